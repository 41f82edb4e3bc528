"""Рисование блоков: квадраты или круги с необязательной обводкой.

Заливка выполняется без сглаживания, чтобы края блоков оставались чёткими.
"""
from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from PIL import Image, ImageDraw

from pixelart import config
from pixelart.errors import SurfaceError
from pixelart.models.block_model import BlockGrid, SampledBlock
from pixelart.models.pixelation_config import PixelationConfig, PixelShape


class RenderService:
    def render(self, grid: BlockGrid, cfg: PixelationConfig, size: Tuple[int, int]) -> Image.Image:
        """Рисует сетку блоков на новой прозрачной поверхности размера `size`.

        Пустые блоки (без непрозрачных пикселей) остаются прозрачными.
        Обводка накладывается поверх заливки (source-over), если
        `draw_borders` включён и block_size > 2.
        """
        try:
            if cfg.pixel_shape is PixelShape.SQUARE:
                surface = self._fill_squares(grid, size)
            else:
                surface = Image.new("RGBA", size, (0, 0, 0, 0))
                self._fill_circles(surface, grid)

            if cfg.draw_borders and grid.block_size > config.MIN_BORDER_BLOCK_SIZE:
                overlay = Image.new("RGBA", size, (0, 0, 0, 0))
                self._stroke_borders(overlay, grid, cfg.pixel_shape)
                surface = Image.alpha_composite(surface, overlay)
        except (MemoryError, ValueError) as exc:
            raise SurfaceError(f"Не удалось создать выходную поверхность {size[0]}x{size[1]}") from exc
        return surface

    @staticmethod
    def border_line_width(block_size: int) -> float:
        """Толщина линии обводки: max(1, block_size * 0.05)."""
        return max(1.0, block_size * config.BORDER_WIDTH_RATIO)

    @classmethod
    def stroke_width(cls, block_size: int) -> int:
        """Толщина обводки в целых пикселях (половина округляется вверх)."""
        return int(math.floor(cls.border_line_width(block_size) + 0.5))

    @staticmethod
    def disc_geometry(block: SampledBlock, block_size: int) -> Tuple[float, float, float]:
        """Центр и радиус круга блока: (x + bs/2, y + bs/2, bs/2).

        Считается от настроенного block_size, а не от размера выборки:
        у неполного последнего блока круг выходит за его границы и
        частично за пределы поверхности.
        """
        radius = block_size / 2
        return block.x + radius, block.y + radius, radius

    @classmethod
    def disc_bbox(cls, block: SampledBlock, block_size: int) -> Tuple[int, int, int, int]:
        cx, cy, radius = cls.disc_geometry(block, block_size)
        # inclusive pixel bounds, as ImageDraw expects
        return int(cx - radius), int(cy - radius), int(cx + radius) - 1, int(cy + radius) - 1

    # ---- Internals ----
    def _fill_squares(self, grid: BlockGrid, size: Tuple[int, int]) -> Image.Image:
        # каждый блок растягивается на свой фактический размер выборки
        canvas = np.repeat(np.repeat(grid.colors, grid.heights, axis=0), grid.widths, axis=1)
        width, height = size
        if canvas.shape[:2] != (height, width):
            raise SurfaceError(f"Сетка {canvas.shape[1]}x{canvas.shape[0]} не совпадает с {width}x{height}")
        return Image.fromarray(np.ascontiguousarray(canvas, dtype=np.uint8))

    def _fill_circles(self, surface: Image.Image, grid: BlockGrid) -> None:
        draw = ImageDraw.Draw(surface)
        for block in grid.blocks():
            box = self.disc_bbox(block, grid.block_size)
            if box[0] == box[2] and box[1] == box[3]:
                # ImageDraw draws nothing for a one-pixel ellipse
                draw.point(box[:2], fill=block.rgba)
            else:
                draw.ellipse(box, fill=block.rgba)

    def _stroke_borders(self, overlay: Image.Image, grid: BlockGrid, shape: PixelShape) -> None:
        draw = ImageDraw.Draw(overlay)
        width = self.stroke_width(grid.block_size)
        for block in grid.blocks():
            if shape is PixelShape.CIRCLE:
                draw.ellipse(self.disc_bbox(block, grid.block_size), outline=config.BORDER_RGBA, width=width)
            else:
                # ImageDraw strokes inward from the bounds: the line stays inside the block
                box = (block.x, block.y, block.x + block.sample_width - 1, block.y + block.sample_height - 1)
                draw.rectangle(box, outline=config.BORDER_RGBA, width=width)
