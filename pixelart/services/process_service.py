"""Конвейер пикселизации: нормализация, выравнивание, выборка блоков.

Каждый этап — чистая функция своих входов; рисование вынесено в `RenderService`.
Поверхности создаются заново на каждый запуск и не переживают вызов.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from pixelart import config
from pixelart.errors import SurfaceError
from pixelart.models.block_model import BlockGrid
from pixelart.models.image_model import ImageData
from pixelart.models.pixelation_config import PixelationConfig
from pixelart.services.render_service import RenderService

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Округление к ближайшему целому, половины — вверх (как Math.round)."""
    return int(math.floor(value + 0.5))


class ProcessService:
    def __init__(self, render_service: Optional[RenderService] = None) -> None:
        self._render_service = render_service or RenderService()

    # ---------- 1) Нормализация разрешения ----------
    def normalize_resolution(self, image: Image.Image, min_resolution: int = config.MIN_RESOLUTION) -> Image.Image:
        """
        Гарантирует минимальное рабочее разрешение с сохранением пропорций.
        - обе стороны >= min_resolution: изображение возвращается как есть;
        - широкое/квадратное: ширина = min_resolution, высота по пропорции;
        - высокое: высота = min_resolution, ширина по пропорции.
        Размеры округляются до ближайшего целого пикселя.
        """
        width, height = image.size
        if width <= 0 or height <= 0:
            raise SurfaceError(f"Пустая поверхность: {width}x{height}")
        if width >= min_resolution and height >= min_resolution:
            return image

        if width >= height:
            target = (min_resolution, round_half_up(min_resolution * height / width))
        else:
            target = (round_half_up(min_resolution * width / height), min_resolution)
        # extreme aspect ratios must not round down to an empty surface
        target = (max(1, target[0]), max(1, target[1]))

        logger.debug("Normalize %dx%d -> %dx%d", width, height, target[0], target[1])
        try:
            return image.resize(target, Image.Resampling.BILINEAR)
        except (MemoryError, ValueError) as exc:
            raise SurfaceError(f"Не удалось создать рабочую поверхность {target[0]}x{target[1]}") from exc

    # ---------- 2) Политика выравнивания ----------
    def alignment_bounds(self, width: int, height: int, block_size: int, align: bool) -> Tuple[int, int]:
        """
        Возвращает (loop_width, loop_height) — область, по которой идёт выборка.
        При выравнивании обрезает до наибольших кратных block_size размеров;
        если блок не помещается хотя бы по одной оси, выравнивание не применяется.
        """
        if not align:
            return width, height
        blocks_x = width // block_size
        blocks_y = height // block_size
        if blocks_x < 1 or blocks_y < 1:
            return width, height
        return blocks_x * block_size, blocks_y * block_size

    # ---------- 3) Выборка блоков ----------
    def sample_blocks(self, image: Image.Image, block_size: int, loop_width: int, loop_height: int) -> BlockGrid:
        """
        Делит область (0, 0, loop_width, loop_height) на блоки и считает
        цвет каждого блока как среднее по пикселям с alpha > 0.

        Полностью прозрачные пиксели не входят ни в сумму, ни в счётчик.
        Среднее округляется половиной вверх, точно в целых числах:
        (2 * sum + count) // (2 * count). Блоки без учтённых пикселей
        получают count = 0 и цвет (0, 0, 0, 0).
        """
        ys = np.arange(0, loop_height, block_size)
        xs = np.arange(0, loop_width, block_size)
        try:
            arr = np.asarray(image.convert("RGBA") if image.mode != "RGBA" else image, dtype=np.uint8)
            arr = arr[:loop_height, :loop_width]
            sums, counts = self._block_sums(arr, ys, xs)
        except MemoryError as exc:
            raise SurfaceError(f"Не хватает памяти для выборки {loop_width}x{loop_height}") from exc

        safe = np.maximum(counts, 1)[..., None]
        colors = (2 * sums + safe) // (2 * safe)
        colors[counts == 0] = 0

        return BlockGrid(
            block_size=block_size,
            xs=xs,
            ys=ys,
            widths=np.minimum(block_size, loop_width - xs),
            heights=np.minimum(block_size, loop_height - ys),
            colors=colors.astype(np.uint8),
            counts=counts,
        )

    @staticmethod
    def _block_sums(arr: np.ndarray, ys: np.ndarray, xs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Суммы каналов и число видимых пикселей по блокам.

        Каналы суммируются по одному прямо из uint8, чтобы не держать
        целочисленную копию всей поверхности.
        """
        mask = arr[..., 3] > 0
        counts = np.add.reduceat(np.add.reduceat(mask, ys, axis=0, dtype=np.int64), xs, axis=1)
        sums = np.empty(counts.shape + (4,), dtype=np.int64)
        for channel in range(4):
            visible = arr[..., channel] * mask
            # суммы по полосам строк, затем по столбцам
            rows = np.add.reduceat(visible, ys, axis=0, dtype=np.int64)
            sums[..., channel] = np.add.reduceat(rows, xs, axis=1)
        return sums, counts

    # ---------- Полный конвейер ----------
    def pixelate_image(self, image: Union[Image.Image, ImageData], cfg: PixelationConfig) -> Image.Image:
        """
        Синхронное ядро: нормализация -> выравнивание -> выборка -> рисование.
        Возвращает новую RGBA-поверхность размером (loop_width, loop_height).
        """
        source = image.pil_image if isinstance(image, ImageData) else image
        if source.mode != "RGBA":
            source = source.convert("RGBA")

        working = self.normalize_resolution(source)
        loop_width, loop_height = self.alignment_bounds(*working.size, cfg.block_size, cfg.align_pixels)
        logger.debug(
            "Working %dx%d, sampling %dx%d with block %d",
            working.width, working.height, loop_width, loop_height, cfg.block_size,
        )

        grid = self.sample_blocks(working, cfg.block_size, loop_width, loop_height)
        return self._render_service.render(grid, cfg, (loop_width, loop_height))
