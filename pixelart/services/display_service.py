"""Подготовка готовой поверхности для вызывающего кода: показ, заглушки, экспорт.

Ядро пикселизации здесь не участвует — сервис работает только с результатом.
"""
from __future__ import annotations

import re
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from pixelart import config


class DisplayService:
    def fit_to_display(self, surface: Image.Image, size: Tuple[int, int] = config.DISPLAY_SIZE) -> Image.Image:
        """
        Вписывает поверхность в холст показа с сохранением пропорций и центрированием.
        Масштаб scale = min(W / w, H / h); увеличение ближайшим соседом, чтобы
        блоки не размывались. Поля по краям прозрачные.
        """
        display_w, display_h = size
        canvas = Image.new("RGBA", (display_w, display_h), (0, 0, 0, 0))
        src_w, src_h = surface.size
        if src_w == 0 or src_h == 0:
            return canvas

        scale = min(display_w / src_w, display_h / src_h)
        scaled_w = max(1, int(round(src_w * scale)))
        scaled_h = max(1, int(round(src_h * scale)))
        resized = surface.resize((scaled_w, scaled_h), Image.Resampling.NEAREST)

        offset = ((display_w - scaled_w) // 2, (display_h - scaled_h) // 2)
        canvas.alpha_composite(resized.convert("RGBA"), dest=offset)
        return canvas

    def placeholder(
        self,
        size: Tuple[int, int] = config.DISPLAY_SIZE,
        text: str = config.EMPTY_TEXT,
        color: str = config.EMPTY_COLOR,
    ) -> Image.Image:
        """Прозрачный холст с поясняющей надписью по центру (для запасного UI)."""
        canvas = Image.new("RGBA", size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(canvas)
        font = ImageFont.load_default()
        left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
        x = (size[0] - (right - left)) // 2 - left
        y = (size[1] - (bottom - top)) // 2 - top
        draw.text((x, y), text, fill=color, font=font)
        return canvas

    def error_placeholder(self, size: Tuple[int, int] = config.DISPLAY_SIZE) -> Image.Image:
        return self.placeholder(size, config.ERROR_TEXT, config.ERROR_COLOR)

    # ---- Export ----
    def to_png_bytes(self, surface: Image.Image) -> bytes:
        buffer = BytesIO()
        surface.save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, surface: Image.Image, path: str | Path) -> Path:
        """Сохраняет поверхность в PNG и возвращает итоговый путь."""
        target = Path(path)
        if target.suffix.lower() != ".png":
            target = target.with_suffix(".png")
        target.parent.mkdir(parents=True, exist_ok=True)
        surface.save(target, format="PNG")
        return target

    def download_filename(self, artist: Optional[str], album: Optional[str], block_size: int) -> str:
        """Имя файла для скачивания: `<artist>_<album>_pixel_art_block<N>.png`."""
        safe_artist = _safe_name(artist or "artist")
        safe_album = _safe_name(album or "spotify")
        return f"{safe_artist}_{safe_album}_pixel_art_block{block_size}.png"


def _safe_name(name: str) -> str:
    """Заменяет всё, кроме латинских букв и цифр, на '_' и приводит к нижнему регистру."""
    return re.sub(r"[^a-z0-9]", "_", name, flags=re.IGNORECASE).lower()
