"""Декодированный источник пикселизации.

Загрузчик отдаёт его уже в RGBA с натуральными размерами; дальше конвейер
только читает `pil_image` и никогда не меняет его на месте.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель декодированного источника и его метаданные.

    Fields:
        source: URL, путь или `data:`-URI, из которого получено изображение.
        pil_image: Декодированное изображение PIL (всегда RGBA).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL исходного файла до конвертации, например "P" или "RGB".
        size_bytes: Размер закодированных данных, если известен.
    """
    source: str
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    size_bytes: Optional[int]
