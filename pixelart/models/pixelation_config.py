"""Параметры пикселизации.

Конфигурация неизменяема и проверяется один раз при создании: запущенный
конвейер никогда не видит частично изменённых параметров.
"""
from __future__ import annotations

from dataclasses import dataclass, replace as dataclass_replace
from enum import Enum
from typing import Any, Union

from pixelart.errors import InvalidConfig


class PixelShape(str, Enum):
    SQUARE = "square"
    CIRCLE = "circle"

    @classmethod
    def parse(cls, value: Union[str, "PixelShape"]) -> "PixelShape":
        """Принимает элемент перечисления или строку без учёта регистра."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        allowed = ", ".join(s.value for s in cls)
        raise InvalidConfig(f"pixel_shape must be one of: {allowed}; got {value!r}")


@dataclass(frozen=True)
class PixelationConfig:
    """Неизменяемый набор параметров одного запуска.

    Fields:
        block_size: Сторона блока в пикселях рабочей поверхности, > 0.
        draw_borders: Обводить ли границы блоков.
        pixel_shape: Примитив блока: квадрат или круг.
        align_pixels: Обрезать ли поверхность до кратных block_size размеров.
    """
    block_size: int
    draw_borders: bool = False
    pixel_shape: PixelShape = PixelShape.SQUARE
    align_pixels: bool = False

    def __post_init__(self) -> None:
        # bool is a subclass of int, reject it explicitly
        if isinstance(self.block_size, bool) or not isinstance(self.block_size, int):
            raise InvalidConfig(f"block_size must be an integer; got {self.block_size!r}")
        if self.block_size <= 0:
            raise InvalidConfig(f"block_size must be greater than 0; got {self.block_size}")
        for name in ("draw_borders", "align_pixels"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise InvalidConfig(f"{name} must be a boolean; got {value!r}")
        object.__setattr__(self, "pixel_shape", PixelShape.parse(self.pixel_shape))

    def replace(self, **changes: Any) -> "PixelationConfig":
        """Возвращает новую проверенную конфигурацию с изменёнными полями."""
        return dataclass_replace(self, **changes)
