"""Исключения движка пикселизации.

Все три ошибки терминальны для вызова: движок не делает повторов и не отдаёт
частичный результат. Решение о запасном изображении принимает вызывающий код.
"""
from __future__ import annotations


class PixelationError(Exception):
    """Базовая ошибка конвейера пикселизации."""


class LoadError(PixelationError):
    """Источник не удалось получить или декодировать."""


class InvalidConfig(PixelationError, ValueError):
    """Недопустимые параметры пикселизации (например, block_size <= 0)."""


class SurfaceError(PixelationError):
    """Не удалось выделить или подготовить поверхность для рисования."""
