"""Константы движка и приложения."""
from typing import Tuple

# Минимальная рабочая сторона после нормализации, px
MIN_RESOLUTION = 600

# Обводка блоков: чёрный с ~20% непрозрачности
BORDER_RGBA: Tuple[int, int, int, int] = (0, 0, 0, 51)
BORDER_WIDTH_RATIO = 0.05
# обводка рисуется только при block_size > MIN_BORDER_BLOCK_SIZE
MIN_BORDER_BLOCK_SIZE = 2

# Загрузка источника
LOAD_TIMEOUT = 10  # seconds
USER_AGENT = "pixelart/1.0"

# Значения по умолчанию для вызывающего кода
DEFAULT_BLOCK_SIZE = 15
DISPLAY_SIZE: Tuple[int, int] = (300, 300)
ERROR_TEXT = "Could not pixelate image."
ERROR_COLOR = "red"
EMPTY_TEXT = "Album art will be pixelated here"
EMPTY_COLOR = "#B3B3B3"
