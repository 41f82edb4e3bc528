"""Модели блоков сетки пикселизации."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, NamedTuple, Tuple

import numpy as np


class SampledBlock(NamedTuple):
    """Один непустой блок: прямоугольник выборки и его усреднённый цвет."""
    x: int
    y: int
    sample_width: int
    sample_height: int
    r: int
    g: int
    b: int
    a: int

    @property
    def rgba(self) -> Tuple[int, int, int, int]:
        return (self.r, self.g, self.b, self.a)


@dataclass(frozen=True)
class BlockGrid:
    """Результат выборки: цвета блоков и геометрия сетки.

    Fields:
        block_size: Сторона блока, px.
        xs / ys: Левые/верхние координаты столбцов/строк сетки.
        widths / heights: Фактические размеры выборки по столбцам/строкам
            (меньше block_size только у последнего неполного блока).
        colors: uint8 (rows, cols, 4); для пустых блоков (0, 0, 0, 0).
        counts: Число учтённых (alpha > 0) пикселей в каждом блоке.
    """
    block_size: int
    xs: np.ndarray
    ys: np.ndarray
    widths: np.ndarray
    heights: np.ndarray
    colors: np.ndarray
    counts: np.ndarray

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self.ys), len(self.xs))

    def blocks(self) -> Iterator[SampledBlock]:
        """Непустые блоки построчно: сверху вниз, слева направо."""
        for row, y in enumerate(self.ys):
            for col, x in enumerate(self.xs):
                if self.counts[row, col] == 0:
                    continue
                r, g, b, a = (int(c) for c in self.colors[row, col])
                yield SampledBlock(
                    int(x), int(y), int(self.widths[col]), int(self.heights[row]), r, g, b, a
                )
