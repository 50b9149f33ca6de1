from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional, Sequence

from constants import (
    BAND_PADDING,
    LEGEND_HEIGHT,
    LEGEND_OFFSET,
    MARGIN_BOTTOM,
    MARGIN_LEFT,
    MARGIN_RIGHT,
    MARGIN_TOP,
)

MONTHS: tuple[int, ...] = tuple(range(1, 13))


@dataclass(frozen=True)
class Margin:
    top: float
    right: float
    bottom: float
    left: float


MARGIN = Margin(top=MARGIN_TOP, right=MARGIN_RIGHT, bottom=MARGIN_BOTTOM, left=MARGIN_LEFT)


@dataclass(frozen=True)
class BandScale:
    """
    Discrete domain -> equal pixel bands over [start, stop].

    The same padding fraction is used between bands and at both ends,
    bands are centered in the range. A range of non-positive length
    collapses every band to zero width at ``start``.
    """

    domain: tuple[Hashable, ...]
    start: float
    stop: float
    padding: float = BAND_PADDING

    @property
    def span(self) -> float:
        return max(0.0, self.stop - self.start)

    @property
    def step(self) -> float:
        n = len(self.domain)
        return self.span / max(1.0, n - self.padding + 2 * self.padding)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def offset(self, key: Hashable) -> float:
        index = self.domain.index(key)
        return self.start + self.step * self.padding + self.step * index

    def __call__(self, key: Hashable) -> tuple[float, float]:
        return self.offset(key), self.bandwidth

    def center(self, key: Hashable) -> float:
        return self.offset(key) + self.bandwidth / 2

    def invert(self, position: float) -> Optional[Hashable]:
        """Domain value whose band contains ``position``; None in gaps or outside."""
        if not self.domain or self.bandwidth <= 0:
            return None
        first = self.start + self.step * self.padding
        index = int((position - first) // self.step)
        if not 0 <= index < len(self.domain):
            return None
        if position - (first + index * self.step) > self.bandwidth:
            return None
        return self.domain[index]


@dataclass(frozen=True)
class MatrixLayout:
    width: float
    height: float
    margin: Margin
    x: BandScale
    y: BandScale

    @property
    def legend_x(self) -> float:
        return self.width - self.margin.right + LEGEND_OFFSET

    @property
    def legend_y(self) -> float:
        return self.margin.top + LEGEND_OFFSET

    @property
    def legend_height(self) -> float:
        return LEGEND_HEIGHT

    def cell_box(self, year: int, month: int) -> tuple[float, float, float, float]:
        """(x, y, width, height) of a cell in surface pixels."""
        x0, bw = self.x(year)
        y0, bh = self.y(month)
        return x0, y0, bw, bh

    def cell_at(self, px: float, py: float) -> Optional[tuple[int, int]]:
        year = self.x.invert(px)
        month = self.y.invert(py)
        if year is None or month is None:
            return None
        return year, month


def compute_layout(
    width: float, height: float, years: Sequence[int], margin: Margin = MARGIN
) -> MatrixLayout:
    width = max(0.0, float(width))
    height = max(0.0, float(height))
    x = BandScale(tuple(years), margin.left, width - margin.right)
    y = BandScale(MONTHS, margin.top, height - margin.bottom)
    return MatrixLayout(width=width, height=height, margin=margin, x=x, y=y)
