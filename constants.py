from __future__ import annotations

from enum import Enum


class ViewMode(str, Enum):
    MAX = "max"
    MIN = "min"

    def toggled(self) -> "ViewMode":
        return ViewMode.MIN if self is ViewMode.MAX else ViewMode.MAX


# Only the ten most recent years present in the data are shown.
YEAR_WINDOW: int = 10

# Outer insets in px: top holds year labels, left month labels, right the legend.
MARGIN_TOP: int = 50
MARGIN_RIGHT: int = 130
MARGIN_BOTTOM: int = 30
MARGIN_LEFT: int = 90

BAND_PADDING: float = 0.04
CELL_INNER_PAD: float = 4.0

# Color scale and sparklines share this fixed range (°C).
COLOR_DOMAIN: tuple[float, float] = (0.0, 40.0)
LEGEND_TICKS: tuple[int, ...] = (0, 10, 20, 30, 40)
LEGEND_HEIGHT: int = 220
LEGEND_BAR_WIDTH: int = 18
LEGEND_OFFSET: int = 20

MAX_LINE_COLOR: str = "rgba(80,180,80,0.85)"
MIN_LINE_COLOR: str = "rgba(200,220,255,0.85)"
EMPTY_CELL_FILL: str = "#eeeeee"
BACKGROUND: str = "#f7f4ef"
FONT_FAMILY: str = "monospace"

# Plotly refuses figures narrower/shorter than this.
MIN_SURFACE: int = 10
DEFAULT_WIDTH: int = 1200
DEFAULT_HEIGHT: int = 760
