from __future__ import annotations

import logging
from typing import Callable, Iterable, Mapping, Optional

import plotly.graph_objects as go

from charts import build_matrix_figure
from constants import ViewMode
from data import DataLoadError
from layout import MARGIN, Margin, MatrixLayout, compute_layout
from pipeline import Cell, build_cells, group_records, parse_rows
from tooltip import HoverInfo, describe_cell

logger = logging.getLogger(__name__)

SizeListener = Callable[[float, float], None]


class Subscription:
    """Handle for a registered listener. Closing it is idempotent."""

    def __init__(self, release: Callable[[], None]):
        self._release = release
        self.closed = False

    def close(self) -> None:
        if not self.closed:
            self.closed = True
            self._release()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class SurfaceSizeStream:
    """Publishes drawing-surface sizes: the initial one and every resize."""

    def __init__(self) -> None:
        self._listeners: list[SizeListener] = []
        self.latest: Optional[tuple[float, float]] = None

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: SizeListener) -> Subscription:
        self._listeners.append(listener)
        if self.latest is not None:
            listener(*self.latest)
        return Subscription(lambda: self._listeners.remove(listener))

    def publish(self, width: float, height: float) -> None:
        if self.latest == (width, height):
            return
        self.latest = (width, height)
        for listener in list(self._listeners):
            listener(width, height)


class MatrixController:
    """
    Event-driven shell around the matrix: holds the view mode, the loaded
    cells and the current geometry, and re-renders when any of them change.

    Cells are built once per load and never mutated; mode and size are
    passed to the renderer as parameters. The Streamlit page leaves
    on_hover/on_leave unset because Plotly shows tooltips in the browser;
    hosts that forward pointer positions call hover()/leave() directly.
    """

    def __init__(
        self,
        on_hover: Optional[Callable[[HoverInfo], None]] = None,
        on_leave: Optional[Callable[[], None]] = None,
        margin: Margin = MARGIN,
    ):
        self.on_hover = on_hover
        self.on_leave = on_leave
        self.margin = margin
        self.mode = ViewMode.MAX
        self.cells: list[Cell] = []
        self.years: tuple[int, ...] = ()
        self.error: Optional[str] = None
        self.loaded = False
        self.size: Optional[tuple[float, float]] = None
        self.layout: Optional[MatrixLayout] = None
        self.figure: Optional[go.Figure] = None
        self._subscription: Optional[Subscription] = None

    @property
    def ready(self) -> bool:
        return self.loaded and self.error is None

    # Data

    def load(self, fetch: Callable[[], Iterable[Mapping[str, str]]]) -> bool:
        """
        Run fetch -> parse -> group -> aggregate. Any failure leaves the
        controller in the terminal error state; there is no retry.
        """
        try:
            records = parse_rows(fetch())
            if not records:
                raise DataLoadError("No valid temperature records found.")
            grouped = group_records(records)
        except (DataLoadError, OSError) as e:
            logger.warning("Loading temperature data failed: %s", e)
            self.error = str(e)
            self.loaded = False
            self.cells, self.years = [], ()
            self.layout = None
            self.figure = None
            return False

        self.cells = build_cells(grouped)
        self.years = grouped.years
        self.error = None
        self.loaded = True
        logger.info(
            "Loaded %d daily records, years %s-%s", len(records), self.years[0], self.years[-1]
        )
        if self.size is not None:
            self._relayout()
        self.render()
        return True

    # Events

    def toggle_mode(self) -> ViewMode:
        self.mode = self.mode.toggled()
        self.render()
        return self.mode

    def resize(self, width: float, height: float) -> None:
        self.size = (width, height)
        if self.ready:
            self._relayout()
        self.render()

    def hover(self, x: float, y: float) -> Optional[HoverInfo]:
        cell = self.cell_at(x, y)
        if cell is None or cell.is_empty:
            self.leave()
            return None
        info = describe_cell(cell, self.mode, x=x, y=y)
        if self.on_hover is not None:
            self.on_hover(info)
        return info

    def leave(self) -> None:
        if self.on_leave is not None:
            self.on_leave()

    def cell_at(self, x: float, y: float) -> Optional[Cell]:
        if not self.ready or self.layout is None:
            return None
        hit = self.layout.cell_at(x, y)
        if hit is None:
            return None
        year, month = hit
        index = self.years.index(year) * 12 + (month - 1)
        return self.cells[index]

    # Rendering

    def _relayout(self) -> None:
        width, height = self.size
        self.layout = compute_layout(width, height, self.years, self.margin)

    def render(self) -> Optional[go.Figure]:
        """No-op until both data and a surface size are available."""
        if not self.ready or self.size is None:
            return None
        width, height = self.size
        self.figure = build_matrix_figure(
            self.cells, self.years, self.mode, width, height, layout=self.layout
        )
        return self.figure

    # Resize subscription

    def mount(self, sizes: SurfaceSizeStream) -> Subscription:
        self.unmount()
        self._subscription = sizes.subscribe(self.resize)
        return self._subscription

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None
