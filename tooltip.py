from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from constants import ViewMode
from pipeline import Cell
from utils.time import format_year_month


@dataclass(frozen=True)
class HoverInfo:
    year: int
    month: int
    value: Optional[float]
    label: str
    x: float = 0.0
    y: float = 0.0

    @property
    def date_text(self) -> str:
        return format_year_month(self.year, self.month)

    @property
    def formatted_value(self) -> str:
        return f"{self.value:.1f}" if self.value is not None else "N/A"

    @property
    def value_text(self) -> str:
        return f"{self.label}: {self.formatted_value} °C"

    def as_html(self) -> str:
        return f"<b>Date:</b> {self.date_text}<br><b>{self.label}:</b> {self.formatted_value} °C"


def describe_cell(cell: Cell, mode: ViewMode, x: float = 0.0, y: float = 0.0) -> HoverInfo:
    return HoverInfo(
        year=cell.year,
        month=cell.month,
        value=cell.value(mode),
        label=mode.value,
        x=x,
        y=y,
    )
