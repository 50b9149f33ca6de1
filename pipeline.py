from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

import numpy as np
import pandas as pd

from constants import YEAR_WINDOW, ViewMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DailyRecord:
    date: date
    year: int
    month: int
    day: int
    max_temp: float
    min_temp: float


@dataclass(frozen=True)
class TemporalGroups:
    """Windowed records keyed by (year, month), plus the ascending year domain."""

    years: tuple[int, ...]
    groups: dict[tuple[int, int], tuple[DailyRecord, ...]]

    def days(self, year: int, month: int) -> tuple[DailyRecord, ...]:
        return self.groups.get((year, month), ())


@dataclass(frozen=True)
class Cell:
    year: int
    month: int
    days: tuple[DailyRecord, ...]
    extreme_max: Optional[float]
    extreme_min: Optional[float]

    @property
    def is_empty(self) -> bool:
        return not self.days

    def value(self, mode: ViewMode) -> Optional[float]:
        return self.extreme_max if mode is ViewMode.MAX else self.extreme_min


def parse_rows(rows: Iterable[Mapping[str, str]]) -> list[DailyRecord]:
    """
    Turn raw CSV rows into DailyRecords, silently dropping any row whose
    date is not YYYY-MM-DD or whose temperatures are not finite numbers.
    """
    frame = pd.DataFrame.from_records(list(rows))
    if frame.empty:
        return []
    frame = frame.reindex(columns=["date", "max_temperature", "min_temperature"])

    dates = pd.to_datetime(frame["date"], format="%Y-%m-%d", errors="coerce")
    max_t = pd.to_numeric(frame["max_temperature"].astype(str).str.strip(), errors="coerce")
    min_t = pd.to_numeric(frame["min_temperature"].astype(str).str.strip(), errors="coerce")

    keep = dates.notna() & np.isfinite(max_t) & np.isfinite(min_t)
    dropped = int((~keep).sum())
    if dropped:
        logger.debug("Dropped %d malformed row(s)", dropped)

    records = []
    for ts, hi, lo in zip(dates[keep], max_t[keep], min_t[keep]):
        records.append(
            DailyRecord(
                date=ts.date(),
                year=int(ts.year),
                month=int(ts.month),
                day=int(ts.day),
                max_temp=float(hi),
                min_temp=float(lo),
            )
        )
    return records


def group_records(records: Iterable[DailyRecord], window: int = YEAR_WINDOW) -> TemporalGroups:
    """
    Keep the ``window`` most recent calendar years present in the data
    (years > max_year - window) and group them by (year, month) in input order.
    """
    records = list(records)
    if not records:
        raise ValueError("Cannot group an empty set of records.")

    max_year = max(r.year for r in records)
    groups: dict[tuple[int, int], list[DailyRecord]] = {}
    for r in records:
        if r.year > max_year - window:
            groups.setdefault((r.year, r.month), []).append(r)

    years = tuple(sorted({year for year, _ in groups}))
    logger.debug("Keeping years %s", list(years))
    return TemporalGroups(years=years, groups={k: tuple(v) for k, v in groups.items()})


def build_cells(grouped: TemporalGroups) -> list[Cell]:
    """One cell per (year, month) over the year domain and all twelve months, year-major."""
    cells = []
    for year in grouped.years:
        for month in range(1, 13):
            days = grouped.days(year, month)
            cells.append(
                Cell(
                    year=year,
                    month=month,
                    days=days,
                    extreme_max=max(d.max_temp for d in days) if days else None,
                    extreme_min=min(d.min_temp for d in days) if days else None,
                )
            )
    return cells
