from __future__ import annotations

import logging
from pathlib import Path
from typing import IO, Union

import pandas as pd

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
DATA_PATH = BASE_DIR / "temperature_daily.csv"

REQUIRED_COLUMNS = ("date", "max_temperature", "min_temperature")

RawRow = dict[str, str]


class DataLoadError(Exception):
    """The temperature file could not be read at all."""


def load_rows(source: Union[str, Path, IO, None] = None) -> list[RawRow]:
    """
    Read the daily temperature CSV and return its rows as plain string
    mappings, one per line, in file order. Cells are kept as text (empty
    fields stay ''), type conversion belongs to the parser.

    ``source`` defaults to ``DATA_PATH`` and may also be an open file.
    """
    if source is None:
        source = DATA_PATH
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False)
    except FileNotFoundError as e:
        raise DataLoadError(f"Data file not found: {source}") from e
    except pd.errors.EmptyDataError as e:
        raise DataLoadError("Data file is empty.") from e
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as e:
        raise DataLoadError(f"Could not read data file: {e}") from e

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise DataLoadError(f"Missing column(s): {', '.join(missing)}")
    if df.empty:
        raise DataLoadError("Data file has no rows.")

    rows = df[list(REQUIRED_COLUMNS)].to_dict(orient="records")
    logger.info("Read %d raw rows from %s", len(rows), getattr(source, "name", source))
    return rows
