import sys
from pathlib import Path


# Ensure the project root (parent of this file's directory) is importable when running pytest
THIS_DIR = Path(__file__).resolve().parent
ROOT_DIR = THIS_DIR.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest


def make_rows(first_year: int = 2006, last_year: int = 2017):
    """Two days per month for every year, max = 20 + month, min = month."""
    rows = []
    for year in range(first_year, last_year + 1):
        for month in range(1, 13):
            for day in (1, 2):
                rows.append(
                    {
                        "date": f"{year}-{month:02d}-{day:02d}",
                        "max_temperature": f"{20 + month + day / 10:.1f}",
                        "min_temperature": f"{month - day / 10:.1f}",
                    }
                )
    return rows


@pytest.fixture()
def raw_rows():
    return make_rows()
