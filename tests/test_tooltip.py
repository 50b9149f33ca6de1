from constants import ViewMode
from pipeline import Cell
from tooltip import HoverInfo, describe_cell


def test_hover_info_formats_one_decimal():
    info = HoverInfo(year=2017, month=6, value=33.04, label="max")
    assert info.date_text == "2017-06"
    assert info.value_text == "max: 33.0 °C"
    assert info.as_html() == "<b>Date:</b> 2017-06<br><b>max:</b> 33.0 °C"


def test_hover_info_missing_value_falls_back_to_na():
    info = HoverInfo(year=2017, month=2, value=None, label="min")
    assert info.value_text == "min: N/A °C"


def test_describe_cell_follows_mode():
    cell = Cell(year=2010, month=1, days=(), extreme_max=21.5, extreme_min=3.25)
    assert describe_cell(cell, ViewMode.MAX).value_text == "max: 21.5 °C"
    info = describe_cell(cell, ViewMode.MIN, x=12, y=34)
    assert info.label == "min"
    assert info.value == 3.25
    assert (info.x, info.y) == (12, 34)
