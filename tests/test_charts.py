import plotly.graph_objects as go
import pytest
from plotly.colors import unlabel_rgb

from charts import build_matrix_figure, color_scale, legend_colorscale, sparkline_points
from conftest import make_rows
from constants import EMPTY_CELL_FILL, LEGEND_TICKS, MAX_LINE_COLOR, MIN_LINE_COLOR, ViewMode
from layout import compute_layout
from pipeline import build_cells, group_records, parse_rows


def make_cells(rows=None):
    grouped = group_records(parse_rows(rows if rows is not None else make_rows()))
    return build_cells(grouped), grouped.years


def hit_traces(fig):
    return [t for t in fig.data if t.hoveron == "fills"]


def test_color_scale_endpoints_blue_cold_red_hot():
    r0, g0, b0 = unlabel_rgb(color_scale(0))
    r40, g40, b40 = unlabel_rgb(color_scale(40))
    assert b0 > r0
    assert r40 > b40 and r40 > g40


def test_color_scale_distinct_per_degree_and_moves_blue_to_red():
    colors = [unlabel_rgb(color_scale(t)) for t in range(0, 41)]
    assert len(set(colors)) == len(colors)
    # cold half is blue-dominant, warm half red-dominant
    assert all(b > r for r, _, b in colors[:17])
    assert all(r > b for r, _, b in colors[20:])
    # red rises towards the yellow midpoint, blue falls from there to 40 °C
    reds = [r for r, _, _ in colors[:21]]
    blues = [b for _, _, b in colors[16:]]
    assert all(a <= b for a, b in zip(reds, reds[1:]))
    assert all(a >= b for a, b in zip(blues, blues[1:]))


def test_color_scale_distinct_across_range_and_clamped():
    colors = [color_scale(t) for t in range(0, 41, 5)]
    assert len(set(colors)) == len(colors)
    assert color_scale(-5) == color_scale(0)
    assert color_scale(45) == color_scale(40)


def test_color_scale_null_is_neutral():
    assert color_scale(None) == EMPTY_CELL_FILL
    assert EMPTY_CELL_FILL not in [color_scale(t) for t in range(0, 41)]


def test_legend_colorscale_spans_unit_interval():
    stops = legend_colorscale()
    assert stops[0] == [0.0, color_scale(0)]
    assert stops[-1] == [1.0, color_scale(40)]


def test_sparkline_points_fixed_range_and_padding():
    xs, ys = sparkline_points([0.0, 20.0, 40.0, 55.0], (100, 200, 108, 48))
    assert xs == pytest.approx([104, 137.3333, 170.6667, 204], rel=1e-4)
    # 0 °C sits on the bottom inset, 40 °C on the top inset, out-of-range pinned
    assert ys == pytest.approx([244, 224, 204, 204])


def test_sparkline_single_day_is_centered():
    xs, _ = sparkline_points([10.0], (0, 0, 50, 50))
    assert xs == [25.0]


def test_build_matrix_figure_structure():
    cells, years = make_cells()
    fig = build_matrix_figure(cells, years, ViewMode.MAX, 1200, 760)
    assert isinstance(fig, go.Figure)
    assert fig.layout.width == 1200 and fig.layout.height == 760

    # one background per grid cell, all drawn below traces
    assert len(fig.layout.shapes) == len(cells) == 120
    assert {s.layer for s in fig.layout.shapes} == {"below"}

    texts = [a.text for a in fig.layout.annotations]
    assert [str(y) for y in years] == texts[:10]
    assert "January" in texts and "December" in texts
    assert "0 Celsius" in texts and "40 Celsius" in texts

    legend = fig.data[0]
    assert legend.marker.showscale
    assert list(legend.marker.colorbar.tickvals) == list(LEGEND_TICKS)

    names = [t.name for t in fig.data]
    assert names[1:3] == ["Daily Max", "Daily Min"]
    assert fig.data[1].line.color == MAX_LINE_COLOR
    assert fig.data[2].line.color == MIN_LINE_COLOR

    # hover regions come last, one per non-empty cell
    assert len(hit_traces(fig)) == 120
    assert all(t.hoveron == "fills" for t in fig.data[3:])


def test_build_matrix_figure_mode_switches_fill_values():
    cells, years = make_cells()
    fig_max = build_matrix_figure(cells, years, ViewMode.MAX, 1200, 760)
    fig_min = build_matrix_figure(cells, years, ViewMode.MIN, 1200, 760)
    first = cells[0]
    assert fig_max.layout.shapes[0].fillcolor == color_scale(first.extreme_max)
    assert fig_min.layout.shapes[0].fillcolor == color_scale(first.extreme_min)
    assert "max:" in hit_traces(fig_max)[0].text
    assert "min:" in hit_traces(fig_min)[0].text


def test_build_matrix_figure_is_idempotent():
    cells, years = make_cells()
    a = build_matrix_figure(cells, years, ViewMode.MAX, 900, 600)
    b = build_matrix_figure(cells, years, ViewMode.MAX, 900, 600)
    assert a.to_dict() == b.to_dict()


def test_empty_cells_have_neutral_fill_and_no_hit_region():
    rows = [
        {"date": "2017-06-01", "max_temperature": "32.5", "min_temperature": "27.1"},
        {"date": "2017-06-02", "max_temperature": "33.0", "min_temperature": "26.5"},
        {"date": "2016-06-01", "max_temperature": "31.0", "min_temperature": "25.0"},
    ]
    cells, years = make_cells(rows)
    fig = build_matrix_figure(cells, years, ViewMode.MAX, 1200, 760)
    assert len(fig.layout.shapes) == 24
    fills = [s.fillcolor for s in fig.layout.shapes]
    assert fills.count(EMPTY_CELL_FILL) == 22

    hits = hit_traces(fig)
    assert [t.name for t in hits] == ["2016-06", "2017-06"]
    assert "<b>max:</b> 33.0 °C" in hits[1].text

    # sparklines only for the two months with data: points plus one break each
    daily_max = fig.data[1]
    assert list(daily_max.x).count(None) == 2
    assert len(daily_max.x) == 1 + 1 + 2 + 1


def test_resize_keeps_colors_and_moves_geometry():
    cells, years = make_cells()
    small = build_matrix_figure(cells, years, ViewMode.MAX, 700, 500)
    large = build_matrix_figure(cells, years, ViewMode.MAX, 1400, 900)
    assert [s.fillcolor for s in small.layout.shapes] == [s.fillcolor for s in large.layout.shapes]
    s_w = small.layout.shapes[0].x1 - small.layout.shapes[0].x0
    l_w = large.layout.shapes[0].x1 - large.layout.shapes[0].x0
    assert l_w / s_w == pytest.approx((1400 - 220) / (700 - 220))


def test_build_matrix_figure_accepts_precomputed_layout():
    cells, years = make_cells()
    layout = compute_layout(1000, 700, years)
    fig = build_matrix_figure(cells, years, ViewMode.MAX, 1000, 700, layout=layout)
    x0, y0, _, _ = layout.cell_box(years[0], 1)
    assert fig.layout.shapes[0].x0 == pytest.approx(x0)
    assert fig.layout.shapes[0].y0 == pytest.approx(y0)


@pytest.mark.parametrize("size", [(0, 0), (-10, 500), (500, 5)])
def test_degenerate_surface_draws_nothing(size):
    cells, years = make_cells()
    fig = build_matrix_figure(cells, years, ViewMode.MAX, *size)
    assert len(fig.data) == 0
    assert len(fig.layout.shapes) == 0


def test_surface_smaller_than_margins_draws_nothing():
    cells, years = make_cells()
    fig = build_matrix_figure(cells, years, ViewMode.MAX, 120, 60)
    assert len(fig.layout.shapes) == 0
    assert len(fig.layout.annotations) == 0
    assert len(fig.data) == 0


def test_no_years_still_renders_legend():
    fig = build_matrix_figure([], (), ViewMode.MAX, 800, 600)
    assert len(fig.layout.shapes) == 0
    assert fig.data[0].marker.showscale
