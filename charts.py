from __future__ import annotations

from typing import Optional, Sequence

import plotly.graph_objects as go
from plotly.colors import diverging, sample_colorscale, unlabel_rgb

from constants import (
    BACKGROUND,
    CELL_INNER_PAD,
    COLOR_DOMAIN,
    EMPTY_CELL_FILL,
    FONT_FAMILY,
    LEGEND_BAR_WIDTH,
    LEGEND_TICKS,
    MAX_LINE_COLOR,
    MIN_LINE_COLOR,
    MIN_SURFACE,
    ViewMode,
)
from layout import MatrixLayout, compute_layout
from pipeline import Cell
from tooltip import describe_cell
from utils.time import month_name

# RdYlBu runs red -> blue, so it is sampled from the far end: 0 °C is blue, 40 °C dark red.
_PALETTE = diverging.RdYlBu


def _normalize(value: float) -> float:
    lo, hi = COLOR_DOMAIN
    return min(1.0, max(0.0, (value - lo) / (hi - lo)))


def color_scale(value: Optional[float]) -> str:
    if value is None:
        return EMPTY_CELL_FILL
    sampled = sample_colorscale(_PALETTE, 1.0 - _normalize(value))[0]
    r, g, b = unlabel_rgb(sampled)
    return f"rgb({int(round(r))}, {int(round(g))}, {int(round(b))})"


def legend_colorscale() -> list[list]:
    lo, hi = COLOR_DOMAIN
    stops = range(int(lo), int(hi) + 1, 5)
    return [[(v - lo) / (hi - lo), color_scale(v)] for v in stops]


def _clamp01(v: float) -> float:
    return min(1.0, max(0.0, v))


def _placed(cells: Sequence[Cell], layout: MatrixLayout) -> list[Cell]:
    return [c for c in cells if c.year in layout.x.domain and c.month in layout.y.domain]


def _axis_annotations(years: Sequence[int], layout: MatrixLayout) -> list[dict]:
    font = dict(size=12, family=FONT_FAMILY, color="#333333")
    anns = []
    for year in years:
        anns.append(
            dict(
                xref="x",
                yref="y",
                x=layout.x.center(year),
                y=layout.margin.top - 10,
                text=str(year),
                showarrow=False,
                xanchor="center",
                yanchor="bottom",
                font=font,
            )
        )
    for month in layout.y.domain:
        anns.append(
            dict(
                xref="x",
                yref="y",
                x=layout.margin.left - 8,
                y=layout.y.center(month),
                text=month_name(month),
                showarrow=False,
                xanchor="right",
                yanchor="middle",
                font=dict(font, size=11),
            )
        )
    return anns


def _legend_annotations(layout: MatrixLayout) -> list[dict]:
    lo, hi = COLOR_DOMAIN
    x = layout.legend_x + LEGEND_BAR_WIDTH / 2
    common = dict(xref="x", yref="y", x=x, showarrow=False, xanchor="center")
    return [
        dict(
            common,
            y=layout.legend_y - 8,
            yanchor="bottom",
            text=f"{hi:g} Celsius",
            font=dict(size=10, family=FONT_FAMILY, color=color_scale(hi)),
        ),
        dict(
            common,
            y=layout.legend_y + layout.legend_height + 8,
            yanchor="top",
            text=f"{lo:g} Celsius",
            font=dict(size=10, family=FONT_FAMILY, color=color_scale(lo)),
        ),
    ]


def _legend_trace(layout: MatrixLayout) -> go.Scatter:
    lo, hi = COLOR_DOMAIN
    # Dummy marker trace: only its colorbar is visible.
    return go.Scatter(
        x=[None],
        y=[None],
        mode="markers",
        name="Temperature scale",
        marker=dict(
            colorscale=legend_colorscale(),
            cmin=lo,
            cmax=hi,
            color=[lo],
            showscale=True,
            colorbar=dict(
                x=_clamp01(layout.legend_x / layout.width),
                xanchor="left",
                y=_clamp01(1 - layout.legend_y / layout.height),
                yanchor="top",
                len=layout.legend_height,
                lenmode="pixels",
                thickness=LEGEND_BAR_WIDTH,
                thicknessmode="pixels",
                tickvals=list(LEGEND_TICKS),
                ticktext=[str(t) for t in LEGEND_TICKS],
                tickfont=dict(size=10, family=FONT_FAMILY),
                outlinewidth=0,
                xpad=0,
                ypad=0,
            ),
        ),
        hoverinfo="skip",
        showlegend=False,
    )


def _cell_shapes(cells: Sequence[Cell], mode: ViewMode, layout: MatrixLayout) -> list[dict]:
    shapes = []
    for cell in cells:
        x0, y0, bw, bh = layout.cell_box(cell.year, cell.month)
        shapes.append(
            dict(
                type="rect",
                xref="x",
                yref="y",
                x0=x0,
                y0=y0,
                x1=x0 + bw,
                y1=y0 + bh,
                fillcolor=color_scale(cell.value(mode)),
                line=dict(color="rgba(255,255,255,0.3)", width=0.5),
                layer="below",
            )
        )
    return shapes


def sparkline_points(
    values: Sequence[float], box: tuple[float, float, float, float]
) -> tuple[list[float], list[float]]:
    """
    Pixel coordinates of a day-by-day series inside a cell box. Days are
    spread evenly by sequence position; the y range is the fixed color
    domain, so values outside it are pinned to the box edge.
    """
    x0, y0, bw, bh = box
    left, top = x0 + CELL_INNER_PAD, y0 + CELL_INNER_PAD
    right = max(left, x0 + bw - CELL_INNER_PAD)
    bottom = max(top, y0 + bh - CELL_INNER_PAD)
    n = len(values)
    if n == 1:
        xs = [(left + right) / 2]
    else:
        xs = [left + (right - left) * i / (n - 1) for i in range(n)]
    ys = [bottom - (bottom - top) * _normalize(v) for v in values]
    return xs, ys


def _sparkline_traces(cells: Sequence[Cell], layout: MatrixLayout) -> list[go.Scatter]:
    series = {
        "Daily Max": ([], [], MAX_LINE_COLOR, lambda d: d.max_temp),
        "Daily Min": ([], [], MIN_LINE_COLOR, lambda d: d.min_temp),
    }
    for cell in cells:
        if cell.is_empty:
            continue
        box = layout.cell_box(cell.year, cell.month)
        for xs, ys, _, pick in series.values():
            px, py = sparkline_points([pick(d) for d in cell.days], box)
            # None breaks the line between cells
            xs.extend(px + [None])
            ys.extend(py + [None])

    return [
        go.Scatter(
            x=xs,
            y=ys,
            mode="lines",
            name=name,
            line=dict(color=color, width=1.2, shape="spline"),
            hoverinfo="skip",
            connectgaps=False,
        )
        for name, (xs, ys, color, _) in series.items()
    ]


def _hit_region_traces(cells: Sequence[Cell], mode: ViewMode, layout: MatrixLayout) -> list[go.Scatter]:
    traces = []
    for cell in cells:
        if cell.is_empty:
            continue
        x0, y0, bw, bh = layout.cell_box(cell.year, cell.month)
        info = describe_cell(cell, mode, x=x0 + bw / 2, y=y0 + bh / 2)
        traces.append(
            go.Scatter(
                x=[x0, x0 + bw, x0 + bw, x0, x0],
                y=[y0, y0, y0 + bh, y0 + bh, y0],
                mode="lines",
                fill="toself",
                fillcolor="rgba(0,0,0,0)",
                line=dict(width=0, color="rgba(0,0,0,0)"),
                hoveron="fills",
                hoverinfo="text",
                text=info.as_html(),
                name=info.date_text,
                showlegend=False,
            )
        )
    return traces


def build_matrix_figure(
    cells: Sequence[Cell],
    years: Sequence[int],
    mode: ViewMode,
    width: float,
    height: float,
    *,
    layout: Optional[MatrixLayout] = None,
) -> go.Figure:
    """
    Full year x month matrix scene on a pixel-addressed figure.

    Layers back to front: axis labels and legend, cell backgrounds,
    sparklines, transparent hover regions. A new figure is built on every
    call, nothing from a previous render survives.
    """
    fig = go.Figure()
    if width < MIN_SURFACE or height < MIN_SURFACE:
        return fig
    if layout is None:
        layout = compute_layout(width, height, years)
    if layout.x.bandwidth <= 0 or layout.y.bandwidth <= 0:
        return fig

    placed = _placed(cells, layout)

    fig.add_trace(_legend_trace(layout))
    for trace in _sparkline_traces(placed, layout):
        fig.add_trace(trace)
    for trace in _hit_region_traces(placed, mode, layout):
        fig.add_trace(trace)

    fig.update_layout(
        template="simple_white",
        width=int(layout.width),
        height=int(layout.height),
        margin=dict(l=0, r=0, t=0, b=0),
        paper_bgcolor=BACKGROUND,
        plot_bgcolor=BACKGROUND,
        font=dict(family=FONT_FAMILY),
        xaxis=dict(range=[0, layout.width], visible=False, fixedrange=True),
        yaxis=dict(range=[layout.height, 0], visible=False, fixedrange=True),
        hovermode="closest",
        dragmode=False,
        hoverlabel=dict(
            bgcolor="rgba(255,255,255,0.97)",
            bordercolor="#cccccc",
            font=dict(family=FONT_FAMILY, size=12, color="#222222"),
        ),
        legend=dict(
            orientation="h",
            x=_clamp01(layout.margin.left / layout.width),
            xanchor="left",
            y=0,
            yanchor="bottom",
            font=dict(size=11, color="#555555"),
        ),
        shapes=_cell_shapes(placed, mode, layout),
        annotations=_axis_annotations(years, layout) + _legend_annotations(layout),
    )
    return fig
