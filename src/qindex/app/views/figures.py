"""Plotly figure builders for Q-index charts.

Pure functions: chart points in, `go.Figure` out. No Streamlit calls,
so the CLI can export the same figures as HTML.
"""

import math
from collections.abc import Sequence
from datetime import datetime, timezone

import plotly.graph_objects as go
from plotly.subplots import make_subplots

from qindex.analysis.number_format import format_compact_number
from qindex.app.logic.chart_loader import ChartSeries
from qindex.app.views.colors import LINE_COLOR_MAP, LINE_DASH_MAP, LINE_TITLES, Colors
from qindex.core.domain_models import CandlestickPoint, HistogramPoint, LinePoint


def _is_plottable(time: int | float) -> bool:
    return not (isinstance(time, float) and math.isnan(time))


def _axis_time(time: int | float) -> datetime:
    return datetime.fromtimestamp(time, tz=timezone.utc)


def compact_ticks(values: Sequence[float], count: int = 5) -> tuple[list[float], list[str]]:
    """Evenly spaced tick values over the data range with compact labels."""
    finite = [v for v in values if math.isfinite(v)]
    if not finite:
        return [], []
    low, high = min(finite), max(finite)
    if low == high or count < 2:
        return [low], [format_compact_number(low)]
    step = (high - low) / (count - 1)
    ticks = [low + step * i for i in range(count)]
    return ticks, [format_compact_number(t) for t in ticks]


def _apply_dark_layout(fig: go.Figure, title: str, height: int) -> go.Figure:
    fig.update_layout(
        title=title,
        height=height,
        template="plotly_dark",
        paper_bgcolor=Colors.background,
        plot_bgcolor=Colors.background,
        font={"color": Colors.text},
        hovermode="x unified",
        showlegend=True,
        margin={"l": 10, "r": 10, "t": 40, "b": 10},
    )
    fig.update_xaxes(gridcolor=Colors.grid, rangeslider_visible=False)
    fig.update_yaxes(gridcolor=Colors.grid, side="right")
    return fig


def candlestick_trace(points: Sequence[CandlestickPoint]) -> go.Candlestick:
    plottable = [p for p in points if _is_plottable(p["time"])]
    return go.Candlestick(
        x=[_axis_time(p["time"]) for p in plottable],
        open=[p["open"] for p in plottable],
        high=[p["high"] for p in plottable],
        low=[p["low"] for p in plottable],
        close=[p["close"] for p in plottable],
        increasing_line_color=Colors.candle_up,
        decreasing_line_color=Colors.candle_down,
        hovertext=[
            f"O {format_compact_number(p['open'])} H {format_compact_number(p['high'])} "
            f"L {format_compact_number(p['low'])} C {format_compact_number(p['close'])}"
            for p in plottable
        ],
        name="OHLC",
    )


def line_trace(points: Sequence[LinePoint], field: str) -> go.Scatter:
    plottable = [p for p in points if _is_plottable(p["time"])]
    return go.Scatter(
        x=[_axis_time(p["time"]) for p in plottable],
        y=[p["value"] for p in plottable],
        mode="lines",
        name=LINE_TITLES.get(field, field),
        line={"color": LINE_COLOR_MAP.get(field), "dash": LINE_DASH_MAP.get(field), "width": 3},
        text=[format_compact_number(p["value"]) for p in plottable],
        hovertemplate="%{text}",
    )


def histogram_trace(points: Sequence[HistogramPoint]) -> go.Bar:
    plottable = [p for p in points if _is_plottable(p["time"])]
    return go.Bar(
        x=[_axis_time(p["time"]) for p in plottable],
        y=[p["value"] for p in plottable],
        marker_color=[p["color"] for p in plottable],
        name="QV1",
        text=[format_compact_number(p["value"]) for p in plottable],
        textposition="none",
        hovertemplate="%{text}",
    )


def build_candlestick_figure(
    points: Sequence[CandlestickPoint], title: str = "", height: int = 300
) -> go.Figure:
    fig = go.Figure(candlestick_trace(points))
    tickvals, ticktext = compact_ticks(
        [p["low"] for p in points] + [p["high"] for p in points]
    )
    fig.update_yaxes(tickvals=tickvals, ticktext=ticktext)
    return _apply_dark_layout(fig, title, height)


def build_line_figure(
    lines: dict[str, Sequence[LinePoint]], title: str = "", height: int = 300
) -> go.Figure:
    """Line chart with one trace per indicator field (e.g. trend_q, fq)."""
    fig = go.Figure([line_trace(points, field) for field, points in lines.items()])
    return _apply_dark_layout(fig, title, height)


def build_histogram_figure(
    points: Sequence[HistogramPoint], title: str = "", height: int = 300
) -> go.Figure:
    fig = go.Figure(histogram_trace(points))
    return _apply_dark_layout(fig, title, height)


def build_stock_figure(series: ChartSeries, height: int = 300) -> go.Figure:
    """Stacked price, indicator and qv1 panels sharing one time axis.

    Args:
        series: Chart series for one symbol and period
        height: Height of a single panel in pixels
    """
    fig = make_subplots(
        rows=3,
        cols=1,
        shared_xaxes=True,
        vertical_spacing=0.03,
        row_heights=[0.5, 0.25, 0.25],
        subplot_titles=("Price", "Trend Q / FQ", "QV1"),
    )
    fig.add_trace(candlestick_trace(series.candlestick), row=1, col=1)
    fig.add_trace(line_trace(series.trend_q, "trend_q"), row=2, col=1)
    fig.add_trace(line_trace(series.fq, "fq"), row=2, col=1)
    fig.add_trace(histogram_trace(series.qv1), row=3, col=1)

    tickvals, ticktext = compact_ticks(
        [p["low"] for p in series.candlestick] + [p["high"] for p in series.candlestick]
    )
    fig.update_yaxes(tickvals=tickvals, ticktext=ticktext, row=1, col=1)

    title = f"{series.symbol} · {series.period.label}"
    return _apply_dark_layout(fig, title, height * 2)
