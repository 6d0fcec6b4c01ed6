"""Chart rendering components for the stock chart page.

Thin Streamlit wrappers around the Plotly figure builders.
"""

import streamlit as st

from qindex.app.logic.chart_loader import ChartSeries
from qindex.app.views.figures import (
    build_candlestick_figure,
    build_histogram_figure,
    build_line_figure,
)
from qindex.core.domain_models import PERIOD_LABELS, TimePeriod


def render_sidebar_header(title: str, description: str) -> None:
    st.sidebar.title(title)
    st.sidebar.caption(description)
    st.sidebar.divider()


def render_empty_state(message: str) -> None:
    st.info(f"ℹ️ {message}")


def period_selection(default: TimePeriod, on_sidebar: bool = False) -> TimePeriod:
    """Render the 3m / 6m / 1y / 5y period selector."""
    options = list(TimePeriod)
    container = st.sidebar if on_sidebar else st
    return container.radio(
        "Period",
        options=options,
        index=options.index(default),
        format_func=lambda period: PERIOD_LABELS[period],
        horizontal=True,
    )


def render_latest_values(series: ChartSeries) -> None:
    """Render the latest candle and indicator values as metrics."""
    if series.is_empty:
        return

    latest = series.candlestick[-1]
    cols = st.columns(4)
    with cols[0]:
        st.metric(label="Close", value=f"{latest['close']:,.2f}")
    with cols[1]:
        if series.trend_q:
            st.metric(label="Trend Q", value=f"{series.trend_q[-1]['value']:,.2f}")
    with cols[2]:
        if series.fq:
            st.metric(label="FQ", value=f"{series.fq[-1]['value']:,.2f}")
    with cols[3]:
        if series.qv1:
            st.metric(label="QV1", value=f"{series.qv1[-1]['value']:,.2f}")


def render_stock_charts(series: ChartSeries, height: int = 300) -> None:
    """Render price, indicator and qv1 charts stacked vertically.

    Args:
        series: Chart series for one symbol and period
        height: Height of each chart in pixels
    """
    if series.is_empty:
        st.warning(f"No Q-index data for {series.symbol} in the last {series.period.label}")
        return

    st.plotly_chart(
        build_candlestick_figure(series.candlestick, f"{series.symbol} Price", height),
        use_container_width=True,
    )
    st.plotly_chart(
        build_line_figure({"trend_q": series.trend_q, "fq": series.fq}, "Trend Q / FQ", height),
        use_container_width=True,
    )
    st.plotly_chart(
        build_histogram_figure(series.qv1, "QV1", height),
        use_container_width=True,
    )
