"""Stock Chart Page.

Wiring layer: symbol and period selection, then candlestick,
Trend Q / FQ and QV1 charts for the selected window.
"""

import streamlit as st
from loguru import logger

from qindex.app.logic.chart_loader import load_chart_series
from qindex.app.views.charts import (
    period_selection,
    render_empty_state,
    render_latest_values,
    render_sidebar_header,
    render_stock_charts,
)
from qindex.config.settings import load_config
from qindex.core.config import settings
from qindex.core.file_manager import ParquetStorage
from qindex.etl.pipeline import ImportPipeline

# Page config
st.set_page_config(
    page_title="Stock Chart",
    page_icon="📈",
    layout="wide",
)

render_sidebar_header("Stock Chart", "Q-index price and momentum charts")

try:
    config = load_config(settings.config_path)
    storage = ParquetStorage(config.settings.qindex_dir)
except Exception as e:
    st.error(f"Failed to load configuration: {e}")
    logger.error(f"Configuration error: {e}")
    raise e

stored_symbols = ImportPipeline(storage).available_symbols()
# Watchlist symbols first, then anything else that was imported
symbols = [s for s in config.universe.symbols if s in stored_symbols] + [
    s for s in stored_symbols if s not in config.universe.symbols
]
if not symbols:
    render_empty_state("No Q-index data imported yet. Run `qindex import <csv> --symbol SYM`.")
    st.stop()

selected_symbol = st.sidebar.selectbox("Select Symbol", options=symbols, index=0)
selected_period = period_selection(config.settings.default_period)

try:
    series = load_chart_series(selected_symbol, storage, selected_period)
    st.subheader(f"📈 {selected_symbol}")
    render_latest_values(series)
    render_stock_charts(series, height=config.settings.chart_height)
except Exception as e:
    st.exception(e)
    logger.error(f"Stock chart error: {e}")
