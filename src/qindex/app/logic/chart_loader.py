"""Data loading logic for the stock chart page.

Loads stored Q-index rows for a symbol and prepares chart series.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

import polars as pl
from loguru import logger

from qindex.analysis.chart_data import (
    Record,
    filter_data_by_time_period,
    format_candlestick_data,
    format_histogram_data,
    format_line_data,
    resolve_period,
)
from qindex.core.domain_models import (
    CandlestickPoint,
    HistogramPoint,
    LinePoint,
    TimePeriod,
)
from qindex.core.file_manager import ParquetStorage
from qindex.core.mapper import df_to_records, normalize_symbol
from qindex.etl.pipeline import qindex_filename


@dataclass
class ChartSeries:
    """Chart-ready series for one symbol and period."""

    symbol: str
    period: TimePeriod
    candlestick: list[CandlestickPoint] = field(default_factory=list)
    trend_q: list[LinePoint] = field(default_factory=list)
    fq: list[LinePoint] = field(default_factory=list)
    qv1: list[HistogramPoint] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.candlestick


def get_symbol_data(symbol: str, storage: ParquetStorage) -> pl.DataFrame:
    """Read stored Q-index rows for a symbol, sorted by date.

    Returns an empty DataFrame when nothing is stored for the symbol.
    """
    try:
        df_symbol = storage.read(qindex_filename(symbol)).sort("date")
    except FileNotFoundError:
        logger.warning(f"No Q-index data found for symbol '{symbol}'")
        return pl.DataFrame()

    logger.info(f"Loaded {df_symbol.height} Q-index records for {symbol}")
    return df_symbol


def build_chart_series(
    rows: Iterable[Record],
    symbol: str,
    period: TimePeriod | str | None,
    now: datetime | None = None,
) -> ChartSeries:
    """Filter rows to the period window and format every chart series."""
    resolved = resolve_period(period)
    window = filter_data_by_time_period(rows, resolved, now)
    logger.debug(f"[{symbol}] {len(window)} records inside {resolved.value} window")

    return ChartSeries(
        symbol=symbol,
        period=resolved,
        candlestick=format_candlestick_data(window),
        trend_q=format_line_data(window, "trend_q"),
        fq=format_line_data(window, "fq"),
        qv1=format_histogram_data(window),
    )


def load_chart_series(
    symbol: str,
    storage: ParquetStorage,
    period: TimePeriod | str | None,
    now: datetime | None = None,
) -> ChartSeries:
    """Load stored rows for a symbol and build its chart series.

    Stored rows are validated into QIndexRecord models before charting.
    """
    symbol = normalize_symbol(symbol)
    records = df_to_records(get_symbol_data(symbol, storage))
    return build_chart_series(records, symbol, period, now)
