from datetime import date
from enum import Enum
from typing import Literal, TypedDict

import polars as pl
from pydantic import BaseModel, ConfigDict

# --- Constants & Schemas ---

# Polars Schema for Q-index storage.
# Bulk imports go through DataFrames with this schema; QIndexRecord is for single records.
QINDEX_SCHEMA = {
    "symbol": pl.Utf8,
    "date": pl.Date,
    "open": pl.Float64,
    "high": pl.Float64,
    "low": pl.Float64,
    "close": pl.Float64,
    "trend_q": pl.Float64,
    "fq": pl.Float64,
    "qv1": pl.Float64,
    "band_down": pl.Float64,
    "band_up": pl.Float64,
}

NUMERIC_FIELDS = [name for name, dtype in QINDEX_SCHEMA.items() if dtype == pl.Float64]

LineField = Literal["trend_q", "fq"]
LINE_FIELDS: tuple[str, ...] = ("trend_q", "fq")


# --- Enums ---


class TimePeriod(str, Enum):
    """Relative look-back window for chart filtering."""

    THREE_MONTHS = "3m"
    SIX_MONTHS = "6m"
    ONE_YEAR = "1y"
    FIVE_YEARS = "5y"

    @property
    def label(self) -> str:
        return PERIOD_LABELS[self]


PERIOD_LABELS = {
    TimePeriod.THREE_MONTHS: "3 months",
    TimePeriod.SIX_MONTHS: "6 months",
    TimePeriod.ONE_YEAR: "1 year",
    TimePeriod.FIVE_YEARS: "5 years",
}

DEFAULT_PERIOD = TimePeriod.THREE_MONTHS


# --- Domain Models ---


class QIndexRecord(BaseModel):
    """
    One day of Q-index data for a stock.

    All indicator fields are optional; providers leave gaps and the
    chart layer turns missing values into zero.
    """

    model_config = ConfigDict(frozen=True)

    symbol: str
    date: date
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    trend_q: float | None = None
    fq: float | None = None
    qv1: float | None = None
    band_down: float | None = None
    band_up: float | None = None


# --- Chart point shapes ---


class CandlestickPoint(TypedDict):
    time: int | float
    open: float
    high: float
    low: float
    close: float


class LinePoint(TypedDict):
    time: int | float
    value: float


class HistogramPoint(TypedDict):
    time: int | float
    value: float
    color: str
