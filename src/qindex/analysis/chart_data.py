"""Chart data transformation for Q-index time series.

Reshapes raw Q-index records into the point shapes the chart layer
consumes (candlestick, line, histogram) and filters records by a
relative look-back window.

All functions are pure and never raise on bad data:
- unparseable numbers become 0
- unparseable dates become NaN timestamps (sorted last)
- unknown period tags fall back to 3 months
"""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from dateutil.parser import isoparse
from dateutil.relativedelta import relativedelta
from loguru import logger

from qindex.core.domain_models import (
    DEFAULT_PERIOD,
    LINE_FIELDS,
    CandlestickPoint,
    HistogramPoint,
    LineField,
    LinePoint,
    QIndexRecord,
    TimePeriod,
)

POSITIVE_COLOR = "rgba(0, 150, 136, 0.8)"
NEGATIVE_COLOR = "rgba(255, 82, 82, 0.8)"

PERIOD_OFFSETS = {
    TimePeriod.THREE_MONTHS: relativedelta(months=3),
    TimePeriod.SIX_MONTHS: relativedelta(months=6),
    TimePeriod.ONE_YEAR: relativedelta(years=1),
    TimePeriod.FIVE_YEARS: relativedelta(years=5),
}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Leading float literal, same prefix rule as JavaScript's parseFloat
_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

Record = Mapping[str, Any] | QIndexRecord


# --- Parsing helpers ---


def parse_number(value: Any) -> float:
    """Parse a numeric field leniently.

    Strings are read up to the first character that cannot continue a
    float literal ("12.5abc" -> 12.5). None, booleans, empty or
    unparseable values and NaN all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0

    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            number = math.inf if value > 0 else -math.inf
    else:
        match = _FLOAT_PREFIX.match(str(value).strip())
        if match is None:
            return 0.0
        number = float(match.group(0))

    if math.isnan(number):
        return 0.0
    return number


def parse_datetime(value: Any) -> datetime | None:
    """Convert an ISO-8601 string, date or datetime to an aware UTC-based datetime.

    Naive values are interpreted as UTC. Returns None when the value
    cannot be read as a calendar timestamp.
    """
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            moment = isoparse(value.strip())
        except (ValueError, OverflowError):
            return None
    else:
        return None

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def to_unix_seconds(value: Any) -> int | float:
    """Unix timestamp in whole seconds (floored), or NaN for an invalid date."""
    moment = parse_datetime(value)
    if moment is None:
        return math.nan
    delta = moment - _EPOCH
    # timedelta keeps seconds/microseconds non-negative, so this floors
    return delta.days * 86400 + delta.seconds


def _field(item: Record, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _time_sort_key(point: Mapping[str, Any]) -> tuple[int, int | float]:
    time = point["time"]
    if isinstance(time, float) and math.isnan(time):
        return (1, 0)
    return (0, time)


# --- Formatters ---


def format_candlestick_data(data: Iterable[Record]) -> list[CandlestickPoint]:
    """Format records as candlestick points sorted by time.

    Args:
        data: Records with date, open, high, low, close

    Returns:
        List of {time, open, high, low, close}
    """
    points: list[CandlestickPoint] = [
        {
            "time": to_unix_seconds(_field(item, "date")),
            "open": parse_number(_field(item, "open")),
            "high": parse_number(_field(item, "high")),
            "low": parse_number(_field(item, "low")),
            "close": parse_number(_field(item, "close")),
        }
        for item in data
    ]
    return sorted(points, key=_time_sort_key)


def format_line_data(data: Iterable[Record], field: LineField) -> list[LinePoint]:
    """Format one indicator column as line points sorted by time.

    Args:
        data: Records with date and the selected indicator
        field: Either "trend_q" or "fq"

    Raises:
        ValueError: If field is not a line indicator
    """
    if field not in LINE_FIELDS:
        raise ValueError(f"Line field must be one of {LINE_FIELDS}, got {field!r}")

    points: list[LinePoint] = [
        {
            "time": to_unix_seconds(_field(item, "date")),
            "value": parse_number(_field(item, field)),
        }
        for item in data
    ]
    return sorted(points, key=_time_sort_key)


def histogram_color(value: float) -> str:
    """Positive color for values >= 0, negative color otherwise."""
    return POSITIVE_COLOR if value >= 0 else NEGATIVE_COLOR


def format_histogram_data(data: Iterable[Record]) -> list[HistogramPoint]:
    """Format the qv1 indicator as colored histogram bars sorted by time."""
    points: list[HistogramPoint] = []
    for item in data:
        value = parse_number(_field(item, "qv1"))
        points.append(
            {
                "time": to_unix_seconds(_field(item, "date")),
                "value": value,
                "color": histogram_color(value),
            }
        )
    return sorted(points, key=_time_sort_key)


# --- Time window ---


def resolve_period(period: TimePeriod | str | None) -> TimePeriod:
    """Map a period tag to TimePeriod, defaulting to 3 months for unknown tags."""
    try:
        return TimePeriod(period)
    except (ValueError, TypeError):
        logger.debug(f"Unknown period {period!r}, using {DEFAULT_PERIOD.value}")
        return DEFAULT_PERIOD


def period_cutoff(period: TimePeriod | str | None, now: datetime | None = None) -> datetime:
    """Earliest timestamp admitted by a period tag.

    A fresh base time is taken on every call unless `now` is given.
    """
    base = now if now is not None else datetime.now(timezone.utc)
    if base.tzinfo is None:
        base = base.replace(tzinfo=timezone.utc)
    return base - PERIOD_OFFSETS[resolve_period(period)]


def filter_data_by_time_period(
    data: Iterable[Record],
    period: TimePeriod | str | None,
    now: datetime | None = None,
) -> list[Record]:
    """Keep records dated on or after the period cutoff.

    Input order is preserved. Records without a readable date are dropped.

    Args:
        data: Records with a date field
        period: One of "3m", "6m", "1y", "5y"
        now: Reference time, defaults to the current UTC time

    Returns:
        Records inside the window
    """
    cutoff = period_cutoff(period, now)
    kept = []
    for item in data:
        moment = parse_datetime(_field(item, "date"))
        if moment is not None and moment >= cutoff:
            kept.append(item)
    return kept
