import math
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from qindex.analysis.chart_data import (
    NEGATIVE_COLOR,
    POSITIVE_COLOR,
    filter_data_by_time_period,
    format_candlestick_data,
    format_histogram_data,
    format_line_data,
    parse_number,
    period_cutoff,
    resolve_period,
    to_unix_seconds,
)
from qindex.core.domain_models import QIndexRecord, TimePeriod

JAN_1_2024 = 1704067200


def _times(points: list[dict]) -> list:
    return [p["time"] for p in points]


def _is_sorted(points: list[dict]) -> bool:
    times = [t for t in _times(points) if not (isinstance(t, float) and math.isnan(t))]
    return times == sorted(times)


# --- parse_number ---


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("10", 10.0),
        (" 7 ", 7.0),
        ("12.5abc", 12.5),
        ("-.5", -0.5),
        ("1e3", 1000.0),
        ("3.", 3.0),
        (42, 42.0),
        (1.25, 1.25),
        (Decimal("1.25"), 1.25),
        ("Infinity", math.inf),
    ],
)
def test_parse_number_reads_numeric_prefix(raw, expected) -> None:
    assert parse_number(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", ".", "Inf", True, False, math.nan, "NaN", []])
def test_parse_number_falls_back_to_zero(raw) -> None:
    assert parse_number(raw) == 0.0


# --- to_unix_seconds ---


def test_to_unix_seconds_accepts_strings_and_dates() -> None:
    assert to_unix_seconds("2024-01-01T00:00:00Z") == JAN_1_2024
    assert to_unix_seconds("2024-01-01") == JAN_1_2024
    assert to_unix_seconds("2024-01-01T07:00:00+07:00") == JAN_1_2024
    assert to_unix_seconds(date(2024, 1, 1)) == JAN_1_2024
    assert to_unix_seconds(datetime(2024, 1, 1)) == JAN_1_2024


def test_to_unix_seconds_truncates_toward_earlier_second() -> None:
    assert to_unix_seconds("2024-01-01T00:00:00.999Z") == JAN_1_2024
    assert to_unix_seconds("1969-12-31T23:59:59.500Z") == -1


@pytest.mark.parametrize("raw", ["not a date", "", None, "2024-13-45", 12345])
def test_to_unix_seconds_invalid_is_nan(raw) -> None:
    result = to_unix_seconds(raw)
    assert isinstance(result, float)
    assert math.isnan(result)


# --- Candlestick ---


def test_candlestick_single_point() -> None:
    points = format_candlestick_data(
        [{"date": "2024-01-01T00:00:00Z", "open": "10", "high": "12", "low": "9", "close": "11"}]
    )
    assert points == [
        {"time": JAN_1_2024, "open": 10.0, "high": 12.0, "low": 9.0, "close": 11.0}
    ]


def test_candlestick_sorted_ascending() -> None:
    data = [
        {"date": "2024-03-01", "open": 3},
        {"date": "2024-01-01", "open": 1},
        {"date": "2024-02-01", "open": 2},
    ]
    points = format_candlestick_data(data)
    assert _is_sorted(points)
    assert [p["open"] for p in points] == [1.0, 2.0, 3.0]


def test_candlestick_missing_fields_become_zero() -> None:
    points = format_candlestick_data([{"date": "2024-01-01", "open": None, "high": "n/a"}])
    assert points[0]["open"] == 0.0
    assert points[0]["high"] == 0.0
    assert points[0]["low"] == 0.0
    assert points[0]["close"] == 0.0


def test_candlestick_invalid_date_sorted_last() -> None:
    data = [
        {"date": "garbage", "close": 1},
        {"date": "2024-01-02", "close": 2},
        {"date": "2024-01-01", "close": 3},
    ]
    points = format_candlestick_data(data)
    assert [p["close"] for p in points] == [3.0, 2.0, 1.0]
    assert math.isnan(points[-1]["time"])


def test_candlestick_is_idempotent_and_order_independent() -> None:
    data = [
        {"date": "2024-01-03", "open": "3", "high": "4", "low": "2", "close": "3.5"},
        {"date": "2024-01-01", "open": "1", "high": "2", "low": "0.5", "close": "1.5"},
        {"date": "2024-01-02", "open": "2", "high": "3", "low": "1", "close": "2.5"},
    ]
    first = format_candlestick_data(data)
    assert format_candlestick_data(data) == first
    assert format_candlestick_data(list(reversed(data))) == first


def test_candlestick_does_not_mutate_input() -> None:
    data = [{"date": "2024-01-02", "open": "2"}, {"date": "2024-01-01", "open": "1"}]
    snapshot = [dict(item) for item in data]
    format_candlestick_data(data)
    assert data == snapshot


def test_candlestick_accepts_records() -> None:
    record = QIndexRecord(symbol="FPT", date=date(2024, 1, 1), open=10, high=12, low=9)
    points = format_candlestick_data([record])
    assert points == [{"time": JAN_1_2024, "open": 10.0, "high": 12.0, "low": 9.0, "close": 0.0}]


def test_candlestick_empty_input() -> None:
    assert format_candlestick_data([]) == []


# --- Line ---


def test_line_missing_field_is_zero() -> None:
    points = format_line_data([{"date": "2024-01-01", "trend_q": "1.5"}], "fq")
    assert points == [{"time": JAN_1_2024, "value": 0.0}]


def test_line_selects_field_and_sorts() -> None:
    data = [
        {"date": "2024-01-02", "trend_q": "2", "fq": "20"},
        {"date": "2024-01-01", "trend_q": "1", "fq": "10"},
    ]
    assert [p["value"] for p in format_line_data(data, "trend_q")] == [1.0, 2.0]
    assert [p["value"] for p in format_line_data(data, "fq")] == [10.0, 20.0]


def test_line_rejects_other_fields() -> None:
    with pytest.raises(ValueError):
        format_line_data([{"date": "2024-01-01", "qv1": 1}], "qv1")  # type: ignore[arg-type]


# --- Histogram ---


def test_histogram_colors() -> None:
    points = format_histogram_data(
        [
            {"date": "2024-01-01", "qv1": -5},
            {"date": "2024-01-02", "qv1": 0},
            {"date": "2024-01-03", "qv1": "2.5"},
            {"date": "2024-01-04"},
        ]
    )
    assert [p["color"] for p in points] == [
        NEGATIVE_COLOR,
        POSITIVE_COLOR,
        POSITIVE_COLOR,
        POSITIVE_COLOR,
    ]
    assert [p["value"] for p in points] == [-5.0, 0.0, 2.5, 0.0]


def test_histogram_sorted_ascending() -> None:
    data = [{"date": f"2024-01-{day:02d}", "qv1": day} for day in (5, 1, 3, 2, 4)]
    points = format_histogram_data(data)
    assert _is_sorted(points)
    assert [p["value"] for p in points] == [1.0, 2.0, 3.0, 4.0, 5.0]


# --- Period filtering ---


def test_resolve_period() -> None:
    assert resolve_period("1y") is TimePeriod.ONE_YEAR
    assert resolve_period(TimePeriod.FIVE_YEARS) is TimePeriod.FIVE_YEARS
    assert resolve_period("10y") is TimePeriod.THREE_MONTHS
    assert resolve_period(None) is TimePeriod.THREE_MONTHS


@pytest.mark.parametrize(
    ("period", "expected"),
    [
        ("3m", datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc)),
        ("6m", datetime(2023, 12, 15, 12, 0, tzinfo=timezone.utc)),
        ("1y", datetime(2023, 6, 15, 12, 0, tzinfo=timezone.utc)),
        ("5y", datetime(2019, 6, 15, 12, 0, tzinfo=timezone.utc)),
    ],
)
def test_period_cutoff(now, period, expected) -> None:
    assert period_cutoff(period, now) == expected


def test_period_cutoff_clamps_to_month_end() -> None:
    now = datetime(2024, 5, 31, tzinfo=timezone.utc)
    assert period_cutoff("3m", now) == datetime(2024, 2, 29, tzinfo=timezone.utc)


def test_period_cutoff_naive_now_is_utc() -> None:
    assert period_cutoff("1y", datetime(2024, 6, 15)) == datetime(2023, 6, 15, tzinfo=timezone.utc)


def test_filter_one_year_window_includes_cutoff(now) -> None:
    data = [
        {"date": "2023-06-15T12:00:00Z", "tag": "at_cutoff"},
        {"date": "2023-06-15T11:59:59Z", "tag": "just_before"},
        {"date": "2023-06-15", "tag": "midnight_before"},
        {"date": "2024-06-01", "tag": "recent"},
        {"date": "2020-01-01", "tag": "old"},
    ]
    kept = filter_data_by_time_period(data, "1y", now)
    assert [item["tag"] for item in kept] == ["at_cutoff", "recent"]


def test_filter_preserves_order_and_drops_invalid_dates(now) -> None:
    data = [
        {"date": "2024-06-10"},
        {"date": "bogus"},
        {"date": None},
        {"date": "2024-04-01"},
    ]
    kept = filter_data_by_time_period(data, TimePeriod.THREE_MONTHS, now)
    assert kept == [{"date": "2024-06-10"}, {"date": "2024-04-01"}]


def test_filter_unknown_period_matches_three_months(now) -> None:
    data = [{"date": f"2024-{month:02d}-01"} for month in range(1, 7)]
    expected = filter_data_by_time_period(data, "3m", now)
    assert filter_data_by_time_period(data, "10y", now) == expected
    assert [item["date"] for item in expected] == ["2024-04-01", "2024-05-01", "2024-06-01"]


def test_filter_repeated_calls_are_identical(now) -> None:
    data = [{"date": "2024-01-01"}, {"date": "2022-01-01"}, {"date": "2019-07-01"}]
    for period in ("5y", "1y", "6m", "3m", "5y"):
        assert filter_data_by_time_period(data, period, now) == filter_data_by_time_period(
            data, period, now
        )
    assert len(filter_data_by_time_period(data, "5y", now)) == 3
    assert filter_data_by_time_period(data, "1y", now) == data[:1]


def test_filter_uses_current_time_by_default() -> None:
    today = datetime.now(timezone.utc)
    data = [
        {"date": (today - timedelta(days=1)).isoformat()},
        {"date": (today - timedelta(days=200)).isoformat()},
    ]
    kept = filter_data_by_time_period(data, "3m")
    assert kept == data[:1]


def test_filter_accepts_date_objects(now) -> None:
    data = [{"date": date(2024, 6, 1)}, {"date": date(2023, 1, 1)}]
    assert filter_data_by_time_period(data, "6m", now) == data[:1]
