"""
Mapping Layer: Transforms imported Q-index files to domain data.

Bridges raw CSV content (all-string Polars frames) and the internal
representation (QINDEX_SCHEMA DataFrames + QIndexRecord models).
"""

import polars as pl
from loguru import logger

from qindex.core.domain_models import NUMERIC_FIELDS, QINDEX_SCHEMA, QIndexRecord

# Accepted date layouts in imported sheets, tried in order
DATE_FORMATS = ["%Y-%m-%d", "%d/%m/%Y"]


def normalize_symbol(symbol: str) -> str:
    """Trim and upper-case a stock symbol.

    Raises:
        ValueError: If the symbol is empty
    """
    cleaned = symbol.strip().upper()
    if not cleaned:
        raise ValueError("Symbol must not be empty")
    return cleaned


def _date_expr(column: str) -> pl.Expr:
    text = pl.col(column).cast(pl.Utf8).str.strip_chars()
    return pl.coalesce(
        # ISO timestamps: keep the calendar day only
        text.str.slice(0, 10).str.to_date(DATE_FORMATS[0], strict=False),
        text.str.to_date(DATE_FORMATS[1], strict=False),
    ).alias("date")


def _numeric_expr(column: str, name: str) -> pl.Expr:
    return (
        pl.col(column)
        .cast(pl.Utf8)
        .str.strip_chars()
        .str.replace_all(",", "")
        .cast(pl.Float64, strict=False)
        .alias(name)
    )


def map_csv_to_df(raw: pl.DataFrame, symbol: str) -> pl.DataFrame:
    """
    Map a raw Q-index sheet to a QINDEX_SCHEMA DataFrame.

    Column names are matched case-insensitively. Missing numeric columns
    become null columns; unparseable numeric cells become null. Rows
    without a readable date are dropped, and duplicate dates keep the
    last row of the sheet.

    Args:
        raw: Sheet content, typically read with all columns as strings
        symbol: Stock symbol the sheet belongs to

    Returns:
        DataFrame with QINDEX_SCHEMA columns sorted by date

    Raises:
        ValueError: If the sheet has no date column or the symbol is empty
    """
    symbol = normalize_symbol(symbol)
    columns = {name.strip().lower(): name for name in raw.columns}

    if "date" not in columns:
        raise ValueError(f"[{symbol}] Sheet has no 'date' column (found: {raw.columns})")

    missing = [name for name in NUMERIC_FIELDS if name not in columns]
    if missing:
        logger.debug(f"[{symbol}] Columns not in sheet, filled with nulls: {missing}")

    exprs = [pl.lit(symbol).alias("symbol"), _date_expr(columns["date"])]
    for name in NUMERIC_FIELDS:
        if name in columns:
            exprs.append(_numeric_expr(columns[name], name))
        else:
            exprs.append(pl.lit(None, dtype=pl.Float64).alias(name))

    df = raw.select(exprs)

    invalid_rows = df.filter(pl.col("date").is_null()).height
    if invalid_rows:
        logger.warning(f"[{symbol}] Dropped {invalid_rows} rows without a valid date")

    return (
        df.filter(pl.col("date").is_not_null())
        .unique(subset=["date"], keep="last", maintain_order=True)
        .select(list(QINDEX_SCHEMA))
        .cast(QINDEX_SCHEMA)
        .sort("date")
    )


def df_to_records(df: pl.DataFrame) -> list[QIndexRecord]:
    """Validate stored rows into QIndexRecord models.

    A frame without columns (nothing stored) gives an empty list.
    """
    if df.is_empty():
        return []
    return [QIndexRecord(**row) for row in df.select(list(QINDEX_SCHEMA)).to_dicts()]
