"""Q-index import pipeline with atomic upserts.

Reads Q-index sheets (CSV), maps them to the storage schema and merges
them into one parquet file per symbol.
"""

from pathlib import Path

import polars as pl
from loguru import logger

from qindex.core.file_manager import ParquetStorage
from qindex.core.mapper import map_csv_to_df, normalize_symbol

FILE_PREFIX = "qindex_"


def qindex_filename(symbol: str) -> str:
    return f"{FILE_PREFIX}{normalize_symbol(symbol)}"


class ImportPipeline:
    """Orchestrates Q-index imports with dependency injection for testability."""

    def __init__(self, storage: ParquetStorage) -> None:
        """
        Initialize pipeline with its storage.

        Args:
            storage: ParquetStorage instance for reading/writing Q-index data
        """
        self.storage = storage
        logger.info("ImportPipeline initialized")

    def read_sheet(self, csv_path: Path) -> pl.DataFrame:
        """Read a CSV sheet with every column as a string."""
        csv_path = Path(csv_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"Import file not found: {csv_path}")
        logger.debug(f"Reading sheet {csv_path}")
        return pl.read_csv(csv_path, infer_schema_length=0)

    def run_import(self, csv_path: Path, symbol: str) -> int:
        """
        Import one sheet for a symbol.

        Rows for dates already stored are replaced; other stored rows are kept.

        Args:
            csv_path: Path to the CSV sheet
            symbol: Stock symbol the sheet belongs to

        Returns:
            Number of imported rows

        Raises:
            FileNotFoundError: If the sheet does not exist
            ValueError: If the sheet cannot be mapped or has no valid rows
        """
        symbol = normalize_symbol(symbol)
        logger.info(f"[{symbol}] Importing Q-index sheet {csv_path}")

        raw = self.read_sheet(csv_path)
        new_df = map_csv_to_df(raw, symbol)
        if new_df.is_empty():
            raise ValueError(f"[{symbol}] No valid rows in {csv_path}")

        merged_df = self.storage.atomic_update(new_df, qindex_filename(symbol))
        logger.success(
            f"[{symbol}] Imported {new_df.height} rows ({merged_df.height} total rows stored)"
        )
        return new_df.height

    def available_symbols(self) -> list[str]:
        """Symbols with stored Q-index data."""
        return [name[len(FILE_PREFIX) :] for name in self.storage.list_files(FILE_PREFIX)]
