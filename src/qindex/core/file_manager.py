"""Parquet file storage with atomic write guarantees.

Handles all file I/O for Q-index data using Polars DataFrames.
Atomic writes prevent data corruption by writing to temporary files first.
"""

from pathlib import Path

import polars as pl
from loguru import logger


class ParquetStorage:
    """Manages atomic read/write operations for Parquet files."""

    def __init__(self, base_path: Path) -> None:
        """Initialize storage with a base directory.

        Args:
            base_path: Root directory for all parquet files
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"ParquetStorage initialized at {self.base_path}")

    def path_for(self, filename: str) -> Path:
        """Location of a parquet file; the `.parquet` suffix is optional."""
        if not filename.endswith(".parquet"):
            filename = f"{filename}.parquet"
        return self.base_path / filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).exists()

    def list_files(self, prefix: str = "") -> list[str]:
        """Sorted file stems in the base directory starting with prefix."""
        return sorted(
            path.stem for path in self.base_path.glob(f"{prefix}*.parquet") if path.is_file()
        )

    def atomic_update(
        self,
        df: pl.DataFrame,
        filename: str,
        unique_keys: list[str] | None = None,
    ) -> pl.DataFrame:
        """Upsert rows into an existing parquet file atomically.

        Rows of `df` replace stored rows with the same unique keys;
        other stored rows are kept. The result is sorted by the keys.

        Args:
            df: New data to merge
            filename: Target parquet filename
            unique_keys: Columns identifying a row (default: symbol, date)

        Returns:
            The combined DataFrame that was written
        """
        keys = unique_keys or ["symbol", "date"]
        target = self.path_for(filename)

        merged = df
        if target.exists():
            kept = pl.read_parquet(target).join(df.select(keys), on=keys, how="anti")
            logger.debug(f"{target.name}: merging {df.height} rows, keeping {kept.height}")
            merged = pl.concat([df, kept], how="diagonal_relaxed")

        merged = merged.sort(keys)
        self.atomic_write(merged, filename)
        return merged

    def atomic_write(self, df: pl.DataFrame, filename: str) -> None:
        """Replace a parquet file with `df` without exposing a half-written file.

        The frame goes to a sibling `.tmp` file that is then renamed over
        the target. A failed write leaves any previous file untouched.
        """
        target = self.path_for(filename)
        staging = target.with_name(f"{target.name}.tmp")

        try:
            df.write_parquet(staging)
            staging.replace(target)
        except Exception as e:
            staging.unlink(missing_ok=True)
            logger.error(f"Could not save {target.name}, previous version kept: {e}")
            raise

        logger.info(f"Saved {df.height} rows to {target}")

    def read(self, filename: str) -> pl.DataFrame:
        """Load a stored parquet file.

        Raises:
            FileNotFoundError: If nothing is stored under `filename`
        """
        source = self.path_for(filename)
        if not source.is_file():
            logger.warning(f"Nothing stored at {source}")
            raise FileNotFoundError(f"No parquet file found: {source.name}")

        df = pl.read_parquet(source)
        logger.debug(f"Loaded {df.height} rows from {source.name}")
        return df
