from datetime import datetime, timezone
from pathlib import Path

import pytest

from qindex.core.file_manager import ParquetStorage

# Fixed reference time so period windows are deterministic
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

SAMPLE_CSV = """date,open,high,low,close,trend_q,fq,qv1,band_down,band_up
2024-06-10,10.5,11.0,10.0,10.8,1.2,0.9,-0.4,9.5,11.5
2024-06-11,10.8,11.4,10.6,11.2,1.3,1.0,0.0,9.6,11.6
2024-06-12,11.2,11.9,11.0,11.7,1.5,,0.6,9.8,11.9
2023-01-05,8.0,8.4,7.9,8.1,0.4,0.2,-1.1,7.0,9.0
,1,1,1,1,1,1,1,1,1
"""


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def storage(tmp_path: Path) -> ParquetStorage:
    return ParquetStorage(tmp_path / "qindex")


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    path = tmp_path / "fpt.csv"
    path.write_text(SAMPLE_CSV)
    return path


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        "universe:\n"
        "  symbols: [fpt, ' vnm ', FPT]\n"
        "settings:\n"
        f"  base_dir: {tmp_path / 'data'}\n"
        "  default_period: 1y\n"
    )
    return path
