"""Q-Index Dashboard - Main Entry Point with CLI Commands.

Supports:
- import: Import a Q-index CSV sheet for a symbol
- chart: Export candlestick / indicator charts for a symbol as HTML
- list: List symbols with stored Q-index data
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from qindex.app.logic.chart_loader import load_chart_series
from qindex.app.views.figures import build_stock_figure
from qindex.config.settings import Config, load_config
from qindex.core.config import settings
from qindex.core.domain_models import TimePeriod
from qindex.core.file_manager import ParquetStorage
from qindex.etl.pipeline import ImportPipeline


def configure_logging(level: str) -> None:
    """Route loguru output to stderr at the given level."""
    logger.remove()
    logger.add(sys.stderr, level=level)


def _load(args: argparse.Namespace) -> tuple[Config, ParquetStorage]:
    config = load_config(Path(args.config))
    return config, ParquetStorage(config.settings.qindex_dir)


def cmd_import(args: argparse.Namespace) -> None:
    """Import a Q-index CSV sheet into storage."""
    logger.info("=== Importing Q-Index Sheet ===")

    try:
        _, storage = _load(args)
        ImportPipeline(storage).run_import(Path(args.csv_file), args.symbol)
    except Exception as e:
        logger.error(f"Import failed: {e}")
        sys.exit(1)


def cmd_chart(args: argparse.Namespace) -> None:
    """Write the stacked Q-index chart for a symbol to an HTML file."""
    try:
        config, storage = _load(args)
        period = args.period or config.settings.default_period
        series = load_chart_series(args.symbol, storage, period)
    except Exception as e:
        logger.error(f"Failed to load chart data for '{args.symbol}': {e}")
        sys.exit(1)

    if series.is_empty:
        logger.error(f"No Q-index data for {args.symbol} in the last {series.period.label}")
        sys.exit(1)

    default_name = f"{series.symbol}_{series.period.value}.html"
    output = Path(args.output) if args.output else Path(default_name)
    try:
        fig = build_stock_figure(series, height=config.settings.chart_height)
        fig.write_html(output)
    except Exception as e:
        logger.error(f"Failed to write chart to {output}: {e}")
        sys.exit(1)

    logger.success(f"✅ Wrote {len(series.candlestick)} candles for {series.symbol} to {output}")


def cmd_list(args: argparse.Namespace) -> None:
    """List symbols with stored Q-index data."""
    try:
        _, storage = _load(args)
        symbols = ImportPipeline(storage).available_symbols()
    except Exception as e:
        logger.error(f"Failed to list symbols: {e}")
        sys.exit(1)

    if not symbols:
        logger.info("No Q-index data stored")
        return

    logger.info(f"Found {len(symbols)} symbol(s):")
    for symbol in symbols:
        logger.info(f"  • {symbol}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Q-Index Dashboard - Data Import and Charts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        default=str(settings.config_path),
        help="Path to config.yaml (default: %(default)s)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    # Import command
    parser_import = subparsers.add_parser("import", help="Import a Q-index CSV sheet")
    parser_import.add_argument("csv_file", help="CSV with date, open, high, low, close, ...")
    parser_import.add_argument("--symbol", required=True, help="Stock symbol of the sheet")
    parser_import.set_defaults(func=cmd_import)

    # Chart command
    parser_chart = subparsers.add_parser("chart", help="Export charts for a symbol as HTML")
    parser_chart.add_argument("--symbol", required=True, help="Stock symbol")
    parser_chart.add_argument(
        "--period",
        choices=[p.value for p in TimePeriod],
        help="Look-back window (default: from config)",
    )
    parser_chart.add_argument("--output", help="Output HTML path (default: <SYMBOL>_<period>.html)")
    parser_chart.set_defaults(func=cmd_chart)

    # List command
    parser_list = subparsers.add_parser("list", help="List symbols with stored data")
    parser_list.set_defaults(func=cmd_list)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point with CLI argument parsing."""
    configure_logging(settings.effective_log_level)

    args = build_parser().parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
