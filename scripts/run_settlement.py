#!/usr/bin/env python3
"""
Run a settlement calculation over a CSV or XLSX file and write the result as CSV.

Invoices and payments are matched in row order; each output row is one
allocation record with its days difference, discount, final payment and
case note.

Usage:
    python3 scripts/run_settlement.py --input <path> [options]

Examples:
    # Calculate and print the settlement CSV
    python3 scripts/run_settlement.py --input rows.csv

    # Read the "Ledger" sheet of a workbook, write to a file
    python3 scripts/run_settlement.py --input ledger.xlsx --sheet Ledger --output settled.csv

    # Use a custom settings file and verbose logging
    python3 scripts/run_settlement.py --input rows.csv --config settings.yaml --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Project root on sys.path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Match invoices against payments and write settlement rows as CSV.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--input",
        required=True,
        type=Path,
        help="Path to source file (.csv or .xlsx).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the settlement CSV here (default: stdout).",
    )
    parser.add_argument(
        "--sheet",
        default=None,
        help="Worksheet name or 0-based index for .xlsx input (default: active sheet).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Settings YAML (default: $SETTLEMENT_CONFIG or packaged defaults).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Override the configured log level.",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    from settlement_config import get_active_settings, log_level
    from settlement_ingestion import export_rows, read_source
    from settlement_kernel.exceptions import ConfigurationError, InterchangeError
    from settlement_kernel.logging_config import LogContext, configure_logging, get_logger
    from settlement_services import SettlementCalculator

    try:
        settings = get_active_settings(args.config)
    except ConfigurationError as exc:
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1

    configure_logging(level=args.log_level or log_level(settings))
    logger = get_logger("scripts.run_settlement")

    with LogContext.bind(source=str(args.input)):
        options = {"delimiter": settings.interchange.delimiter}
        if args.sheet:
            options["sheet"] = args.sheet
        try:
            rows = read_source(args.input, options)
        except InterchangeError as exc:
            logger.error("settlement_input_failed", exc_info=True)
            print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
            return 1

        calculator = SettlementCalculator(settings)
        output_rows = calculator.calculate(rows)
        text = export_rows(
            output_rows,
            delimiter=settings.interchange.delimiter,
            quote_all=settings.interchange.quote_all,
        )

        if args.output is None:
            sys.stdout.write(text)
        else:
            args.output.write_text(text, encoding="utf-8")
        logger.info("settlement_written", extra={
            "input_rows": len(rows),
            "output_rows": len(output_rows),
            "output": str(args.output) if args.output else "<stdout>",
        })
    return 0


if __name__ == "__main__":
    sys.exit(main())
