#!/usr/bin/env python3
"""
Export pending transactions to a NACHA file, or reconcile a bank return file.

Usage:
    python src/ach_cli.py export <transactions.csv> --effective-date YYYY-MM-DD
        [--config originator.json] [--output-dir DIR] [--dry-run]
    python src/ach_cli.py returns <return_file> --traces <file>.traces.json

The transactions CSV needs the columns id, amount, kind, routing_number,
account_number_last4, payee_id and payee_name. Without --config, originator
settings come from SSM Parameter Store or ACH_* environment variables.
"""

import argparse
import csv
import json
import logging
import sys
from datetime import date, datetime
from decimal import InvalidOperation
from pathlib import Path

from ach_config import OriginatorConfig
from logging_utils import color_json, setup_json_logger
from nacha_decoder import decode
from nacha_encoder import encode, export_file_name, export_summary
from nacha_fields import NachaError
from nacha_records import Transaction
from reconciliation import import_summary, reconcile

logger = logging.getLogger(__name__)


def read_transactions(csv_path: Path) -> list[Transaction]:
    with csv_path.open(newline="", encoding="utf-8") as f:
        return [Transaction.from_row(row) for row in csv.DictReader(f)]


def load_originator(config_path: str | None) -> OriginatorConfig:
    if config_path:
        with open(config_path, encoding="utf-8") as f:
            return OriginatorConfig.from_dict(json.load(f))
    return OriginatorConfig.load()


def run_export(args: argparse.Namespace) -> int:
    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        logger.error("CSV file not found: %s", args.csv_file)
        return 1

    try:
        effective_date = date.fromisoformat(args.effective_date)
    except ValueError:
        logger.error("Invalid effective date format. Use YYYY-MM-DD")
        return 1

    try:
        transactions = read_transactions(csv_path)
        originator = load_originator(args.config)
        config = originator.batch_config(effective_date, datetime.now())
        result = encode(transactions, config)
    except (NachaError, KeyError, ValueError, InvalidOperation, OSError):
        logger.exception("NACHA export failed", extra={"csv_file": str(csv_path)})
        return 1

    summary = export_summary(result, transactions, config)
    print(color_json(summary))

    if args.dry_run:
        print(result.text)
        return 0

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    nacha_path = output_dir / export_file_name(config.created_at)
    nacha_path.write_text(result.text, encoding="ascii", errors="replace")
    traces_path = nacha_path.with_suffix(".traces.json")
    # Keyed by trace number, the shape reconcile() expects
    traces_path.write_text(
        json.dumps(
            {trace: txn_id for txn_id, trace in result.trace_numbers.items()},
            indent=2,
        ),
        encoding="utf-8",
    )
    logger.info(
        "Wrote NACHA file",
        extra={"nacha_file": str(nacha_path), "traces_file": str(traces_path)},
    )
    for degraded in result.degraded:
        print(
            f"  ! {degraded.transaction_id} (trace {degraded.trace_number}): "
            f"{degraded.reason}"
        )
    return 0


def run_returns(args: argparse.Namespace) -> int:
    return_path = Path(args.return_file)
    traces_path = Path(args.traces)
    for path in (return_path, traces_path):
        if not path.exists():
            logger.error("File not found: %s", path)
            return 1

    try:
        known_trace_numbers = json.loads(traces_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError):
        logger.exception(
            "Unreadable trace map", extra={"traces_file": str(traces_path)}
        )
        return 1
    if not isinstance(known_trace_numbers, dict):
        logger.error("Trace map must be a JSON object: %s", traces_path)
        return 1

    decoded = decode(return_path.read_text(encoding="utf-8", errors="replace"))
    reconciled = reconcile(decoded.entries, known_trace_numbers)

    print(color_json(import_summary(decoded, reconciled, return_path.name)))
    return 0 if not (decoded.skipped or reconciled.orphans) else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build NACHA files and reconcile ACH return files"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export", help="Encode transactions from a CSV into a NACHA file"
    )
    export_parser.add_argument("csv_file", type=str, help="Transactions CSV")
    export_parser.add_argument(
        "--effective-date",
        type=str,
        required=True,
        help="Effective entry date (YYYY-MM-DD)",
    )
    export_parser.add_argument(
        "--config",
        type=str,
        help="JSON file with originator settings. Defaults to SSM/environment.",
    )
    export_parser.add_argument(
        "--output-dir", type=str, default=".", help="Where to write the file"
    )
    export_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the file and summary without writing anything",
    )
    export_parser.set_defaults(handler=run_export)

    returns_parser = subparsers.add_parser(
        "returns", help="Decode a return file and match it to exported entries"
    )
    returns_parser.add_argument("return_file", type=str, help="Bank return file")
    returns_parser.add_argument(
        "--traces",
        type=str,
        required=True,
        help="Trace map written alongside the exported NACHA file",
    )
    returns_parser.set_defaults(handler=run_returns)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    setup_json_logger()
    sys.exit(main())
