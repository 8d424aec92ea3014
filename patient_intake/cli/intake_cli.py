"""
Command-line interface for patient CSV intake.

Usage:
    patient-intake ingest <file> [--edit ROW FIELD VALUE]... [--stage] [options]
    patient-intake metrics
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from patient_intake.core.config import ConfigError, IntakeSettings, load_settings
from patient_intake.core.models import UploadedFile
from patient_intake.observability.logger import get_logger, setup_logger, ROOT_LOGGER_NAME
from patient_intake.observability.metrics import generate_metrics
from patient_intake.session import IntakeSession


logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INGESTION_FAILED = 1
EXIT_BAD_INPUT = 2


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))


def _load_settings(args: argparse.Namespace) -> IntakeSettings:
    settings = load_settings(args.config)
    if args.timeout is None:
        return settings
    try:
        return IntakeSettings(**{**settings.model_dump(), "timeout_seconds": args.timeout})
    except ValidationError as e:
        raise ConfigError(f"Invalid --timeout value: {args.timeout}") from e


def ingest_command(args: argparse.Namespace) -> int:
    """
    Execute the ingest command.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    try:
        settings = _load_settings(args)
    except (ConfigError, FileNotFoundError) as e:
        logger.error(f"Invalid configuration: {e}")
        return EXIT_BAD_INPUT

    setup_logger(ROOT_LOGGER_NAME, level=settings.log_level, format_type=settings.log_format)

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error(f"Input file not found: {args.input}")
        return EXIT_BAD_INPUT

    session = IntakeSession(settings=settings)

    try:
        result = session.upload(UploadedFile.from_path(input_path))
        if not result.ok:
            _print_json({"error": result.error.model_dump(mode="json")})
            return EXIT_INGESTION_FAILED

        for row, field, value in args.edit or []:
            try:
                session.edit(int(row), field, value)
            except ValueError as e:
                logger.error(f"Rejected edit: {e}")
                return EXIT_BAD_INPUT

        if args.stage:
            payload = session.prepare_for_sync()
            _print_json({"staged": payload.model_dump(mode="json")})
        else:
            _print_json({"records": [record.to_row() for record in session.records]})

        return EXIT_OK
    finally:
        session.close()


def metrics_command(args: argparse.Namespace) -> int:
    """Print Prometheus exposition text for this process."""
    sys.stdout.write(generate_metrics().decode("utf-8"))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="patient-intake",
        description="Patient contact CSV intake",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Validate and print a CSV upload
  patient-intake ingest data/patients.csv

  # Fix a cell and stage the result for CRM sync
  patient-intake ingest data/patients.csv --edit 0 email jane@x.com --stage

  # Allow more time for large files
  patient-intake ingest data/patients.csv --timeout 120
        """
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    ingest_parser = subparsers.add_parser("ingest", help="Ingest a patient CSV file")
    ingest_parser.add_argument(
        "input",
        help="Path to the CSV file"
    )
    ingest_parser.add_argument(
        "--edit",
        nargs=3,
        action="append",
        metavar=("ROW", "FIELD", "VALUE"),
        help="Apply a cell edit after ingestion (repeatable)"
    )
    ingest_parser.add_argument(
        "--stage",
        action="store_true",
        help="Print the CRM sync payload instead of the records"
    )
    ingest_parser.add_argument(
        "--config",
        default=None,
        help="Path to intake settings YAML file"
    )
    ingest_parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Parse timeout in seconds (default: 30)"
    )

    subparsers.add_parser("metrics", help="Print Prometheus metrics for this process")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_BAD_INPUT

    if args.command == "ingest":
        return ingest_command(args)
    if args.command == "metrics":
        return metrics_command(args)

    return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
