"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime, time, timezone


def setup_logging(level: str = "INFO") -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def parse_date(value: str, field_name: str = "date") -> date:
    """Parse a date string for argparse arguments.

    Args:
        value: Date string in YYYY-MM-DD format.
        field_name: Name of the field for error messages.

    Returns:
        Parsed date object.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid date.
    """
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be YYYY-MM-DD") from exc


def end_of_day(d: date) -> datetime:
    """Midnight UTC at the end of the given day."""
    return datetime.combine(d, time.max, tzinfo=timezone.utc)


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Config name under configs/ (default: $PIPELINE_CONFIG or prod)",
    )
