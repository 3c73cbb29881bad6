"""Helper functions for generate_keywords CLI."""

from __future__ import annotations

import argparse
from functools import partial

from common.cli_helpers import add_config_argument, parse_date


def parse_generate_keywords_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for generate_keywords.'''

    parser = argparse.ArgumentParser(description="Rebuild keyword tags from recent articles")
    add_config_argument(parser)
    parser.add_argument(
        "--as-of",
        type=partial(parse_date, field_name="as-of"),
        default=None,
        help="UTC date (YYYY-MM-DD) ending the mining window (default: now)",
    )
    parser.add_argument("--window-days", type=int, default=None)
    parser.add_argument("--threshold", type=float, default=None, help="Clustering threshold")
    return parser.parse_args(argv)
