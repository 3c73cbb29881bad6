"""Helper functions for ingest_articles CLI."""

from __future__ import annotations

import argparse
import logging

from common.cli_helpers import add_config_argument
from ingest_articles.fetch_articles.sources import SOURCES

logger = logging.getLogger(__name__)


def parse_sources(value: str | None) -> list[str]:
    '''Parse the --sources argument into a list of source keys.'''

    # An empty list means every registered source
    if not value or value.strip().lower() == "all":
        return []

    # Parse comma-separated sources, keeping only valid ones
    valid_sources = set(SOURCES.keys())
    parsed = [s.strip().lower() for s in value.split(",") if s.strip() and s.strip().lower() != "all"]

    # Log any invalid sources
    for source in parsed:
        if source not in valid_sources:
            logger.warning("Invalid source: %s", source)

    sources = [s for s in parsed if s in valid_sources]

    # Raise an error if no valid sources were provided
    if not sources:
        raise ValueError(f"No valid sources provided. Valid sources: {', '.join(sorted(valid_sources))}")

    return sources


def parse_ingest_articles_args(argv: list[str] | None = None) -> argparse.Namespace:
    '''Parse CLI arguments for ingest_articles.'''

    parser = argparse.ArgumentParser(description="Fetch, link and store articles from all feeds")
    add_config_argument(parser)
    parser.add_argument(
        "--sources",
        default=None,
        help="Comma-separated list of sources (default: all).",
    )
    parser.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Worker pool size (default: one per source).",
    )
    return parser.parse_args(argv)
