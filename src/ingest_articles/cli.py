"""CLI for ingesting articles."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from article_store.connection import get_session
from common.cli_helpers import setup_logging
from common.config import load_config, set_config
from common.errors import PipelineError
from ingest_articles.helpers import parse_ingest_articles_args, parse_sources
from ingest_articles.ingest_articles import ingest_articles

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_ingest_articles_args(argv)

    load_dotenv()
    config = load_config(args.config)
    setup_logging(config.logging.level)

    try:
        sources = parse_sources(args.sources)
    except ValueError as e:
        logger.error("%s", e)
        return 2
    if sources:
        config.ingest.sources = sources
    if args.max_workers is not None:
        config.ingest.max_workers = args.max_workers
    set_config(config)

    try:
        with get_session() as session:
            summary = ingest_articles(session, config=config)
    except PipelineError as e:
        logger.error("Ingestion failed: %s", e)
        return 1

    for error in summary.adapter_errors:
        logger.warning("Adapter failed: %s", error)
    logger.info(
        "Ingested %d articles (%d new, %d links)",
        summary.articles_fetched,
        summary.articles_inserted,
        summary.links_created,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
