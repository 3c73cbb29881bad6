"""CLI for deleting old articles."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from article_store.connection import get_session
from cleanup_articles.cleanup import cleanup_old_articles
from common.cli_helpers import add_config_argument, setup_logging
from common.config import load_config, set_config
from common.errors import PipelineError

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Delete articles older than the retention window")
    add_config_argument(parser)
    parser.add_argument(
        "--older-than-days",
        type=int,
        default=None,
        help="Retention window in days (default: from config)",
    )
    args = parser.parse_args(argv)

    load_dotenv()
    config = load_config(args.config)
    set_config(config)
    setup_logging(config.logging.level)

    days = args.older_than_days if args.older_than_days is not None else config.cleanup.older_than_days

    try:
        with get_session() as session:
            cleanup_old_articles(session, older_than_days=days)
    except PipelineError as e:
        logger.error("Cleanup failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
