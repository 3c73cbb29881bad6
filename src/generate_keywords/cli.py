"""CLI for generating keywords."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from article_store.connection import get_session
from common.cli_helpers import end_of_day, setup_logging
from common.config import load_config, set_config
from common.errors import PipelineError
from generate_keywords.generate_keywords import generate_keywords
from generate_keywords.helpers import parse_generate_keywords_args

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    args = parse_generate_keywords_args(argv)

    load_dotenv()
    config = load_config(args.config)
    if args.window_days is not None:
        config.keywords.window_days = args.window_days
    if args.threshold is not None:
        config.keywords.cluster_threshold = args.threshold
    set_config(config)
    setup_logging(config.logging.level)

    as_of = end_of_day(args.as_of) if args.as_of else None

    try:
        with get_session() as session:
            summary = generate_keywords(session, as_of=as_of, config=config)
    except PipelineError as e:
        logger.error("Keyword generation failed: %s", e)
        return 1

    logger.info(
        "Generated %d keywords from %d articles",
        summary.keywords_persisted,
        summary.articles_loaded,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
