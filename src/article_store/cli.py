"""CLI for creating the article store schema."""

from __future__ import annotations

import argparse

from dotenv import load_dotenv

from article_store.connection import create_schema, get_engine
from common.cli_helpers import add_config_argument, setup_logging
from common.config import load_config, set_config


def main() -> None:
    parser = argparse.ArgumentParser(description="Create database tables")
    add_config_argument(parser)
    args = parser.parse_args()

    load_dotenv()
    config = load_config(args.config)
    set_config(config)
    setup_logging(config.logging.level)

    create_schema(get_engine())


if __name__ == "__main__":
    main()
