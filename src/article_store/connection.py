"""Engine and session factory for the article store."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from article_store.models import Base
from common.config import get_config

logger = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def get_engine(url: str | None = None, echo: bool = False) -> Engine:
    """Create (once per URL) the engine for `url`, or for the configured database."""
    if url is None:
        database = get_config().database
        url, echo = database.url, database.echo
    logger.debug("Creating engine for %s", url.split("@")[-1])
    return create_engine(url, echo=echo)


@contextmanager
def get_session(url: str | None = None) -> Iterator[Session]:
    """Yield a session; callers commit explicitly, anything uncommitted is rolled back."""
    factory = sessionmaker(bind=get_engine(url), expire_on_commit=False)
    session = factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_schema(engine: Engine) -> None:
    """Create all tables that don't exist yet."""
    Base.metadata.create_all(engine)
    logger.info("Schema ready (%s)", ", ".join(sorted(Base.metadata.tables)))
