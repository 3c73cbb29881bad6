"""Shared fixtures."""

from __future__ import annotations

from typing import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from article_store.connection import create_schema
from common.config import PipelineConfig, reset_config, set_config


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    factory = sessionmaker(bind=engine, expire_on_commit=False)
    session = factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def pipeline_config() -> Iterator[PipelineConfig]:
    """Default config installed as the process-wide config for the test."""
    config = PipelineConfig()
    config.ingest.request_timeout = 5.0
    set_config(config)
    yield config
    reset_config()
