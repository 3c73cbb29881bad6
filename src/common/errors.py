"""Error types raised by the ingestion and mining pipelines."""

from __future__ import annotations


class PipelineError(Exception):
    """Base class for pipeline failures."""


class AdapterError(PipelineError):
    """A single source adapter failed (network, timeout, malformed feed)."""

    def __init__(self, adapter: str, cause: BaseException):
        super().__init__(f"{adapter}: {cause}")
        self.adapter = adapter
        self.cause = cause


class ScrapeCycleError(PipelineError):
    """Every adapter that ran failed and no article was produced."""

    def __init__(self, errors: list[AdapterError]):
        names = ", ".join(error.adapter for error in errors)
        super().__init__(f"all scrapers failed ({len(errors)} errors: {names})")
        self.errors = errors


class PersistenceError(PipelineError):
    """A database operation failed and its transaction was rolled back."""
