"""Shared configuration loading.

Configuration lives in `configs/<name>.yaml` at the repository root. Every
section is optional; missing keys keep the dataclass defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Generic, TypeVar

import yaml
from dotenv import load_dotenv

T = TypeVar("T")

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"
CONFIG_ENV_VAR = "PIPELINE_CONFIG"


@dataclass
class IngestConfig:
    """Feed fan-out settings.

    Attributes:
        sources: Source keys to scrape; empty means every registered source
        request_timeout: Per-adapter HTTP timeout in seconds
        max_workers: Worker pool size; 0 means one worker per adapter
    """

    sources: list[str] = field(default_factory=list)
    request_timeout: float = 30.0
    max_workers: int = 0


@dataclass
class SimilarityConfig:
    """Weights and bucket values of the composite similarity score."""

    title_weight: float = 0.45
    description_weight: float = 0.35
    time_weight: float = 0.15
    source_weight: float = 0.05
    same_day: float = 1.0
    same_week: float = 0.8
    same_month: float = 0.5
    same_source: float = 0.2
    different_source: float = 0.3
    min_title_length: int = 10
    min_description_length: int = 20


@dataclass
class LinkConfig:
    """Link resolution settings.

    Attributes:
        threshold: Minimum composite score for two articles to be linked
        symmetric: Also store the reverse direction of every discovered link
    """

    threshold: float = 0.3
    symmetric: bool = False


@dataclass
class KeywordConfig:
    """Keyword mining settings."""

    window_days: int = 14
    cluster_threshold: float = 0.36
    top_k: int = 8
    batch_size: int = 500


@dataclass
class CleanupConfig:
    older_than_days: int = 7


@dataclass
class DatabaseConfig:
    url: str = "sqlite:///news.db"
    echo: bool = False


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class PipelineConfig:
    """Root configuration container."""

    ingest: IngestConfig = field(default_factory=IngestConfig)
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    link: LinkConfig = field(default_factory=LinkConfig)
    keywords: KeywordConfig = field(default_factory=KeywordConfig)
    cleanup: CleanupConfig = field(default_factory=CleanupConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path = CONFIG_DIR,
    default_name: str = "prod",
    env_var: str | None = CONFIG_ENV_VAR,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def _build_section(cls: type[T], data: dict[str, Any] | None) -> T:
    known = {f.name for f in fields(cls)}
    values = {key: value for key, value in (data or {}).items() if key in known}
    return cls(**values)


def parse_config(data: dict[str, Any]) -> PipelineConfig:
    """Parse a config dictionary into a PipelineConfig."""
    config = PipelineConfig(
        ingest=_build_section(IngestConfig, data.get("ingest")),
        similarity=_build_section(SimilarityConfig, data.get("similarity")),
        link=_build_section(LinkConfig, data.get("link")),
        keywords=_build_section(KeywordConfig, data.get("keywords")),
        cleanup=_build_section(CleanupConfig, data.get("cleanup")),
        database=_build_section(DatabaseConfig, data.get("database")),
        logging=_build_section(LoggingConfig, data.get("logging")),
    )

    database_url = os.environ.get("DATABASE_URL")
    if database_url:
        config.database.url = database_url

    return config


def load_config(config_name: str | None = None) -> PipelineConfig:
    """Load configuration by name.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses PIPELINE_CONFIG env var or "prod".
    """
    load_dotenv()
    path = find_config_path(config_name)
    return parse_config(load_yaml(path))


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.

    Example:
        >>> _manager = ConfigSingleton(load_config)
        >>> get_config = _manager.get
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[PipelineConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
