"""Tests for common.config module."""

from pathlib import Path

import pytest

from common.config import (
    ConfigSingleton,
    PipelineConfig,
    find_config_path,
    load_config,
    parse_config,
)


class TestFindConfigPath:
    def test_explicit_name(self, tmp_path: Path) -> None:
        (tmp_path / "dev.yaml").write_text("{}")
        assert find_config_path("dev", config_dir=tmp_path) == tmp_path / "dev.yaml"

    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "staging.yaml").write_text("{}")
        monkeypatch.setenv("PIPELINE_CONFIG", "staging")
        assert find_config_path(None, config_dir=tmp_path) == tmp_path / "staging.yaml"

    def test_default_name(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "prod.yaml").write_text("{}")
        monkeypatch.delenv("PIPELINE_CONFIG", raising=False)
        assert find_config_path(None, config_dir=tmp_path) == tmp_path / "prod.yaml"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            find_config_path("nope", config_dir=tmp_path)


class TestParseConfig:
    def test_empty_uses_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = parse_config({})
        assert config == PipelineConfig()
        assert config.link.threshold == 0.3
        assert config.keywords.cluster_threshold == 0.36
        assert config.keywords.window_days == 14
        assert config.keywords.batch_size == 500
        assert config.cleanup.older_than_days == 7

    def test_overrides_and_ignores_unknown_keys(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = parse_config(
            {
                "similarity": {"title_weight": 0.5, "bogus": 1},
                "ingest": {"sources": ["faz"], "max_workers": 3},
            }
        )
        assert config.similarity.title_weight == 0.5
        assert config.similarity.description_weight == 0.35
        assert config.ingest.sources == ["faz"]
        assert config.ingest.max_workers == 3

    def test_database_url_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DATABASE_URL", "postgresql+psycopg2://db/news")
        config = parse_config({"database": {"url": "sqlite://"}})
        assert config.database.url == "postgresql+psycopg2://db/news"


class TestLoadConfig:
    def test_loads_test_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = load_config("test")
        assert config.database.url == "sqlite://"
        assert config.ingest.sources == ["faz", "taz"]


class TestConfigSingleton:
    def test_lazy_load_once(self) -> None:
        calls = []

        def loader() -> str:
            calls.append(1)
            return "config"

        manager = ConfigSingleton(loader)
        assert manager.get() == "config"
        assert manager.get() == "config"
        assert len(calls) == 1

    def test_set_and_reset(self) -> None:
        manager = ConfigSingleton(lambda: "loaded")
        manager.set("explicit")
        assert manager.get() == "explicit"
        manager.reset()
        assert manager.get() == "loaded"

    def test_no_loader_raises(self) -> None:
        with pytest.raises(RuntimeError):
            ConfigSingleton().get()
