"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from config.settings import Settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("YOJANA_CATALOG_PATH", raising=False)
        monkeypatch.delenv("YOJANA_ENV", raising=False)
        cfg = Settings(_env_file=None)
        assert cfg.catalog_path is None
        assert cfg.search_min_score == 0.1
        assert cfg.featured_limit == 6
        assert cfg.related_limit == 3
        assert cfg.is_production is False

    def test_prefixed_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YOJANA_ENV", "production")
        monkeypatch.setenv("YOJANA_CATALOG_PATH", "/srv/catalog.json")
        monkeypatch.setenv("LOG_FORMAT", "console")
        cfg = Settings(_env_file=None)
        assert cfg.is_production is True
        assert cfg.catalog_path == "/srv/catalog.json"
        assert cfg.log_format == "console"

    def test_rejects_non_positive_threshold(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("YOJANA_SEARCH_MIN_SCORE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
