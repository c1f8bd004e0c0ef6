"""Tests for the catalog provider."""

from __future__ import annotations

from pathlib import Path

import orjson
import pytest

from yojana.data.catalog import CatalogUnavailableError, load_catalog
from yojana.services.eligibility_view import normalize


def _write(tmp_path: Path, rows: object) -> Path:
    path = tmp_path / "catalog.json"
    path.write_bytes(orjson.dumps(rows))
    return path


class TestBundledCatalog:
    def test_loads(self) -> None:
        schemes = load_catalog()
        assert len(schemes) == 14
        ids = [s.id for s in schemes]
        assert len(ids) == len(set(ids))

    def test_snake_case_row(self) -> None:
        pmegp = next(s for s in load_catalog() if s.id == "pmegp")
        assert pmegp.launch_date == "2008-08-15"
        assert normalize(pmegp.eligibility).min_age == 18

    def test_json_string_eligibility(self) -> None:
        sukanya = next(s for s in load_catalog() if s.id == "sukanya")
        view = normalize(sukanya.eligibility)
        assert view.genders == ("female",)
        assert view.max_age == 10

    def test_closed_scheme_present(self) -> None:
        ddugky = next(s for s in load_catalog() if s.id == "ddugky")
        assert ddugky.is_active is False


class TestLoadCatalog:
    def test_invalid_rows_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [
            {"id": "ok", "title": "Fine"},
            {"title": "missing id"},
            "not an object",
            {"id": "", "title": "blank id"},
            {"id": "ok-2", "tags": "not a list"},
        ])
        assert [s.id for s in load_catalog(path)] == ["ok"]

    def test_duplicate_ids_first_wins(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [
            {"id": "naps", "title": "First"},
            {"id": "naps", "title": "Second"},
        ])
        schemes = load_catalog(path)
        assert len(schemes) == 1
        assert schemes[0].title == "First"

    def test_scheme_id_and_numeric_id(self, tmp_path: Path) -> None:
        path = _write(tmp_path, [{"scheme_id": "from-store"}, {"id": 42}])
        assert [s.id for s in load_catalog(str(path))] == ["from-store", "42"]

    def test_empty_array(self, tmp_path: Path) -> None:
        assert load_catalog(_write(tmp_path, [])) == []

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogUnavailableError, match="file not found"):
            load_catalog(tmp_path / "nope.json")

    def test_malformed_json(self, tmp_path: Path) -> None:
        path = tmp_path / "catalog.json"
        path.write_text("[{not json", encoding="utf-8")
        with pytest.raises(CatalogUnavailableError, match="malformed JSON"):
            load_catalog(path)

    def test_not_an_array(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogUnavailableError) as exc_info:
            load_catalog(_write(tmp_path, {"schemes": []}))
        assert exc_info.value.source.endswith("catalog.json")
