"""Tests for the v1 HTTP API.

The app's lifespan loads the bundled catalog, so these run against the
same data shipped with the package.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from yojana.main import app, install_catalog


@pytest.fixture(scope="module")
def client() -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "healthy"
        assert body["catalog_loaded"] is True
        assert body["scheme_count"] == 14


class TestBrowse:
    def test_list_paginates(self, client: TestClient) -> None:
        resp = client.get("/api/v1/schemes", params={"page": 2, "page_size": 5})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 14
        assert len(body["schemes"]) == 5
        assert body["page"] == 2

    def test_list_category_filter(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes", params={"category": "AGRICULTURE"}).json()
        assert {s["id"] for s in body["schemes"]} == {"pmfby", "pmkisan"}

    def test_list_active_filter(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes", params={"active": "false", "page_size": 50}).json()
        assert [s["id"] for s in body["schemes"]] == ["ddugky"]

    def test_list_sort_newest(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes", params={"sort": "newest", "page_size": 1}).json()
        assert body["schemes"][0]["id"] == "pmkisan"

    def test_invalid_sort_rejected(self, client: TestClient) -> None:
        assert client.get("/api/v1/schemes", params={"sort": "random"}).status_code == 422

    def test_featured(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes/featured").json()
        assert 0 < len(body) <= 6
        assert all(s["isPopular"] for s in body)

    def test_categories(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes/categories").json()
        counts = {c["category"].casefold(): c["count"] for c in body["categories"]}
        assert counts["agriculture"] == 2
        assert counts["finance"] == 2

    def test_detail_uses_camel_case(self, client: TestClient) -> None:
        resp = client.get("/api/v1/schemes/pmjdy")
        assert resp.status_code == 200
        body = resp.json()
        assert body["eligibilityText"] == "Any Indian citizen above 10 years of age"
        assert body["isPopular"] is True

    def test_detail_not_found(self, client: TestClient) -> None:
        assert client.get("/api/v1/schemes/does-not-exist").status_code == 404

    def test_related(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes/pmfby/related").json()
        ids = [s["id"] for s in body]
        assert len(ids) == 3
        assert "pmfby" not in ids
        assert ids[0] == "pmkisan"

    def test_related_not_found(self, client: TestClient) -> None:
        assert client.get("/api/v1/schemes/nope/related").status_code == 404


class TestSearch:
    def test_search(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes/search", params={"q": "crop insurance farmers"}).json()
        assert body["total"] > 0
        assert body["results"][0]["id"] == "pmfby"

    def test_empty_query_lists_catalog(self, client: TestClient) -> None:
        body = client.get("/api/v1/schemes/search").json()
        assert body["total"] == 14
        assert body["results"][0]["isPopular"] is True

    def test_search_filters(self, client: TestClient) -> None:
        body = client.get(
            "/api/v1/schemes/search",
            params={"q": "north east startups", "state": "assam"},
        ).json()
        assert [s["id"] for s in body["results"]] == ["ne-startup"]


class TestMatch:
    def test_match_ranks_and_explains(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/schemes/match",
            json={"age": 9, "gender": "female", "interests": ["girl child"]},
        )
        assert resp.status_code == 200
        results = resp.json()["results"]
        assert len(results) == 14
        top = results[0]
        assert top["scheme"]["id"] == "sukanya"
        assert top["score"] == 100
        labels = [f["factor"] for f in top["matchingFactors"]]
        assert "Gender Eligibility" in labels
        assert "Child Focused" in labels

        scores = [r["score"] for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_match_refinements(self, client: TestClient) -> None:
        body = client.post(
            "/api/v1/schemes/match",
            params={"category": "finance", "limit": 2},
            json={"occupation": "farmer"},
        ).json()
        assert body["total"] == 2
        assert all(r["scheme"]["category"] == "finance" for r in body["results"])

    def test_empty_profile_scores_zero(self, client: TestClient) -> None:
        body = client.post("/api/v1/schemes/match", json={}).json()
        assert {r["score"] for r in body["results"]} == {0}

    def test_fractional_age_accepted(self, client: TestClient) -> None:
        resp = client.post("/api/v1/schemes/match", json={"age": 9.5, "gender": "female"})
        assert resp.status_code == 200
        assert resp.json()["total"] == 14

    def test_invalid_profile(self, client: TestClient) -> None:
        resp = client.post("/api/v1/schemes/match", json={"age": "nine"})
        assert resp.status_code == 422


class TestCatalogUnavailable:
    def test_endpoints_answer_503(self, client: TestClient, tmp_path: Path) -> None:
        install_catalog(app, str(tmp_path / "missing.json"))
        try:
            assert client.get("/api/v1/schemes").status_code == 503
            assert client.post("/api/v1/schemes/match", json={"age": 30}).status_code == 503
            assert client.get("/api/v1/schemes/search", params={"q": "loan"}).status_code == 503
            health = client.get("/api/v1/health").json()
            assert health["status"] == "degraded"
            assert health["scheme_count"] == 0
        finally:
            install_catalog(app)
