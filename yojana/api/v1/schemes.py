"""Scheme-related API endpoints for Yojana v1.

Provides endpoints for browsing, searching and profile-matching the
government schemes loaded at startup.  Every endpoint answers 503 when
the catalog could not be loaded.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from config.settings import settings
from yojana.models.matching import MatchedScheme
from yojana.models.scheme import SchemeRecord
from yojana.models.user_profile import UserProfile
from yojana.services.ranking import (
    SchemeMatcher,
    SortOrder,
    count_by_category,
    filter_by_category,
    sort_items,
)
from yojana.services.scheme_search import SchemeSearchService, SearchFilters

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/schemes", tags=["schemes"])


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SchemeListResponse(BaseModel):
    """Paginated list of schemes."""

    schemes: list[SchemeRecord]
    total: int
    page: int
    page_size: int


class SchemeSearchResponse(BaseModel):
    results: list[SchemeRecord]
    query: str
    total: int


class MatchResponse(BaseModel):
    """Ranked schemes for one profile, best match first."""

    results: list[MatchedScheme]
    total: int


class CategoryCount(BaseModel):
    category: str
    count: int


class CategoriesResponse(BaseModel):
    categories: list[CategoryCount]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _state_service(request: Request, name: str) -> Any:
    service = getattr(request.app.state, name, None)
    if service is None:
        raise HTTPException(status_code=503, detail="Scheme catalog is unavailable.")
    return service


def _matcher(request: Request) -> SchemeMatcher:
    return _state_service(request, "matcher")


def _search(request: Request) -> SchemeSearchService:
    return _state_service(request, "scheme_search")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("", response_model=SchemeListResponse)
async def list_schemes(
    request: Request,
    category: str | None = Query(default=None, description="Exact category, case-insensitive"),
    state: str | None = Query(default=None, description="State name or fragment"),
    active: bool | None = Query(default=None, description="Only active (true) or inactive (false) schemes"),
    sort: SortOrder = Query(default=SortOrder.RECOMMENDED, description="recommended, newest or deadline"),
    page: int = Query(default=1, ge=1, description="Page number"),
    page_size: int = Query(default=9, ge=1, le=100, description="Results per page"),
) -> SchemeListResponse:
    """Browse the catalog with filters, a sort order and pagination."""
    search = _search(request)

    filtered = search.filter(SearchFilters(state=state, is_active=active))
    filtered = filter_by_category(filtered, category)
    ordered = sort_items(filtered, sort)

    start = (page - 1) * page_size
    return SchemeListResponse(
        schemes=ordered[start:start + page_size],
        total=len(ordered),
        page=page,
        page_size=page_size,
    )


@router.get("/featured", response_model=list[SchemeRecord])
async def featured_schemes(
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=50),
) -> list[SchemeRecord]:
    """Popular schemes for the landing page."""
    return _matcher(request).featured(limit or settings.featured_limit)


@router.get("/categories", response_model=CategoriesResponse)
async def scheme_categories(request: Request) -> CategoriesResponse:
    """Category labels with scheme counts, most populous first."""
    counts = count_by_category(_matcher(request).schemes)
    return CategoriesResponse(
        categories=[CategoryCount(category=label, count=n) for label, n in counts],
    )


@router.get("/search", response_model=SchemeSearchResponse)
async def search_schemes(
    request: Request,
    q: str = Query(default="", max_length=500, description="Free-text query"),
    category: str | None = Query(default=None),
    state: str | None = Query(default=None),
    active: bool | None = Query(default=None),
) -> SchemeSearchResponse:
    """Free-text search; an empty query lists the filtered catalog."""
    results = _search(request).search(
        q,
        SearchFilters(category=category, state=state, is_active=active),
    )
    return SchemeSearchResponse(results=results, query=q, total=len(results))


@router.post("/match", response_model=MatchResponse)
async def match_schemes(
    profile: UserProfile,
    request: Request,
    category: str | None = Query(default=None, description="Exact category, case-insensitive"),
    sort: SortOrder = Query(default=SortOrder.RECOMMENDED),
    limit: int | None = Query(default=None, ge=1, le=500),
) -> MatchResponse:
    """Rank every scheme for *profile* and explain each score."""
    ranked = _matcher(request).rank(profile)
    ranked = filter_by_category(ranked, category)
    ranked = sort_items(ranked, sort)
    if limit is not None:
        ranked = ranked[:limit]

    logger.info(
        "api.schemes.match",
        profile_fields=len(profile.model_dump(exclude_defaults=True)),
        returned=len(ranked),
    )
    return MatchResponse(results=ranked, total=len(ranked))


@router.get("/{scheme_id}", response_model=SchemeRecord)
async def get_scheme_detail(scheme_id: str, request: Request) -> SchemeRecord:
    """Get full details of a specific scheme by its ID."""
    scheme = _matcher(request).get(scheme_id)
    if scheme is None:
        raise HTTPException(status_code=404, detail=f"Scheme '{scheme_id}' not found.")
    return scheme


@router.get("/{scheme_id}/related", response_model=list[SchemeRecord])
async def related_schemes(
    scheme_id: str,
    request: Request,
    limit: int | None = Query(default=None, ge=1, le=20),
) -> list[SchemeRecord]:
    """Schemes similar to the given one, excluding itself."""
    matcher = _matcher(request)
    scheme = matcher.get(scheme_id)
    if scheme is None:
        raise HTTPException(status_code=404, detail=f"Scheme '{scheme_id}' not found.")
    return matcher.related(scheme, limit or settings.related_limit)
