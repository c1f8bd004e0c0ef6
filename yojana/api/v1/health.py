"""Health check endpoint.

Reports liveness and whether the scheme catalog was loaded.  Always
answers 200 while the process runs; ``status`` is ``"degraded"`` when
the catalog is unavailable.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    version: str
    catalog_loaded: bool
    scheme_count: int


@router.get("", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Liveness probe with catalog status."""
    catalog = getattr(request.app.state, "catalog", None)
    loaded = catalog is not None

    return HealthResponse(
        status="healthy" if loaded else "degraded",
        version=request.app.version,
        catalog_loaded=loaded,
        scheme_count=len(catalog) if loaded else 0,
    )
