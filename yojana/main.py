"""Yojana FastAPI application entry point.

Creates the FastAPI app, configures structured logging, includes the
v1 routers, and loads the scheme catalog once at startup.  The matcher
and search index built from it are read-only and shared by all requests.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.responses import ORJSONResponse

from config.settings import settings
from yojana import __version__
from yojana.api.router import api_router
from yojana.data.catalog import CatalogUnavailableError, load_catalog
from yojana.services.ranking import SchemeMatcher
from yojana.services.scheme_search import SchemeSearchService

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Structured logging configuration
# ---------------------------------------------------------------------------


def _configure_logging() -> None:
    """Set up structlog with JSON or console rendering based on settings."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            settings.log_level,
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


def install_catalog(app: FastAPI, catalog_path: str | None = None) -> None:
    """Load the catalog and attach it, with its matcher and search index, to ``app.state``.

    On failure the three attributes are set to ``None`` so that scheme
    endpoints answer 503 instead of serving an empty catalog.
    """
    try:
        schemes = load_catalog(catalog_path)
    except CatalogUnavailableError as exc:
        logger.error("app.catalog_unavailable", source=exc.source, reason=exc.reason)
        app.state.catalog = None
        app.state.matcher = None
        app.state.scheme_search = None
        return

    app.state.catalog = schemes
    app.state.matcher = SchemeMatcher(schemes)
    app.state.scheme_search = SchemeSearchService(
        schemes,
        min_score=settings.search_min_score,
    )
    logger.info("app.catalog_installed", count=len(schemes))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging and load the scheme catalog."""
    _configure_logging()
    logger.info("app.startup", env=settings.env, version=__version__)

    install_catalog(app, settings.catalog_path)

    logger.info("app.startup_complete")

    yield

    logger.info("app.shutdown_complete")


# ---------------------------------------------------------------------------
# FastAPI application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Yojana Finder API",
    description=(
        "Browse, search and match Indian government welfare schemes "
        "against an applicant profile, with an explanation for every match."
    ),
    version=__version__,
    lifespan=lifespan,
    default_response_class=ORJSONResponse,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# -- Include routers -------------------------------------------------------
app.include_router(api_router)


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    uvicorn.run(
        "yojana.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
