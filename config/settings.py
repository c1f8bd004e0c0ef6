"""Runtime configuration for the scheme finder.

Values come from the process environment (and a ``.env`` file when one
exists), validated by pydantic-settings.  Scheme-finder keys carry the
``YOJANA_`` prefix; host, port and logging keep their conventional
unprefixed names through ``validation_alias``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(StrEnum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Scheme finder settings.

    ``catalog_path`` left unset means the catalog bundled with the
    package.  The limits only apply to the HTTP surface; the matching
    core itself never truncates.
    """

    model_config = SettingsConfigDict(
        env_prefix="YOJANA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── Deployment ─────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"
    api_host: str = Field(default="0.0.0.0", validation_alias="API_HOST")
    api_port: int = Field(default=8000, validation_alias="API_PORT")

    # ── Logging (structlog) ────────────────────────────────────────────
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "console"] = Field(default="json", validation_alias="LOG_FORMAT")

    # ── Catalog ────────────────────────────────────────────────────────
    catalog_path: str | None = None

    # ── Search and listing ─────────────────────────────────────────────
    search_min_score: float = Field(default=0.1, gt=0.0)
    featured_limit: int = Field(default=6, ge=1)
    related_limit: int = Field(default=3, ge=1)

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PRODUCTION


settings = Settings()
