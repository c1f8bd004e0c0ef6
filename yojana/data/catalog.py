"""Catalog provider.

Loads scheme rows from the bundled ``catalog.json`` (or any JSON file
holding an array of rows) into validated :class:`SchemeRecord` instances.
Rows may use the web catalog's camelCase keys or the document store's
snake_case columns (including ``scheme_id`` in place of ``id``).

A catalog that cannot be read at all raises
:class:`CatalogUnavailableError`; the matching core never sees a
partial or corrupt catalog.  Individual bad rows are skipped.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson
import structlog
from pydantic import ValidationError

from yojana.models.scheme import SchemeRecord

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

_DATA_DIR: Path = Path(__file__).resolve().parent / "schemes"
DEFAULT_CATALOG_PATH: Path = _DATA_DIR / "catalog.json"


class CatalogUnavailableError(Exception):
    """The catalog could not be loaded; no ranking or search is possible."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Scheme catalog unavailable ({source}): {reason}")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_catalog(path: str | Path | None = None) -> list[SchemeRecord]:
    """Load the scheme catalog.

    Parameters
    ----------
    path:
        JSON file holding an array of scheme rows.  Defaults to the
        bundled ``catalog.json``.

    Returns
    -------
    list[SchemeRecord]
        Valid schemes in file order.  When an ``id`` repeats, the first
        row wins.

    Raises
    ------
    CatalogUnavailableError
        If the file is missing, unreadable, not valid JSON, or not a
        JSON array.
    """
    file_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    source = str(file_path)

    try:
        raw = orjson.loads(file_path.read_bytes())
    except FileNotFoundError as exc:
        raise CatalogUnavailableError(source, "file not found") from exc
    except OSError as exc:
        raise CatalogUnavailableError(source, f"unreadable: {exc.strerror or exc}") from exc
    except orjson.JSONDecodeError as exc:
        raise CatalogUnavailableError(source, f"malformed JSON: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogUnavailableError(source, "expected a JSON array of scheme rows")

    schemes: list[SchemeRecord] = []
    seen: set[str] = set()
    skipped = 0

    for position, row in enumerate(raw):
        scheme = _parse_record(row, position)
        if scheme is None:
            skipped += 1
            continue
        if scheme.id in seen:
            logger.warning("catalog.duplicate_id", scheme_id=scheme.id, position=position)
            skipped += 1
            continue
        seen.add(scheme.id)
        schemes.append(scheme)

    logger.info(
        "catalog.loaded",
        count=len(schemes),
        skipped=skipped,
        source=source,
    )
    return schemes


def _parse_record(row: Any, position: int) -> SchemeRecord | None:
    """Validate one raw row; ``None`` (with a warning) if unusable."""
    if not isinstance(row, dict):
        logger.warning("catalog.invalid_row", position=position, reason="not an object")
        return None

    if not row.get("id") and row.get("scheme_id"):
        row = {**row, "id": row["scheme_id"]}
    if isinstance(row.get("id"), int) and not isinstance(row.get("id"), bool):
        row = {**row, "id": str(row["id"])}

    try:
        scheme = SchemeRecord.model_validate(row)
    except ValidationError as exc:
        logger.warning(
            "catalog.invalid_row",
            position=position,
            scheme_id=row.get("id", "unknown"),
            errors=exc.error_count(),
        )
        return None

    if not scheme.id.strip():
        logger.warning("catalog.invalid_row", position=position, reason="blank id")
        return None
    return scheme
