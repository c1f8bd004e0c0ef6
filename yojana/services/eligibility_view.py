"""Eligibility normalizer.

A scheme's ``eligibility`` value arrives in one of three shapes:

* a structured predicate object (``{"minAge": 18, "gender": ["female"]}``),
* a JSON string encoding such an object (older catalog rows), or
* free descriptive text.

:func:`normalize` resolves all three into a single :class:`EligibilityView`
so the scorer never has to sniff types.  Malformed input degrades
silently: unparsable JSON becomes free text, and structured values of
the wrong type are dropped.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Final

import orjson
import structlog
from pydantic import BaseModel, ConfigDict

from yojana.models.scheme import SchemeRecord

logger = structlog.get_logger(__name__)


# camelCase key -> snake_case twin accepted from document-store rows
_KEY_ALIASES: Final[dict[str, str]] = {
    "minAge": "min_age",
    "maxAge": "max_age",
    "maxIncome": "max_income",
    "employmentStatus": "employment_status",
}


class EligibilityView(BaseModel):
    """Uniform, read-only projection of a scheme's eligibility data.

    Structured fields and ``text`` may both be set; the scorer evaluates
    structured predicates where present and also scans the text.
    """

    model_config = ConfigDict(frozen=True)

    min_age: float | None = None
    max_age: float | None = None
    max_income: float | None = None
    genders: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    education: tuple[str, ...] = ()
    states: tuple[str, ...] = ()
    employment_status: tuple[str, ...] = ()
    disability: bool | None = None
    text: str | None = None


def normalize(raw: Any) -> EligibilityView:
    """Resolve a raw ``eligibility`` value into an :class:`EligibilityView`."""
    if raw is None:
        return EligibilityView()

    if isinstance(raw, Mapping):
        return _from_mapping(raw)

    if isinstance(raw, str):
        stripped = raw.strip()
        if not stripped:
            return EligibilityView()
        if stripped.startswith("{"):
            try:
                decoded = orjson.loads(stripped)
            except orjson.JSONDecodeError:
                logger.debug("eligibility.json_degraded_to_text", length=len(stripped))
                return EligibilityView(text=stripped)
            if isinstance(decoded, dict):
                return _from_mapping(decoded)
            return EligibilityView(text=stripped)
        return EligibilityView(text=stripped)

    # Anything else (lists, numbers) carries no usable predicate.
    return EligibilityView()


def keyword_text(scheme: SchemeRecord, view: EligibilityView | None = None) -> str:
    """Eligibility text used for keyword matching and display.

    ``eligibilityText`` wins over free-text ``eligibility``.
    """
    if scheme.eligibility_text and scheme.eligibility_text.strip():
        return scheme.eligibility_text
    if view is None:
        view = normalize(scheme.eligibility)
    return view.text or ""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _from_mapping(data: Mapping[str, Any]) -> EligibilityView:
    get = _aliased_getter(data)
    return EligibilityView(
        min_age=_as_number(get("minAge")),
        max_age=_as_number(get("maxAge")),
        max_income=_as_number(get("maxIncome")),
        genders=_as_str_tuple(get("gender")),
        categories=_as_str_tuple(get("category")),
        education=_as_str_tuple(get("education")),
        states=_as_str_tuple(get("states")),
        employment_status=_as_str_tuple(get("employmentStatus")),
        disability=get("disability") if isinstance(get("disability"), bool) else None,
    )


def _aliased_getter(data: Mapping[str, Any]):
    def get(key: str) -> Any:
        value = data.get(key)
        if value is None and key in _KEY_ALIASES:
            value = data.get(_KEY_ALIASES[key])
        return value

    return get


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(
        item.strip().casefold()
        for item in value
        if isinstance(item, str) and item.strip()
    )

