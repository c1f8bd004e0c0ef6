"""Ranking aggregator.

:class:`SchemeMatcher` runs the scorer across a catalog and returns
:class:`~yojana.models.matching.MatchedScheme` results sorted by score.
The module-level helpers are the caller-side refinements applied after
ranking: category filtering, alternative sort orders, and category
counts for the browse page.

All sorts are stable, so ties keep catalog order.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from enum import StrEnum
from typing import Final, TypeVar

import structlog

from yojana.models.matching import MatchedScheme
from yojana.models.scheme import ONGOING_DEADLINE, SchemeRecord
from yojana.models.user_profile import UserProfile
from yojana.services.scorer import match

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Missing or unparsable launch dates sort as the oldest.
EPOCH: Final[date] = date(1970, 1, 1)
# Ongoing, missing or unparsable deadlines sort after every real date.
FAR_FUTURE: Final[date] = date(2999, 12, 31)

_DATE_FORMATS: Final[tuple[str, ...]] = (
    "%Y-%m-%d",
    "%d/%m/%Y",
    "%d-%m-%Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

_WORD_SPLIT: Final[re.Pattern[str]] = re.compile(r"\W+")

_SAME_CATEGORY_POINTS: Final[int] = 10
_SAME_MINISTRY_POINTS: Final[int] = 5
_SHARED_TAG_POINTS: Final[int] = 3
_TITLE_SIMILARITY_WEIGHT: Final[int] = 7
_DESCRIPTION_SIMILARITY_WEIGHT: Final[int] = 5


class SortOrder(StrEnum):
    RECOMMENDED = "recommended"
    NEWEST = "newest"
    DEADLINE = "deadline"


T = TypeVar("T", SchemeRecord, MatchedScheme)


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class SchemeMatcher:
    """Scores and ranks a read-only catalog against applicant profiles.

    Holds no per-call state, so a single instance can serve concurrent
    requests.

    Parameters
    ----------
    schemes:
        The catalog, in its canonical order.  Ties in every ranking
        preserve this order.
    """

    __slots__ = ("_by_id", "_schemes")

    def __init__(self, schemes: Iterable[SchemeRecord]) -> None:
        self._schemes: tuple[SchemeRecord, ...] = tuple(schemes)
        self._by_id: dict[str, SchemeRecord] = {}
        for scheme in self._schemes:
            self._by_id.setdefault(scheme.id, scheme)

    @property
    def schemes(self) -> tuple[SchemeRecord, ...]:
        return self._schemes

    def __len__(self) -> int:
        return len(self._schemes)

    def get(self, scheme_id: str) -> SchemeRecord | None:
        return self._by_id.get(scheme_id)

    def rank(self, profile: UserProfile) -> list[MatchedScheme]:
        """Score every scheme and sort by score, highest first.

        Returns the full list; truncation is left to the caller.  An empty
        catalog yields an empty list.
        """
        matches = [match(scheme, profile) for scheme in self._schemes]
        # sorted() is stable, reverse=True included.
        ranked = sorted(matches, key=lambda m: m.score, reverse=True)

        logger.info(
            "matcher.ranked",
            scheme_count=len(ranked),
            top_score=ranked[0].score if ranked else None,
        )
        return ranked

    def related(self, scheme: SchemeRecord, limit: int = 3) -> list[SchemeRecord]:
        """Schemes most similar to *scheme*, excluding itself.

        Similarity adds points for a shared category and ministry, for
        each shared tag, and for word overlap in title and description.
        """
        scored = [
            (_relatedness(scheme, other), other)
            for other in self._schemes
            if other.id != scheme.id
        ]
        scored.sort(key=lambda pair: pair[0], reverse=True)
        return [other for _, other in scored[: max(limit, 0)]]

    def featured(self, limit: int = 6) -> list[SchemeRecord]:
        """Popular schemes in catalog order."""
        return [s for s in self._schemes if s.is_popular][: max(limit, 0)]


# ---------------------------------------------------------------------------
# Refinements
# ---------------------------------------------------------------------------


def _scheme_of(item: SchemeRecord | MatchedScheme) -> SchemeRecord:
    return item.scheme if isinstance(item, MatchedScheme) else item


def filter_by_category(items: Iterable[T], category: str | None) -> list[T]:
    """Keep items whose scheme category equals *category*, ignoring case.

    ``None``, blank or ``"all"`` keeps everything.
    """
    wanted = (category or "").strip().casefold()
    if not wanted or wanted == "all":
        return list(items)
    return [
        item for item in items
        if _scheme_of(item).category.strip().casefold() == wanted
    ]


def parse_scheme_date(value: str | None) -> date | None:
    """Parse the free-text dates found in catalog rows; ``None`` if unparsable."""
    if not value or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def launch_sort_key(scheme: SchemeRecord) -> date:
    return parse_scheme_date(scheme.launch_date) or EPOCH


def deadline_sort_key(scheme: SchemeRecord) -> date:
    if scheme.deadline is None or scheme.deadline.strip() == ONGOING_DEADLINE:
        return FAR_FUTURE
    return parse_scheme_date(scheme.deadline) or FAR_FUTURE


def sort_items(items: Sequence[T], order: SortOrder | str = SortOrder.RECOMMENDED) -> list[T]:
    """Re-sort schemes or ranked matches.

    * ``recommended``: popular schemes first, otherwise input order.
      Ranked matches keep their score order.
    * ``newest``: launch date descending.
    * ``deadline``: deadline ascending, open-ended schemes last.
    """
    order = SortOrder(order)
    if order is SortOrder.NEWEST:
        return sorted(items, key=lambda i: launch_sort_key(_scheme_of(i)), reverse=True)
    if order is SortOrder.DEADLINE:
        return sorted(items, key=lambda i: deadline_sort_key(_scheme_of(i)))
    if items and isinstance(items[0], MatchedScheme):
        return list(items)
    return sorted(items, key=lambda i: not _scheme_of(i).is_popular)


def count_by_category(schemes: Iterable[SchemeRecord]) -> list[tuple[str, int]]:
    """``(label, count)`` per category, most populous first.

    Categories differing only in case are merged; the label is the
    first spelling seen.
    """
    labels: dict[str, str] = {}
    counts: dict[str, int] = {}
    for scheme in schemes:
        label = scheme.category.strip()
        if not label:
            continue
        key = label.casefold()
        labels.setdefault(key, label)
        counts[key] = counts.get(key, 0) + 1
    ordered = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [(labels[key], count) for key, count in ordered]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _words(text: str) -> list[str]:
    return [w for w in _WORD_SPLIT.split(text.lower()) if len(w) > 2]


def _text_similarity(a: str, b: str) -> float:
    words_a = _words(a)
    words_b = _words(b)
    vocabulary = set(words_b)
    common = sum(1 for w in words_a if w in vocabulary)
    return common / max(len(words_a), len(words_b), 1)


def _relatedness(current: SchemeRecord, other: SchemeRecord) -> float:
    points = 0.0

    category = current.category.strip().casefold()
    if category and other.category.strip().casefold() == category:
        points += _SAME_CATEGORY_POINTS

    ministry = current.display_ministry.strip().casefold()
    if ministry and other.display_ministry.strip().casefold() == ministry:
        points += _SAME_MINISTRY_POINTS

    current_tags = {t.casefold() for t in current.tags}
    points += _SHARED_TAG_POINTS * sum(1 for t in other.tags if t.casefold() in current_tags)

    points += _TITLE_SIMILARITY_WEIGHT * _text_similarity(other.title, current.title)
    points += _DESCRIPTION_SIMILARITY_WEIGHT * _text_similarity(
        other.description, current.description
    )
    return points
