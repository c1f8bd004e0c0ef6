"""Free-text scheme search.

A lightweight lexical index, independent of the profile scorer.  The
query is tokenized (lower-cased, punctuation stripped, stop words and
single characters dropped) and every candidate scheme is scored by
weighted token overlap across its title, description, ministry,
category and eligibility text.

Filters narrow the catalog *before* scoring.  An empty query (or one
made only of stop words) skips scoring and returns the filtered catalog
with popular schemes first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

import structlog

from yojana.models.scheme import SchemeRecord
from yojana.services.eligibility_view import keyword_text

logger = structlog.get_logger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_MIN_SCORE: Final[float] = 0.1

_PUNCTUATION: Final[re.Pattern[str]] = re.compile(r"[^\w\s]")

_STOP_WORDS: Final[frozenset[str]] = frozenset({
    "a", "an", "the", "and", "or", "but", "is", "are", "was", "were",
    "be", "been", "being", "in", "on", "at", "to", "for", "with", "by",
    "about", "against", "between", "into", "through", "during", "before",
    "after", "above", "below", "from", "up", "down", "of", "off", "over",
    "under", "again", "further", "then", "once", "here", "there", "when",
    "where", "why", "how", "all", "any", "both", "each", "few", "more",
    "most", "other", "some", "such", "no", "nor", "not", "only", "own",
    "same", "so", "than", "too", "very", "can", "will", "just", "should",
    "now",
})

_EXACT_MATCH: Final[float] = 1.0
_PREFIX_MATCH: Final[float] = 0.5

_TITLE_WEIGHT: Final[float] = 2.0
_DESCRIPTION_WEIGHT: Final[float] = 1.0
_MINISTRY_WEIGHT: Final[float] = 0.5
_CATEGORY_WEIGHT: Final[float] = 0.8
_ELIGIBILITY_WEIGHT: Final[float] = 0.7


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Hard predicates applied before scoring.

    ``None`` (or ``"all"`` for the text filters) disables a filter.
    """

    category: str | None = None
    state: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True, slots=True)
class SearchHit:
    scheme: SchemeRecord
    score: float


def tokenize(text: str | None) -> list[str]:
    """Split *text* into lower-case search tokens.

    >>> tokenize("The women farmers' loan!")
    ['women', 'farmers', 'loan']
    """
    if not text:
        return []
    normalized = _PUNCTUATION.sub(" ", text.lower())
    return [
        word for word in normalized.split()
        if len(word) > 1 and word not in _STOP_WORDS
    ]


def field_similarity(query_tokens: list[str], text: str | None) -> float:
    """Overlap of *query_tokens* with *text*, in ``[0, 1]``.

    Each query token scores 1.0 for an exact token match, otherwise 0.5
    if it and some text token are prefixes of one another.  The sum is
    divided by the number of query tokens.
    """
    if not query_tokens or not text:
        return 0.0
    text_tokens = tokenize(text)
    if not text_tokens:
        return 0.0

    vocabulary = set(text_tokens)
    total = 0.0
    for token in query_tokens:
        if token in vocabulary:
            total += _EXACT_MATCH
        elif any(t.startswith(token) or token.startswith(t) for t in text_tokens):
            total += _PREFIX_MATCH
    return total / len(query_tokens)


class SchemeSearchService:
    """Lexical search over a read-only catalog.

    Parameters
    ----------
    schemes:
        The catalog, in canonical order.
    min_score:
        Hits scoring at or below this are dropped.
    """

    __slots__ = ("_min_score", "_schemes")

    def __init__(
        self,
        schemes: Iterable[SchemeRecord],
        min_score: float = DEFAULT_MIN_SCORE,
    ) -> None:
        self._schemes: tuple[SchemeRecord, ...] = tuple(schemes)
        self._min_score = min_score

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
    ) -> list[SchemeRecord]:
        """Return schemes matching *query*, best first."""
        tokens = tokenize(query)
        candidates = self.filter(filters)

        if not tokens:
            # Popular first, otherwise catalog order.
            results = sorted(candidates, key=lambda s: not s.is_popular)
        else:
            results = [hit.scheme for hit in self._rank(tokens, candidates)]

        logger.info(
            "search.query",
            tokens=tokens,
            candidates=len(candidates),
            results=len(results),
        )
        return results

    def score_query(
        self,
        query: str | None,
        filters: SearchFilters | None = None,
    ) -> list[SearchHit]:
        """Like :meth:`search` but keeps each scheme's relevance score.

        Returns an empty list when the query has no searchable tokens.
        """
        tokens = tokenize(query)
        if not tokens:
            return []
        return self._rank(tokens, self.filter(filters))

    def filter(self, filters: SearchFilters | None) -> list[SchemeRecord]:
        """Apply *filters* to the catalog, preserving order."""
        if filters is None:
            return list(self._schemes)
        return [s for s in self._schemes if _passes(s, filters)]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _rank(self, tokens: list[str], candidates: list[SchemeRecord]) -> list[SearchHit]:
        hits = []
        for scheme in candidates:
            relevance = relevance_score(tokens, scheme)
            if relevance > self._min_score:
                hits.append(SearchHit(scheme=scheme, score=relevance))
        hits.sort(key=lambda h: h.score, reverse=True)
        return hits


def relevance_score(tokens: list[str], scheme: SchemeRecord) -> float:
    """Weighted field similarity of *scheme* for pre-tokenized *tokens*."""
    return (
        field_similarity(tokens, scheme.title) * _TITLE_WEIGHT
        + field_similarity(tokens, scheme.description) * _DESCRIPTION_WEIGHT
        + field_similarity(tokens, scheme.display_ministry) * _MINISTRY_WEIGHT
        + field_similarity(tokens, scheme.category) * _CATEGORY_WEIGHT
        + field_similarity(tokens, keyword_text(scheme)) * _ELIGIBILITY_WEIGHT
    )


def _matches_text(value: str | None, wanted: str | None) -> bool:
    needle = (wanted or "").strip().casefold()
    if not needle or needle == "all":
        return True
    hay = (value or "").strip().casefold()
    return hay == needle or needle in hay


def _passes(scheme: SchemeRecord, filters: SearchFilters) -> bool:
    if not _matches_text(scheme.category, filters.category):
        return False
    if not _matches_text(scheme.state, filters.state):
        return False
    if filters.is_active is not None and scheme.is_active != filters.is_active:
        return False
    return True
