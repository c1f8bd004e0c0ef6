"""Yojana matching core -- eligibility normalizer, scorer, ranking and search.

Everything here is pure, synchronous computation over an in-memory
catalog; no module performs I/O.
"""

from __future__ import annotations

from yojana.services.eligibility_view import EligibilityView, keyword_text, normalize
from yojana.services.ranking import (
    SchemeMatcher,
    SortOrder,
    count_by_category,
    filter_by_category,
    sort_items,
)
from yojana.services.scheme_search import SchemeSearchService, SearchFilters, SearchHit, tokenize
from yojana.services.scorer import ScoreBreakdown, match, normalized_score, score

__all__ = [
    "EligibilityView",
    "SchemeMatcher",
    "SchemeSearchService",
    "ScoreBreakdown",
    "SearchFilters",
    "SearchHit",
    "SortOrder",
    "count_by_category",
    "filter_by_category",
    "keyword_text",
    "match",
    "normalize",
    "normalized_score",
    "score",
    "sort_items",
    "tokenize",
]
