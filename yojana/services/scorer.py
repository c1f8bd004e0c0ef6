"""Profile-to-scheme scorer.

Runs every signal group from :mod:`yojana.services.signals` against one
``(scheme, profile)`` pair, sums earned points and the maximum possible
points of the *attempted* groups, and normalises the ratio to 0-100.

Scoring is a pure function of its inputs: no clock, no randomness, no
shared state.
"""

from __future__ import annotations

from typing import NamedTuple

from yojana.models.matching import MatchedScheme, MatchingFactor
from yojana.models.scheme import SchemeRecord
from yojana.models.user_profile import UserProfile
from yojana.services.signals import SIGNAL_GROUPS, SchemeFacts, popularity_signal


class ScoreBreakdown(NamedTuple):
    """Raw result of scoring one scheme for one profile."""

    points: int
    max_possible: int
    factors: tuple[MatchingFactor, ...]

    @property
    def score(self) -> int:
        return normalized_score(self.points, self.max_possible)


def normalized_score(points: int, max_possible: int) -> int:
    """Return ``round(points / max_possible * 100)`` clamped to ``[0, 100]``.

    Ties round half-up.  A zero maximum (nothing attempted) scores 0.
    Points may exceed the maximum when a group fires several
    opportunities, hence the clamp.
    """
    if max_possible <= 0:
        return 0
    # floor(x + 0.5) in exact integer arithmetic
    value = (points * 200 + max_possible) // (2 * max_possible)
    return max(0, min(100, value))


def score(scheme: SchemeRecord, profile: UserProfile) -> ScoreBreakdown:
    """Score *scheme* against *profile*.

    Parameters
    ----------
    scheme:
        The catalog record to evaluate.
    profile:
        The (possibly sparse) applicant profile.

    Returns
    -------
    ScoreBreakdown
        ``(points, max_possible, factors)`` with factors ordered by
        descending weight; equal weights keep evaluation order.
    """
    facts = SchemeFacts.of(scheme)

    points = 0
    max_possible = 0
    factors: list[MatchingFactor] = []

    for signal in SIGNAL_GROUPS:
        result = signal(facts, profile)
        if result is None:
            continue
        max_possible += result.max_points
        points += result.points
        factors.extend(result.factors)

    # The bonus always earns its points but only widens a non-zero maximum,
    # so a profile with no usable fields still scores 0 everywhere.
    bonus = popularity_signal(facts, profile)
    if max_possible > 0:
        max_possible += bonus.max_points
    points += bonus.points
    factors.extend(bonus.factors)

    factors.sort(key=lambda f: f.weight, reverse=True)
    return ScoreBreakdown(points, max_possible, tuple(factors))


def match(scheme: SchemeRecord, profile: UserProfile) -> MatchedScheme:
    """Score *scheme* and wrap it with its normalised score and factors."""
    breakdown = score(scheme, profile)
    return MatchedScheme(
        scheme=scheme,
        score=breakdown.score,
        matching_factors=list(breakdown.factors),
    )
