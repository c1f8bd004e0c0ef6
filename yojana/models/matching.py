from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from yojana.models.scheme import SchemeRecord


class MatchingFactor(BaseModel):
    """One explanatory reason contributing to a scheme's match score."""

    model_config = ConfigDict(frozen=True)

    factor: str  # short label, e.g. "Age Eligibility"
    description: str
    weight: int  # raw points, before normalisation


class MatchedScheme(BaseModel):
    """A scheme annotated with its 0-100 score for one profile.

    Produced fresh per ranking call; never persisted.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    scheme: SchemeRecord
    score: int = Field(ge=0, le=100)
    matching_factors: list[MatchingFactor] = Field(default_factory=list)
