"""Citizen profile collected by the eligibility questionnaire.

Every field is optional.  A missing field means "this signal is not
evaluated", never "this signal failed": the scorer only attempts a
signal group when the profile actually supplies the facts it needs.
List-valued fields default to empty lists, and an empty list is
treated exactly like an absent field.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class UserProfile(BaseModel):
    """Sparse set of facts about one applicant.

    Accepts both the questionnaire's camelCase keys (``maritalStatus``,
    ``ruralOrUrban``) and snake_case attribute names.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    # ----------------------------------------------------------------
    # Demographics
    # ----------------------------------------------------------------
    age: float | None = None
    gender: str | None = None  # "male", "female", "other"
    marital_status: str | None = None  # "single", "married", "divorced", "widowed"
    family_size: float | None = None
    disabilities: list[str] = Field(default_factory=list)

    # ----------------------------------------------------------------
    # Economic
    # ----------------------------------------------------------------
    income: float | None = None  # Annual, in INR
    category: list[str] = Field(default_factory=list)  # interest areas / applicant codes
    has_land: bool | None = None
    land_size: float | None = None  # In hectares

    # ----------------------------------------------------------------
    # Location
    # ----------------------------------------------------------------
    location: str | None = None  # State name
    rural_or_urban: str | None = None  # "rural", "urban"

    # ----------------------------------------------------------------
    # Work and learning
    # ----------------------------------------------------------------
    occupation: str | None = None
    employment_status: str | None = None  # "unemployed", "self-employed", "part-time", ...
    education: str | None = None
    industry_sector: str | None = None
    skill_level: list[str] = Field(default_factory=list)
    interests: list[str] = Field(default_factory=list)

    # ----------------------------------------------------------------
    # Collected by the questionnaire but not used for scoring
    # ----------------------------------------------------------------
    tech_literacy: str | None = None
    preferred_language: str | None = None
    household_income: float | None = None
    education_level: str | None = None
    owns_business: bool | None = None

    @field_validator(
        "gender",
        "marital_status",
        "location",
        "rural_or_urban",
        "occupation",
        "employment_status",
        "education",
        "industry_sector",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        # Untouched form inputs arrive as "".
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator(
        "category",
        "disabilities",
        "interests",
        "skill_level",
        mode="before",
    )
    @classmethod
    def _clean_list(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [item for item in v if not (isinstance(item, str) and not item.strip())]
        return v
