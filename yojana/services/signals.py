"""Signal groups for profile-to-scheme matching.

Each group is an independent, named predicate over ``(scheme, profile)``:

* It returns ``None`` when the profile does not supply the facts the group
  needs.  The group is then *not attempted* and adds nothing to the
  maximum possible score, so a missing answer never penalises a scheme.
* Otherwise it returns a :class:`SignalResult` whose ``max_points`` counts
  toward the maximum whether or not any factor fired.  A failed check
  simply contributes no points; nothing is ever subtracted.

:data:`SIGNAL_GROUPS` fixes the evaluation order: core eligibility first,
soft-interest signals after.  :func:`popularity_signal` is kept separate
because it does not depend on the profile.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from yojana.models.matching import MatchingFactor
from yojana.models.scheme import SchemeRecord
from yojana.models.user_profile import UserProfile
from yojana.services.eligibility_view import EligibilityView, keyword_text, normalize

# ---------------------------------------------------------------------------
# Weights
# ---------------------------------------------------------------------------

CATEGORY_WEIGHT: Final[int] = 25
GENDER_WEIGHT: Final[int] = 20
AGE_WEIGHT: Final[int] = 15
AGE_ONE_SIDED_WEIGHT: Final[int] = 10
INCOME_WEIGHT: Final[int] = 15
LOCATION_WEIGHT: Final[int] = 15
NATIONWIDE_WEIGHT: Final[int] = 10
OCCUPATION_WEIGHT: Final[int] = 20
OCCUPATION_GENERIC_WEIGHT: Final[int] = 15
EDUCATION_WEIGHT: Final[int] = 10
MARITAL_WEIGHT: Final[int] = 15
DISABILITY_WEIGHT: Final[int] = 20
AREA_WEIGHT: Final[int] = 15
EMPLOYMENT_WEIGHT: Final[int] = 15
FAMILY_WEIGHT: Final[int] = 10
LAND_WEIGHT: Final[int] = 15
INTEREST_WEIGHT: Final[int] = 10  # per matched interest
RELATED_CONTENT_WEIGHT: Final[int] = 5
INDUSTRY_WEIGHT: Final[int] = 15
SKILL_WEIGHT: Final[int] = 15
POPULARITY_WEIGHT: Final[int] = 5

# Annual income (INR) under which BPL-targeted schemes are considered.
BPL_INCOME_THRESHOLD: Final[float] = 100_000
LARGE_FAMILY_SIZE: Final[int] = 5
SMALL_HOLDING_HECTARES: Final[float] = 2.0

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

_GENDER_SYNONYMS: Final[dict[str, str]] = {
    "female": "female",
    "woman": "female",
    "women": "female",
    "girl": "female",
    "male": "male",
    "man": "male",
    "men": "male",
    "boy": "male",
}

# Word-bounded so that "women" is not a hit for "men".
_FEMALE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\b(?:women|woman|females?|girls?)\b")
_MALE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\b(?:men|man|males?|boys?)\b")

_UNRESTRICTED: Final[frozenset[str]] = frozenset({"all", "any"})

_NATIONWIDE_STATES: Final[frozenset[str]] = frozenset({
    "all",
    "all states",
    "all india",
    "pan india",
    "pan-india",
})

_NORTHEAST_STATES: Final[frozenset[str]] = frozenset({
    "assam",
    "arunachal pradesh",
    "manipur",
    "meghalaya",
    "mizoram",
    "nagaland",
    "sikkim",
    "tripura",
})

_HILL_STATES: Final[frozenset[str]] = frozenset({
    "himachal pradesh",
    "uttarakhand",
    "jammu and kashmir",
    "ladakh",
})

# (profile occupation terms, scheme terms, explanation)
_OCCUPATION_BUCKETS: Final[tuple[tuple[tuple[str, ...], tuple[str, ...], str], ...]] = (
    (
        ("farm", "agricultur"),
        ("farm", "agricultur"),
        "This scheme is relevant to farmers/agricultural workers",
    ),
    (
        ("student", "study"),
        ("student", "education"),
        "This scheme is relevant to students or education",
    ),
    (
        ("business", "entrepreneur", "self-employed", "startup"),
        ("business", "entrepreneur", "startup", "self-employed"),
        "This scheme is relevant to entrepreneurs/business owners",
    ),
)

_MARITAL_KEYWORDS: Final[dict[str, tuple[str, ...]]] = {
    "single": ("single", "unmarried", "bachelor"),
    "married": ("married", "spouse", "husband", "wife"),
    "divorced": ("divorced", "divorcee", "separated"),
    "widowed": ("widow", "widower", "widowed"),
}

_DISABILITY_KEYWORDS: Final[tuple[str, ...]] = (
    "disability",
    "disabled",
    "handicapped",
    "differently abled",
    "special needs",
    "pwd",
    "persons with disabilities",
)

# employment status -> (scheme keywords, explanation)
_EMPLOYMENT_KEYWORDS: Final[dict[str, tuple[tuple[str, ...], str]]] = {
    "unemployed": (
        ("unemployed", "jobless"),
        "This scheme targets unemployed individuals",
    ),
    "self-employed": (
        ("self-employed", "entrepreneur"),
        "This scheme targets self-employed individuals",
    ),
    "part-time": (
        ("part-time", "part time"),
        "This scheme may be suitable for part-time workers",
    ),
}


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SchemeFacts:
    """Lower-cased text surfaces and normalised eligibility of one scheme."""

    scheme: SchemeRecord
    view: EligibilityView
    title: str
    description: str
    eligibility_text: str

    @classmethod
    def of(cls, scheme: SchemeRecord) -> SchemeFacts:
        view = normalize(scheme.eligibility)
        return cls(
            scheme=scheme,
            view=view,
            title=scheme.title.lower(),
            description=scheme.description.lower(),
            eligibility_text=keyword_text(scheme, view).lower(),
        )

    def mentions(self, *keywords: str) -> bool:
        """True if the eligibility text or the description contains any keyword."""
        return any(
            kw in self.eligibility_text or kw in self.description
            for kw in keywords
            if kw
        )


@dataclass(frozen=True, slots=True)
class SignalResult:
    """Outcome of one attempted signal group."""

    max_points: int
    factors: tuple[MatchingFactor, ...] = ()

    @property
    def points(self) -> int:
        return sum(f.weight for f in self.factors)


Signal = Callable[[SchemeFacts, UserProfile], "SignalResult | None"]


def _factor(label: str, description: str, weight: int) -> MatchingFactor:
    return MatchingFactor(factor=label, description=description, weight=weight)


def _fold(value: str | None) -> str:
    return (value or "").strip().casefold()


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else f"{number:g}"


def _canonical_gender(value: str) -> str:
    return _GENDER_SYNONYMS.get(value, value)


def _dashed(value: str) -> str:
    return value.replace("_", "-").replace(" ", "-")


# ---------------------------------------------------------------------------
# Core eligibility groups
# ---------------------------------------------------------------------------


def category_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.category:
        return None

    scheme_category = _fold(facts.scheme.category)
    if scheme_category:
        for cat in profile.category:
            if _fold(cat) == scheme_category:
                return SignalResult(CATEGORY_WEIGHT, (
                    _factor("Category", f"You selected {cat} as an area of interest", CATEGORY_WEIGHT),
                ))

    # Applicant-category codes (ews, sc, obc, ...) from structured eligibility
    for cat in profile.category:
        if _fold(cat) in facts.view.categories:
            return SignalResult(CATEGORY_WEIGHT, (
                _factor("Category", f"This scheme is open to the {cat} category", CATEGORY_WEIGHT),
            ))

    return SignalResult(CATEGORY_WEIGHT)


def gender_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.gender:
        return None

    raw = _fold(profile.gender)
    gender = _canonical_gender(raw)

    # Structured gender list takes precedence over keywords.
    if facts.view.genders:
        eligible = {_canonical_gender(g) for g in facts.view.genders}
        if raw in facts.view.genders or gender in eligible:
            return SignalResult(GENDER_WEIGHT, (
                _factor(
                    "Gender Eligibility",
                    f"This scheme is designed for {profile.gender} applicants",
                    GENDER_WEIGHT,
                ),
            ))
        if _UNRESTRICTED & set(facts.view.genders):
            return SignalResult(GENDER_WEIGHT, (
                _factor(
                    "Gender Eligibility",
                    "This scheme is open to applicants of all genders",
                    GENDER_WEIGHT,
                ),
            ))
        return SignalResult(GENDER_WEIGHT)

    surfaces = (facts.title, facts.description, facts.eligibility_text)
    if gender == "female" and any(_FEMALE_PATTERN.search(s) for s in surfaces):
        return SignalResult(GENDER_WEIGHT, (
            _factor("Women-Focused", "This scheme specifically benefits women/girls", GENDER_WEIGHT),
        ))
    if gender == "male" and any(_MALE_PATTERN.search(s) for s in surfaces):
        return SignalResult(GENDER_WEIGHT, (
            _factor("Men-Focused", "This scheme specifically benefits men/boys", GENDER_WEIGHT),
        ))
    return SignalResult(GENDER_WEIGHT)


def _age_bracket(age: float) -> tuple[str, str, tuple[str, ...]] | None:
    """Keyword bracket for *age*; brackets never overlap."""
    if age < 18:
        return (
            "Child Focused",
            "This scheme is targeted at children",
            ("child", "minor", "below 18", "under 18"),
        )
    if age <= 35:
        return (
            "Youth Focused",
            "This scheme is targeted at young citizens",
            ("youth", "young", "below 35", "under 35"),
        )
    if age >= 60:
        return (
            "Senior Citizen",
            "This scheme is targeted at senior citizens",
            ("senior", "elderly", "old age", "above 60"),
        )
    return None


def age_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if profile.age is None:
        return None

    age = profile.age
    low, high = facts.view.min_age, facts.view.max_age
    factors: list[MatchingFactor] = []

    if low is not None and high is not None:
        if low <= age <= high:
            factors.append(_factor(
                "Age Eligibility",
                f"Your age ({_fmt(age)}) is within the eligible range of {_fmt(low)}-{_fmt(high)} years",
                AGE_WEIGHT,
            ))
    elif low is not None:
        if age >= low:
            factors.append(_factor(
                "Age Eligibility",
                f"You meet the minimum age requirement of {_fmt(low)} years",
                AGE_ONE_SIDED_WEIGHT,
            ))
    elif high is not None:
        if age <= high:
            factors.append(_factor(
                "Age Eligibility",
                f"You meet the maximum age requirement of {_fmt(high)} years",
                AGE_ONE_SIDED_WEIGHT,
            ))

    bracket = _age_bracket(age)
    if bracket is not None:
        label, description, keywords = bracket
        if any(kw in facts.eligibility_text for kw in keywords):
            factors.append(_factor(label, description, AGE_WEIGHT))

    return SignalResult(AGE_WEIGHT, tuple(factors))


def income_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if profile.income is None:
        return None

    income = profile.income
    factors: list[MatchingFactor] = []

    max_income = facts.view.max_income
    if max_income is not None and income <= max_income:
        factors.append(_factor(
            "Income Eligibility",
            f"Your income is below the maximum limit of ₹{max_income:,.0f}",
            INCOME_WEIGHT,
        ))

    if income < BPL_INCOME_THRESHOLD and facts.mentions("bpl", "below poverty line"):
        factors.append(_factor(
            "BPL Eligibility",
            "This scheme is targeted at BPL families",
            INCOME_WEIGHT,
        ))

    return SignalResult(INCOME_WEIGHT, tuple(factors))


def location_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.location:
        return None

    location = _fold(profile.location)
    scheme_state = _fold(facts.scheme.state)
    states = facts.view.states
    factors: list[MatchingFactor] = []

    if scheme_state in _NATIONWIDE_STATES or "all" in states:
        factors.append(_factor(
            "Geographic Coverage",
            "This scheme is available across India",
            NATIONWIDE_WEIGHT,
        ))
    elif (scheme_state and scheme_state == location) or location in states:
        factors.append(_factor(
            "State-Specific",
            f"This scheme is specifically for residents of {profile.location}",
            LOCATION_WEIGHT,
        ))

    if location in _NORTHEAST_STATES and facts.mentions("north east", "north-east", "northeast"):
        factors.append(_factor(
            "North East Region",
            "This scheme has special provisions for North East states",
            LOCATION_WEIGHT,
        ))

    if location in _HILL_STATES and facts.mentions("hill", "mountain"):
        factors.append(_factor(
            "Hill/Mountain Region",
            "This scheme has special provisions for hill/mountain states",
            LOCATION_WEIGHT,
        ))

    return SignalResult(LOCATION_WEIGHT, tuple(factors))


def occupation_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.occupation:
        return None

    occupation = _fold(profile.occupation)
    factors: list[MatchingFactor] = []

    for occupation_terms, scheme_terms, description in _OCCUPATION_BUCKETS:
        if any(t in occupation for t in occupation_terms) and facts.mentions(*scheme_terms):
            factors.append(_factor("Occupation", description, OCCUPATION_WEIGHT))

    if facts.mentions(occupation):
        factors.append(_factor(
            "Occupation",
            f"This scheme is relevant to your occupation ({profile.occupation})",
            OCCUPATION_GENERIC_WEIGHT,
        ))

    return SignalResult(OCCUPATION_WEIGHT, tuple(factors))


def education_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.education:
        return None

    education = _fold(profile.education)
    if any(level in education for level in facts.view.education):
        return SignalResult(EDUCATION_WEIGHT, (
            _factor(
                "Education Level",
                "Your education level matches the eligibility criteria",
                EDUCATION_WEIGHT,
            ),
        ))
    if facts.mentions(education):
        return SignalResult(EDUCATION_WEIGHT, (
            _factor(
                "Education Level",
                f"This scheme is relevant to your education level ({profile.education})",
                EDUCATION_WEIGHT,
            ),
        ))
    return SignalResult(EDUCATION_WEIGHT)


# ---------------------------------------------------------------------------
# Circumstance groups
# ---------------------------------------------------------------------------


def marital_status_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.marital_status:
        return None

    keywords = _MARITAL_KEYWORDS.get(_fold(profile.marital_status), ())
    if facts.mentions(*keywords):
        return SignalResult(MARITAL_WEIGHT, (
            _factor(
                "Marital Status",
                f"This scheme is relevant to your marital status ({profile.marital_status})",
                MARITAL_WEIGHT,
            ),
        ))
    return SignalResult(MARITAL_WEIGHT)


def disability_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.disabilities:
        return None

    factors: list[MatchingFactor] = []
    if facts.view.disability is True or facts.mentions(*_DISABILITY_KEYWORDS):
        factors.append(_factor(
            "Disability Support",
            "This scheme offers support for persons with disabilities",
            DISABILITY_WEIGHT,
        ))

    for disability in profile.disabilities:
        if facts.mentions(_fold(disability)):
            factors.append(_factor(
                "Specific Disability Support",
                f"This scheme specifically mentions support for {disability}",
                DISABILITY_WEIGHT,
            ))
            break

    return SignalResult(DISABILITY_WEIGHT, tuple(factors))


def area_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.rural_or_urban:
        return None

    area = _fold(profile.rural_or_urban)
    if area == "rural" and facts.mentions("rural", "village"):
        return SignalResult(AREA_WEIGHT, (
            _factor("Rural Focus", "This scheme is focused on rural areas", AREA_WEIGHT),
        ))
    if area == "urban" and facts.mentions("urban", "city"):
        return SignalResult(AREA_WEIGHT, (
            _factor("Urban Focus", "This scheme is focused on urban areas", AREA_WEIGHT),
        ))
    return SignalResult(AREA_WEIGHT)


def employment_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.employment_status:
        return None

    status = _dashed(_fold(profile.employment_status))

    if status in {_dashed(s) for s in facts.view.employment_status}:
        return SignalResult(EMPLOYMENT_WEIGHT, (
            _factor(
                "Employment Status",
                f"This scheme is open to {profile.employment_status} applicants",
                EMPLOYMENT_WEIGHT,
            ),
        ))

    keywords, description = _EMPLOYMENT_KEYWORDS.get(status, ((), ""))
    if facts.mentions(*keywords):
        return SignalResult(EMPLOYMENT_WEIGHT, (
            _factor("Employment Status", description, EMPLOYMENT_WEIGHT),
        ))
    return SignalResult(EMPLOYMENT_WEIGHT)


def family_size_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if profile.family_size is None:
        return None

    if profile.family_size >= LARGE_FAMILY_SIZE and facts.mentions("large family", "big family"):
        return SignalResult(FAMILY_WEIGHT, (
            _factor(
                "Family Size",
                "This scheme may offer additional benefits for large families",
                FAMILY_WEIGHT,
            ),
        ))
    return SignalResult(FAMILY_WEIGHT)


def land_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if profile.has_land is None:
        return None

    factors: list[MatchingFactor] = []
    if profile.has_land:
        if facts.mentions("land owner", "landowner"):
            factors.append(_factor("Land Ownership", "This scheme targets land owners", LAND_WEIGHT))
        if (
            profile.land_size is not None
            and profile.land_size < SMALL_HOLDING_HECTARES
            and facts.mentions("small farmer", "marginal farmer")
        ):
            factors.append(_factor(
                "Small Land Holding",
                "This scheme targets small or marginal farmers",
                LAND_WEIGHT,
            ))
    elif facts.mentions("landless"):
        factors.append(_factor("Landless", "This scheme targets landless individuals", LAND_WEIGHT))

    return SignalResult(LAND_WEIGHT, tuple(factors))


# ---------------------------------------------------------------------------
# Soft-interest groups
# ---------------------------------------------------------------------------


def interests_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    tags = [_fold(tag) for tag in facts.scheme.tags if tag]
    if not profile.interests or not tags:
        return None

    max_points = INTEREST_WEIGHT * len(profile.interests)
    factors: list[MatchingFactor] = []

    matched = [
        interest
        for interest in profile.interests
        if any(_fold(interest) in tag for tag in tags)
    ]
    if matched:
        plural = "s" if len(matched) > 1 else ""
        factors.append(_factor(
            "Interests",
            f"Matches your interest{plural} in {', '.join(matched)}",
            INTEREST_WEIGHT * len(matched),
        ))

    for interest in profile.interests:
        if _fold(interest) in facts.description:
            factors.append(_factor(
                "Related Content",
                f"This scheme content relates to your interest in {interest}",
                RELATED_CONTENT_WEIGHT,
            ))
            break

    return SignalResult(max_points, tuple(factors))


def industry_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.industry_sector:
        return None

    if facts.mentions(_fold(profile.industry_sector)):
        return SignalResult(INDUSTRY_WEIGHT, (
            _factor(
                "Industry Sector",
                f"This scheme is relevant to your industry ({profile.industry_sector})",
                INDUSTRY_WEIGHT,
            ),
        ))
    return SignalResult(INDUSTRY_WEIGHT)


def skills_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult | None:
    if not profile.skill_level:
        return None

    for skill in profile.skill_level:
        if facts.mentions(_fold(skill)):
            return SignalResult(SKILL_WEIGHT, (
                _factor("Skills Match", f"This scheme is relevant to your skill in {skill}", SKILL_WEIGHT),
            ))
    return SignalResult(SKILL_WEIGHT)


def popularity_signal(facts: SchemeFacts, profile: UserProfile) -> SignalResult:
    """Flat bonus for widely used schemes; independent of the profile."""
    if facts.scheme.is_popular is True:
        return SignalResult(POPULARITY_WEIGHT, (
            _factor("Popular Scheme", "This is a widely-used government scheme", POPULARITY_WEIGHT),
        ))
    return SignalResult(POPULARITY_WEIGHT)


SIGNAL_GROUPS: Final[tuple[Signal, ...]] = (
    category_signal,
    gender_signal,
    age_signal,
    income_signal,
    location_signal,
    occupation_signal,
    education_signal,
    marital_status_signal,
    disability_signal,
    area_signal,
    employment_signal,
    family_size_signal,
    land_signal,
    interests_signal,
    industry_signal,
    skills_signal,
)
