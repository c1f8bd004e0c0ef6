"""Tests for the scheme, profile and match models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from yojana.models import MatchedScheme, MatchingFactor, SchemeRecord, UserProfile


class TestSchemeRecord:
    def test_camel_case_input(self) -> None:
        scheme = SchemeRecord.model_validate({
            "id": "pmjdy",
            "title": "Jan Dhan",
            "eligibilityText": "Any citizen",
            "isPopular": True,
            "launchDate": "August 28, 2014",
            "fundingMinistry": "Ministry of Finance",
            "benefitAmount": "₹10,000 overdraft",
        })
        assert scheme.eligibility_text == "Any citizen"
        assert scheme.is_popular is True
        assert scheme.launch_date == "August 28, 2014"
        assert scheme.benefit_amount == "₹10,000 overdraft"

    def test_snake_case_input(self) -> None:
        scheme = SchemeRecord.model_validate({
            "id": "x",
            "eligibility_text": "Farmers",
            "is_popular": None,
            "tags": None,
            "title": None,
        })
        assert scheme.eligibility_text == "Farmers"
        assert scheme.is_popular is False
        assert scheme.tags == []
        assert scheme.title == ""

    def test_only_id_required(self) -> None:
        scheme = SchemeRecord(id="bare")
        assert scheme.category == ""
        assert scheme.eligibility is None
        with pytest.raises(ValidationError):
            SchemeRecord.model_validate({"title": "no id"})

    def test_unknown_keys_ignored(self) -> None:
        scheme = SchemeRecord.model_validate({"id": "x", "rating": 5})
        assert not hasattr(scheme, "rating")

    @pytest.mark.parametrize(
        ("deadline", "active"),
        [
            ("Closed", False),
            (" Closed ", False),
            ("Ongoing", True),
            ("December 31, 2024", True),
            (None, False),
            ("", False),
        ],
    )
    def test_is_active(self, deadline: str | None, active: bool) -> None:
        assert SchemeRecord(id="x", deadline=deadline).is_active is active

    def test_display_ministry(self) -> None:
        assert SchemeRecord(id="x", funding_ministry="DFS").display_ministry == "DFS"
        assert SchemeRecord(id="x", ministry="MoF", funding_ministry="DFS").display_ministry == "MoF"
        assert SchemeRecord(id="x").display_ministry == ""

    def test_serialises_camel_case(self) -> None:
        dumped = SchemeRecord(id="x", eligibility_text="t").model_dump(by_alias=True)
        assert dumped["eligibilityText"] == "t"
        assert "isPopular" in dumped


class TestUserProfile:
    def test_questionnaire_keys(self) -> None:
        profile = UserProfile.model_validate({
            "age": 34,
            "maritalStatus": "married",
            "ruralOrUrban": "rural",
            "hasLand": True,
            "landSize": 1.5,
            "skillLevel": ["tailoring"],
            "employmentStatus": "self-employed",
            "industrySector": "textile",
            "familySize": 5,
        })
        assert profile.marital_status == "married"
        assert profile.rural_or_urban == "rural"
        assert profile.has_land is True
        assert profile.land_size == 1.5
        assert profile.skill_level == ["tailoring"]

    def test_blank_strings_become_absent(self) -> None:
        profile = UserProfile.model_validate({"gender": "", "location": "  ", "occupation": "farmer"})
        assert profile.gender is None
        assert profile.location is None
        assert profile.occupation == "farmer"

    def test_list_cleaning(self) -> None:
        profile = UserProfile.model_validate({
            "category": "agriculture",
            "interests": ["health", "", "  "],
            "disabilities": None,
        })
        assert profile.category == ["agriculture"]
        assert profile.interests == ["health"]
        assert profile.disabilities == []

    def test_empty_profile(self) -> None:
        profile = UserProfile()
        assert profile.age is None
        assert profile.category == []

    def test_fractional_numbers_accepted(self) -> None:
        profile = UserProfile.model_validate({"age": 9.5, "familySize": 4.5})
        assert profile.age == 9.5
        assert profile.family_size == 4.5


class TestMatchedScheme:
    def test_score_bounds_enforced(self) -> None:
        with pytest.raises(ValidationError):
            MatchedScheme(scheme=SchemeRecord(id="x"), score=101)

    def test_camel_case_output(self) -> None:
        matched = MatchedScheme(
            scheme=SchemeRecord(id="x"),
            score=80,
            matching_factors=[MatchingFactor(factor="Category", description="d", weight=25)],
        )
        dumped = matched.model_dump(by_alias=True)
        assert dumped["matchingFactors"][0] == {"factor": "Category", "description": "d", "weight": 25}
