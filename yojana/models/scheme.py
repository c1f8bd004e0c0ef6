from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Only this literal deadline marks a scheme as closed.
CLOSED_DEADLINE: Final[str] = "Closed"
ONGOING_DEADLINE: Final[str] = "Ongoing"


class SchemeRecord(BaseModel):
    """One welfare scheme as supplied by the catalog provider.

    Attribute names are snake_case; input may use either the camelCase
    keys of the web catalog (``eligibilityText``, ``isPopular``) or the
    snake_case columns of the document store (``eligibility_text``).
    Everything except ``id`` is optional.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    title: str = ""
    description: str = ""
    category: str = ""  # free-text label, not a closed vocabulary
    ministry: str | None = None
    funding_ministry: str | None = None

    # Raw polymorphic value: structured dict, free text, or JSON text.
    # Resolved by ``yojana.services.eligibility_view.normalize``.
    eligibility: dict[str, Any] | str | None = None
    eligibility_text: str | None = None

    launch_date: str | None = None
    deadline: str | None = None  # date text, "Ongoing" or "Closed"

    tags: list[str] = Field(default_factory=list)
    is_popular: bool = False

    # -- Supplementary text, used only as keyword surface ---------------------
    benefit_amount: str | None = None
    documents: list[str] = Field(default_factory=list)
    implementing_agency: str | None = None
    beneficiaries: str | None = None
    objective: str | None = None
    state: str | None = None

    application_url: str | None = None
    scheme_code: str | None = None

    # Document-store rows carry NULLs where the web catalog omits the key.
    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def _null_to_empty_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("tags", "documents", mode="before")
    @classmethod
    def _null_to_empty_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("is_popular", mode="before")
    @classmethod
    def _null_to_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def is_active(self) -> bool:
        """Active iff a deadline is present and is not ``"Closed"``.

        A missing or blank deadline counts as inactive.
        """
        if not self.deadline or not self.deadline.strip():
            return False
        return self.deadline.strip() != CLOSED_DEADLINE

    @property
    def display_ministry(self) -> str:
        return self.ministry or self.funding_ministry or ""
