"""
Member model for the Library Catalog.

Members are the people registered with the library. Email addresses are
validated syntactically here, stored in lower case, and kept unique by the
store.

Join dates are naive local time throughout the catalog: timezone-aware values
are converted to local time and their offset dropped before they reach the
store, so ordering and threshold filters compare like with like.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


class Member(BaseModel):
    """Represents a registered library member."""

    model_config = ConfigDict(from_attributes=True)

    id: int | None = Field(
        default=None,
        description="Store-generated identifier; ignored on add",
        ge=1,
    )

    full_name: str = Field(
        ...,
        description="Full name of the member",
        min_length=1,
        examples=["Jane Doe", "Maria Garcia"],
    )

    email: EmailStr = Field(
        ...,
        description="Email address, unique across all members regardless of case",
        examples=["jane.doe@example.com"],
    )

    join_date: datetime = Field(
        default_factory=datetime.now,
        description="When the member joined (naive local time); defaults to now",
    )

    @field_validator("full_name")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("join_date")
    @classmethod
    def normalize_join_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)
