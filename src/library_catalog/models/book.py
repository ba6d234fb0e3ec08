"""
Book model for the Library Catalog.

A book is a catalog record with a store-generated integer identity. The model
is used both as the input to repository writes (``id`` left unset) and as the
record returned by every read.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Book(BaseModel):
    """
    Represents a book in the library catalog.

    ``price`` is fixed-point with two fractional digits and must be
    non-negative; the store never corrects it.
    """

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Dune",
                "author": "Frank Herbert",
                "published_year": 1965,
                "price": "15.00",
                "genre": "Science Fiction",
            }
        },
    )

    id: int | None = Field(
        default=None,
        description="Store-generated identifier; ignored on add",
        ge=1,
    )

    title: str = Field(
        ...,
        description="The title of the book",
        min_length=1,
        max_length=200,
        examples=["Dune", "The Left Hand of Darkness"],
    )

    author: str = Field(
        ...,
        description="Author of the book",
        min_length=1,
        examples=["Frank Herbert", "Ursula K. Le Guin"],
    )

    published_year: int | None = Field(
        default=None,
        description="Year the book was published",
        examples=[1965, 1969],
    )

    price: Decimal = Field(
        ...,
        description="Price with two fractional digits",
        ge=0,
        max_digits=18,
        decimal_places=2,
        examples=["15.00", "29.99"],
    )

    genre: str | None = Field(
        default=None,
        description="Literary genre of the book",
        examples=["Fiction", "Science Fiction"],
    )

    @field_validator("title", "author")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Required text fields may not be whitespace only."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v
