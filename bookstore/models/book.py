"""
Book model for the bookstore.

Defines the insert schema for book documents. Stored documents are
read back as plain dicts.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bookstore.validators.fields import validate_published_year


class BookCreate(BaseModel):
    """
    Schema for inserting a new book.

    Used for input validation when seeding the collection.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Annotated[
        str,
        Field(min_length=1, description="Book title", examples=["1984"]),
    ]
    author: Annotated[
        str,
        Field(min_length=1, description="Author name", examples=["George Orwell"]),
    ]
    genre: Annotated[
        str,
        Field(min_length=1, description="Genre", examples=["Fiction", "Dystopian"]),
    ]
    published_year: Annotated[
        int,
        Field(description="Year of first publication", examples=[1949]),
    ]
    price: Annotated[
        float,
        Field(ge=0, description="Price", examples=[10.99]),
    ]
    in_stock: Annotated[
        bool,
        Field(default=True, description="Whether the book is in stock"),
    ] = True
    pages: Annotated[
        int | None,
        Field(default=None, ge=1, description="Page count"),
    ] = None
    publisher: Annotated[
        str | None,
        Field(default=None, description="Publisher name"),
    ] = None

    @field_validator("published_year")
    @classmethod
    def check_published_year(cls, v: int) -> int:
        """Validate publication year range."""
        return validate_published_year(v)

    def to_document(self) -> dict:
        """Convert to a document ready for insertion (optional fields dropped when unset)."""
        return self.model_dump(exclude_none=True)
