"""Pydantic schemas for catalogue data validation."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class Genre(str, Enum):
    """Catalogue genres."""

    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    SCIENCE_FICTION = "Science Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    THRILLER = "Thriller"
    BIOGRAPHY = "Biography"
    HISTORY = "History"
    SCIENCE = "Science"
    SELF_HELP = "Self-Help"
    FANTASY = "Fantasy"
    HORROR = "Horror"
    POETRY = "Poetry"
    CHILDREN = "Children"
    OTHER = "Other"


class TocEntry(BaseModel):
    """A table of contents entry."""

    title: str = Field(..., min_length=1)
    page: int = Field(..., ge=1)


# ============================================================================
# Book Schemas
# ============================================================================


class BookBase(BaseModel):
    """Base book fields common to create/update operations."""

    title: str = Field(..., min_length=1, max_length=200, description="Book title")
    author: str = Field(..., min_length=1, description="Primary author")
    isbn: Optional[str] = Field(None, max_length=13)
    description: Optional[str] = Field(None, max_length=2000)
    language: str = "English"
    genre: Optional[Genre] = None

    # Reading content
    page_count: Optional[int] = Field(None, ge=1)
    content: Optional[str] = Field(None, description="Plain text of the book")
    toc: list[TocEntry] = Field(default_factory=list)

    @field_validator("title", "author", mode="before")
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace."""
        return v.strip() if isinstance(v, str) else v

    @field_validator("isbn", mode="before")
    @classmethod
    def clean_isbn(cls, v: Optional[str]) -> Optional[str]:
        """Drop hyphens and spaces from ISBNs."""
        if v is None:
            return None
        v = str(v).replace("-", "").replace(" ", "").strip()
        return v if v else None


class BookCreate(BookBase):
    """Schema for creating a new book."""

    pass


# ============================================================================
# Reading Position Schemas
# ============================================================================


class ReadingPositionResponse(BaseModel):
    """Stored reading position for a (user, book) pair."""

    user_id: str
    book_id: str
    current_page: int
    bookmarks: list[int]
    updated_at: datetime
