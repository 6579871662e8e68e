"""Schemas for the e-reader: display preferences and session data."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..db.schemas import TocEntry

FONT_SIZE_MIN = 14
FONT_SIZE_MAX = 28
LINE_HEIGHT_MIN = 1.2
LINE_HEIGHT_MAX = 2.5


class FontFamily(str, Enum):
    """Typeface family for page text."""

    SERIF = "serif"
    SANS_SERIF = "sans-serif"
    MONOSPACE = "monospace"


class ReadingMode(str, Enum):
    """Page colour scheme."""

    LIGHT = "light"
    DARK = "dark"
    SEPIA = "sepia"


class DisplayPreferences(BaseModel):
    """Presentation settings of one reader session.

    Fields accept their camelCase names too (``fontSize``, ``readingMode``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    font_size: int = Field(default=18, ge=FONT_SIZE_MIN, le=FONT_SIZE_MAX)
    font_family: FontFamily = FontFamily.SERIF
    line_height: float = Field(default=1.8, ge=LINE_HEIGHT_MIN, le=LINE_HEIGHT_MAX)
    reading_mode: ReadingMode = ReadingMode.LIGHT

    @field_validator("font_size", "line_height", mode="before")
    @classmethod
    def reject_bool(cls, v):
        """Booleans are ints in Python; never accept them as sizes."""
        if isinstance(v, bool):
            raise ValueError("boolean is not a number")
        return v

    @classmethod
    def resolve_key(cls, key: str) -> Optional[str]:
        """Map a field name or its camelCase alias to the field name."""
        if key in cls.model_fields:
            return key
        for name, field in cls.model_fields.items():
            if field.alias == key:
                return name
        return None

    @classmethod
    def value_type(cls, key: str) -> str:
        """Storage type name of a preference: int, float or enum."""
        annotation = cls.model_fields[key].annotation
        if isinstance(annotation, type) and issubclass(annotation, Enum):
            return "enum"
        return annotation.__name__


PREFERENCE_KEYS = tuple(DisplayPreferences.model_fields)


class PreferenceUpdateResult(BaseModel):
    """Outcome of a preference change.

    Truthy when the value was applied. A rejected update leaves the
    previous value in place and carries the reason.
    """

    key: str
    accepted: bool
    value: Any = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.accepted


class BookMetadata(BaseModel):
    """What a reader session needs to know about a book."""

    book_id: str
    title: str
    author: str
    total_pages: int = Field(..., ge=1)
    toc: list[TocEntry] = Field(default_factory=list)


class ReadingPositionSnapshot(BaseModel):
    """Persistable state of a session."""

    book_id: str
    current_page: int
    bookmarks: list[int] = Field(default_factory=list)
