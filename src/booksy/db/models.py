"""SQLAlchemy ORM models for local SQLite database.

Tables:
- books: Catalogue records, including the readable text
- reading_positions: Saved page and bookmarks per (user, book)
- reader_preferences: Default display preferences per user
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Book(Base):
    """Book model - catalogue metadata plus the text served to the reader."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)

    # Core fields
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    isbn: Mapped[Optional[str]] = mapped_column(String(13), unique=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    language: Mapped[Optional[str]] = mapped_column(String(50))
    genre: Mapped[Optional[str]] = mapped_column(String(50), index=True)

    # Reading content
    page_count: Mapped[Optional[int]] = mapped_column(Integer)
    content: Mapped[Optional[str]] = mapped_column(Text)
    toc: Mapped[Optional[str]] = mapped_column(Text)  # JSON list of {title, page}

    # Timestamps
    created_at: Mapped[str] = mapped_column(
        String(26), default=lambda: datetime.now(timezone.utc).isoformat()
    )
    updated_at: Mapped[str] = mapped_column(
        String(26),
        default=lambda: datetime.now(timezone.utc).isoformat(),
        onupdate=lambda: datetime.now(timezone.utc).isoformat(),
    )

    positions: Mapped[list["ReadingPosition"]] = relationship(
        "ReadingPosition", back_populates="book", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Book(id={self.id}, title='{self.title}', author='{self.author}')>"

    def get_toc(self) -> list[dict]:
        """Get table of contents as list of dicts."""
        if self.toc:
            return json.loads(self.toc)
        return []

    def set_toc(self, entries: list[dict]) -> None:
        """Set table of contents from list of dicts."""
        self.toc = json.dumps(entries) if entries else None


class ReadingPosition(Base):
    """Last known page and bookmarks of one user in one book."""

    __tablename__ = "reading_positions"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), index=True)
    book_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("books.id", ondelete="CASCADE"), index=True
    )
    current_page: Mapped[int] = mapped_column(Integer, default=1)
    bookmarks: Mapped[Optional[str]] = mapped_column(Text)  # JSON list, insertion order
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    book: Mapped["Book"] = relationship("Book", back_populates="positions")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_position_user_book"),
    )

    def get_bookmarks(self) -> list[int]:
        """Get bookmarks as list."""
        if self.bookmarks:
            return json.loads(self.bookmarks)
        return []

    def set_bookmarks(self, pages: list[int]) -> None:
        """Set bookmarks from list."""
        self.bookmarks = json.dumps(pages) if pages else None


class ReaderPreference(Base):
    """A user's default value for one display preference."""

    __tablename__ = "reader_preferences"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(100), index=True)
    key: Mapped[str] = mapped_column(String(50))
    value: Mapped[str] = mapped_column(Text)
    value_type: Mapped[str] = mapped_column(String(20))  # int, float, enum
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    __table_args__ = (
        UniqueConstraint("user_id", "key", name="uq_preference_user_key"),
    )
