"""Database module for local SQLite storage."""

from .models import Book, ReaderPreference, ReadingPosition
from .schemas import BookCreate, Genre, ReadingPositionResponse, TocEntry
from .sqlite import Database, get_db, reset_db

__all__ = [
    "Book",
    "ReaderPreference",
    "ReadingPosition",
    "BookCreate",
    "Genre",
    "ReadingPositionResponse",
    "TocEntry",
    "Database",
    "get_db",
    "reset_db",
]
