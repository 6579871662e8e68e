"""Pytest configuration and shared fixtures.

This module provides fixtures for testing booksy, including a temporary
database, sample books and reader sessions.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from booksy.config import reset_config
from booksy.db.models import Book
from booksy.db.schemas import BookCreate, Genre, TocEntry
from booksy.db.sqlite import Database, reset_db
from booksy.reader import BookContentProvider, ReaderManager, ReaderSession


@pytest.fixture(autouse=True)
def reset_booksy_logger() -> Generator[None, None, None]:
    """Undo setup_logging() so caplog sees records again."""
    yield
    logger = logging.getLogger("booksy")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    # Reset any global state
    reset_db()
    reset_config()

    # Set environment variable for test database
    os.environ["BOOKSY_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    # Cleanup
    reset_db()
    reset_config()
    if "BOOKSY_DB_PATH" in os.environ:
        del os.environ["BOOKSY_DB_PATH"]


@pytest.fixture
def memory_db() -> Database:
    """Create an in-memory database for testing."""
    database = Database(":memory:")
    database.create_tables()
    return database


# ============================================================================
# Sample Data Fixtures
# ============================================================================


def make_text(paragraphs: int, words_per_paragraph: int) -> str:
    """Build text with numbered words so pages are easy to tell apart."""
    return "\n\n".join(
        " ".join(f"p{p}w{w}" for w in range(words_per_paragraph))
        for p in range(paragraphs)
    )


@pytest.fixture
def sample_book_data() -> BookCreate:
    """Book with 100 declared pages and a table of contents."""
    return BookCreate(
        title="Sample Book Title",
        author="Author Name",
        isbn="978-0-7432-7356-5",
        genre=Genre.FICTION,
        page_count=100,
        content=make_text(paragraphs=20, words_per_paragraph=50),
        toc=[
            TocEntry(title="Chapter 1: Introduction", page=1),
            TocEntry(title="Chapter 2: Getting Started", page=15),
            TocEntry(title="Chapter 3: Advanced Topics", page=32),
            TocEntry(title="Chapter 4: Conclusion", page=85),
        ],
    )


@pytest.fixture
def sample_book_minimal() -> BookCreate:
    """Create minimal book data (only required fields)."""
    return BookCreate(
        title="Minimal Book",
        author="Test Author",
    )


@pytest.fixture
def created_book(db: Database, sample_book_data: BookCreate) -> Book:
    """Create and return a book in the database."""
    return db.create_book(sample_book_data)


@pytest.fixture
def content(db: Database) -> BookContentProvider:
    return BookContentProvider(db, words_per_page=100)


@pytest.fixture
def manager(db: Database, content: BookContentProvider) -> ReaderManager:
    return ReaderManager(db, content)


@pytest.fixture
def reader() -> ReaderSession:
    """A 100-page session starting on page 1."""
    return ReaderSession(book_id="book-1", total_pages=100)


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()


@pytest.fixture
def cli_app():
    """Get the CLI app for testing."""
    from booksy.cli import app
    return app
