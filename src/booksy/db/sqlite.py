"""SQLite database operations.

Handles database connection, session management, and CRUD operations.
"""

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, Book, ReaderPreference, ReadingPosition
from .schemas import BookCreate, ReadingPositionResponse

logger = logging.getLogger(__name__)


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     BOOKSY_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "BOOKSY_DB_PATH",
                str(Path.home() / ".booksy" / "booksy.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # For in-memory databases, use StaticPool to reuse the same connection
        # This ensures all sessions share the same in-memory database
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Book Operations
    # ========================================================================

    def create_book(self, book: BookCreate, session: Optional[Session] = None) -> Book:
        """Create a new book record."""

        def _create(s: Session) -> Book:
            db_book = Book(
                title=book.title,
                author=book.author,
                isbn=book.isbn,
                description=book.description,
                language=book.language,
                genre=book.genre.value if book.genre else None,
                page_count=book.page_count,
                content=book.content,
            )
            db_book.set_toc([entry.model_dump() for entry in book.toc])

            s.add(db_book)
            s.flush()
            logger.debug("Created book %s (%s)", db_book.id, db_book.title)
            return db_book

        if session:
            return _create(session)
        else:
            with self.get_session() as s:
                book_obj = _create(s)
                s.expunge(book_obj)
                return book_obj

    def get_book(self, book_id: str, session: Optional[Session] = None) -> Optional[Book]:
        """Get a book by ID."""

        def _get(s: Session) -> Optional[Book]:
            return s.get(Book, book_id)

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def get_book_by_isbn(
        self, isbn: str, session: Optional[Session] = None
    ) -> Optional[Book]:
        """Get a book by ISBN."""

        def _get(s: Session) -> Optional[Book]:
            stmt = select(Book).where(Book.isbn == isbn)
            return s.execute(stmt).scalar_one_or_none()

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                book = _get(s)
                if book:
                    s.expunge(book)
                return book

    def search_books(
        self, query: str, limit: int = 20, session: Optional[Session] = None
    ) -> list[Book]:
        """Search books by title or author."""

        def _search(s: Session) -> list[Book]:
            pattern = f"%{query}%"
            stmt = (
                select(Book)
                .where((Book.title.ilike(pattern)) | (Book.author.ilike(pattern)))
                .order_by(Book.title)
                .limit(limit)
            )
            return list(s.execute(stmt).scalars().all())

        if session:
            return _search(session)
        else:
            with self.get_session() as s:
                books = _search(s)
                for book in books:
                    s.expunge(book)
                return books

    def get_all_books(self, session: Optional[Session] = None) -> list[Book]:
        """Get all books."""

        def _get(s: Session) -> list[Book]:
            stmt = select(Book).order_by(Book.title)
            return list(s.execute(stmt).scalars().all())

        if session:
            return _get(session)
        else:
            with self.get_session() as s:
                books = _get(s)
                for book in books:
                    s.expunge(book)
                return books

    def delete_book(self, book_id: str, session: Optional[Session] = None) -> bool:
        """Delete a book record along with its saved positions."""

        def _delete(s: Session) -> bool:
            book = s.get(Book, book_id)
            if not book:
                return False
            s.delete(book)
            return True

        if session:
            return _delete(session)
        else:
            with self.get_session() as s:
                return _delete(s)

    # ========================================================================
    # Reading Position Operations
    # ========================================================================

    def _find_position(self, s: Session, user_id: str, book_id: str) -> Optional[ReadingPosition]:
        stmt = select(ReadingPosition).where(
            ReadingPosition.user_id == user_id,
            ReadingPosition.book_id == book_id,
        )
        return s.execute(stmt).scalar_one_or_none()

    @staticmethod
    def _position_response(position: ReadingPosition) -> ReadingPositionResponse:
        return ReadingPositionResponse(
            user_id=position.user_id,
            book_id=position.book_id,
            current_page=position.current_page,
            bookmarks=position.get_bookmarks(),
            updated_at=position.updated_at,
        )

    def get_position(
        self, user_id: str, book_id: str
    ) -> Optional[ReadingPositionResponse]:
        """Get the saved reading position for a user and book."""
        with self.get_session() as s:
            position = self._find_position(s, user_id, book_id)
            if not position:
                return None
            return self._position_response(position)

    def save_position(
        self,
        user_id: str,
        book_id: str,
        current_page: int,
        bookmarks: list[int],
    ) -> ReadingPositionResponse:
        """Insert or update the reading position for a user and book."""
        with self.get_session() as s:
            position = self._find_position(s, user_id, book_id)
            if position:
                position.current_page = current_page
            else:
                position = ReadingPosition(
                    user_id=user_id,
                    book_id=book_id,
                    current_page=current_page,
                )
                s.add(position)
            position.set_bookmarks(list(bookmarks))
            s.flush()
            return self._position_response(position)

    def delete_position(self, user_id: str, book_id: str) -> bool:
        """Delete the saved reading position. Returns whether one existed."""
        with self.get_session() as s:
            position = self._find_position(s, user_id, book_id)
            if not position:
                return False
            s.delete(position)
            return True

    def get_positions_for_user(self, user_id: str) -> dict[str, ReadingPositionResponse]:
        """Get all saved positions of a user, keyed by book ID."""
        with self.get_session() as s:
            stmt = select(ReadingPosition).where(ReadingPosition.user_id == user_id)
            return {
                p.book_id: self._position_response(p)
                for p in s.execute(stmt).scalars().all()
            }

    # ========================================================================
    # Reader Preference Operations
    # ========================================================================

    def get_preferences(self, user_id: str) -> dict[str, tuple[str, str]]:
        """Get stored preferences as {key: (value, value_type)}."""
        with self.get_session() as s:
            stmt = select(ReaderPreference).where(ReaderPreference.user_id == user_id)
            return {
                p.key: (p.value, p.value_type)
                for p in s.execute(stmt).scalars().all()
            }

    def set_preference(self, user_id: str, key: str, value: str, value_type: str) -> None:
        """Insert or update one stored preference."""
        with self.get_session() as s:
            stmt = select(ReaderPreference).where(
                ReaderPreference.user_id == user_id,
                ReaderPreference.key == key,
            )
            pref = s.execute(stmt).scalar_one_or_none()
            if pref:
                pref.value = value
                pref.value_type = value_type
            else:
                s.add(
                    ReaderPreference(
                        user_id=user_id,
                        key=key,
                        value=value,
                        value_type=value_type,
                    )
                )


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
