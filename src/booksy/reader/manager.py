"""Reader session management.

Opens reader views on books, restores saved reading positions and
default preferences, and persists progress when sessions close.
"""

import logging
from enum import Enum
from typing import Any, Optional

from ..db.sqlite import Database, get_db
from ..exceptions import BookNotFoundError
from .content import BookContentProvider
from .schemas import DisplayPreferences, ReadingPositionSnapshot
from .session import ReaderSession
from .view import ReaderView

logger = logging.getLogger(__name__)


class ReaderManager:
    """Opens, saves and closes reader sessions."""

    def __init__(
        self,
        db: Optional[Database] = None,
        content: Optional[BookContentProvider] = None,
    ):
        """Initialize reader manager.

        Args:
            db: Database instance
            content: Content provider (default: one backed by db)
        """
        self.db = db or get_db()
        self.content = content or BookContentProvider(self.db)

    # ========================================================================
    # Sessions
    # ========================================================================

    def open_session(
        self,
        book_id: str,
        user_id: str,
        start_page: Optional[int] = None,
    ) -> ReaderView:
        """Open a book for reading.

        Args:
            book_id: ID of the book
            user_id: Reader the saved position belongs to
            start_page: Page to open at, overriding the saved position

        Returns:
            ReaderView around a new ReaderSession

        Raises:
            BookNotFoundError: If the book does not exist
        """
        metadata = self.content.get_metadata(book_id)
        saved = self.db.get_position(user_id, book_id)

        current_page = 1
        bookmarks: list[int] = []
        if saved:
            current_page = saved.current_page
            bookmarks = saved.bookmarks
        if start_page is not None:
            current_page = start_page

        session = ReaderSession(
            book_id=book_id,
            total_pages=metadata.total_pages,
            current_page=current_page,
            bookmarks=bookmarks,
            display_prefs=self.get_default_preferences(user_id),
        )
        logger.info(
            "Opened book %s for %s at page %d/%d",
            book_id,
            user_id,
            session.current_page,
            session.total_pages,
        )
        return ReaderView(session, metadata, self.content)

    def save_progress(self, session: ReaderSession, user_id: str) -> ReadingPositionSnapshot:
        """Persist the session's page and bookmarks."""
        snapshot = session.snapshot()
        self.db.save_position(
            user_id=user_id,
            book_id=snapshot.book_id,
            current_page=snapshot.current_page,
            bookmarks=snapshot.bookmarks,
        )
        logger.debug(
            "Saved progress for %s in %s: page %d, %d bookmark(s)",
            user_id,
            snapshot.book_id,
            snapshot.current_page,
            len(snapshot.bookmarks),
        )
        return snapshot

    def close_session(self, view: ReaderView, user_id: str) -> ReadingPositionSnapshot:
        """Unmount the view and persist its progress."""
        view.unmount()
        snapshot = self.save_progress(view.session, user_id)
        logger.info(
            "Closed book %s for %s at %d%%",
            snapshot.book_id,
            user_id,
            view.session.progress(),
        )
        return snapshot

    def get_position(self, book_id: str, user_id: str) -> Optional[ReadingPositionSnapshot]:
        """Get the saved position of a user in a book, if any."""
        saved = self.db.get_position(user_id, book_id)
        if not saved:
            return None
        return ReadingPositionSnapshot(
            book_id=saved.book_id,
            current_page=saved.current_page,
            bookmarks=saved.bookmarks,
        )

    def clear_position(self, book_id: str, user_id: str) -> bool:
        """Forget the saved position. Returns whether one existed."""
        if not self.db.get_book(book_id):
            raise BookNotFoundError(book_id)
        return self.db.delete_position(user_id, book_id)

    # ========================================================================
    # Default preferences
    # ========================================================================

    def get_default_preferences(self, user_id: str) -> DisplayPreferences:
        """Stored defaults merged over the built-in ones."""
        stored = {key: value for key, (value, _) in self.db.get_preferences(user_id).items()}
        return DisplayPreferences.model_validate(stored)

    def set_default_preference(self, user_id: str, key: str, value: Any) -> DisplayPreferences:
        """Validate and store a default display preference.

        Raises:
            ValueError: If the key is unknown or the value is out of range
        """
        # Same validation as ReaderSession.update_preference
        probe = ReaderSession(
            book_id="",
            total_pages=1,
            display_prefs=self.get_default_preferences(user_id),
        )
        result = probe.update_preference(key, value)
        if not result:
            raise ValueError(f"Invalid value for {result.key}: {value!r} ({result.reason})")

        stored = result.value.value if isinstance(result.value, Enum) else result.value
        self.db.set_preference(
            user_id,
            result.key,
            str(stored),
            DisplayPreferences.value_type(result.key),
        )
        return probe.display_prefs


# Global reader manager instance
_reader_manager: Optional[ReaderManager] = None


def get_reader_manager(db: Optional[Database] = None) -> ReaderManager:
    """Get or create the global reader manager instance."""
    global _reader_manager
    if _reader_manager is None:
        _reader_manager = ReaderManager(db)
    return _reader_manager


def reset_reader_manager() -> None:
    """Reset the global reader manager. Used for testing."""
    global _reader_manager
    _reader_manager = None
