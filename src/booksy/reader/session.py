"""Reader session state.

Tracks reading position, bookmarks and display preferences for one open
book. Navigation clamps into the book's page range and never raises;
preference changes are validated and rejected values leave the previous
value in place.
"""

import logging
import math
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from .schemas import DisplayPreferences, PreferenceUpdateResult, ReadingPositionSnapshot

logger = logging.getLogger(__name__)


def progress_percent(page: int, total_pages: int) -> float:
    """Percentage of the book read at ``page``, rounded half up to a whole number.

    The page is clamped into [1, total_pages] first.
    """
    page = max(1, min(total_pages, page))
    return float(math.floor(page / total_pages * 100 + 0.5))


class ReaderSession:
    """In-memory state of one open book."""

    def __init__(
        self,
        book_id: str,
        total_pages: int,
        current_page: int = 1,
        bookmarks: Optional[Iterable[int]] = None,
        display_prefs: Optional[DisplayPreferences] = None,
    ):
        """Initialize a session.

        Args:
            book_id: ID of the book being read
            total_pages: Page count, fixed for the session's lifetime
            current_page: Starting page (clamped into range)
            bookmarks: Restored bookmarks; pages outside the book are dropped
            display_prefs: Initial display preferences (defaults if None)

        Raises:
            ValueError: If total_pages is less than 1
        """
        if total_pages < 1:
            raise ValueError(f"Book must have at least one page, got {total_pages}")

        self.book_id = book_id
        self._total_pages = total_pages
        self._current_page = self._clamp(current_page)
        # dict keeps insertion order and rejects duplicates
        self._bookmarks: dict[int, None] = {}
        for page in bookmarks or ():
            if 1 <= page <= total_pages:
                self._bookmarks[page] = None
        self._prefs = display_prefs or DisplayPreferences()

    def __repr__(self) -> str:
        return (
            f"<ReaderSession(book_id={self.book_id}, "
            f"page={self._current_page}/{self._total_pages})>"
        )

    # ========================================================================
    # State
    # ========================================================================

    @property
    def total_pages(self) -> int:
        return self._total_pages

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def bookmarks(self) -> set[int]:
        """Bookmarked pages (a copy)."""
        return set(self._bookmarks)

    def bookmarks_in_order(self, numeric: bool = False) -> list[int]:
        """Bookmarks in insertion order, or ascending when numeric is set."""
        pages = list(self._bookmarks)
        return sorted(pages) if numeric else pages

    @property
    def is_bookmarked(self) -> bool:
        return self._current_page in self._bookmarks

    @property
    def display_prefs(self) -> DisplayPreferences:
        """Current display preferences (a copy)."""
        return self._prefs.model_copy()

    @property
    def is_first_page(self) -> bool:
        return self._current_page == 1

    @property
    def is_last_page(self) -> bool:
        return self._current_page == self._total_pages

    # ========================================================================
    # Navigation
    # ========================================================================

    def _clamp(self, page: int) -> int:
        return max(1, min(self._total_pages, page))

    def go_to_page(self, target: int) -> None:
        """Move to a page, clamping out-of-range targets to the nearest end."""
        self._current_page = self._clamp(target)

    def next_page(self) -> None:
        """Advance one page; stays put on the last page."""
        self.go_to_page(self._current_page + 1)

    def previous_page(self) -> None:
        """Go back one page; stays put on the first page."""
        self.go_to_page(self._current_page - 1)

    def jump_to_bookmark(self, page: int) -> None:
        self.go_to_page(page)

    # ========================================================================
    # Bookmarks
    # ========================================================================

    def toggle_bookmark(self) -> bool:
        """Bookmark the current page, or remove its bookmark.

        Returns:
            True if the page is bookmarked afterwards
        """
        page = self._current_page
        if page in self._bookmarks:
            del self._bookmarks[page]
            return False
        self._bookmarks[page] = None
        return True

    # ========================================================================
    # Preferences
    # ========================================================================

    def update_preference(self, key: str, value: Any) -> PreferenceUpdateResult:
        """Validate and apply one display preference.

        Keys are field names (``font_size``) or their camelCase aliases
        (``fontSize``). Out-of-domain values and unknown keys are rejected:
        nothing changes and the result carries the reason.
        """
        field = DisplayPreferences.resolve_key(key)
        if field is None:
            logger.warning("Rejected unknown preference %r for book %s", key, self.book_id)
            return PreferenceUpdateResult(
                key=key, accepted=False, reason=f"Unknown preference: {key}"
            )

        current = getattr(self._prefs, field)
        try:
            updated = DisplayPreferences.model_validate(
                {**self._prefs.model_dump(), field: value}
            )
        except ValidationError as e:
            reason = e.errors()[0]["msg"]
            logger.warning(
                "Rejected %s=%r for book %s: %s", field, value, self.book_id, reason
            )
            return PreferenceUpdateResult(
                key=field, accepted=False, value=current, reason=reason
            )

        self._prefs = updated
        return PreferenceUpdateResult(key=field, accepted=True, value=getattr(updated, field))

    # ========================================================================
    # Derived values
    # ========================================================================

    def progress(self) -> float:
        """Percentage read, rounded to a whole number."""
        return progress_percent(self._current_page, self._total_pages)

    def snapshot(self) -> ReadingPositionSnapshot:
        """State to hand to the persistence layer."""
        return ReadingPositionSnapshot(
            book_id=self.book_id,
            current_page=self._current_page,
            bookmarks=self.bookmarks_in_order(),
        )
