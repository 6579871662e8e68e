"""Reader view: overlays and keyboard handling around a ReaderSession.

The view subscribes to a KeyboardDispatcher while mounted and must be
unmounted when closed so keys stop reaching the session.
"""

import logging
from typing import Optional

from ..db.schemas import TocEntry
from .content import BookContentProvider
from .keyboard import Key, KeyboardDispatcher
from .schemas import BookMetadata
from .session import ReaderSession

logger = logging.getLogger(__name__)


class ReaderView:
    """One open book as shown to the reader."""

    def __init__(
        self,
        session: ReaderSession,
        metadata: BookMetadata,
        content: Optional[BookContentProvider] = None,
    ):
        self.session = session
        self.metadata = metadata
        self.content = content
        self.show_settings = False
        self.show_toc = False
        self._dispatcher: Optional[KeyboardDispatcher] = None

    def __enter__(self) -> "ReaderView":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.unmount()

    # ========================================================================
    # Lifecycle
    # ========================================================================

    @property
    def is_mounted(self) -> bool:
        return self._dispatcher is not None

    def mount(self, dispatcher: KeyboardDispatcher) -> "ReaderView":
        """Start receiving keys from the dispatcher.

        Raises:
            RuntimeError: If the view is already mounted
        """
        if self._dispatcher is not None:
            raise RuntimeError(f"Reader for book {self.session.book_id} is already mounted")
        dispatcher.subscribe(self.handle_key)
        self._dispatcher = dispatcher
        logger.debug("Mounted reader for book %s", self.session.book_id)
        return self

    def unmount(self) -> None:
        """Stop receiving keys. Safe to call more than once."""
        if self._dispatcher is None:
            return
        self._dispatcher.unsubscribe(self.handle_key)
        self._dispatcher = None
        self.close_overlays()
        logger.debug("Unmounted reader for book %s", self.session.book_id)

    # ========================================================================
    # Keyboard
    # ========================================================================

    def handle_key(self, key: Key) -> bool:
        """Right/left turn pages, escape closes overlays."""
        if key == Key.RIGHT:
            self.session.next_page()
        elif key == Key.LEFT:
            self.session.previous_page()
        elif key == Key.ESCAPE:
            self.close_overlays()
        else:
            return False
        return True

    # ========================================================================
    # Overlays
    # ========================================================================

    def toggle_settings(self) -> bool:
        self.show_settings = not self.show_settings
        return self.show_settings

    def toggle_toc(self) -> bool:
        self.show_toc = not self.show_toc
        return self.show_toc

    def close_overlays(self) -> None:
        self.show_settings = False
        self.show_toc = False

    # ========================================================================
    # Navigation that closes the table of contents
    # ========================================================================

    def jump_to_bookmark(self, page: int) -> None:
        self.session.jump_to_bookmark(page)
        self.show_toc = False

    def jump_to_chapter(self, entry: TocEntry) -> None:
        self.session.go_to_page(entry.page)
        self.show_toc = False

    def current_chapter(self) -> Optional[TocEntry]:
        """Last chapter starting at or before the current page."""
        page = self.session.current_page
        chapter = None
        for entry in sorted(self.metadata.toc, key=lambda e: e.page):
            if entry.page > page:
                break
            chapter = entry
        return chapter

    def page_text(self) -> str:
        if self.content is None:
            return ""
        return self.content.page_text(self.session.book_id, self.session.current_page)
