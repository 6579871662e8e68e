"""Book content provider.

Supplies book metadata and paginated text to reader sessions.
Paragraphs are packed into pages of at most ``words_per_page`` words.
"""

from typing import Optional

from ..config import get_config
from ..db.schemas import TocEntry
from ..db.sqlite import Database
from ..exceptions import BookNotFoundError
from .schemas import BookMetadata


def paginate(text: Optional[str], words_per_page: int) -> list[str]:
    """Split text into pages.

    Args:
        text: Plain text; paragraphs are separated by blank lines
        words_per_page: Maximum words on one page

    Returns:
        List of page strings (empty if the text has no words)
    """
    if words_per_page < 1:
        raise ValueError(f"words_per_page must be positive, got {words_per_page}")
    if not text:
        return []

    paragraphs = [p.split() for p in text.replace("\r\n", "\n").split("\n\n")]
    pages: list[str] = []
    current: list[list[str]] = []
    count = 0

    for words in paragraphs:
        if not words:
            continue
        # Long paragraphs are split on word boundaries
        while words:
            room = words_per_page - count
            if room == 0:
                pages.append("\n\n".join(" ".join(p) for p in current))
                current, count = [], 0
                room = words_per_page
            chunk, words = words[:room], words[room:]
            current.append(chunk)
            count += len(chunk)

    if current:
        pages.append("\n\n".join(" ".join(p) for p in current))

    return pages


class BookContentProvider:
    """Reads book metadata and page text from the catalogue."""

    def __init__(self, db: Database, words_per_page: Optional[int] = None):
        """Initialize content provider.

        Args:
            db: Database instance
            words_per_page: Pagination size (default: from config)
        """
        self.db = db
        self.words_per_page = words_per_page or get_config().words_per_page
        self._page_counts: dict[str, int] = {}
        # Pages of the most recently read book only
        self._current: Optional[tuple[str, list[str]]] = None

    def _load_pages(self, book_id: str) -> list[str]:
        if self._current is None or self._current[0] != book_id:
            book = self.db.get_book(book_id)
            if not book:
                raise BookNotFoundError(book_id)
            pages = paginate(book.content, self.words_per_page)
            self._page_counts[book_id] = len(pages)
            self._current = (book_id, pages)
        return self._current[1]

    def get_metadata(self, book_id: str) -> BookMetadata:
        """Get the metadata a reader session needs.

        Raises:
            BookNotFoundError: If the book does not exist
        """
        book = self.db.get_book(book_id)
        if not book:
            raise BookNotFoundError(book_id)

        total_pages = book.page_count
        if not total_pages:
            if book_id not in self._page_counts:
                self._page_counts[book_id] = len(paginate(book.content, self.words_per_page))
            total_pages = max(1, self._page_counts[book_id])

        return BookMetadata(
            book_id=book.id,
            title=book.title,
            author=book.author,
            total_pages=total_pages,
            toc=[TocEntry(**entry) for entry in book.get_toc()],
        )

    def page_text(self, book_id: str, page: int) -> str:
        """Text of a 1-indexed page; empty past the end of the content."""
        pages = self._load_pages(book_id)
        if 1 <= page <= len(pages):
            return pages[page - 1]
        return ""
