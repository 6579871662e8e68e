"""Exceptions raised by booksy."""


class BooksyError(Exception):
    """Base exception for booksy errors."""

    pass


class BookNotFoundError(BooksyError):
    """Raised when a book id does not exist in the catalogue."""

    def __init__(self, book_id: str):
        self.book_id = book_id
        super().__init__(f"Book not found: {book_id}")
