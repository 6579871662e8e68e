"""E-reader sessions: navigation, bookmarks, display preferences and progress."""

from .content import BookContentProvider, paginate
from .keyboard import Key, KeyboardDispatcher, normalize_key
from .manager import ReaderManager, get_reader_manager, reset_reader_manager
from .schemas import (
    BookMetadata,
    DisplayPreferences,
    FontFamily,
    PreferenceUpdateResult,
    ReadingMode,
    ReadingPositionSnapshot,
)
from .session import ReaderSession, progress_percent
from .themes import Palette, palette_for
from .view import ReaderView

__all__ = [
    "BookContentProvider",
    "paginate",
    "Key",
    "KeyboardDispatcher",
    "normalize_key",
    "ReaderManager",
    "get_reader_manager",
    "reset_reader_manager",
    "BookMetadata",
    "DisplayPreferences",
    "FontFamily",
    "PreferenceUpdateResult",
    "ReadingMode",
    "ReadingPositionSnapshot",
    "ReaderSession",
    "progress_percent",
    "Palette",
    "palette_for",
    "ReaderView",
]
