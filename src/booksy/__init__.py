"""Booksy: a library reader with saved progress and bookmarks."""

__version__ = "0.1.0"
