"""Tests for ReaderView overlays, keyboard handling and lifecycle."""

import pytest

from booksy.db.schemas import TocEntry
from booksy.reader import (
    BookMetadata,
    Key,
    KeyboardDispatcher,
    ReaderSession,
    ReaderView,
)

TOC = [
    TocEntry(title="Chapter 1: Introduction", page=1),
    TocEntry(title="Chapter 2: Getting Started", page=15),
    TocEntry(title="Chapter 3: Advanced Topics", page=32),
    TocEntry(title="Chapter 4: Conclusion", page=85),
]


@pytest.fixture
def view() -> ReaderView:
    session = ReaderSession(book_id="book-1", total_pages=100)
    metadata = BookMetadata(
        book_id="book-1",
        title="Sample Book Title",
        author="Author Name",
        total_pages=100,
        toc=TOC,
    )
    return ReaderView(session, metadata)


@pytest.fixture
def dispatcher() -> KeyboardDispatcher:
    return KeyboardDispatcher()


class TestKeyboard:
    """Tests for key handling while mounted."""

    def test_arrow_keys_turn_pages(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        view.mount(dispatcher)

        dispatcher.dispatch("ArrowRight")
        dispatcher.dispatch("ArrowRight")
        assert view.session.current_page == 3

        dispatcher.dispatch("ArrowLeft")
        assert view.session.current_page == 2

    def test_arrow_keys_respect_bounds(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        view.mount(dispatcher)

        dispatcher.dispatch("ArrowLeft")
        assert view.session.current_page == 1

        view.session.go_to_page(100)
        dispatcher.dispatch("ArrowRight")
        assert view.session.current_page == 100

    def test_escape_closes_overlays(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        """Test escape closes both panels and leaves the page alone."""
        view.mount(dispatcher)
        view.session.go_to_page(7)
        view.toggle_settings()
        view.toggle_toc()

        assert dispatcher.dispatch("Escape") is True
        assert not view.show_settings
        assert not view.show_toc
        assert view.session.current_page == 7

    def test_handle_key_directly(self, view: ReaderView):
        assert view.handle_key(Key.RIGHT) is True
        assert view.session.current_page == 2


class TestLifecycle:
    """Tests for mount/unmount."""

    def test_unmounted_view_ignores_keys(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        """Test keys stop reaching the session after unmount."""
        view.mount(dispatcher)
        dispatcher.dispatch("right")
        view.unmount()

        assert dispatcher.dispatch("right") is False
        assert view.session.current_page == 2
        assert not view.is_mounted
        assert len(dispatcher) == 0

    def test_context_manager_unmounts(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        with view.mount(dispatcher):
            assert view.is_mounted
            dispatcher.dispatch("right")

        assert not view.is_mounted
        dispatcher.dispatch("right")
        assert view.session.current_page == 2

    def test_double_mount_raises(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        view.mount(dispatcher)
        with pytest.raises(RuntimeError):
            view.mount(dispatcher)

    def test_unmount_twice_is_safe(self, view: ReaderView, dispatcher: KeyboardDispatcher):
        view.mount(dispatcher)
        view.unmount()
        view.unmount()
        assert not view.is_mounted

    def test_independent_sessions(self, dispatcher: KeyboardDispatcher):
        """Test two mounted views each keep their own state."""
        views = []
        for book_id, total in (("a", 10), ("b", 3)):
            metadata = BookMetadata(book_id=book_id, title=book_id, author="x", total_pages=total)
            views.append(ReaderView(ReaderSession(book_id, total_pages=total), metadata))

        for v in views:
            v.mount(dispatcher)
        for _ in range(5):
            dispatcher.dispatch("right")

        assert views[0].session.current_page == 6
        assert views[1].session.current_page == 3


class TestOverlays:
    """Tests for the settings and contents panels."""

    def test_toggle(self, view: ReaderView):
        assert view.toggle_settings() is True
        assert view.toggle_settings() is False
        assert view.toggle_toc() is True
        assert view.show_toc

    def test_jump_to_bookmark_closes_toc(self, view: ReaderView):
        view.session.go_to_page(40)
        view.session.toggle_bookmark()
        view.session.go_to_page(1)
        view.toggle_toc()

        view.jump_to_bookmark(40)

        assert view.session.current_page == 40
        assert not view.show_toc

    def test_jump_to_chapter_closes_toc(self, view: ReaderView):
        view.toggle_toc()
        view.jump_to_chapter(TOC[2])

        assert view.session.current_page == 32
        assert not view.show_toc


class TestCurrentChapter:
    """Tests for chapter tracking."""

    @pytest.mark.parametrize(
        "page,expected",
        [(1, 0), (14, 0), (15, 1), (31, 1), (32, 2), (84, 2), (85, 3), (100, 3)],
    )
    def test_follows_navigation(self, view: ReaderView, page: int, expected: int):
        view.session.go_to_page(page)
        assert view.current_chapter() == TOC[expected]

    def test_no_chapter_before_first_entry(self):
        metadata = BookMetadata(
            book_id="b",
            title="t",
            author="a",
            total_pages=20,
            toc=[TocEntry(title="Prologue", page=5)],
        )
        view = ReaderView(ReaderSession("b", total_pages=20), metadata)
        assert view.current_chapter() is None

    def test_no_toc(self):
        metadata = BookMetadata(book_id="b", title="t", author="a", total_pages=2)
        view = ReaderView(ReaderSession("b", total_pages=2), metadata)
        assert view.current_chapter() is None
        assert view.page_text() == ""
