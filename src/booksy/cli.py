"""Command-line interface for booksy.

Built with Typer for commands and Rich for beautiful output.
"""

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import get_config
from .db import get_db
from .db.models import Book
from .db.schemas import BookCreate, Genre, TocEntry
from .exceptions import BooksyError
from .logging_config import setup_logging
from .reader import (
    KeyboardDispatcher,
    ReaderView,
    get_reader_manager,
    palette_for,
    progress_percent,
)
from .reader.schemas import PREFERENCE_KEYS

# Create the main app
app = typer.Typer(
    name="booksy",
    help="Read books from your Booksy library and keep your place.",
    no_args_is_help=True,
)

# Rich console for pretty output
console = Console()

READER_HELP = (
    "n/right next · p/left previous · g N go to page · b bookmark · j N jump to bookmark\n"
    "t contents · c N chapter · s settings · set KEY VALUE · esc close panels · q quit"
)


# ============================================================================
# Helper Functions
# ============================================================================


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[bold green]Success:[/bold green] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[bold yellow]Warning:[/bold yellow] {message}")


def progress_bar(pct: float, width: int = 20) -> str:
    filled = int((pct / 100) * width)
    return "█" * filled + "░" * (width - filled)


def _resolve_user(user: Optional[str]) -> str:
    return user or get_config().default_user


def _resolve_book(query: str) -> Book:
    """Find a book by ID, falling back to a title/author search."""
    db = get_db()
    book = db.get_book(query)
    if book:
        return book
    books = db.search_books(query, limit=1)
    if not books:
        print_error(f"No book found matching: {query}")
        raise typer.Exit(1)
    return books[0]


def _parse_toc(entries: list[str]) -> list[TocEntry]:
    """Parse "Title:page" strings."""
    toc = []
    for raw in entries:
        title, sep, page = raw.rpartition(":")
        if not sep or not title.strip() or not page.strip().isdigit():
            raise typer.BadParameter(f"Expected 'Title:page', got {raw!r}", param_hint="--toc")
        toc.append(TocEntry(title=title.strip(), page=int(page)))
    return toc


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """Read books from your Booksy library and keep your place."""
    config = get_config()
    setup_logging("DEBUG" if verbose else config.log_level, config.log_format)


# ============================================================================
# Catalogue Commands
# ============================================================================


@app.command()
def add(
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Option(..., "--author", "-a", help="Author name"),
    pages: Optional[int] = typer.Option(None, "--pages", help="Page count (default: from content)"),
    content: Optional[Path] = typer.Option(
        None, "--content", "-c", exists=True, dir_okay=False, help="Plain text file with the book"
    ),
    toc: Optional[List[str]] = typer.Option(None, "--toc", help="Chapter as 'Title:page' (repeatable)"),
    isbn: Optional[str] = typer.Option(None, "--isbn", "-i", help="ISBN"),
    genre: Optional[Genre] = typer.Option(None, "--genre", "-g", help="Genre"),
) -> None:
    """Add a book to the library."""
    db = get_db()

    try:
        book_data = BookCreate(
            title=title,
            author=author,
            page_count=pages,
            content=content.read_text(encoding="utf-8") if content else None,
            toc=_parse_toc(toc or []),
            isbn=isbn,
            genre=genre,
        )
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)

    if book_data.isbn and db.get_book_by_isbn(book_data.isbn):
        print_error(f"Book with ISBN {book_data.isbn} already exists")
        raise typer.Exit(1)

    book = db.create_book(book_data)
    print_success(f"Added '{book.title}' by {book.author}")
    console.print(f"[dim]ID: {book.id}[/dim]")


@app.command("list")
def list_books(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
) -> None:
    """List books with reading progress."""
    db = get_db()
    manager = get_reader_manager(db)
    user_id = _resolve_user(user)

    books = db.get_all_books()
    if not books:
        console.print("[dim]No books found.[/dim]")
        return

    positions = db.get_positions_for_user(user_id)

    table = Table(title="Library", show_header=True, header_style="bold magenta")
    table.add_column("Title", style="cyan", max_width=40)
    table.add_column("Author", style="green", max_width=25)
    table.add_column("Progress", justify="center")
    table.add_column("ID", style="dim")

    for book in books:
        progress = "-"
        position = positions.get(book.id)
        if position:
            total = manager.content.get_metadata(book.id).total_pages
            pct = progress_percent(position.current_page, total)
            progress = f"[{progress_bar(pct, 10)}] {pct:.0f}%"
        table.add_row(book.title, book.author, progress, book.id[:8])

    console.print(table)


@app.command()
def show(
    book_query: str = typer.Argument(..., help="Book ID or title"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
) -> None:
    """Show a book's details, contents and saved progress."""
    book = _resolve_book(book_query)
    manager = get_reader_manager(get_db())
    metadata = manager.content.get_metadata(book.id)
    position = manager.get_position(book.id, _resolve_user(user))

    lines = [
        f"[bold]{book.title}[/bold]",
        f"by {book.author}",
        "",
        f"Pages: {metadata.total_pages}",
    ]
    if book.genre:
        lines.append(f"Genre: {book.genre}")
    if book.isbn:
        lines.append(f"ISBN: {book.isbn}")
    if position:
        pct = progress_percent(position.current_page, metadata.total_pages)
        lines.append(f"Progress: [{progress_bar(pct)}] {pct:.0f}% (page {position.current_page})")
        if position.bookmarks:
            lines.append(f"Bookmarks: {', '.join(str(p) for p in sorted(position.bookmarks))}")
    if metadata.toc:
        lines.append("")
        lines.append("[bold]Contents[/bold]")
        for i, entry in enumerate(metadata.toc, start=1):
            lines.append(f"  {i}. {entry.title} [dim]p.{entry.page}[/dim]")

    console.print(Panel("\n".join(lines), title="Book"))


# ============================================================================
# Reader Commands
# ============================================================================


def _render(view: ReaderView) -> None:
    """Draw the current page and any open panels."""
    session = view.session
    prefs = session.display_prefs
    palette = palette_for(prefs.reading_mode)

    if view.show_settings:
        table = Table(title="Reading Settings", show_header=False)
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("reading_mode", prefs.reading_mode.value)
        table.add_row("font_size", f"{prefs.font_size}px")
        table.add_row("font_family", prefs.font_family.value)
        table.add_row("line_height", str(prefs.line_height))
        console.print(table)

    if view.show_toc:
        lines = []
        for i, entry in enumerate(view.metadata.toc, start=1):
            marker = "▶" if entry == view.current_chapter() else " "
            lines.append(f"{marker} {i}. {entry.title} (p.{entry.page})")
        bookmarks = session.bookmarks_in_order(numeric=True)
        if bookmarks:
            lines.append("")
            lines.append("Bookmarks: " + ", ".join(f"p.{p}" for p in bookmarks))
        console.print(Panel("\n".join(lines) or "No contents", title="Table of Contents"))

    chapter = view.current_chapter()
    title = view.metadata.title + (f" · {chapter.title}" if chapter else "")
    marker = " ★" if session.is_bookmarked else ""
    console.print(
        Panel(
            Text(view.page_text() or "(no text on this page)", style=palette.body_style),
            title=title,
            subtitle=(
                f"Page {session.current_page} of {session.total_pages}{marker} · "
                f"{session.progress():.0f}% complete"
            ),
            style=palette.body_style,
            border_style=palette.secondary_style,
        )
    )


def _page_argument(arg: str) -> Optional[int]:
    try:
        return int(arg)
    except ValueError:
        print_warning(f"Not a page number: {arg!r}")
        return None


def _run_command(view: ReaderView, dispatcher: KeyboardDispatcher, line: str) -> bool:
    """Apply one reader command. Returns False when the reader should quit."""
    session = view.session
    parts = line.strip().split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]

    if cmd in ("q", "quit"):
        return False
    if cmd in ("n", "right"):
        dispatcher.dispatch("ArrowRight")
    elif cmd in ("p", "left"):
        dispatcher.dispatch("ArrowLeft")
    elif cmd in ("esc", "escape"):
        dispatcher.dispatch("Escape")
    elif cmd == "g" and args:
        page = _page_argument(args[0])
        if page is not None:
            session.go_to_page(page)
    elif cmd == "b":
        if session.toggle_bookmark():
            console.print(f"[yellow]Bookmarked page {session.current_page}[/yellow]")
        else:
            console.print(f"[dim]Removed bookmark on page {session.current_page}[/dim]")
    elif cmd == "j" and args:
        page = _page_argument(args[0])
        if page is not None:
            if page not in session.bookmarks:
                print_warning(f"Page {page} is not bookmarked")
            else:
                view.jump_to_bookmark(page)
    elif cmd == "t":
        view.toggle_toc()
    elif cmd == "c" and args:
        index = _page_argument(args[0])
        if index is not None:
            if 1 <= index <= len(view.metadata.toc):
                view.jump_to_chapter(view.metadata.toc[index - 1])
            else:
                print_warning(f"No chapter {index}")
    elif cmd == "s":
        view.toggle_settings()
    elif cmd == "set" and len(args) == 2:
        result = session.update_preference(args[0], args[1])
        if not result:
            print_warning(f"{args[0]} not changed: {result.reason}")
    elif cmd in ("h", "help", "?"):
        console.print(f"[dim]{READER_HELP}[/dim]")
    else:
        print_warning(f"Unknown command: {line.strip()!r} (h for help)")
    return True


@app.command()
def read(
    book_query: str = typer.Argument(..., help="Book ID or title"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
    page: Optional[int] = typer.Option(None, "--page", "-p", help="Open at this page"),
) -> None:
    """Open a book in the terminal reader.

    Your page and bookmarks are saved when you quit.
    """
    book = _resolve_book(book_query)
    user_id = _resolve_user(user)
    manager = get_reader_manager(get_db())

    try:
        view = manager.open_session(book.id, user_id, start_page=page)
    except BooksyError as e:
        print_error(str(e))
        raise typer.Exit(1)

    dispatcher = KeyboardDispatcher()
    view.mount(dispatcher)
    console.print(f"[dim]{READER_HELP}[/dim]")

    try:
        while True:
            _render(view)
            try:
                line = typer.prompt("»", default="", show_default=False)
            except typer.Abort:
                break
            if not _run_command(view, dispatcher, line):
                break
    finally:
        snapshot = manager.close_session(view, user_id)

    console.print(
        f"[green]Saved your place: page {snapshot.current_page} of "
        f"{view.session.total_pages} ({view.session.progress():.0f}%)[/green]"
    )


@app.command()
def progress(
    book_query: str = typer.Argument(..., help="Book ID or title"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
) -> None:
    """Show saved reading progress for a book."""
    book = _resolve_book(book_query)
    manager = get_reader_manager(get_db())
    position = manager.get_position(book.id, _resolve_user(user))

    if not position:
        console.print(f"[dim]You haven't started '{book.title}' yet.[/dim]")
        return

    total = manager.content.get_metadata(book.id).total_pages
    pct = progress_percent(position.current_page, total)
    console.print(f"[bold]{book.title}[/bold]")
    console.print(f"Progress: [{progress_bar(pct)}] {pct:.0f}%")
    console.print(f"Page {position.current_page} of {total}")


@app.command()
def bookmarks(
    book_query: str = typer.Argument(..., help="Book ID or title"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
) -> None:
    """List saved bookmarks for a book."""
    book = _resolve_book(book_query)
    manager = get_reader_manager(get_db())
    position = manager.get_position(book.id, _resolve_user(user))

    if not position or not position.bookmarks:
        console.print("[dim]No bookmarks.[/dim]")
        return

    metadata = manager.content.get_metadata(book.id)
    table = Table(title=f"Bookmarks - {book.title}", show_header=True, header_style="bold magenta")
    table.add_column("Page", justify="right", style="cyan")
    table.add_column("Chapter", style="green")

    for page_number in sorted(position.bookmarks):
        chapter = None
        for entry in sorted(metadata.toc, key=lambda e: e.page):
            if entry.page > page_number:
                break
            chapter = entry
        table.add_row(str(page_number), chapter.title if chapter else "-")

    console.print(table)


@app.command()
def reset(
    book_query: str = typer.Argument(..., help="Book ID or title"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
) -> None:
    """Forget saved progress and bookmarks for a book."""
    book = _resolve_book(book_query)
    manager = get_reader_manager(get_db())

    if manager.clear_position(book.id, _resolve_user(user)):
        print_success(f"Progress for '{book.title}' cleared.")
    else:
        print_warning(f"No saved progress for '{book.title}'.")


@app.command()
def prefs(
    user: Optional[str] = typer.Option(None, "--user", "-u", help="Reader (default: BOOKSY_USER)"),
    set_: Optional[List[str]] = typer.Option(
        None, "--set", "-s", help="KEY=VALUE default to store (repeatable)"
    ),
) -> None:
    """Show or change default reading preferences."""
    manager = get_reader_manager(get_db())
    user_id = _resolve_user(user)

    for item in set_ or []:
        key, sep, value = item.partition("=")
        if not sep:
            print_error(f"Expected KEY=VALUE, got {item!r}")
            raise typer.Exit(1)
        try:
            manager.set_default_preference(user_id, key.strip(), value.strip())
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(1)
        print_success(f"{key.strip()} set to {value.strip()}")

    current = manager.get_default_preferences(user_id).model_dump(mode="json")
    table = Table(title=f"Reading Preferences - {user_id}", show_header=False)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    for key in PREFERENCE_KEYS:
        table.add_row(key, str(current[key]))
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    console.print(f"booksy version {__version__}")


# ============================================================================
# Main Entry Point
# ============================================================================


if __name__ == "__main__":
    app()
