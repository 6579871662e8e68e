"""Main entry point for the booksy package."""

from booksy.cli import app


if __name__ == "__main__":
    app()
