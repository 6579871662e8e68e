"""Colour palettes for the reading modes."""

from dataclasses import dataclass

from rich.style import Style

from .schemas import ReadingMode


@dataclass(frozen=True)
class Palette:
    """Background, body text and secondary text colours."""

    background: str
    text: str
    secondary: str

    @property
    def body_style(self) -> Style:
        return Style(color=self.text, bgcolor=self.background)

    @property
    def secondary_style(self) -> Style:
        return Style(color=self.secondary, bgcolor=self.background)


PALETTES = {
    ReadingMode.LIGHT: Palette(background="#ffffff", text="#111827", secondary="#4b5563"),
    ReadingMode.DARK: Palette(background="#0f172a", text="#ffffff", secondary="#94a3b8"),
    ReadingMode.SEPIA: Palette(background="#f4ecd8", text="#5c4a2f", secondary="#8b7355"),
}


def palette_for(mode: ReadingMode) -> Palette:
    return PALETTES[ReadingMode(mode)]
