from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Protocol, Tuple

# %c{color} switches the foreground, %b{color} the background; empty braces reset
_MARKUP = re.compile(r"%([cb])\{([^}]*)\}")


class Display(Protocol):
    """Cell-grid drawing surface the screens render onto."""

    width: int
    height: int

    def draw(self, x: int, y: int, glyph: str, foreground: Optional[str] = None, background: Optional[str] = None) -> None: ...

    def draw_text(self, x: int, y: int, text: str, max_width: Optional[int] = None) -> int: ...

    def clear(self) -> None: ...


@dataclass
class Cell:
    glyph: str = " "
    foreground: str = "white"
    background: str = "black"


def parse_markup(text: str, foreground: str, background: str) -> Iterator[Tuple[str, str, str]]:
    """Yield (char, fg, bg) for every visible character of ``text``."""
    fg, bg = foreground, background
    pos = 0
    for match in _MARKUP.finditer(text):
        for ch in text[pos:match.start()]:
            yield ch, fg, bg
        kind, color = match.groups()
        if kind == "c":
            fg = color or foreground
        else:
            bg = color or background
        pos = match.end()
    for ch in text[pos:]:
        yield ch, fg, bg


def strip_markup(text: str) -> str:
    return _MARKUP.sub("", text)


class GridDisplay:
    """In-memory character grid.

    The arcade window paints it every frame; tests inspect it directly.
    Writes outside the grid are dropped.
    """

    def __init__(self, width: int, height: int, foreground: str = "white", background: str = "black") -> None:
        if width <= 0 or height <= 0:
            raise ValueError("Display dimensions must be positive")
        self.width = width
        self.height = height
        self.foreground = foreground
        self.background = background
        self._cells: List[List[Cell]] = []
        self.clear()

    def clear(self) -> None:
        self._cells = [[Cell(" ", self.foreground, self.background) for _ in range(self.width)] for _ in range(self.height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def draw(self, x: int, y: int, glyph: str, foreground: Optional[str] = None, background: Optional[str] = None) -> None:
        if not self.in_bounds(x, y):
            return
        self._cells[y][x] = Cell(glyph, foreground or self.foreground, background or self.background)

    def draw_text(self, x: int, y: int, text: str, max_width: Optional[int] = None) -> int:
        """Draw markup text left to right, wrapping at ``max_width`` columns.

        Returns the number of rows used.
        """
        limit = max_width if max_width is not None else self.width - x
        cx, cy = x, y
        for ch, fg, bg in parse_markup(text, self.foreground, self.background):
            if limit > 0 and cx - x >= limit:
                cx, cy = x, cy + 1
            self.draw(cx, cy, ch, fg, bg)
            cx += 1
        return cy - y + 1

    def cell(self, x: int, y: int) -> Cell:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        return "".join(c.glyph for c in self._cells[y])

    def cells(self) -> Iterator[Tuple[int, int, Cell]]:
        for y, row in enumerate(self._cells):
            for x, c in enumerate(row):
                yield x, y, c
