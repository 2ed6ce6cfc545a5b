from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tile:
    """Appearance and walkability of one map cell."""

    name: str
    glyph: str = " "
    foreground: str = "white"
    background: str = "black"
    walkable: bool = False

    def is_walkable(self) -> bool:
        return self.walkable


NULL = Tile("null")
FLOOR = Tile("floor", ".", walkable=True)
WALL = Tile("wall", "#", foreground="goldenrod")
STAIRS_UP = Tile("stairs_up", "<", foreground="white", walkable=True)
STAIRS_DOWN = Tile("stairs_down", ">", foreground="white", walkable=True)
