from __future__ import annotations

import logging
import re
from typing import Dict

import arcade

from .core import keys
from .core.input import InputType
from .core.session import GameSession
from .core.settings import Settings
from .screens.start import StartScreen
from .ui.display import GridDisplay

logger = logging.getLogger(__name__)

# Logical input actions -> the key code the screens expect
ACTION_KEYS: Dict[str, int] = {
    "left": keys.LEFT,
    "right": keys.RIGHT,
    "up": keys.UP,
    "down": keys.DOWN,
    "confirm": keys.RETURN,
    "cancel": keys.ESCAPE,
}

_CAMEL = re.compile(r"([a-z])([A-Z])")


def _normalize_key_name(name: str) -> int:
    """Translate a key name from settings to an ``arcade.key`` constant."""
    if len(name) == 1:
        name = name.upper()
    try:
        return getattr(arcade.key, name)
    except AttributeError as e:
        raise ValueError(f"Unknown key name: {name}") from e


def build_key_translation(mapping: Dict[str, list]) -> Dict[int, int]:
    translation: Dict[int, int] = {}
    for action, names in mapping.items():
        if action not in ACTION_KEYS:
            logger.warning("Ignoring binding for unknown action '%s'", action)
            continue
        for name in names:
            translation[_normalize_key_name(name)] = ACTION_KEYS[action]
    return translation


def to_color(name: str) -> arcade.types.Color:
    """Accept '#rrggbb' or color names such as 'goldenrod' / 'lightGreen'."""
    if name.startswith("#"):
        return arcade.types.Color.from_hex_string(name)
    attr = _CAMEL.sub(r"\1_\2", name).upper()
    return getattr(arcade.color, attr, arcade.color.WHITE)


class GameWindow(arcade.Window):
    """Arcade window hosting a GameSession.

    Key presses become KEYDOWN events and typed text becomes KEYPRESS events.
    ``on_draw`` only paints the session's cell grid; screens redraw the grid
    when the session refreshes.
    """

    def __init__(self, settings: Settings) -> None:
        d = settings.display
        super().__init__(
            width=d.columns * d.cell_width,
            height=d.rows * d.cell_height,
            title="Gloomdelve",
        )
        self.settings = settings
        self.background_color = arcade.color.BLACK
        self.grid = GridDisplay(d.columns, d.rows)
        self.session = GameSession(settings, self.grid)
        self._keys = build_key_translation(settings.input.mapping)
        self.session.switch_screen(StartScreen(self.session))
        logger.info("GameWindow initialized: %dx%d cells", d.columns, d.rows)

    def on_draw(self):  # noqa: N802 (arcade API)
        self.clear()
        d = self.settings.display
        for x, y, cell in self.grid.cells():
            left = x * d.cell_width
            bottom = self.height - (y + 1) * d.cell_height
            if cell.background != "black":
                arcade.draw_lrbt_rectangle_filled(
                    left, left + d.cell_width, bottom, bottom + d.cell_height, to_color(cell.background)
                )
            if cell.glyph.strip():
                arcade.draw_text(
                    cell.glyph,
                    left + d.cell_width / 2,
                    bottom + d.cell_height / 2,
                    to_color(cell.foreground),
                    d.font_size,
                    font_name=d.font_name,
                    anchor_x="center",
                    anchor_y="center",
                )

    def on_key_press(self, key: int, modifiers: int):  # noqa: N802 (arcade API)
        self.session.handle_input(InputType.KEYDOWN, self._keys.get(key, key))

    def on_text(self, text: str):  # noqa: N802 (pyglet API)
        for ch in text:
            if ch.isprintable():
                self.session.handle_input(InputType.KEYPRESS, ord(ch))
