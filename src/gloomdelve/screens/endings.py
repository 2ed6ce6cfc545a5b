from __future__ import annotations

import random
from typing import Optional

from ..core import keys
from ..core.input import InputType
from ..ui.display import Display
from .base import Screen

ROWS = 22


class _EndingScreen(Screen):
    """Terminal screen; Enter goes back to the title."""

    def handle_input(self, input_type: InputType, data: int) -> None:
        if input_type == InputType.KEYDOWN and data == keys.RETURN:
            from .start import StartScreen

            self.session.switch_screen(StartScreen(self.session))


class WinScreen(_EndingScreen):
    def __init__(self, session, rng: Optional[random.Random] = None) -> None:
        super().__init__(session)
        self.rng = rng or random.Random()

    def render(self, display: Display) -> None:
        for i in range(ROWS):
            r, g, b = (self.rng.randint(0, 255) for _ in range(3))
            display.draw_text(2, i + 1, f"%b{{#{r:02x}{g:02x}{b:02x}}}You win!")


class LoseScreen(_EndingScreen):
    def render(self, display: Display) -> None:
        for i in range(ROWS):
            display.draw_text(2, i + 1, "%b{red}You lose! :(")
