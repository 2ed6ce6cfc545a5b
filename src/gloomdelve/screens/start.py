from __future__ import annotations

import logging

from ..core import keys
from ..core.input import InputType
from ..ui.display import Display
from .base import Screen
from .play import PlayScreen

logger = logging.getLogger(__name__)


class StartScreen(Screen):
    """Title screen; Enter starts a new game."""

    def render(self, display: Display) -> None:
        display.draw_text(1, 1, "%c{yellow}Gloomdelve")
        display.draw_text(1, 2, "Press [Enter] to start!")

    def handle_input(self, input_type: InputType, data: int) -> None:
        if input_type == InputType.KEYDOWN and data == keys.RETURN:
            logger.info("Starting a new game")
            self.session.switch_screen(PlayScreen(self.session))
