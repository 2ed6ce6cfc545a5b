from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.input import InputType
from ..ui.display import Display

if TYPE_CHECKING:
    from ..core.session import GameSession

logger = logging.getLogger(__name__)


class Screen:
    """Base class for all screens.

    Lifecycle hooks:
    - enter(): called once when the screen becomes active
    - exit(): called once when it is replaced or cleared
    - render(display): draw onto the cell grid; any number of times while active
    - handle_input(input_type, data): key code for KEYDOWN, character code
      for KEYPRESS; codes a screen does not know are ignored
    """

    def __init__(self, session: "GameSession") -> None:
        self.session = session

    def enter(self) -> None:
        logger.debug("%s.enter", type(self).__name__)

    def exit(self) -> None:
        logger.debug("%s.exit", type(self).__name__)

    def render(self, display: Display) -> None:
        pass

    def handle_input(self, input_type: InputType, data: int) -> None:
        pass
