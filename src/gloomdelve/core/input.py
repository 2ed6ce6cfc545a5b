from __future__ import annotations

from enum import Enum


class InputType(str, Enum):
    """Discriminator for input events routed to screens.

    KEYDOWN carries a key code (see ``gloomdelve.core.keys``); KEYPRESS
    carries the character code of typed text such as ``>`` or ``,``.
    """

    KEYDOWN = "keydown"
    KEYPRESS = "keypress"
