"""Key codes understood by the screens.

Values match ``arcade.key`` so the window adapter forwards codes unchanged
while screens stay importable without an OpenGL context.
"""
from __future__ import annotations

import string
from typing import Dict, Optional

RETURN = 65293
ENTER = RETURN
ESCAPE = 65307
LEFT = 65361
UP = 65362
RIGHT = 65363
DOWN = 65364
KEY_0 = 48
A = 97
Z = 122

# Names accepted in the settings input mapping
NAMES: Dict[str, int] = {
    "RETURN": RETURN,
    "ENTER": ENTER,
    "ESCAPE": ESCAPE,
    "LEFT": LEFT,
    "UP": UP,
    "RIGHT": RIGHT,
    "DOWN": DOWN,
}
NAMES.update({ch.upper(): A + i for i, ch in enumerate(string.ascii_lowercase)})


def letter_index(key_code: int) -> Optional[int]:
    """Map a letter key code to its alphabet index (a=0), else None."""
    if A <= key_code <= Z:
        return key_code - A
    return None
