from enum import Enum, auto


class WorldEvent(Enum):
    """Events a Map emits to the screen layer."""

    PLAYER_TURN = auto()
    ENTITY_REMOVED = auto()
    PLAYER_DIED = auto()
    PLAYER_ESCAPED = auto()
