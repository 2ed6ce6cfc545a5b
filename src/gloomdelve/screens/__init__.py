from .base import Screen
from .endings import LoseScreen, WinScreen
from .item_list import ItemListScreen
from .play import PlayScreen
from .start import StartScreen

__all__ = [
    "Screen",
    "StartScreen",
    "PlayScreen",
    "WinScreen",
    "LoseScreen",
    "ItemListScreen",
]
