from __future__ import annotations

import logging
import string
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Sequence, Set

from ..core import keys
from ..core.input import InputType
from ..entities import behaviours
from ..ui.display import Display
from .base import Screen

if TYPE_CHECKING:
    from ..core.session import GameSession
    from ..entities.entity import Entity
    from ..entities.items import Item

logger = logging.getLogger(__name__)

OkFunction = Callable[[Dict[int, "Item"]], bool]


class ItemListScreen(Screen):
    """Sub-screen listing items under letters a, b, c... by list position.

    Absent entries (None) keep their letter but are not shown, so a filtered
    view of an inventory still maps letters to inventory slots. The ``ok``
    callback receives ``{index: item}`` for the selection; a truthy return
    means the action used up the player's turn. With ``can_select_none`` a
    "0 - no item" row is shown and 0 completes with an empty selection.
    """

    def __init__(
        self,
        session: "GameSession",
        caption: str,
        ok: Optional[OkFunction] = None,
        *,
        can_select: bool = True,
        can_select_multiple: bool = False,
        can_select_none: bool = False,
    ) -> None:
        super().__init__(session)
        self.caption = caption
        self.ok = ok
        self.can_select = can_select
        self.can_select_multiple = can_select_multiple
        self.can_select_none = can_select_none
        self.player: Optional["Entity"] = None
        self.items: List[Optional["Item"]] = []
        self.selected_indices: Set[int] = set()

    def setup(self, player: "Entity", items: Sequence[Optional["Item"]]) -> None:
        """Bind the list to ``player`` and ``items``; must run before display."""
        self.player = player
        self.items = list(items)
        self.selected_indices = set()

    def render(self, display: Display) -> None:
        display.draw_text(0, 0, self.caption)
        row = 0
        if self.can_select and self.can_select_none:
            display.draw_text(0, 2, "0 - no item")
            row += 1
        for i, item in enumerate(self.items):
            if item is None or i >= len(string.ascii_lowercase):
                continue
            letter = string.ascii_lowercase[i]
            marked = self.can_select and self.can_select_multiple and i in self.selected_indices
            suffix = behaviours.equipped_label(self.player, item) if self.player is not None else ""
            display.draw_text(0, 2 + row, f"{letter} {'+' if marked else '-'} {item.describe()}{suffix}")
            row += 1

    def execute_ok(self) -> None:
        selected = {i: self.items[i] for i in sorted(self.selected_indices)}
        self.session.set_sub_screen(None)
        consumed = bool(self.ok(selected)) if self.ok is not None else False
        logger.debug("Item list '%s' completed with %s (turn used: %s)", self.caption, list(selected), consumed)
        if consumed and self.player is not None and self.player.map is not None:
            self.player.map.engine.unlock()

    def handle_input(self, input_type: InputType, data: int) -> None:
        if input_type != InputType.KEYDOWN:
            return
        if data == keys.ESCAPE or (data == keys.RETURN and (not self.can_select or not self.selected_indices)):
            self.session.set_sub_screen(None)
        elif data == keys.RETURN:
            self.execute_ok()
        elif self.can_select and self.can_select_none and data == keys.KEY_0:
            self.selected_indices = set()
            self.execute_ok()
        elif self.can_select:
            index = keys.letter_index(data)
            if index is None or index >= len(self.items) or self.items[index] is None:
                return
            if self.can_select_multiple:
                if index in self.selected_indices:
                    self.selected_indices.discard(index)
                else:
                    self.selected_indices.add(index)
                self.session.refresh()
            else:
                self.selected_indices.add(index)
                self.execute_ok()
