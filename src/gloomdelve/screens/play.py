from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from ..core import keys
from ..core.input import InputType
from ..entities import behaviours
from ..entities.being import Being
from ..ui.display import Display
from ..world.events import WorldEvent
from ..world.factory import create_world
from ..world.map import Map
from .base import Screen
from .endings import LoseScreen, WinScreen
from .item_list import ItemListScreen

if TYPE_CHECKING:
    from ..core.session import GameSession
    from ..entities.entity import Entity
    from ..entities.items import Item

logger = logging.getLogger(__name__)

MOVES: Dict[int, Tuple[int, int, int]] = {
    keys.LEFT: (-1, 0, 0),
    keys.RIGHT: (1, 0, 0),
    keys.UP: (0, -1, 0),
    keys.DOWN: (0, 1, 0),
}
DEPTH_MOVES: Dict[str, Tuple[int, int, int]] = {
    ">": (0, 0, 1),
    "<": (0, 0, -1),
}


class PlayScreen(Screen):
    """The dungeon itself.

    ``enter`` builds the world and starts the engine, which runs until the
    player's first turn. Each valid move key resolves a move attempt and then
    unlocks the engine so every other actor takes its turn. Once the player
    has died only Enter is accepted, leading to the lose screen.
    """

    def __init__(self, session: "GameSession", world: Optional[Map] = None, player: Optional[Being] = None) -> None:
        super().__init__(session)
        self.map: Optional[Map] = world
        self.player: Optional[Being] = player
        self.game_ended = False

    # ---- Lifecycle -------------------------------------------------------
    def enter(self) -> None:
        super().enter()
        if self.map is None:
            self.player = self.session.entity_templates.create("player")
            self.map = create_world(
                self.session.settings.world,
                self.player,
                self.session.entity_templates,
                self.session.item_templates,
                combat=self.session.settings.combat,
            )
        elif self.player is None:
            self.player = self.map.player
        self.map.display = self.session.display
        self.map.add_listener(self._on_world_event)
        self.map.engine.start()

    def exit(self) -> None:
        super().exit()
        if self.map is not None:
            self.map.engine.halt()
            self.map.remove_listener(self._on_world_event)
            self.map.display = None

    def set_game_ended(self, game_ended: bool) -> None:
        self.game_ended = game_ended

    def _on_world_event(self, event: WorldEvent, _map: Map, entity: Optional["Entity"]) -> None:
        if event is WorldEvent.PLAYER_TURN:
            self.session.refresh()
        elif event is WorldEvent.PLAYER_DIED:
            logger.info("Player died; waiting for acknowledgement")
            self.set_game_ended(True)
            self.session.refresh()
        elif event is WorldEvent.PLAYER_ESCAPED:
            self.session.switch_screen(WinScreen(self.session))

    # ---- Rendering -------------------------------------------------------
    def render(self, display: Display) -> None:
        dmap, player = self.map, self.player
        if dmap is None or player is None:
            return
        z = player.z
        for y in range(dmap.height):
            for x in range(dmap.width):
                tile = dmap.get_tile(x, y, z)
                display.draw(x, y, tile.glyph, tile.foreground, tile.background)
        for (x, y, _z), items in dmap.item_positions(z):
            top = items[-1]
            display.draw(x, y, top.glyph, top.foreground, top.background)
        for entity in dmap.entities:
            if entity.z == z:
                display.draw(entity.x, entity.y, entity.glyph, entity.foreground, entity.background)
        self._render_status(display, dmap.height)

    def _render_status(self, display: Display, top: int) -> None:
        player = self.player
        status = f"%c{{white}}HP: {player.health}/{player.max_health}  Depth: {player.z + 1}"
        if player.has_capability("food_consumer"):
            status += f"  {behaviours.hunger_state(player)}"
        display.draw_text(0, top, status)
        messages: List[str] = player.messages if player.has_capability("message_recipient") else []
        rows = max(0, display.height - top - 1)
        for i, message in enumerate(messages[-rows:] if rows else []):
            display.draw_text(0, top + 1 + i, message)

    # ---- Input -----------------------------------------------------------
    def handle_input(self, input_type: InputType, data: int) -> None:
        if self.game_ended:
            if input_type == InputType.KEYDOWN and data == keys.RETURN:
                self.session.switch_screen(LoseScreen(self.session))
            # Nothing else may reach the world once the game is over
            return

        if input_type == InputType.KEYDOWN:
            delta = MOVES.get(data)
        elif input_type == InputType.KEYPRESS:
            if not 0 <= data <= sys.maxunicode:
                return
            char = chr(data)
            if char in MENUS:
                MENUS[char](self)
                return
            delta = DEPTH_MOVES.get(char)
        else:
            delta = None
        if delta is None:
            return
        self.move(*delta)
        self._end_turn()

    def move(self, dx: int, dy: int, dz: int) -> bool:
        player = self.player
        behaviours.clear_messages(player)
        return player.try_move(player.x + dx, player.y + dy, player.z + dz)

    def _end_turn(self) -> None:
        if self.game_ended or self.session.active_screen is not self:
            return
        self.map.engine.unlock()

    # ---- Item menus ------------------------------------------------------
    def _notify(self, message: str) -> None:
        behaviours.send_message(self.player, message)
        self.session.refresh()

    def _show_item_screen(self, screen: ItemListScreen, items: List[Optional["Item"]], empty_message: str) -> None:
        behaviours.clear_messages(self.player)
        if not any(item is not None for item in items):
            self._notify(empty_message)
            return
        screen.setup(self.player, items)
        self.session.set_sub_screen(screen)

    def show_inventory(self) -> None:
        screen = ItemListScreen(self.session, "Your inventory", can_select=False)
        self._show_item_screen(screen, self.player.items, "You are not carrying anything.")

    def show_drop(self) -> None:
        def ok(selected: Dict[int, "Item"]) -> bool:
            for index, item in selected.items():
                behaviours.drop_item(self.player, index)
                behaviours.send_message(self.player, f"You drop {item.describe_the()}.")
            return True

        screen = ItemListScreen(self.session, "Choose the item you wish to drop", ok)
        self._show_item_screen(screen, self.player.items, "You have nothing to drop.")

    def show_eat(self) -> None:
        def ok(selected: Dict[int, "Item"]) -> bool:
            return all(behaviours.eat(self.player, index) for index in selected)

        edible = [item if item is not None and item.has_capability("edible") else None for item in self.player.items]
        screen = ItemListScreen(self.session, "Choose the item you wish to eat", ok)
        self._show_item_screen(screen, edible, "You have nothing to eat.")

    def show_pickup(self) -> None:
        player = self.player
        floor = self.map.get_items_at(player.x, player.y, player.z)
        if len(floor) == 1:
            behaviours.clear_messages(player)
            item = floor[0]
            if behaviours.pickup_items(player, [0]):
                behaviours.send_message(player, f"You pick up {item.describe_a()}.")
                self.session.refresh()
                self._end_turn()
            else:
                self._notify("Your inventory is full! Nothing was picked up.")
            return

        def ok(selected: Dict[int, "Item"]) -> bool:
            if not behaviours.pickup_items(player, selected.keys()):
                behaviours.send_message(player, "Your inventory is full! Not all items were picked up.")
            return True

        screen = ItemListScreen(self.session, "Choose the items you wish to pick up", ok, can_select_multiple=True)
        self._show_item_screen(screen, list(floor), "There is nothing here to pick up.")

    def _show_equip(
        self,
        flag: str,
        caption: str,
        empty_message: str,
        put_on: Callable[["Entity", "Item"], None],
        put_off: Callable[["Entity"], None],
        on_message: str,
        off_message: str,
    ) -> None:
        """List inventory items with ``flag`` set; 0 takes the current one off."""
        if not self.player.has_capability("equipper"):
            return

        def ok(selected: Dict[int, "Item"]) -> bool:
            if not selected:
                put_off(self.player)
                behaviours.send_message(self.player, off_message)
                return True
            item = next(iter(selected.values()))
            put_on(self.player, item)
            behaviours.send_message(self.player, on_message.format(item=item.describe_the()))
            return True

        candidates = [
            item if item is not None and item.has_capability("equippable") and getattr(item, flag) else None
            for item in self.player.items
        ]
        screen = ItemListScreen(self.session, caption, ok, can_select_none=True)
        self._show_item_screen(screen, candidates, empty_message)

    def show_wield(self) -> None:
        self._show_equip(
            "wieldable",
            "Choose the item you wish to wield",
            "You have nothing to wield.",
            behaviours.wield,
            behaviours.unwield,
            "You are wielding {item}.",
            "You are empty handed.",
        )

    def show_wear(self) -> None:
        self._show_equip(
            "wearable",
            "Choose the item you wish to wear",
            "You have nothing to wear.",
            behaviours.wear,
            behaviours.take_off,
            "You are wearing {item}.",
            "You are not wearing anything.",
        )


MENUS = {
    "i": PlayScreen.show_inventory,
    "d": PlayScreen.show_drop,
    "e": PlayScreen.show_eat,
    ",": PlayScreen.show_pickup,
    "w": PlayScreen.show_wield,
    "W": PlayScreen.show_wear,
}
