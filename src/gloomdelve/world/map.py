from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional, Tuple

from . import tiles
from .engine import Engine
from .events import WorldEvent
from .tiles import Tile

if TYPE_CHECKING:
    from ..core.settings import CombatSettings
    from ..entities.entity import Entity
    from ..entities.items import Item
    from ..entities.templates import TemplateRepository
    from ..ui.display import Display

logger = logging.getLogger(__name__)

Position = Tuple[int, int, int]
Listener = Callable[[WorldEvent, "Map", Optional["Entity"]], None]


class Map:
    """A stack of tile levels plus everything standing on them.

    Tiles are indexed ``tiles[z][y][x]``. Entities are keyed by position, so
    at most one entity occupies a cell; items pile up per cell. The map owns
    the world engine and schedules every entity that can act.
    """

    def __init__(
        self,
        tile_levels: List[List[List[Tile]]],
        *,
        engine: Optional[Engine] = None,
        rng: Optional[random.Random] = None,
        combat: Optional["CombatSettings"] = None,
        item_templates: Optional["TemplateRepository"] = None,
    ) -> None:
        if not tile_levels or not tile_levels[0] or not tile_levels[0][0]:
            raise ValueError("Map requires at least one non-empty level")
        self._tiles = tile_levels
        self.depth = len(tile_levels)
        self.height = len(tile_levels[0])
        self.width = len(tile_levels[0][0])
        self.engine = engine or Engine()
        self.rng = rng or random.Random()
        self.combat = combat
        self.item_templates = item_templates
        self.display: Optional["Display"] = None
        self.player: Optional["Entity"] = None
        self._entities: Dict[Position, "Entity"] = {}
        self._items: Dict[Position, List["Item"]] = {}
        self._listeners: List[Listener] = []

    # ---- Events ----------------------------------------------------------
    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event: WorldEvent, entity: Optional["Entity"] = None) -> None:
        for listener in list(self._listeners):
            listener(event, self, entity)

    # ---- Tiles -----------------------------------------------------------
    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def get_tile(self, x: int, y: int, z: int) -> Tile:
        if not self.in_bounds(x, y, z):
            return tiles.NULL
        return self._tiles[z][y][x]

    def set_tile(self, x: int, y: int, z: int, tile: Tile) -> None:
        if not self.in_bounds(x, y, z):
            logger.error("Attempt to write out-of-bounds tile at (%d,%d,%d)", x, y, z)
            return
        self._tiles[z][y][x] = tile

    def is_empty_floor(self, x: int, y: int, z: int) -> bool:
        return self.get_tile(x, y, z) is tiles.FLOOR and self.get_entity_at(x, y, z) is None

    def random_floor_position(self, z: int) -> Position:
        candidates = [
            (x, y, z)
            for y in range(self.height)
            for x in range(self.width)
            if self.is_empty_floor(x, y, z)
        ]
        if not candidates:
            raise ValueError(f"No empty floor left on level {z}")
        return self.rng.choice(candidates)

    # ---- Entities --------------------------------------------------------
    @property
    def entities(self) -> List["Entity"]:
        return list(self._entities.values())

    def get_entity_at(self, x: int, y: int, z: int) -> Optional["Entity"]:
        return self._entities.get((x, y, z))

    def get_entities_within_radius(self, cx: int, cy: int, z: int, radius: int) -> Iterator["Entity"]:
        for entity in self._entities.values():
            if entity.z == z and abs(entity.x - cx) <= radius and abs(entity.y - cy) <= radius:
                yield entity

    def add_entity(self, entity: "Entity") -> None:
        pos = entity.position
        if not self.in_bounds(*pos):
            raise ValueError(f"Entity {entity.name!r} placed out of bounds at {pos}")
        if pos in self._entities:
            raise ValueError(f"Cell {pos} already occupied by {self._entities[pos].name!r}")
        entity.map = self
        self._entities[pos] = entity
        if entity.has_capability("player_actor"):
            self.player = entity
        if entity.is_actor:
            self.engine.scheduler.add(entity)
        logger.debug("Added %s at %s", entity.name, pos)

    def add_entity_at_random_position(self, entity: "Entity", z: int) -> None:
        entity.x, entity.y, entity.z = self.random_floor_position(z)
        self.add_entity(entity)

    def remove_entity(self, entity: "Entity") -> bool:
        """Take an entity off the map; returns False if it was not on it."""
        pos = entity.position
        if self._entities.get(pos) is not entity:
            return False
        del self._entities[pos]
        self.engine.scheduler.remove(entity)
        logger.debug("Removed %s from %s", entity.name, pos)
        self.emit(WorldEvent.ENTITY_REMOVED, entity)
        return True

    def update_entity_position(self, entity: "Entity", old: Position) -> None:
        if self._entities.get(old) is entity:
            del self._entities[old]
        pos = entity.position
        if not self.in_bounds(*pos):
            raise ValueError(f"Entity {entity.name!r} moved out of bounds to {pos}")
        if self._entities.get(pos) not in (None, entity):
            raise ValueError(f"Cell {pos} already occupied")
        self._entities[pos] = entity

    # ---- Items -----------------------------------------------------------
    def get_items_at(self, x: int, y: int, z: int) -> List["Item"]:
        return list(self._items.get((x, y, z), []))

    def set_items_at(self, x: int, y: int, z: int, items: List["Item"]) -> None:
        if items:
            self._items[(x, y, z)] = list(items)
        else:
            self._items.pop((x, y, z), None)

    def add_item(self, x: int, y: int, z: int, item: "Item") -> None:
        self._items.setdefault((x, y, z), []).append(item)

    def add_item_at_random_position(self, item: "Item", z: int) -> None:
        x, y, z = self.random_floor_position(z)
        self.add_item(x, y, z, item)

    def item_positions(self, z: int) -> Iterator[Tuple[Position, List["Item"]]]:
        for pos, items in self._items.items():
            if pos[2] == z and items:
                yield pos, list(items)
