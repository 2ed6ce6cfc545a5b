from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ..world import tiles
from ..world.events import WorldEvent
from .behaviours import equipment_bonus, send_message
from .capabilities import Capability
from .entity import Entity

logger = logging.getLogger(__name__)


class Being(Entity):
    """An entity with health, attack and defence that moves and fights.

    Attributes:
        health: Current hit points. Not clamped below zero; <= 0 means dead.
        max_health: Upper bound applied at construction.
        attack: Damage dealt before the target's defence is subtracted.
        defence: Subtracted from incoming attack values.
    """

    def __init__(
        self,
        props: Optional[Mapping[str, Any]] = None,
        capabilities: Iterable[Capability] = (),
    ) -> None:
        props = dict(props or {})
        props.setdefault("health", 3)
        props.setdefault("defence", 0)
        props.setdefault("attack", 1)
        props.setdefault("max_health", props["health"])
        self._dead = False
        super().__init__(props, capabilities)
        self.health = min(self.health, self.max_health)

    @property
    def is_player(self) -> bool:
        return self.has_capability("player_actor")

    @property
    def alive(self) -> bool:
        return not self._dead and self.health > 0

    def attack_value(self) -> int:
        """Base attack plus whatever the being has equipped."""
        return self.attack + equipment_bonus(self, "attack_value")

    def defence_value(self) -> int:
        return self.defence + equipment_bonus(self, "defence_value")

    # ---- Movement --------------------------------------------------------
    def new_position(self, x: int, y: int, z: int) -> None:
        """Erase the being from its old cell, move it, and draw it again."""
        display = self.map.display if self.map is not None else None
        if display is not None:
            old = self.map.get_tile(self.x, self.y, self.z)
            display.draw(self.x, self.y, old.glyph, old.foreground, old.background)
        self.set_position(x, y, z)
        self.draw()

    def can_occupy(self, x: int, y: int, z: int) -> bool:
        """Resolve an attempt to step onto (x, y, z).

        Returns True when the cell is walkable and empty. An occupied cell is
        never free: if the occupant is another Being, combat happens here as a
        side effect, but the mover stays where it is.
        """
        dmap = self.map
        if dmap is None:
            return False
        tile = dmap.get_tile(x, y, z)
        occupant = dmap.get_entity_at(x, y, z)
        if occupant is None:
            return tile.is_walkable()
        if occupant is not self and isinstance(occupant, Being):
            self.combat(occupant)
        return False

    def try_move(self, x: int, y: int, z: int) -> bool:
        """Move to (x, y, z) if possible; returns True when the being moved.

        A change of depth is only possible from stairs leading that way and
        keeps x/y. Taking the stairs down on the deepest level leaves the
        dungeon.
        """
        if self.map is None:
            return False
        if z != self.z:
            return self._change_level(z)
        if self.can_occupy(x, y, z):
            self.new_position(x, y, z)
            return True
        return False

    def _change_level(self, z: int) -> bool:
        here = self.map.get_tile(self.x, self.y, self.z)
        if z > self.z and here is not tiles.STAIRS_DOWN:
            send_message(self, "You can't go down here!")
            return False
        if z < self.z and here is not tiles.STAIRS_UP:
            send_message(self, "You can't go up here!")
            return False
        if z >= self.map.depth:
            if self.is_player:
                logger.info("%s escaped the dungeon", self.name)
                self.map.emit(WorldEvent.PLAYER_ESCAPED, self)
            return False
        if not self.can_occupy(self.x, self.y, z):
            return False
        verb = "descend" if z > self.z else "ascend"
        self.new_position(self.x, self.y, z)
        send_message(self, f"You {verb} to level {z + 1}!")
        return True

    # ---- Combat ----------------------------------------------------------
    def combat(self, defender: "Being") -> None:
        """One exchange of blows with ``defender``.

        The defender loses the attacker's attack value minus its own defence
        value, unclamped. A non-player attacker then takes the defender's
        counterblow, computed the same way. Both values include equipment.
        Whether a defender killed by the first blow still strikes back follows
        ``combat.dead_defender_retaliates`` on the map.
        """
        damage = self.attack_value() - defender.defence_value()
        defender.health -= damage
        logger.debug("%s hits %s for %d (hp now %d)", self.name, defender.name, damage, defender.health)
        send_message(self, f"You strike the {defender.name} for {damage} damage!")
        send_message(defender, f"The {self.name} strikes you for {damage} damage!")

        defender_died = defender.health <= 0
        if defender_died:
            defender.die(killer=self)

        if self.is_player:
            return
        if defender_died and not self._dead_defender_retaliates():
            return
        counter = defender.attack_value() - self.defence_value()
        self.health -= counter
        logger.debug("%s strikes back at %s for %d (hp now %d)", defender.name, self.name, counter, self.health)
        send_message(defender, f"You strike the {self.name} for {counter} damage!")
        send_message(self, f"The {defender.name} strikes you for {counter} damage!")
        if self.health <= 0:
            self.die(killer=defender)

    def _dead_defender_retaliates(self) -> bool:
        rules = self.map.combat if self.map is not None else None
        return True if rules is None else rules.dead_defender_retaliates

    def die(self, killer: Optional[Entity] = None) -> bool:
        """Remove the being from play. Only the first call has any effect."""
        if self._dead:
            return False
        self._dead = True
        dmap = self.map
        logger.info("%s died at %s", self.name, self.position)
        self.raise_event("on_death", killer)
        if killer is not None:
            send_message(killer, f"You kill the {self.name}!")
        if dmap is None:
            return True
        dmap.remove_entity(self)
        if self.is_player:
            send_message(self, "You have died... Press [Enter] to continue!")
            # Nothing else may take a turn once the player is gone
            dmap.engine.halt()
            dmap.emit(WorldEvent.PLAYER_DIED, self)
        return True
