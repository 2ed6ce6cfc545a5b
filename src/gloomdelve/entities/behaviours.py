"""Built-in capabilities and the helpers screens use to drive them."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Optional

from ..world.events import WorldEvent
from .capabilities import Capability, CapabilityRegistry

if TYPE_CHECKING:
    from .being import Being
    from .entity import Entity
    from .items import Item

logger = logging.getLogger(__name__)

CARDINALS = ((-1, 0), (1, 0), (0, -1), (0, 1))


# ---- Messages ---------------------------------------------------------------
def _init_messages(entity: "Entity", _props: Mapping[str, Any]) -> None:
    entity.messages = []


def send_message(recipient: "Entity", message: str) -> None:
    if recipient.has_capability("message_recipient"):
        recipient.messages.append(message)


def send_message_nearby(entity: "Entity", message: str, radius: int = 5) -> None:
    """Tell every message recipient around ``entity`` (itself excluded)."""
    if entity.map is None:
        return
    for other in entity.map.get_entities_within_radius(entity.x, entity.y, entity.z, radius):
        if other is not entity:
            send_message(other, message)


def clear_messages(recipient: "Entity") -> None:
    if recipient.has_capability("message_recipient"):
        recipient.messages.clear()


# ---- Player -----------------------------------------------------------------
def _player_act(player: "Being") -> None:
    if player.has_capability("food_consumer"):
        add_turn_hunger(player)
    if not player.alive or player.map is None:
        return
    # Wait for input; the screen layer unlocks once a valid action is made
    player.map.engine.lock()
    player.map.emit(WorldEvent.PLAYER_TURN, player)


# ---- Sight ------------------------------------------------------------------
def can_see(entity: "Entity", other: "Entity") -> bool:
    """Square sight check on the same level within ``sight_radius``."""
    if not entity.has_capability("sight") or entity.z != other.z:
        return False
    radius = entity.sight_radius
    return abs(entity.x - other.x) <= radius and abs(entity.y - other.y) <= radius


# ---- Tasks ------------------------------------------------------------------
def _sign(n: int) -> int:
    return (n > 0) - (n < 0)


def _can_hunt(entity: "Being") -> bool:
    if not entity.has_capability("attacker"):
        return False
    target = entity.map.player if entity.map is not None else None
    return target is not None and target.alive and can_see(entity, target)


def _hunt(entity: "Being") -> None:
    target = entity.map.player
    dx, dy = target.x - entity.x, target.y - entity.y
    steps = [(_sign(dx), 0), (0, _sign(dy))]
    if abs(dy) > abs(dx):
        steps.reverse()
    for sx, sy in steps:
        if (sx, sy) == (0, 0):
            continue
        nx, ny = entity.x + sx, entity.y + sy
        occupant = entity.map.get_entity_at(nx, ny, entity.z)
        # Only bump into the quarry, never into other monsters on the way
        if occupant is not None and occupant is not target:
            continue
        if occupant is target or entity.map.get_tile(nx, ny, entity.z).is_walkable():
            entity.try_move(nx, ny, entity.z)
            return


def _wander(entity: "Being") -> None:
    dx, dy = entity.map.rng.choice(CARDINALS)
    entity.try_move(entity.x + dx, entity.y + dy, entity.z)


TASKS = {
    "hunt": (_can_hunt, _hunt),
    "wander": (lambda entity: entity.map is not None, _wander),
}


def _init_tasks(entity: "Entity", _props: Mapping[str, Any]) -> None:
    unknown = [t for t in entity.tasks if t not in TASKS]
    if unknown:
        raise ValueError(f"{entity.name!r} has unknown tasks: {unknown}")


def _task_act(entity: "Being") -> None:
    for task in entity.tasks:
        can_do, do = TASKS[task]
        if can_do(entity):
            do(entity)
            return


# ---- Corpses ----------------------------------------------------------------
def _drop_corpse(entity: "Entity", _killer: Optional["Entity"] = None) -> None:
    dmap = entity.map
    if dmap is None or dmap.item_templates is None:
        return
    if dmap.rng.random() * 100 >= entity.corpse_drop_rate:
        return
    corpse = dmap.item_templates.create(
        "corpse", name=f"{entity.name} corpse", foreground=entity.foreground
    )
    dmap.add_item(entity.x, entity.y, entity.z, corpse)
    logger.debug("%s dropped a corpse at %s", entity.name, entity.position)


# ---- Inventory --------------------------------------------------------------
def _init_inventory(entity: "Entity", _props: Mapping[str, Any]) -> None:
    entity.items = [None] * int(entity.inventory_slots)


def can_add_item(holder: "Entity") -> bool:
    return any(slot is None for slot in holder.items)


def add_item(holder: "Entity", item: "Item") -> bool:
    for i, slot in enumerate(holder.items):
        if slot is None:
            holder.items[i] = item
            return True
    return False


def remove_item(holder: "Entity", index: int) -> Optional["Item"]:
    item = holder.items[index]
    holder.items[index] = None
    if item is not None and holder.has_capability("equipper"):
        unequip(holder, item)
    return item


def pickup_items(holder: "Entity", indices: Iterable[int]) -> bool:
    """Move floor items (by index at the holder's feet) into the inventory.

    Returns True only if every requested item fit.
    """
    dmap = holder.map
    floor: List[Optional["Item"]] = list(dmap.get_items_at(holder.x, holder.y, holder.z))
    added = 0
    for index in sorted(set(indices)):
        item = floor[index]
        if item is not None and add_item(holder, item):
            floor[index] = None
            added += 1
        else:
            break
    dmap.set_items_at(holder.x, holder.y, holder.z, [i for i in floor if i is not None])
    return added == len(set(indices))


def drop_item(holder: "Entity", index: int) -> Optional["Item"]:
    item = holder.items[index]
    if item is None:
        return None
    if holder.map is not None:
        holder.map.add_item(holder.x, holder.y, holder.z, item)
    return remove_item(holder, index)


# ---- Food -------------------------------------------------------------------
def add_turn_hunger(consumer: "Being") -> None:
    consumer.fullness -= consumer.fullness_depletion_rate
    if consumer.fullness <= 0:
        send_message(consumer, "You have died of starvation!")
        consumer.die()


def modify_fullness(consumer: "Entity", amount: int) -> None:
    consumer.fullness = min(consumer.max_fullness, consumer.fullness + amount)


def hunger_state(consumer: "Entity") -> str:
    percent = consumer.fullness * 100 // max(1, consumer.max_fullness)
    if percent <= 5:
        return "Starving"
    if percent <= 25:
        return "Hungry"
    if percent >= 95:
        return "Oversatiated"
    if percent >= 75:
        return "Full"
    return "Not Hungry"


def _init_edible(item: "Entity", _props: Mapping[str, Any]) -> None:
    item.max_consumptions = item.consumptions


def eat(consumer: "Entity", holder_index: int) -> bool:
    """Eat one portion of the inventory item at ``holder_index``.

    The item leaves the inventory once its last portion is gone. Returns
    False when the slot holds nothing edible.
    """
    item = consumer.items[holder_index]
    if item is None or not item.has_capability("edible") or item.consumptions <= 0:
        return False
    item.consumptions -= 1
    modify_fullness(consumer, item.food_value)
    send_message(consumer, f"You eat {item.describe_the()}.")
    if item.consumptions <= 0:
        remove_item(consumer, holder_index)
    return True


# ---- Equipment ---------------------------------------------------------------
def _init_equipper(entity: "Entity", _props: Mapping[str, Any]) -> None:
    entity.weapon = None
    entity.armour = None


def equipment_bonus(entity: "Entity", attribute: str) -> int:
    """Sum ``attribute`` over the weapon and armour ``entity`` has on."""
    if not entity.has_capability("equipper"):
        return 0
    return sum(getattr(item, attribute) for item in (entity.weapon, entity.armour) if item is not None)


def wield(equipper: "Entity", item: "Item") -> None:
    unequip(equipper, item)
    equipper.weapon = item


def unwield(equipper: "Entity") -> None:
    equipper.weapon = None


def wear(equipper: "Entity", item: "Item") -> None:
    unequip(equipper, item)
    equipper.armour = item


def take_off(equipper: "Entity") -> None:
    equipper.armour = None


def unequip(equipper: "Entity", item: "Item") -> None:
    """Take ``item`` out of whichever equipment slot holds it."""
    if equipper.weapon is item:
        unwield(equipper)
    if equipper.armour is item:
        take_off(equipper)


def equipped_label(equipper: "Entity", item: "Item") -> str:
    if not equipper.has_capability("equipper"):
        return ""
    if equipper.weapon is item:
        return " (wielding)"
    if equipper.armour is item:
        return " (wearing)"
    return ""


BUILTIN_CAPABILITIES = (
    Capability("player_actor", act=_player_act),
    Capability("task_actor", defaults={"tasks": ["wander"], "speed": 1000}, init=_init_tasks, act=_task_act),
    Capability("attacker"),
    Capability("destructible"),
    Capability("corpse_dropper", defaults={"corpse_drop_rate": 100}, listeners={"on_death": _drop_corpse}),
    Capability("sight", defaults={"sight_radius": 5}),
    Capability("inventory_holder", defaults={"inventory_slots": 10}, init=_init_inventory),
    Capability("message_recipient", init=_init_messages),
    Capability(
        "food_consumer",
        defaults={"max_fullness": 1000, "fullness": 500, "fullness_depletion_rate": 1},
    ),
    Capability("edible", defaults={"food_value": 5, "consumptions": 1}, init=_init_edible),
    Capability("equipper", init=_init_equipper),
    Capability(
        "equippable",
        defaults={"attack_value": 0, "defence_value": 0, "wieldable": False, "wearable": False},
    ),
)


def default_capabilities() -> CapabilityRegistry:
    return CapabilityRegistry(BUILTIN_CAPABILITIES)
