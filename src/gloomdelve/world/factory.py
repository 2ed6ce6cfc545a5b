from __future__ import annotations

import logging
import random
from typing import Optional

from ..core.settings import CombatSettings, WorldSettings
from ..entities.entity import Entity
from ..entities.templates import TemplateRepository
from .builder import Builder
from .map import Map

logger = logging.getLogger(__name__)


def create_world(
    world: WorldSettings,
    player: Entity,
    entity_templates: TemplateRepository,
    item_templates: TemplateRepository,
    *,
    combat: Optional[CombatSettings] = None,
) -> Map:
    """Build the dungeon, place the player on the top level and stock every level.

    The player is added first so it takes the first turn once the engine starts.
    """
    rng = random.Random(world.seed)
    builder = Builder(world.width, world.height, world.depth, seed=rng.randrange(2**32))
    dmap = Map(builder.get_tiles(), rng=rng, combat=combat, item_templates=item_templates)
    dmap.add_entity_at_random_position(player, 0)
    for z in range(dmap.depth):
        for _ in range(world.monsters_per_level):
            dmap.add_entity_at_random_position(entity_templates.create_random(rng), z)
        for _ in range(world.items_per_level):
            dmap.add_item_at_random_position(item_templates.create_random(rng), z)
    logger.info(
        "World built: %dx%dx%d, %d entities, seed=%s",
        dmap.width,
        dmap.height,
        dmap.depth,
        len(dmap.entities),
        world.seed,
    )
    return dmap
