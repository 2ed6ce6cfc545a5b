import pytest

from gloomdelve.entities.entity import Entity
from gloomdelve.entities.items import Item
from gloomdelve.world import tiles


def test_out_of_bounds_tiles_are_null(make_map):
    dmap = make_map(5, 4)
    assert dmap.get_tile(-1, 0, 0) is tiles.NULL
    assert dmap.get_tile(0, 0, 3) is tiles.NULL
    assert dmap.get_tile(1, 1, 0) is tiles.FLOOR
    dmap.set_tile(9, 9, 0, tiles.WALL)  # logged and ignored


def test_one_entity_per_cell(make_map):
    dmap = make_map()
    dmap.add_entity(Entity({"name": "a", "x": 1, "y": 1}))
    with pytest.raises(ValueError):
        dmap.add_entity(Entity({"name": "b", "x": 1, "y": 1}))
    with pytest.raises(ValueError):
        dmap.add_entity(Entity({"name": "c", "x": 10, "y": 1}))


def test_actors_are_scheduled_and_unscheduled(make_map, make_being):
    dmap = make_map()
    newt = make_being("newt", capabilities=("task_actor", "destructible"), x=2, y=2)
    rock = Entity({"name": "rock", "x": 3, "y": 3})
    dmap.add_entity(newt)
    dmap.add_entity(rock)
    assert newt in dmap.engine.scheduler
    assert rock not in dmap.engine.scheduler

    assert dmap.remove_entity(newt) is True
    assert newt not in dmap.engine.scheduler


def test_random_positions_avoid_occupied_cells(make_map):
    dmap = make_map(4, 4)  # 2x2 interior
    for i in range(4):
        dmap.add_entity_at_random_position(Entity({"name": str(i)}), 0)
    assert len(dmap.entities) == 4
    with pytest.raises(ValueError):
        dmap.random_floor_position(0)


def test_radius_query_and_items(make_map):
    dmap = make_map()
    near = Entity({"name": "near", "x": 2, "y": 2})
    far = Entity({"name": "far", "x": 5, "y": 5})
    dmap.add_entity(near)
    dmap.add_entity(far)
    assert [e.name for e in dmap.get_entities_within_radius(1, 1, 0, 1)] == ["near"]

    gem = Item({"name": "gem"})
    dmap.add_item(2, 2, 0, gem)
    assert dmap.get_items_at(2, 2, 0) == [gem]
    assert list(dmap.item_positions(0)) == [((2, 2, 0), [gem])]
    dmap.set_items_at(2, 2, 0, [])
    assert list(dmap.item_positions(0)) == []
