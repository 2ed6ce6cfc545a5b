from gloomdelve.entities import behaviours
from gloomdelve.entities.templates import entity_repository, item_repository
from gloomdelve.world.events import WorldEvent


def _world(make_map):
    dmap = make_map(item_templates=item_repository())
    return dmap, entity_repository(), dmap.item_templates


def test_kobold_hunts_adjacent_player_and_dies_to_retaliation(make_map):
    dmap, entities, _items = _world(make_map)
    player = entities.create("player", x=1, y=1)
    kobold = entities.create("kobold", x=2, y=1)
    dmap.add_entity(player)
    dmap.add_entity(kobold)

    kobold.act()

    assert player.health == 36
    assert kobold.health == -4
    assert dmap.get_entity_at(2, 1, 0) is None
    assert "The kobold strikes you for 4 damage!" in player.messages
    assert "You kill the kobold!" in player.messages
    corpse = dmap.get_items_at(2, 1, 0)
    assert [c.name for c in corpse] == ["kobold corpse"]
    assert corpse[0].foreground == kobold.foreground


def test_hunter_steps_toward_visible_player(make_map):
    dmap, entities, _items = _world(make_map)
    player = entities.create("player", x=1, y=1)
    kobold = entities.create("kobold", x=4, y=2)
    dmap.add_entity(player)
    dmap.add_entity(kobold)

    kobold.act()
    assert kobold.position == (3, 2, 0)


def test_wanderer_moves_one_step_or_stays(make_map):
    dmap, entities, _items = _world(make_map)
    newt = entities.create("newt", x=3, y=3)
    dmap.add_entity(newt)
    for _ in range(10):
        before = newt.position
        newt.act()
        dx, dy = abs(newt.x - before[0]), abs(newt.y - before[1])
        assert dx + dy <= 1
        assert dmap.get_entity_at(*newt.position) is newt


def test_player_turn_locks_engine_and_emits(make_map):
    dmap, entities, _items = _world(make_map)
    events = []
    dmap.add_listener(lambda event, _m, entity: events.append(event))
    player = entities.create("player", x=1, y=1)
    dmap.add_entity(player)

    dmap.engine.start()
    assert dmap.engine.locked
    assert events == [WorldEvent.PLAYER_TURN]
    assert player.fullness == 499


def test_starvation_kills_player(make_map):
    dmap, entities, _items = _world(make_map)
    events = []
    dmap.add_listener(lambda event, _m, entity: events.append(event))
    player = entities.create("player", x=1, y=1, fullness=1)
    dmap.add_entity(player)

    dmap.engine.start()
    assert not player.alive
    assert dmap.engine.halted
    assert WorldEvent.PLAYER_DIED in events
    assert WorldEvent.PLAYER_TURN not in events
    assert "You have died of starvation!" in player.messages


def test_pickup_and_drop(make_map):
    dmap, entities, items = _world(make_map)
    player = entities.create("player", x=2, y=2, inventory_slots=2)
    dmap.add_entity(player)
    for name in ("apple", "rock", "melon"):
        dmap.add_item(2, 2, 0, items.create(name))

    assert behaviours.pickup_items(player, [0, 2]) is True
    assert [i.name for i in player.items] == ["apple", "melon"]
    assert [i.name for i in dmap.get_items_at(2, 2, 0)] == ["rock"]

    assert behaviours.pickup_items(player, [0]) is False
    assert [i.name for i in dmap.get_items_at(2, 2, 0)] == ["rock"]

    dropped = behaviours.drop_item(player, 0)
    assert dropped.name == "apple"
    assert player.items[0] is None
    assert [i.name for i in dmap.get_items_at(2, 2, 0)] == ["rock", "apple"]
    assert behaviours.drop_item(player, 0) is None


def test_eating_caps_fullness_and_consumes_portions(make_map):
    dmap, entities, items = _world(make_map)
    player = entities.create("player", x=2, y=2, fullness=990)
    dmap.add_entity(player)
    melon = items.create("melon")
    behaviours.add_item(player, melon)

    assert behaviours.eat(player, 0) is True
    assert player.fullness == 1000
    assert melon.describe() == "partly eaten melon"
    for _ in range(3):
        behaviours.eat(player, 0)
    assert player.items[0] is None
    assert behaviours.eat(player, 0) is False

    behaviours.add_item(player, items.create("rock"))
    assert behaviours.eat(player, 0) is False


def test_hunger_state_thresholds(make_map):
    _dmap, entities, _items = _world(make_map)
    player = entities.create("player")
    for fullness, state in ((50, "Starving"), (200, "Hungry"), (500, "Not Hungry"), (800, "Full"), (960, "Oversatiated")):
        player.fullness = fullness
        assert behaviours.hunger_state(player) == state


def test_messages_only_reach_recipients(make_map):
    dmap, entities, _items = _world(make_map)
    player = entities.create("player", x=1, y=1)
    newt = entities.create("newt", x=2, y=1)
    dmap.add_entity(player)
    dmap.add_entity(newt)

    behaviours.send_message(newt, "ignored")
    behaviours.send_message_nearby(newt, "A newt squeaks.")
    assert player.messages == ["A newt squeaks."]
    behaviours.clear_messages(player)
    assert player.messages == []


def test_wield_and_wear_fill_separate_slots(make_map):
    dmap, entities, items = _world(make_map)
    player = entities.create("player", x=2, y=2)
    dmap.add_entity(player)
    staff = items.create("staff")
    tunic = items.create("tunic")
    behaviours.add_item(player, staff)
    behaviours.add_item(player, tunic)

    behaviours.wield(player, staff)
    behaviours.wear(player, tunic)
    assert player.weapon is staff and player.armour is tunic
    assert player.attack_value() == 15
    assert player.defence_value() == 5
    assert behaviours.equipped_label(player, staff) == " (wielding)"

    behaviours.wear(player, staff)
    assert player.weapon is None and player.armour is staff

    behaviours.take_off(player)
    assert player.defence_value() == 0


def test_dropping_equipped_item_unequips_it(make_map):
    dmap, entities, items = _world(make_map)
    player = entities.create("player", x=2, y=2)
    dmap.add_entity(player)
    sword = items.create("sword")
    behaviours.add_item(player, sword)
    behaviours.wield(player, sword)

    behaviours.drop_item(player, 0)
    assert player.weapon is None
    assert player.attack_value() == 10


def test_only_attackers_hunt(make_map):
    dmap, entities, _items = _world(make_map)
    player = entities.create("player", x=1, y=1)
    dmap.add_entity(player)
    entities.define(
        "gazer",
        {"name": "gazer", "glyph": "e", "tasks": ["hunt"], "capabilities": ["task_actor", "sight", "destructible"]},
    )
    gazer = entities.create("gazer", x=4, y=2)
    dmap.add_entity(gazer)

    gazer.act()
    assert gazer.position == (4, 2, 0)
