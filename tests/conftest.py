import random
import sys
from pathlib import Path

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

import pytest  # noqa: E402

from gloomdelve.entities.behaviours import default_capabilities  # noqa: E402
from gloomdelve.entities.being import Being  # noqa: E402
from gloomdelve.world import tiles  # noqa: E402
from gloomdelve.world.map import Map  # noqa: E402


def open_level(width, height):
    """A walled room: floor everywhere except the border."""
    return [
        [tiles.WALL if x in (0, width - 1) or y in (0, height - 1) else tiles.FLOOR for x in range(width)]
        for y in range(height)
    ]


@pytest.fixture
def make_map():
    def _make(width=7, height=7, depth=1, **kwargs):
        kwargs.setdefault("rng", random.Random(0))
        return Map([open_level(width, height) for _ in range(depth)], **kwargs)

    return _make


@pytest.fixture
def make_being():
    registry = default_capabilities()

    def _make(name="monster", *, attack=1, defence=0, health=10, capabilities=("attacker", "destructible"), **props):
        data = {"name": name, "glyph": name[0], "attack": attack, "defence": defence, "health": health}
        data.update(props)
        return Being(data, registry.resolve(capabilities))

    return _make


@pytest.fixture
def make_player(make_being):
    def _make(**kwargs):
        kwargs.setdefault("attack", 10)
        kwargs.setdefault("health", 40)
        kwargs.setdefault(
            "capabilities",
            ("player_actor", "attacker", "destructible", "inventory_holder", "message_recipient"),
        )
        return make_being("player", **kwargs)

    return _make
