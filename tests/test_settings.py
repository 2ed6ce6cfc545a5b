from pathlib import Path

import pytest

from gloomdelve.cli import load_settings, parse_args
from gloomdelve.core.settings import Settings
from gloomdelve.errors import SettingsError


def test_packaged_defaults_load():
    s = Settings.load()
    assert s.display.columns == 80 and s.display.rows == 26
    assert s.world.depth == 4 and s.world.seed is None
    assert s.combat.dead_defender_retaliates is True
    assert s.input.mapping["confirm"] == ["ENTER", "RETURN"]


def test_user_file_overlays_defaults(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("world:\n  depth: 2\n  seed: 42\ncombat:\n  dead_defender_retaliates: false\n", encoding="utf-8")
    s = Settings.load(user_path=path)
    assert s.world.depth == 2
    assert s.world.seed == 42
    assert s.world.width == 80
    assert s.combat.dead_defender_retaliates is False


def test_missing_user_file_falls_back_to_defaults(tmp_path: Path):
    s = Settings.load(user_path=tmp_path / "absent.yaml")
    assert s.world.depth == 4


@pytest.mark.parametrize(
    "content",
    [
        "world: [unclosed\n",
        "- just\n- a list\n",
        "world:\n  gravity: 9\n",
    ],
)
def test_bad_user_file_raises_settings_error(tmp_path: Path, content: str):
    path = tmp_path / "settings.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(SettingsError):
        Settings.load(user_path=path)


def test_save_then_load(tmp_path: Path):
    s = Settings.load()
    s.world.monsters_per_level = 3
    s.input.mapping["left"] = ["LEFT", "H"]
    path = tmp_path / "nested" / "settings.yaml"
    s.save(path)

    loaded = Settings.load(user_path=path)
    assert loaded.world.monsters_per_level == 3
    assert loaded.input.mapping["left"] == ["LEFT", "H"]


def test_cli_settings_path_and_seed(tmp_path: Path):
    path = tmp_path / "settings.yaml"
    path.write_text("world:\n  depth: 3\n", encoding="utf-8")
    args = parse_args(["--settings", str(path), "--seed", "9", "--debug"])
    assert args.debug is True

    s = load_settings(args)
    assert s.world.depth == 3
    assert s.world.seed == 9


def test_cli_without_user_file_uses_defaults(monkeypatch, tmp_path: Path):
    monkeypatch.setattr(Settings, "default_user_path", staticmethod(lambda: tmp_path / "none.yaml"))
    s = load_settings(parse_args([]))
    assert s.world.seed is None
    assert s.world.depth == 4
