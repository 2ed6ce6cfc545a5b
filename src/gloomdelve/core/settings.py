from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from platformdirs import user_config_dir

from ..errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "gloomdelve"


@dataclass
class DisplaySettings:
    columns: int = 80
    rows: int = 26
    cell_width: int = 12
    cell_height: int = 18
    font_size: int = 12
    font_name: str = "Courier New"


@dataclass
class WorldSettings:
    width: int = 80
    height: int = 22
    depth: int = 4
    monsters_per_level: int = 12
    items_per_level: int = 8
    seed: Optional[int] = None


@dataclass
class CombatSettings:
    dead_defender_retaliates: bool = True


@dataclass
class InputSettings:
    mapping: Dict[str, List[str]] = field(default_factory=dict)


@dataclass
class Settings:
    display: DisplaySettings = field(default_factory=DisplaySettings)
    world: WorldSettings = field(default_factory=WorldSettings)
    combat: CombatSettings = field(default_factory=CombatSettings)
    input: InputSettings = field(default_factory=InputSettings)

    @staticmethod
    def default_user_path() -> Path:
        return Path(user_config_dir(APP_NAME)) / "settings.yaml"

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise SettingsError(f"Malformed settings file {path}: {e}") from e
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {path} must contain a mapping")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        try:
            display = DisplaySettings(**data.get("display", {}))
            world = WorldSettings(**data.get("world", {}))
            combat = CombatSettings(**data.get("combat", {}))
        except TypeError as e:
            raise SettingsError(f"Unknown settings key: {e}") from e
        mapping = {k: list(v) for k, v in data.get("input", {}).get("mapping", {}).items()}
        return Settings(display=display, world=world, combat=combat, input=InputSettings(mapping=mapping))

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Load packaged defaults and overlay an optional user YAML file."""
        try:
            text = resources.files("gloomdelve.config").joinpath("default_settings.yaml").read_text(encoding="utf-8")
            default_data = yaml.safe_load(text) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = dataclasses.asdict(Settings())

        user_data: dict = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        settings = cls.from_dict(cls._deep_merge(default_data, user_data))
        logger.debug("Settings merged: %s", settings)
        return settings

    def save(self, path: Path) -> None:
        data = {
            "display": dataclasses.asdict(self.display),
            "world": dataclasses.asdict(self.world),
            "combat": dataclasses.asdict(self.combat),
            "input": {"mapping": {k: list(v) for k, v in self.input.mapping.items()}},
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, sort_keys=False)
        logger.info("Saved settings to %s", path)
