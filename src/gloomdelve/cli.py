import argparse
import logging
from pathlib import Path

from .core.settings import Settings
from .utils.logging import configure_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="gloomdelve",
        description="Gloomdelve - a turn-based dungeon crawler built with Python + Arcade",
    )
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file (defaults to the per-user config dir).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for dungeon generation.")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging.")
    return parser.parse_args(argv)


def load_settings(args) -> Settings:
    path = args.settings_path
    if path is None:
        default = Settings.default_user_path()
        path = default if default.exists() else None
    settings = Settings.load(user_path=path)
    if args.seed is not None:
        settings.world.seed = args.seed
    return settings


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(level=logging.DEBUG if args.debug else logging.INFO)
    settings = load_settings(args)

    # The window pulls in arcade/pyglet, which needs a display
    import arcade

    from .app import GameWindow

    GameWindow(settings)
    arcade.run()
    return 0
