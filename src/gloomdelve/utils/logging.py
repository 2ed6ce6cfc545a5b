import logging
import os
import sys

LOG_LEVEL_ENV = "GLOOMDELVE_LOG_LEVEL"


def configure_logging(level: int = logging.INFO) -> None:
    """Install a single stdout handler on the root logger.

    ``GLOOMDELVE_LOG_LEVEL`` (e.g. ``DEBUG``) overrides ``level`` when set.
    """
    level_name = os.getenv(LOG_LEVEL_ENV)
    if level_name:
        level = getattr(logging, level_name.upper(), level)

    handler = logging.StreamHandler(stream=sys.stdout)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
