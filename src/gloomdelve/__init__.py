"""
Gloomdelve: turn-based dungeon crawler core.

- Screens and the session that routes input/rendering between them
- Entities assembled from named capabilities declared in YAML templates
- Movement and bump-to-attack combat resolved against the dungeon map
- A speed-based scheduler gated by the player's turn

Only ``gloomdelve.app`` needs arcade; everything else runs headless.
"""
__version__ = "0.1.0"
