from __future__ import annotations

import logging
import random
from collections import deque
from typing import List, Optional, Set, Tuple

from . import tiles
from .tiles import Tile

logger = logging.getLogger(__name__)

Level = List[List[Tile]]
Cell = Tuple[int, int]


class Builder:
    """Cellular automata caverns stacked into a multi-level dungeon.

    Per level:
    - Initialize with random walls based on the initial probability.
    - Smooth with the 8-neighbour rule (>= threshold => wall), borders stay walls.
    - Keep only the largest connected floor region so every cell is reachable.
    Then each level is linked to the one below by a pair of stairs placed on a
    cell that is floor on both levels. The deepest level gets one more set of
    stairs down: the way out of the dungeon.
    """

    def __init__(
        self,
        width: int,
        height: int,
        depth: int,
        *,
        seed: Optional[int] = None,
        initial_wall_prob: float = 0.45,
        smooth_steps: int = 4,
        wall_threshold: int = 5,
    ) -> None:
        if width < 3 or height < 3:
            raise ValueError("Levels must be at least 3x3 to keep wall borders")
        if depth < 1:
            raise ValueError("Dungeon needs at least one level")
        self.width = width
        self.height = height
        self.depth = depth
        self.initial_wall_prob = float(initial_wall_prob)
        self.smooth_steps = int(smooth_steps)
        self.wall_threshold = int(wall_threshold)
        self.rng = random.Random(seed)
        self._regions: List[Set[Cell]] = []
        self._tiles: List[Level] = [self._generate_level(z) for z in range(depth)]
        self._place_stairs()

    def get_tiles(self) -> List[Level]:
        return self._tiles

    # ---- Generation ------------------------------------------------------
    def _generate_level(self, z: int) -> Level:
        w, h = self.width, self.height
        grid = [
            [
                tiles.WALL
                if x in (0, w - 1) or y in (0, h - 1) or self.rng.random() < self.initial_wall_prob
                else tiles.FLOOR
                for x in range(w)
            ]
            for y in range(h)
        ]
        for _ in range(self.smooth_steps):
            grid = self._smooth(grid)

        region = self._largest_region(grid)
        if not region:
            # Degenerate roll; carve the centre so the level is never empty
            region = {(w // 2, h // 2)}
            logger.warning("Level %d generated without floor; carving centre cell", z)
        for y in range(h):
            for x in range(w):
                grid[y][x] = tiles.FLOOR if (x, y) in region else tiles.WALL
        self._regions.append(region)
        logger.debug("Level %d: %d floor cells", z, len(region))
        return grid

    def _smooth(self, grid: Level) -> Level:
        w, h = self.width, self.height
        new_grid = [row[:] for row in grid]
        for y in range(1, h - 1):
            for x in range(1, w - 1):
                walls = sum(
                    1
                    for ny in (y - 1, y, y + 1)
                    for nx in (x - 1, x, x + 1)
                    if (nx, ny) != (x, y) and grid[ny][nx] is tiles.WALL
                )
                new_grid[y][x] = tiles.WALL if walls >= self.wall_threshold else tiles.FLOOR
        return new_grid

    def _largest_region(self, grid: Level) -> Set[Cell]:
        seen: Set[Cell] = set()
        best: Set[Cell] = set()
        for y in range(self.height):
            for x in range(self.width):
                if (x, y) in seen or grid[y][x] is not tiles.FLOOR:
                    continue
                region = {(x, y)}
                dq = deque([(x, y)])
                seen.add((x, y))
                while dq:
                    cx, cy = dq.popleft()
                    for nx, ny in ((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)):
                        if (nx, ny) in seen or grid[ny][nx] is not tiles.FLOOR:
                            continue
                        seen.add((nx, ny))
                        region.add((nx, ny))
                        dq.append((nx, ny))
                if len(region) > len(best):
                    best = region
        return best

    # ---- Stairs ----------------------------------------------------------
    def _place_stairs(self) -> None:
        for z in range(self.depth - 1):
            free = sorted(c for c in self._regions[z] if self._tiles[z][c[1]][c[0]] is tiles.FLOOR) or sorted(self._regions[z])
            overlap = [c for c in free if c in self._regions[z + 1]]
            if overlap:
                x, y = self.rng.choice(overlap)
            else:
                # Carve a passage on the lower level up to a free cell of the upper one
                x, y = self.rng.choice(free)
                self._connect_cell(z + 1, x, y)
            self._tiles[z][y][x] = tiles.STAIRS_DOWN
            self._tiles[z + 1][y][x] = tiles.STAIRS_UP
            logger.debug("Stairs between levels %d and %d at (%d,%d)", z, z + 1, x, y)

        last = self.depth - 1
        exits = [(x, y) for (x, y) in sorted(self._regions[last]) if self._tiles[last][y][x] is tiles.FLOOR]
        if exits:
            x, y = self.rng.choice(exits)
            self._tiles[last][y][x] = tiles.STAIRS_DOWN

    def _connect_cell(self, z: int, x: int, y: int) -> None:
        """Carve an L-shaped corridor from (x, y) to the nearest floor of level z."""
        region = self._regions[z]
        tx, ty = min(region, key=lambda c: abs(c[0] - x) + abs(c[1] - y))
        level = self._tiles[z]
        step = 1 if tx >= x else -1
        for cx in range(x, tx + step, step):
            level[y][cx] = tiles.FLOOR
            region.add((cx, y))
        step = 1 if ty >= y else -1
        for cy in range(y, ty + step, step):
            level[cy][tx] = tiles.FLOOR
            region.add((tx, cy))
