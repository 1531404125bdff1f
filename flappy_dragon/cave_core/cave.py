"""
Cave Generator / Scroller
=========================

Owns the tile grid and turns it into an endless cave by regenerating one
column per scroll tick. Columns form a circular buffer: the column about to
leave the screen is reused as the storage for fresh terrain, so steady-state
play never allocates.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

import numpy as np

from flappy_dragon.cave_core.config_loader import GameConfig, get_config
from flappy_dragon.cave_core.render_data import RenderRect
from flappy_dragon.cave_core.rng import TerrainRng
from flappy_dragon.cave_core.tiles import Tile, TileGrid

logger = logging.getLogger(__name__)


class Cave:
    """
    Scrolling cave built from a TileGrid.

    Invariants:
    - row 0 and the last row are Wall in every column
    - 0 <= front_column < cols
    - exactly one column advance per scroll tick
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng=None,
        seed: Optional[int] = None
    ):
        """
        Initialize cave.

        Args:
            config: Game configuration. Uses default if None.
            rng: Magnitude source with draw_magnitude(). Built from seed if None.
            seed: Seed for the default TerrainRng.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = rng if rng is not None else TerrainRng(config, seed)

        self._tile_size = config.tile_size
        self._interval_ms = config.cave.scroll_interval_ms
        self._visible_min = config.cave.visible_min
        self._visible_max = config.cave.visible_max

        self._grid = TileGrid(config.rows, config.cols)
        self._front_column: int = 0
        self._last_scroll_ms: int = 0

        self.initialize()

    @property
    def grid(self) -> TileGrid:
        return self._grid

    @property
    def rows(self) -> int:
        return self._grid.rows

    @property
    def cols(self) -> int:
        return self._grid.cols

    @property
    def last_column_index(self) -> int:
        return self._grid.cols - 1

    @property
    def front_column(self) -> int:
        """Column aligned with the scrolling edge nearest the player."""
        return self._front_column

    @property
    def last_scroll_ms(self) -> int:
        return self._last_scroll_ms

    @property
    def scroll_interval_ms(self) -> int:
        return self._interval_ms

    def initialize(self) -> None:
        """Empty every cell, then wall off the ceiling and floor."""
        self._grid.fill(Tile.EMPTY)
        self._grid.set_row(0, Tile.WALL)
        self._grid.set_row(self.rows - 1, Tile.WALL)
        self._front_column = 0
        self._last_scroll_ms = 0

    def reset(self, seed: Optional[int] = None) -> None:
        """Reinitialize terrain; reseed the default rng when a seed is given."""
        if seed is not None and hasattr(self._rng, "reset"):
            self._rng.reset(seed)
        self.initialize()

    def scroll(self, now_ms: int) -> bool:
        """
        Advance the cave by one column if the scroll interval has elapsed.

        Args:
            now_ms: Current monotonic time in milliseconds.

        Returns:
            True if a column was regenerated, False if nothing changed.
        """
        if now_ms - self._last_scroll_ms < self._interval_ms:
            return False

        self._last_scroll_ms = now_ms

        # The column about to scroll out becomes the generation target
        if self._front_column > 1:
            target = self._front_column - 1
        else:
            target = self.last_column_index

        self._generate_column(target)

        if self._front_column >= self.last_column_index:
            self._front_column = 0
        else:
            self._front_column += 1

        logger.debug(
            "scroll at %d ms: regenerated column %d, front column now %d",
            now_ms, target, self._front_column
        )
        return True

    def _generate_column(self, col: int) -> None:
        """Rebuild one column: boundary walls plus random protrusions."""
        self._grid.set_column(col, Tile.EMPTY)
        self._grid.set(0, col, Tile.WALL)
        self._grid.set(self.rows - 1, col, Tile.WALL)

        stalactite = self._rng.draw_magnitude()
        stalagmite = self._rng.draw_magnitude()

        if self._is_visible(stalactite):
            for row in range(1, min(stalactite + 1, self.rows - 1)):
                self._grid.set(row, col, Tile.WALL)

        if self._is_visible(stalagmite):
            floor = self.rows - 1
            for row in range(max(floor - stalagmite, 1), floor):
                self._grid.set(row, col, Tile.WALL)

    def _is_visible(self, magnitude: int) -> bool:
        return self._visible_min < magnitude <= self._visible_max

    def column_wall_count(self, col: int) -> int:
        """Count of wall cells in a column."""
        return self._grid.wall_count(col)

    def vertical_opening_center(self, col: int) -> int:
        """
        Midpoint row of the open span in a column.

        Falls back to the grid's vertical center when the column is solid.
        """
        empty = self._grid.empty_rows(col)
        if not empty:
            return self.rows // 2
        if len(empty) == 1:
            return empty[0]
        return (empty[0] + empty[-1]) // 2

    def visible_columns(self) -> Iterator[int]:
        """Column indices in on-screen order, starting at the front column."""
        for offset in range(self.cols):
            yield (self._front_column + offset) % self.cols

    def column_ahead(self, distance: int) -> int:
        """Index of the column `distance` places after the front column."""
        return (self._front_column + distance) % self.cols

    def slide_offset(self, now_ms: int) -> float:
        """Sub-tick pixel offset for smooth scrolling between ticks."""
        fraction = (now_ms - self._last_scroll_ms) / self._interval_ms
        fraction = max(0.0, min(1.0, fraction))
        return self._tile_size * fraction

    def wall_rects(self, now_ms: int, sliding: bool = True) -> List[RenderRect]:
        """
        Pixel rectangles for every wall cell, in on-screen column order.

        Args:
            now_ms: Timestamp used for the slide interpolation.
            sliding: Offset columns by the slide interpolation. When False the
                terrain is aligned to the tile grid.
        """
        tile = self._tile_size
        color = self._config.colors.wall
        offset = self.slide_offset(now_ms) if sliding else 0.0
        order = np.fromiter(self.visible_columns(), dtype=np.intp, count=self.cols)
        mask = self._grid.as_array()[:, order] == int(Tile.WALL)

        # Transposed so rects come out column by column, top to bottom
        screen_cols, rows = np.nonzero(mask.T)
        return [
            RenderRect(int(c) * tile - offset, int(r) * tile, tile, tile, color)
            for c, r in zip(screen_cols, rows)
        ]
