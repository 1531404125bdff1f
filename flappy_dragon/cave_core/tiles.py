"""
Tile Grid
=========

Fixed-size 2D grid of wall/empty cells backed by a single numpy buffer.
"""

from __future__ import annotations

from enum import IntEnum
from typing import List, Optional

import numpy as np


class Tile(IntEnum):
    """Contents of one grid cell."""
    EMPTY = 0
    WALL = 1


class TileGrid:
    """
    Rows x cols tile storage.

    The buffer is allocated once and never resized; columns are addressed
    directly by index and the wraparound ordering is left to the Cave.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self._rows = rows
        self._cols = cols
        self._cells = np.full((rows, cols), Tile.EMPTY, dtype=np.uint8)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self):
        return self._cells.shape

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def get(self, row: int, col: int) -> Optional[Tile]:
        """Tile at (row, col), or None when the cell lies outside the grid."""
        if not self.in_bounds(row, col):
            return None
        return Tile(int(self._cells[row, col]))

    def is_wall(self, row: int, col: int) -> bool:
        return self.get(row, col) == Tile.WALL

    def set(self, row: int, col: int, tile: Tile) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) outside {self._rows}x{self._cols} grid")
        self._cells[row, col] = tile

    def fill(self, tile: Tile) -> None:
        self._cells.fill(tile)

    def set_column(self, col: int, tile: Tile) -> None:
        self._cells[:, col] = tile

    def set_row(self, row: int, tile: Tile) -> None:
        self._cells[row, :] = tile

    def wall_count(self, col: int) -> int:
        """Number of wall cells in a column."""
        return int(np.count_nonzero(self._cells[:, col] == Tile.WALL))

    def empty_rows(self, col: int) -> List[int]:
        """Row indices of the empty cells in a column, top to bottom."""
        return [int(r) for r in np.flatnonzero(self._cells[:, col] == Tile.EMPTY)]

    def column(self, col: int) -> np.ndarray:
        """Copy of one column."""
        return self._cells[:, col].copy()

    def as_array(self) -> np.ndarray:
        """Read-only view of the whole grid."""
        view = self._cells.view()
        view.flags.writeable = False
        return view
