"""
State Snapshot
==============

Packs game state into fixed-size numpy arrays for Gymnasium observations.
The grid is reordered so column 0 is always the front column.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

import numpy as np

from flappy_dragon.cave_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from flappy_dragon.cave_core.game import CaveGame

# Stable integer ids for the state variants
STATE_IDS = {"menu": 0, "playing": 1, "respawning": 2, "quit": 3}


@dataclass
class GameSnapshot:
    """Complete observation of one frame."""
    grid: np.ndarray              # (rows, cols) uint8, on-screen column order
    opening_centers: np.ndarray   # (cols,) int16, opening center per on-screen column
    player_row: int
    player_y: float
    velocity_y: float
    front_column: int
    score: int
    lives: int
    state_id: int

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "grid": self.grid,
            "opening_centers": self.opening_centers,
            "player_row": np.array(self.player_row, dtype=np.int32),
            "player_y": np.array(self.player_y, dtype=np.float32),
            "velocity_y": np.array(self.velocity_y, dtype=np.float32),
            "front_column": np.array(self.front_column, dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "lives": np.array(self.lives, dtype=np.int32),
            "state_id": np.array(self.state_id, dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds snapshots with pre-allocated arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._rows = config.rows
        self._cols = config.cols
        self._grid = np.zeros((self._rows, self._cols), dtype=np.uint8)
        self._centers = np.zeros(self._cols, dtype=np.int16)

    def build(self, game: "CaveGame") -> GameSnapshot:
        """Build a snapshot from the current game state."""
        cave = game.cave
        player = game.player
        cells = cave.grid.as_array()

        order = list(cave.visible_columns())
        self._grid[:, :] = cells[:, order]
        for i, col in enumerate(order):
            self._centers[i] = cave.vertical_opening_center(col)

        row, _ = player.grid_position()
        return GameSnapshot(
            grid=self._grid.copy(),
            opening_centers=self._centers.copy(),
            player_row=row,
            player_y=player.position_y,
            velocity_y=player.velocity_y,
            front_column=cave.front_column,
            score=game.score,
            lives=game.lives,
            state_id=STATE_IDS[game.state.name],
        )
