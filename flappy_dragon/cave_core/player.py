"""
Player Entity
=============

The dragon sprite: a fixed horizontal position, a vertical velocity and a
mapping from pixel coordinates to tile-grid cells.
"""

from __future__ import annotations

from typing import Optional, Tuple

from flappy_dragon.cave_core.config_loader import GameConfig, get_config
from flappy_dragon.cave_core.render_data import RenderRect


class Player:
    """
    Player position and velocity.

    Positions are pixel coordinates of the sprite's top-left corner. After
    every integration step position_y lies in [half_height, screen_height].
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize player at the configured start cell.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._tile_size = config.tile_size
        self._screen_height = config.screen.height
        self._half_width = config.player.half_width
        self._half_height = config.player.half_height

        self.position_x: float = 0.0
        self.position_y: float = 0.0
        self.velocity_x: float = 0.0
        self.velocity_y: float = 0.0

        self.reset()

    @property
    def half_width(self) -> int:
        return self._half_width

    @property
    def half_height(self) -> int:
        return self._half_height

    @property
    def position(self) -> Tuple[float, float]:
        return (self.position_x, self.position_y)

    @property
    def velocity(self) -> Tuple[float, float]:
        return (self.velocity_x, self.velocity_y)

    def reset(self) -> None:
        """Return to the start position, falling."""
        player_cfg = self._config.player
        self.position_x = float(player_cfg.start_x)
        self.position_y = float(self._clamp_y(player_cfg.start_row * self._tile_size))
        self.velocity_x = 0.0
        self.velocity_y = float(player_cfg.fall_speed)

    def apply_velocity(self, vx: float, vy: float) -> None:
        """Set velocity and move once immediately."""
        self.velocity_x = vx
        self.velocity_y = vy
        self.integrate()

    def climb(self) -> None:
        self.apply_velocity(0, -self._config.player.climb_speed)

    def fall(self) -> None:
        self.apply_velocity(0, self._config.player.fall_speed)

    def integrate(self) -> None:
        """Advance one tick: position += velocity, snapped to whole pixels and clamped."""
        self.position_x = float(round(self.position_x + self.velocity_x))
        self.position_y = float(self._clamp_y(round(self.position_y + self.velocity_y)))

    def _clamp_y(self, y: float) -> float:
        return max(self._half_height, min(self._screen_height, y))

    def grid_position(self) -> Tuple[int, int]:
        """
        (row, col) of the tile under the sprite's bounding-box center.

        A sprite pinned at the ceiling clamp maps to row 0; the plain formula
        would land one row too low there.
        """
        tile = self._tile_size
        col = int((self.position_x + self._half_width) // tile)
        if self.position_y == self._half_height:
            row = 0
        else:
            row = int((self.position_y + self._half_height) // tile)
        return (row, col)

    def reset_to(self, row: int, col: int) -> None:
        """Teleport to the pixel origin of a tile cell."""
        self.position_x = float(col * self._tile_size)
        self.position_y = float(self._clamp_y(row * self._tile_size))

    def bounding_rect(self) -> RenderRect:
        player_cfg = self._config.player
        return RenderRect(
            self.position_x,
            self.position_y,
            player_cfg.sprite_width,
            player_cfg.sprite_height,
            self._config.colors.player
        )
