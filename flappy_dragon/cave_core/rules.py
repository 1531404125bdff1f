"""
Game Rules
==========

Collision and progress evaluation against the cave's front column, plus the
lives-exhausted policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flappy_dragon.cave_core.cave import Cave
from flappy_dragon.cave_core.config_loader import GameConfig, get_config
from flappy_dragon.cave_core.player import Player
from flappy_dragon.cave_core.tiles import Tile

# Ceiling + floor
BOUNDARY_WALLS = 2


@dataclass
class TickOutcome:
    """Result of evaluating one Playing tick."""
    collided: bool
    cleared: bool
    scored: bool

    @staticmethod
    def nothing() -> "TickOutcome":
        return TickOutcome(False, False, False)

    @staticmethod
    def collision() -> "TickOutcome":
        return TickOutcome(True, False, False)

    @staticmethod
    def passed(scored: bool) -> "TickOutcome":
        return TickOutcome(False, True, scored)


class ProgressRules:
    """
    Decides wall collisions and successfully passed obstacles.

    The sprite never moves horizontally while the world scrolls underneath,
    so both checks look at the cave's front column rather than the
    player's own column.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize progress rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

    def has_collided(self, player: Player, cave: Cave) -> bool:
        """True iff the player's row in the front column is a wall."""
        row, _ = player.grid_position()
        # Out-of-range lookups return None and count as open space
        return cave.grid.get(row, cave.front_column) == Tile.WALL

    def has_cleared_obstacle(self, player: Player, cave: Cave) -> bool:
        """True iff the front column holds an obstacle and the player is not in it."""
        if self.has_collided(player, cave):
            return False
        return cave.column_wall_count(cave.front_column) > BOUNDARY_WALLS

    def evaluate(self, player: Player, cave: Cave, scrolled: bool) -> TickOutcome:
        """
        Combine both checks for one tick.

        Credit is only awarded on a tick where the cave scrolled, so one
        obstacle scores at most once.
        """
        if self.has_collided(player, cave):
            return TickOutcome.collision()
        if self.has_cleared_obstacle(player, cave):
            return TickOutcome.passed(scored=scrolled)
        return TickOutcome.nothing()


class LivesRules:
    """
    Lives-exhausted policy.

    - "menu": a collision that leaves no lives ends the run
    - "none": lives keep decrementing
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._policy = config.session.game_over_policy
        self._starting_lives = config.session.starting_lives

    @property
    def starting_lives(self) -> int:
        return self._starting_lives

    def is_game_over(self, lives: int) -> bool:
        if self._policy == "none":
            return False
        return lives <= 0
