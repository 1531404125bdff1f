"""
Autopilot - steers toward the cave opening.

A simple heuristic used for assisted play, the Gymnasium baseline and
difficulty checks:
- Look a few columns past the front column
- Find the vertical center of that column's open span
- Hold confirm (climb) while below it, release (fall) otherwise
"""

from __future__ import annotations

from flappy_dragon.cave_core.cave import Cave
from flappy_dragon.cave_core.player import Player


class AutoPilot:
    """Keeps the player level with the opening ahead."""

    def __init__(self, lookahead: int = 1, debug: bool = False):
        """
        Args:
            lookahead: How many columns past the front column to aim at.
            debug: If True, print decisions to stdout.
        """
        if lookahead < 0:
            raise ValueError(f"lookahead must be >= 0, got {lookahead}")
        self.lookahead = lookahead
        self.debug = debug

    def target_row(self, cave: Cave) -> int:
        return cave.vertical_opening_center(cave.column_ahead(self.lookahead))

    def choose(self, player: Player, cave: Cave) -> bool:
        """True to hold confirm this frame, False to release it."""
        row, _ = player.grid_position()
        target = self.target_row(cave)
        # Rows grow downward: below the target means a larger row index
        hold = row > target

        if self.debug:
            print(f"[Autopilot] row={row} target={target} hold={hold}")

        return hold

    def action(self, player: Player, cave: Cave) -> int:
        """Gymnasium action: 1 = hold, 0 = release."""
        return int(self.choose(player, cave))
