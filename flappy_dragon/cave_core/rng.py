"""
RNG - Terrain Magnitudes
========================

Seedable random source for stalactite/stalagmite generation.
"""

from __future__ import annotations

import random
from typing import Optional

from flappy_dragon.cave_core.config_loader import GameConfig, get_config


class TerrainRng:
    """
    Draws protrusion magnitudes uniformly from [0, magnitude_upper).

    Any object exposing draw_magnitude() can stand in for this class,
    which is how tests feed the cave a scripted sequence.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize terrain RNG.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility. Random if None.
        """
        if config is None:
            config = get_config()

        self._upper = config.cave.magnitude_upper
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def draw_magnitude(self) -> int:
        """Next magnitude in [0, magnitude_upper)."""
        return self._rng.randrange(0, self._upper)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Restart the sequence.

        Args:
            seed: New random seed. Keeps current if None.
        """
        if seed is not None:
            self._seed = seed
        self._rng = random.Random(self._seed)

    def get_state(self) -> int:
        """Fingerprint of the generator state (for replay checks)."""
        return hash(self._rng.getstate())
