"""
Solid Renderer
==============

Fast numpy-based renderer that rasterises the core's rectangle list into an
RGB array, without pygame.
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from flappy_dragon.cave_core.config_loader import GameConfig, get_config
from flappy_dragon.cave_core.render_data import RenderRect


class SolidRenderer:
    """
    Fills RenderRects into a (height, width, 3) uint8 image.

    Rectangles are scaled from screen pixels to the output size and clipped
    to the image; partially off-screen tiles (during a slide) are cut.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._screen_w = config.screen.width
        self._screen_h = config.screen.height
        self._bg_color = np.array(config.colors.background, dtype=np.uint8)

    def render(
        self,
        rects: Iterable[RenderRect],
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Render rectangles to an RGB array.

        Args:
            rects: Data from CaveGame.get_render_data().
            width: Output image width. Screen width if None.
            height: Output image height. Screen height if None.

        Returns:
            (height, width, 3) uint8 array.
        """
        width = width or self._screen_w
        height = height or self._screen_h
        scale_x = width / self._screen_w
        scale_y = height / self._screen_h

        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        for rect in rects:
            x0 = int(round(rect.x * scale_x))
            y0 = int(round(rect.y * scale_y))
            x1 = int(round((rect.x + rect.width) * scale_x))
            y1 = int(round((rect.y + rect.height) * scale_y))

            x0, x1 = max(0, x0), min(width, x1)
            y0, y1 = max(0, y0), min(height, y1)
            if x0 >= x1 or y0 >= y1:
                continue
            img[y0:y1, x0:x1] = rect.color

        return img

    def close(self) -> None:
        """Clean up resources."""
