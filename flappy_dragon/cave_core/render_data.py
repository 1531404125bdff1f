"""
Render Data
===========

The only thing the core hands to a renderer: colored rectangles in pixels.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class RenderRect:
    """A filled rectangle at pixel bounds."""
    x: float
    y: float
    width: int
    height: int
    color: Tuple[int, int, int]

    def as_int_bounds(self) -> Tuple[int, int, int, int]:
        """(x, y, w, h) rounded to whole pixels."""
        return (int(round(self.x)), int(round(self.y)), self.width, self.height)
