"""
Frame Loop
==========

Single-threaded fixed-cadence driver: poll at most one input event, advance
one tick, render, then sleep out the rest of the frame budget.

The windowing layer is injected as three small collaborators so the loop
runs the same against pygame or against test doubles.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Protocol

from flappy_dragon.cave_core.config_loader import GameConfig
from flappy_dragon.cave_core.game import CaveGame, TickResult
from flappy_dragon.cave_core.game_state import GameState, InputEvent
from flappy_dragon.cave_core.render_data import RenderRect

logger = logging.getLogger(__name__)


class Clock(Protocol):
    def ticks_ms(self) -> int:
        """Monotonic milliseconds."""

    def delay(self, ms: int) -> None:
        """Block for ms milliseconds."""


class EventSource(Protocol):
    def poll(self) -> Optional[InputEvent]:
        """Next pending event, or None without blocking."""


class Renderer(Protocol):
    def draw(self, rects: List[RenderRect], state: GameState) -> None:
        """Fill the given rectangles."""

    def present(self) -> None:
        """Flush the frame to the screen."""


@dataclass
class FrameStats:
    """Timing and outcome of one loop iteration."""
    now_ms: int
    event: Optional[InputEvent]
    tick: TickResult
    work_ms: int
    slept_ms: int
    overrun: bool


class FrameLoop:
    """
    Drives a CaveGame until it reaches Quit.

    Overruns are reported and otherwise ignored: there is no frame skipping,
    so sustained overruns slow the game down instead of dropping frames.
    """

    def __init__(
        self,
        game: CaveGame,
        clock: Clock,
        events: EventSource,
        renderer: Renderer,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize frame loop.

        Args:
            game: The session to drive.
            clock: Monotonic tick source and delay primitive.
            events: Non-blocking input source.
            renderer: Receives the rectangles for each frame.
            config: Game configuration. Uses the game's config if None.
        """
        if config is None:
            config = game.config

        self._game = game
        self._clock = clock
        self._events = events
        self._renderer = renderer
        self._budget_ms = config.loop.frame_budget_ms

        self._frames: int = 0
        self._overruns: int = 0

    @property
    def frame_budget_ms(self) -> int:
        return self._budget_ms

    @property
    def frames(self) -> int:
        """Iterations completed so far."""
        return self._frames

    @property
    def overruns(self) -> int:
        """Iterations whose work exceeded the frame budget."""
        return self._overruns

    def run_frame(self) -> FrameStats:
        """Run exactly one loop iteration."""
        # One timestamp per iteration, reused by scroll and slide
        now = self._clock.ticks_ms()

        event = self._events.poll()
        if event is not None:
            self._game.handle_event(event)

        tick = self._game.tick(now)

        self._renderer.draw(self._game.get_render_data(now), self._game.state)
        self._renderer.present()

        work_ms = self._clock.ticks_ms() - now
        slept_ms = 0
        overrun = work_ms > self._budget_ms
        if overrun:
            self._overruns += 1
            logger.warning(
                "frame %d overran budget: %d ms > %d ms",
                self._frames, work_ms, self._budget_ms
            )
        elif work_ms < self._budget_ms:
            slept_ms = self._budget_ms - work_ms
            self._clock.delay(slept_ms)

        self._frames += 1
        return FrameStats(now, event, tick, work_ms, slept_ms, overrun)

    def run(self, max_frames: Optional[int] = None) -> int:
        """
        Loop until the game reaches Quit.

        Args:
            max_frames: Stop early after this many iterations (None = no limit).

        Returns:
            Number of iterations run by this call.
        """
        ran = 0
        while not self._game.is_over:
            if max_frames is not None and ran >= max_frames:
                break
            self.run_frame()
            ran += 1
        return ran
