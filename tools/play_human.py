"""
Human Play Mode
================

Play Flappy Dragon in a pygame window.

Controls:
    - SPACE: Start / respawn; hold to climb, release to fall
    - ESC: Back to menu while playing, quit from the menu
    - Window close: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--config PATH] [--assist] [--debug]
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from typing import List, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_dragon.cave_core.autopilot import AutoPilot
from flappy_dragon.cave_core.config_loader import GameConfig, load_config
from flappy_dragon.cave_core.frame_loop import FrameLoop
from flappy_dragon.cave_core.game import CaveGame
from flappy_dragon.cave_core.game_state import (
    GameState,
    InputEvent,
    Menu,
    Playing,
    Respawning,
)
from flappy_dragon.cave_core.render_data import RenderRect


class PygameClock:
    """Millisecond tick source and delay backed by pygame.time."""

    def ticks_ms(self) -> int:
        return pygame.time.get_ticks()

    def delay(self, ms: int) -> None:
        pygame.time.delay(ms)


class PygameEvents:
    """Translates at most one pending pygame event per poll."""

    def poll(self) -> Optional[InputEvent]:
        event = pygame.event.poll()
        if event.type == pygame.QUIT:
            return InputEvent.QUIT_REQUEST
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return InputEvent.ESCAPE
            if event.key == pygame.K_SPACE:
                return InputEvent.CONFIRM_PRESS
        elif event.type == pygame.KEYUP:
            if event.key == pygame.K_SPACE:
                return InputEvent.CONFIRM_RELEASE
        return None


class AssistedEvents:
    """
    Wraps a real event source and lets the autopilot press and release
    confirm while Playing, whenever the human sent nothing this frame.
    """

    def __init__(self, inner: PygameEvents, game: CaveGame, pilot: AutoPilot):
        self._inner = inner
        self._game = game
        self._pilot = pilot
        self._holding = False

    def poll(self) -> Optional[InputEvent]:
        event = self._inner.poll()
        if event is not None or not isinstance(self._game.state, Playing):
            self._holding = event == InputEvent.CONFIRM_PRESS
            return event

        hold = self._pilot.choose(self._game.player, self._game.cave)
        if hold == self._holding:
            return None
        self._holding = hold
        return InputEvent.CONFIRM_PRESS if hold else InputEvent.CONFIRM_RELEASE


class PygameRenderer:
    """Fills the core's rectangles and draws the menu/respawn prompts."""

    def __init__(self, config: GameConfig, screen: "pygame.Surface"):
        self._config = config
        self._screen = screen
        self._background = config.colors.background

        pygame.font.init()
        self._font_large = pygame.font.Font(None, 56)
        self._font_small = pygame.font.Font(None, 28)
        self._text_color = (255, 255, 255)

    def draw(self, rects: List[RenderRect], state: GameState) -> None:
        self._screen.fill(self._background)
        for rect in rects:
            self._screen.fill(rect.color, pygame.Rect(*rect.as_int_bounds()))

        if isinstance(state, Menu):
            self._draw_prompt("Flappy Dragon", "SPACE to play, ESC to quit", state)
        elif isinstance(state, Respawning):
            self._draw_prompt("You crashed!", "SPACE to continue, ESC to quit", state)
        elif isinstance(state, Playing):
            self._draw_status(state)

    def _draw_prompt(self, title: str, hint: str, state: GameState) -> None:
        width = self._config.screen.width
        height = self._config.screen.height

        title_surf = self._font_large.render(title, True, self._text_color)
        hint_surf = self._font_small.render(hint, True, self._text_color)
        status_surf = self._font_small.render(
            f"Score: {state.score}   Lives: {state.lives}", True, self._text_color
        )

        y = height // 2 - 60
        for surf in (title_surf, hint_surf, status_surf):
            self._screen.blit(surf, ((width - surf.get_width()) // 2, y))
            y += surf.get_height() + 12

    def _draw_status(self, state: Playing) -> None:
        surf = self._font_small.render(
            f"Score: {state.score}   Lives: {state.lives}", True, self._text_color
        )
        self._screen.blit(surf, (10, self._config.tile_size + 4))

    def present(self) -> None:
        pygame.display.flip()


class HumanPlayer:
    """Owns the pygame window and runs the frame loop until Quit."""

    def __init__(
        self,
        config: GameConfig,
        seed: Optional[int] = None,
        assist: bool = False,
        debug: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for human play mode. Install with: pip install pygame")

        self._config = config
        self._game = CaveGame(config=config, seed=seed)

        pygame.init()
        self._screen = pygame.display.set_mode((config.screen.width, config.screen.height))
        pygame.display.set_caption("Flappy Dragon")

        events = PygameEvents()
        if assist:
            events = AssistedEvents(events, self._game, AutoPilot(lookahead=1, debug=debug))

        self._loop = FrameLoop(
            self._game,
            PygameClock(),
            events,
            PygameRenderer(config, self._screen),
            config
        )

    def run(self) -> int:
        """Run the game loop. Returns the best score of the session."""
        print("=== Flappy Dragon ===")
        print("SPACE to start, hold to climb, release to fall")
        print("ESC for menu / quit")
        print()

        try:
            self._loop.run()
        finally:
            pygame.quit()

        if self._loop.overruns:
            print(f"{self._loop.overruns} of {self._loop.frames} frames overran the budget")
        return self._game.best_score


def main():
    parser = argparse.ArgumentParser(description="Play Flappy Dragon interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the cave")
    parser.add_argument("--fps", type=int, default=None, help="Override target FPS")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--assist", action="store_true", help="Let the autopilot steer")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    args = parser.parse_args()
    if args.fps is not None and args.fps <= 0:
        parser.error("--fps must be positive")

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        config = load_config(args.config)
        if args.fps is not None:
            config = replace(config, loop=replace(config.loop, target_fps=args.fps))
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            assist=args.assist,
            debug=args.debug
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
