"""
Core Game
=========

Session orchestrator combining the cave, the player, the rules and the
current GameState.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from flappy_dragon.cave_core.cave import Cave
from flappy_dragon.cave_core.config_loader import GameConfig, get_config
from flappy_dragon.cave_core.game_state import (
    GameState,
    InputEvent,
    Menu,
    Playing,
    Respawning,
    is_terminal,
    transition,
)
from flappy_dragon.cave_core.player import Player
from flappy_dragon.cave_core.render_data import RenderRect
from flappy_dragon.cave_core.rules import LivesRules, ProgressRules

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of one game tick."""
    state: GameState
    scrolled: bool
    collided: bool
    scored: bool
    delta_score: int
    game_over: bool = False


class CaveGame:
    """
    One play session.

    Cave and Player are built once and mutated in place; a respawn moves the
    player but leaves the cave alone. The state is owned here and passed
    nowhere else.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        rng=None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for terrain generation.
            rng: Optional magnitude source for the cave (overrides seed).
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        self._cave = Cave(config, rng=rng, seed=seed)
        self._player = Player(config)
        self._progress = ProgressRules(config)
        self._lives = LivesRules(config)

        self._state: GameState = Menu(0, config.session.starting_lives)
        self._best_score: int = 0

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def cave(self) -> Cave:
        return self._cave

    @property
    def player(self) -> Player:
        return self._player

    @property
    def rules(self) -> ProgressRules:
        return self._progress

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def score(self) -> int:
        return getattr(self._state, "score", 0)

    @property
    def lives(self) -> int:
        return getattr(self._state, "lives", 0)

    @property
    def best_score(self) -> int:
        """Highest score reached this session (not persisted)."""
        return self._best_score

    @property
    def is_over(self) -> bool:
        return is_terminal(self._state)

    def reset(self, seed: Optional[int] = None) -> GameState:
        """
        Start a fresh run from the menu.

        Args:
            seed: New terrain seed. Uses previous if None.
        """
        if seed is not None:
            self._seed = seed
        self._cave.reset(self._seed)
        self._player.reset()
        self._set_state(Menu(0, self._config.session.starting_lives))
        return self._state

    def handle_event(self, event: InputEvent) -> GameState:
        """Apply one input event through the transition table."""
        self._set_state(transition(self._state, event, self._player))
        return self._state

    def tick(self, now_ms: int) -> TickResult:
        """
        Advance game logic by one frame.

        Only the Playing state does physics and collision work.

        Args:
            now_ms: Timestamp for this frame, shared with rendering.
        """
        state = self._state
        if not isinstance(state, Playing):
            return TickResult(state, False, False, False, 0)

        self._player.integrate()
        scrolled = self._cave.scroll(now_ms)
        outcome = self._progress.evaluate(self._player, self._cave, scrolled)

        if outcome.collided:
            player_cfg = self._config.player
            self._player.reset_to(player_cfg.respawn_row, player_cfg.respawn_col)
            lives = state.lives - 1
            if self._lives.is_game_over(lives):
                logger.info("out of lives, final score %d", state.score)
                self._player.reset()
                self._set_state(Menu(0, self._lives.starting_lives))
                return TickResult(self._state, scrolled, True, False, 0, game_over=True)
            self._set_state(Respawning(state.score, lives))
            return TickResult(self._state, scrolled, True, False, 0)

        if outcome.scored:
            bonus = self._config.session.clear_bonus
            self._set_state(Playing(state.score + bonus, state.lives))
            self._best_score = max(self._best_score, self._state.score)
            return TickResult(self._state, scrolled, False, True, bonus)

        return TickResult(state, scrolled, False, False, 0)

    def _set_state(self, new_state: GameState) -> None:
        if new_state != self._state:
            logger.info("state %s -> %s", self._state, new_state)
        self._state = new_state

    def get_render_data(self, now_ms: int) -> List[RenderRect]:
        """
        Rectangles to fill this frame: cave walls then the player.

        Terrain slides between scroll ticks only while Playing.
        """
        sliding = isinstance(self._state, Playing)
        rects = self._cave.wall_rects(now_ms, sliding=sliding)
        rects.append(self._player.bounding_rect())
        return rects

    def get_info(self) -> Dict[str, Any]:
        """Summary dict for tools and the Gymnasium wrapper."""
        row, col = self._player.grid_position()
        return {
            "state": self._state.name,
            "score": self.score,
            "lives": self.lives,
            "best_score": self._best_score,
            "front_column": self._cave.front_column,
            "player_row": row,
            "player_col": col,
        }
