"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the cave runner.
One step is one frame of simulated time; reward is the score gained.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy_dragon.cave_core.config_loader import GameConfig, load_config
from flappy_dragon.cave_core.game import CaveGame
from flappy_dragon.cave_core.game_state import InputEvent, Respawning
from flappy_dragon.cave_core.render_solid import SolidRenderer
from flappy_dragon.cave_core.state_snapshot import STATE_IDS, SnapshotBuilder


class CaveEnv(gym.Env):
    """
    Flappy Dragon as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = confirm released (fall), 1 = confirm held (climb).

    Observation Space:
        Dict with the on-screen tile grid, per-column opening centers and
        player/session scalars.

    Reward:
        Points gained this step (clear_bonus when an obstacle is passed).

    Episodes start in the Playing state. A collision respawns automatically;
    the episode terminates when the session runs out of lives.
    """

    metadata = {
        "render_modes": ["rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        max_steps: int = 10000,
        debug: bool = False,
    ):
        """
        Initialize cave environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "rgb_array" for numpy frames, None for headless.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            max_steps: Steps before the episode is truncated.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self._config = load_config(config_path)

        self.render_mode = render_mode
        self._image_obs = image_obs
        self._debug = debug
        self._max_steps = max_steps

        self._img_width = image_width or self._config.screen.width
        self._img_height = image_height or self._config.screen.height

        self._game = CaveGame(config=self._config)
        self._snapshots = SnapshotBuilder(self._config)
        self._renderer: Optional[SolidRenderer] = None

        self._now_ms: int = 0
        self._steps: int = 0
        self._holding: bool = False

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] CaveEnv initialized")
            print(f"[DEBUG]   Grid: {self._config.rows}x{self._config.cols} tiles")
            print(f"[DEBUG]   Frame: {self._config.loop.frame_budget_ms} ms")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        rows = self._config.rows
        cols = self._config.cols
        height = self._config.screen.height
        int_max = np.iinfo(np.int32).max

        obs_dict = {
            "grid": spaces.Box(low=0, high=1, shape=(rows, cols), dtype=np.uint8),
            "opening_centers": spaces.Box(low=0, high=rows - 1, shape=(cols,), dtype=np.int16),
            "player_row": spaces.Box(low=0, high=rows + 1, shape=(), dtype=np.int32),
            "player_y": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "velocity_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "front_column": spaces.Box(low=0, high=cols - 1, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "lives": spaces.Box(low=-int_max, high=int_max, shape=(), dtype=np.int32),
            "state_id": spaces.Box(low=0, high=len(STATE_IDS) - 1, shape=(), dtype=np.int32),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start playing.

        Args:
            seed: Terrain seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.handle_event(InputEvent.CONFIRM_PRESS)

        self._now_ms = 0
        self._steps = 0
        self._holding = False

        info = self._game.get_info()
        info["delta_score"] = 0
        return self._build_obs(), info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Advance one frame.

        Args:
            action: 1 to hold confirm, 0 to release it.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        hold = bool(action)

        # Key transitions only; holding a key does not repeat the event
        if hold != self._holding:
            self._game.handle_event(
                InputEvent.CONFIRM_PRESS if hold else InputEvent.CONFIRM_RELEASE
            )
            self._holding = hold

        self._now_ms += self._config.loop.frame_budget_ms
        self._steps += 1
        result = self._game.tick(self._now_ms)

        if isinstance(self._game.state, Respawning):
            self._game.handle_event(InputEvent.CONFIRM_PRESS)

        terminated = result.game_over or self._game.is_over
        truncated = not terminated and self._steps >= self._max_steps

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["collided"] = result.collided
        info["scrolled"] = result.scrolled

        if self._debug:
            print(f"[DEBUG] Step {self._steps}: hold={hold}, row={info['player_row']}, "
                  f"score={info['score']}, lives={info['lives']}")
            if terminated:
                print(f"[DEBUG] TERMINATED: out of lives")

        return self._build_obs(), float(result.delta_score), terminated, truncated, info

    def _build_obs(self) -> Dict[str, np.ndarray]:
        obs = self._snapshots.build(self._game).to_obs_dict()
        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()
        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render the current frame to an RGB array."""
        if self._renderer is None:
            self._renderer = SolidRenderer(self._config)
        rects = self._game.get_render_data(self._now_ms)
        return self._renderer.render(rects, self._img_width, self._img_height)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()
        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CaveGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
