"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


GAME_OVER_POLICIES = ("menu", "none")


@dataclass(frozen=True)
class ScreenConfig:
    """Window geometry and tile size."""
    width: int       # Pixels, multiple of tile_size
    height: int      # Pixels, multiple of tile_size
    tile_size: int   # Edge length of a square tile in pixels

    @property
    def rows(self) -> int:
        """Number of tile rows covering the screen height."""
        return self.height // self.tile_size

    @property
    def cols(self) -> int:
        """Number of tile columns: one screen width plus one spare column."""
        return self.width // self.tile_size + 1


@dataclass(frozen=True)
class CaveConfig:
    """Cave scrolling and terrain generation."""
    scroll_interval_ms: int
    magnitude_upper: int   # Exclusive upper bound of a protrusion draw
    visible_min: int       # Exclusive lower bound of a carved protrusion
    visible_max: int       # Inclusive upper bound of a carved protrusion


@dataclass(frozen=True)
class PlayerConfig:
    """Player sprite and controls."""
    sprite_width: int
    sprite_height: int
    start_x: int
    start_row: int
    climb_speed: int
    fall_speed: int
    respawn_row: int
    respawn_col: int

    @property
    def half_width(self) -> int:
        return self.sprite_width // 2

    @property
    def half_height(self) -> int:
        return self.sprite_height // 2


@dataclass(frozen=True)
class SessionConfig:
    """Scoring and lives."""
    starting_lives: int
    clear_bonus: int
    game_over_policy: str


@dataclass(frozen=True)
class LoopConfig:
    """Frame pacing."""
    target_fps: int

    @property
    def frame_budget_ms(self) -> int:
        """Milliseconds available to one frame (60 fps -> 16 ms)."""
        return 1000 // self.target_fps


@dataclass(frozen=True)
class ColorConfig:
    """RGB fill colors handed to the renderer."""
    background: Tuple[int, int, int]
    wall: Tuple[int, int, int]
    player: Tuple[int, int, int]


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    screen: ScreenConfig
    cave: CaveConfig
    player: PlayerConfig
    session: SessionConfig
    loop: LoopConfig
    colors: ColorConfig

    @property
    def rows(self) -> int:
        return self.screen.rows

    @property
    def cols(self) -> int:
        return self.screen.cols

    @property
    def last_column_index(self) -> int:
        return self.screen.cols - 1

    @property
    def tile_size(self) -> int:
        return self.screen.tile_size


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    screen = config.screen
    if screen.tile_size <= 0:
        raise ValueError(f"tile_size must be positive, got {screen.tile_size}")
    if screen.width % screen.tile_size or screen.height % screen.tile_size:
        raise ValueError(
            f"Screen size {screen.width}x{screen.height} must be a multiple "
            f"of tile_size ({screen.tile_size})"
        )
    # Ceiling, floor and at least one open row
    if screen.rows < 3:
        raise ValueError(f"Screen must be at least 3 tiles high, got {screen.rows}")

    cave = config.cave
    if cave.scroll_interval_ms <= 0:
        raise ValueError(f"scroll_interval_ms must be positive, got {cave.scroll_interval_ms}")
    if not 0 <= cave.visible_min < cave.visible_max < cave.magnitude_upper:
        raise ValueError(
            f"Visible range ({cave.visible_min}, {cave.visible_max}] must lie "
            f"inside [0, {cave.magnitude_upper})"
        )

    player = config.player
    if player.sprite_width > screen.tile_size or player.sprite_height > screen.tile_size:
        raise ValueError(
            f"Player sprite {player.sprite_width}x{player.sprite_height} "
            f"must fit inside one tile ({screen.tile_size})"
        )
    for name, row, col in (
        ("respawn", player.respawn_row, player.respawn_col),
        ("start", player.start_row, 0),
    ):
        if not (0 <= row < screen.rows and 0 <= col < screen.cols):
            raise ValueError(f"{name} cell ({row}, {col}) lies outside the tile grid")

    if config.session.game_over_policy not in GAME_OVER_POLICIES:
        raise ValueError(
            f"game_over_policy must be one of {GAME_OVER_POLICIES}, "
            f"got '{config.session.game_over_policy}'"
        )

    if config.loop.target_fps <= 0:
        raise ValueError(f"target_fps must be positive, got {config.loop.target_fps}")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    screen_data = raw["screen"]
    screen = ScreenConfig(
        width=int(screen_data["width"]),
        height=int(screen_data["height"]),
        tile_size=int(screen_data["tile_size"])
    )

    cave_data = raw["cave"]
    cave = CaveConfig(
        scroll_interval_ms=int(cave_data["scroll_interval_ms"]),
        magnitude_upper=int(cave_data.get("magnitude_upper", 64)),
        visible_min=int(cave_data.get("visible_min", 2)),
        visible_max=int(cave_data.get("visible_max", 8))
    )

    player_data = raw["player"]
    if "start_row" in player_data:
        start_row = int(player_data["start_row"])
    else:
        start_row = screen.height // max(screen.tile_size, 1) // 2
    player = PlayerConfig(
        sprite_width=int(player_data["sprite_width"]),
        sprite_height=int(player_data["sprite_height"]),
        start_x=int(player_data.get("start_x", 0)),
        start_row=start_row,
        climb_speed=int(player_data["climb_speed"]),
        fall_speed=int(player_data["fall_speed"]),
        respawn_row=int(player_data.get("respawn_row", start_row)),
        respawn_col=int(player_data.get("respawn_col", 0))
    )

    session_data = raw.get("session", {})
    session = SessionConfig(
        starting_lives=int(session_data.get("starting_lives", 3)),
        clear_bonus=int(session_data.get("clear_bonus", 10)),
        game_over_policy=str(session_data.get("game_over_policy", "menu"))
    )

    loop_data = raw.get("loop", {})
    loop = LoopConfig(
        target_fps=int(loop_data.get("target_fps", 60))
    )

    colors_data = raw.get("colors", {})
    colors = ColorConfig(
        background=_parse_color(colors_data.get("background", [0, 0, 0])),
        wall=_parse_color(colors_data.get("wall", [170, 110, 60])),
        player=_parse_color(colors_data.get("player", [230, 200, 40]))
    )

    config = GameConfig(
        screen=screen,
        cave=cave,
        player=player,
        session=session,
        loop=loop,
        colors=colors
    )

    _validate_config(config)
    return config


# Module-level cache for convenience; GameConfig is immutable
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
