"""
Cave Core - game logic for the cave runner.

This module provides the cave generator/scroller, the player entity, the
collision/progress rules, the game state machine and the fixed-cadence
frame loop, plus a Gymnasium environment wrapper.

Main exports:
- CaveGame: One play session (state machine + per-tick evaluation)
- FrameLoop: Fixed-cadence driver over injected clock/input/renderer
- Cave, TileGrid, Tile: Procedural cave storage and generation
- Player: The dragon sprite
- CaveEnv: Gymnasium environment for agents
- GameConfig: Configuration loaded from game_config.yaml
"""

from flappy_dragon.cave_core.config_loader import GameConfig, load_config
from flappy_dragon.cave_core.tiles import Tile, TileGrid
from flappy_dragon.cave_core.rng import TerrainRng
from flappy_dragon.cave_core.cave import Cave
from flappy_dragon.cave_core.player import Player
from flappy_dragon.cave_core.rules import ProgressRules, LivesRules
from flappy_dragon.cave_core.game_state import (
    GameState,
    InputEvent,
    Menu,
    Playing,
    Respawning,
    Quit,
    transition,
)
from flappy_dragon.cave_core.game import CaveGame, TickResult
from flappy_dragon.cave_core.frame_loop import FrameLoop, FrameStats
from flappy_dragon.cave_core.render_data import RenderRect
from flappy_dragon.cave_core.autopilot import AutoPilot
from flappy_dragon.cave_core.env_gym import CaveEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Tile",
    "TileGrid",
    "TerrainRng",
    "Cave",
    "Player",
    "ProgressRules",
    "LivesRules",
    "GameState",
    "InputEvent",
    "Menu",
    "Playing",
    "Respawning",
    "Quit",
    "transition",
    "CaveGame",
    "TickResult",
    "FrameLoop",
    "FrameStats",
    "RenderRect",
    "AutoPilot",
    "CaveEnv",
]
