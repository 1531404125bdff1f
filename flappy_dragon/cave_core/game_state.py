"""
Game State Machine
==================

GameState is a closed set of variants. Menu, Playing and Respawning carry
(score, lives); Quit carries nothing and is terminal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from flappy_dragon.cave_core.player import Player


class InputEvent(Enum):
    """Discrete input events the core understands."""
    QUIT_REQUEST = "quit_request"        # Window close
    ESCAPE = "escape"                    # Cancel key down
    CONFIRM_PRESS = "confirm_press"      # Confirm key down
    CONFIRM_RELEASE = "confirm_release"  # Confirm key up


@dataclass(frozen=True)
class Menu:
    score: int
    lives: int

    name = "menu"


@dataclass(frozen=True)
class Playing:
    score: int
    lives: int

    name = "playing"


@dataclass(frozen=True)
class Respawning:
    score: int
    lives: int

    name = "respawning"


@dataclass(frozen=True)
class Quit:
    name = "quit"


GameState = Union[Menu, Playing, Respawning, Quit]


def is_terminal(state: GameState) -> bool:
    return isinstance(state, Quit)


def transition(state: GameState, event: InputEvent, player: Player) -> GameState:
    """
    Apply one input event.

    Events with no entry for the current state leave it unchanged. While
    Playing, the confirm key steers the player and the state stays the same;
    closing the window quits from any state.

    Args:
        state: Current state.
        event: The polled input event.
        player: Receives velocity changes while Playing.

    Returns:
        The new state (possibly the same object).
    """
    if isinstance(state, Quit):
        return state

    if isinstance(state, (Menu, Respawning)):
        if event in (InputEvent.QUIT_REQUEST, InputEvent.ESCAPE):
            return Quit()
        if event == InputEvent.CONFIRM_PRESS:
            return Playing(state.score, state.lives)
        return state

    if isinstance(state, Playing):
        if event == InputEvent.QUIT_REQUEST:
            return Quit()
        if event == InputEvent.ESCAPE:
            return Menu(state.score, state.lives)
        if event == InputEvent.CONFIRM_PRESS:
            player.climb()
        elif event == InputEvent.CONFIRM_RELEASE:
            player.fall()
        return state

    raise TypeError(f"Unknown game state: {state!r}")
