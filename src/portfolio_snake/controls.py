"""Input adapter translating key presses and control messages into engine calls."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from portfolio_snake.engine import GameState
from portfolio_snake.snake import Direction

if TYPE_CHECKING:
    from portfolio_snake.engine import GameEngine


class Action(str, enum.Enum):
    """Device-independent input events."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    PAUSE_TOGGLE = "toggle_pause"
    RESTART = "restart"
    CLOSE = "close"


_DIRECTION_ACTIONS: dict[Action, Direction] = {
    Action.UP: Direction.UP,
    Action.DOWN: Direction.DOWN,
    Action.LEFT: Direction.LEFT,
    Action.RIGHT: Direction.RIGHT,
}

_KEY_MAP: dict[str, Action] = {
    "arrowup": Action.UP,
    "arrowdown": Action.DOWN,
    "arrowleft": Action.LEFT,
    "arrowright": Action.RIGHT,
    "w": Action.UP,
    "s": Action.DOWN,
    "a": Action.LEFT,
    "d": Action.RIGHT,
    "p": Action.PAUSE_TOGGLE,
    "space": Action.RESTART,
    "enter": Action.START,
    "escape": Action.CLOSE,
}


def action_for_key(key: str) -> Action | None:
    """Map a keyboard key name (as browsers report it) to an action."""
    if key == " ":
        return Action.RESTART
    return _KEY_MAP.get(key.strip().lower())


def steer(engine: GameEngine, direction: Direction) -> bool:
    """Buffer *direction*, or start the game when on the menu."""
    if engine.state is GameState.MENU:
        return engine.start()
    return engine.set_direction(direction)


def apply_action(engine: GameEngine, action: Action) -> bool:
    """Route *action* to the engine. Returns whether anything changed.

    A direction pressed on the menu starts the game.
    """
    direction = _DIRECTION_ACTIONS.get(action)
    if direction is not None:
        return steer(engine, direction)

    if action is Action.START:
        return engine.start()
    if action is Action.PAUSE:
        return engine.pause()
    if action is Action.RESUME:
        return engine.resume()
    if action is Action.PAUSE_TOGGLE:
        return engine.toggle_pause()
    if action is Action.RESTART:
        return engine.restart()
    if action is Action.CLOSE:
        return engine.close()

    return False


def handle_key(engine: GameEngine, key: str) -> bool:
    """Apply the action bound to *key*, ignoring unbound keys."""
    action = action_for_key(key)
    if action is None:
        return False
    return apply_action(engine, action)
