"""Portfolio Snake: headless game engine."""

from portfolio_snake.clock import Difficulty, GameClock, tick_interval
from portfolio_snake.config import GameConfig
from portfolio_snake.engine import GameEngine, GameState, Snapshot
from portfolio_snake.errors import ConfigurationError, SpawnExhaustion
from portfolio_snake.grid import Grid
from portfolio_snake.snake import Cell, Direction, Snake

__all__ = [
    "Cell",
    "ConfigurationError",
    "Difficulty",
    "Direction",
    "GameClock",
    "GameConfig",
    "GameEngine",
    "GameState",
    "Grid",
    "Snake",
    "Snapshot",
    "SpawnExhaustion",
    "tick_interval",
]
