"""Tick-based game engine composing grid, snake, food and clock logic."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from portfolio_snake.clock import Difficulty, GameClock, level_for_score
from portfolio_snake.config import GameConfig
from portfolio_snake.errors import SpawnExhaustion
from portfolio_snake.food import FoodSpawner
from portfolio_snake.grid import Grid
from portfolio_snake.interfaces import HighScoreStore, NullRenderer, Renderer
from portfolio_snake.persistence import JsonHighScoreStore, MemoryHighScoreStore
from portfolio_snake.snake import Cell, Direction, Snake

logger = logging.getLogger(__name__)

INITIAL_LENGTH = 3


class GameState(str, enum.Enum):
    """Lifecycle states of a game instance."""

    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    WON = "won"


_SESSION_OVER = (GameState.GAME_OVER, GameState.WON)
_SESSION_RUNNING = (GameState.PLAYING, GameState.PAUSED)


@dataclass(frozen=True)
class Snapshot:
    """Read-only projection of the engine handed to renderers."""

    state: GameState
    snake: tuple[Cell, ...]
    food: Cell | None
    tiles_x: int
    tiles_y: int
    cell_size: int
    score: int
    level: int
    high_score: int
    difficulty: Difficulty
    tick: int
    interval: int

    @property
    def head(self) -> Cell | None:
        return self.snake[0] if self.snake else None

    def to_dict(self) -> dict:
        """Return the snapshot as a JSON-serializable dict."""
        return {
            "state": self.state.value,
            "snake": [list(c) for c in self.snake],
            "food": list(self.food) if self.food is not None else None,
            "grid": {
                "tiles_x": self.tiles_x,
                "tiles_y": self.tiles_y,
                "cell_size": self.cell_size,
            },
            "score": self.score,
            "level": self.level,
            "high_score": self.high_score,
            "difficulty": self.difficulty.value,
            "tick": self.tick,
            "interval": self.interval,
        }


class GameEngine:
    """Single-player snake engine and its session state machine.

    The engine owns the grid, snake, food and clock. Control methods
    (:meth:`start`, :meth:`pause`, ...) return ``True`` when they changed the
    state and ``False`` when the current state forbids them. :meth:`step`
    runs exactly one tick; :meth:`update` runs one only when the clock says
    a tick is due.
    """

    def __init__(
        self,
        width: int = 500,
        height: int = 300,
        cell_size: int = 20,
        difficulty: Difficulty | str = Difficulty.NORMAL,
        renderer: Renderer | None = None,
        store: HighScoreStore | None = None,
        seed: int | None = None,
    ) -> None:
        # Validate before anything else is built.
        self.grid = Grid.from_area(width, height, cell_size)
        self.width = width
        self.height = height
        self.cell_size = cell_size

        self.difficulty = Difficulty.parse(difficulty)
        self.renderer: Renderer = renderer if renderer is not None else NullRenderer()
        self.store: HighScoreStore = (
            store if store is not None else MemoryHighScoreStore()
        )
        self.rng = np.random.default_rng(seed)
        self.food_spawner = FoodSpawner(rng=self.rng)
        self.clock = GameClock(self.difficulty)

        self.high_score = self.store.load_high_score()
        self.state = GameState.MENU
        self.snake: Snake | None = None
        self.food: Cell | None = None
        self.score = 0
        self.level = 1
        self.tick = 0
        self._pending_direction: Direction | None = None

    @classmethod
    def from_config(
        cls, config: GameConfig, renderer: Renderer | None = None,
    ) -> GameEngine:
        """Build an engine from a :class:`GameConfig`."""
        store = (
            JsonHighScoreStore(config.high_score_path)
            if config.high_score_path else None
        )
        return cls(
            width=config.width,
            height=config.height,
            cell_size=config.cell_size,
            difficulty=config.difficulty,
            renderer=renderer,
            store=store,
            seed=config.seed,
        )

    # --- configuration ---

    def select_difficulty(self, difficulty: Difficulty | str) -> bool:
        """Choose the difficulty for the next session."""
        difficulty = Difficulty.parse(difficulty)
        if self.state in _SESSION_RUNNING:
            return False
        self.difficulty = difficulty
        self.clock = GameClock(difficulty)
        return True

    def resize(self, width: int, height: int) -> bool:
        """Change the playable area used from the next session on.

        Raises :class:`ConfigurationError` for an area that is too small.
        """
        if self.state in _SESSION_RUNNING:
            return False
        Grid.from_area(width, height, self.cell_size)
        self.width = width
        self.height = height
        return True

    # --- state transitions ---

    def start(self) -> bool:
        """Start a session from the menu."""
        if self.state is not GameState.MENU:
            return False
        self._new_session()
        return True

    def restart(self) -> bool:
        """Start a fresh session after the previous one ended."""
        if self.state not in _SESSION_OVER:
            return False
        self._new_session()
        return True

    def pause(self) -> bool:
        if self.state is not GameState.PLAYING:
            return False
        self.state = GameState.PAUSED
        logger.info("Game paused at tick %d.", self.tick)
        self.render()
        return True

    def resume(self) -> bool:
        if self.state is not GameState.PAUSED:
            return False
        self.state = GameState.PLAYING
        self.clock.reset()
        logger.info("Game resumed at tick %d.", self.tick)
        self.render()
        return True

    def toggle_pause(self) -> bool:
        if self.state is GameState.PLAYING:
            return self.pause()
        return self.resume()

    def close(self) -> bool:
        """Abandon whatever is going on and return to the menu."""
        if self.state is GameState.MENU:
            return False
        self.state = GameState.MENU
        self.snake = None
        self.food = None
        self._pending_direction = None
        self.clock = GameClock(self.difficulty)
        logger.info("Game closed; back to menu.")
        self.render()
        return True

    # --- input ---

    def set_direction(self, direction: Direction) -> bool:
        """Buffer a direction change for the next tick.

        The last accepted change before a tick wins. Reversals and repeats of
        the current direction are ignored.
        """
        if self.state is not GameState.PLAYING or self.snake is None:
            return False
        current = self.snake.direction
        if direction is current:
            return False
        if len(self.snake) >= 2 and direction.is_reverse_of(current):
            return False
        self._pending_direction = direction
        return True

    @property
    def pending_direction(self) -> Direction | None:
        return self._pending_direction

    # --- simulation ---

    def update(self, now: float) -> bool:
        """Advance the simulation if a tick is due at *now* (ms).

        Redraws on every call regardless. Returns ``True`` when a tick ran.
        """
        if self.state is GameState.PLAYING and self.clock.poll(now):
            self.step()
            return True
        self.render()
        return False

    def step(self) -> Snapshot:
        """Advance the game by exactly one tick and publish the snapshot."""
        if self.state is not GameState.PLAYING or self.snake is None:
            return self.snapshot()

        snake = self.snake
        direction = snake.direction
        if self._pending_direction is not None:
            pending = self._pending_direction
            self._pending_direction = None
            if not (len(snake) >= 2 and pending.is_reverse_of(direction)):
                direction = pending

        candidate = snake.next_head(direction)

        # --- boundary check ---
        if not self.grid.in_bounds(candidate):
            self._end_session(
                GameState.GAME_OVER, f"hit the wall at {tuple(candidate)}",
            )
            return self.snapshot()

        # --- self-collision check (look-ahead) ---
        ate_food = candidate == self.food
        if snake.collides_with_self(candidate, ate_food=ate_food):
            self._end_session(
                GameState.GAME_OVER, f"ran into itself at {tuple(candidate)}",
            )
            return self.snapshot()

        # --- move ---
        snake.advance(direction)
        snake.grow_or_shrink(ate_food)
        self.tick += 1

        if ate_food:
            self.score += 1
            self.level = level_for_score(self.score)
            self.clock.set_level(self.level)
            try:
                self.food = self.food_spawner.place(self.grid, snake.occupied())
            except SpawnExhaustion:
                self.food = None
                self._end_session(GameState.WON, "filled the board")
                return self.snapshot()

        snapshot = self.snapshot()
        self.renderer.draw_field(snapshot)
        return snapshot

    def snapshot(self) -> Snapshot:
        """Return a read-only view of the current state."""
        return Snapshot(
            state=self.state,
            snake=tuple(self.snake.segments) if self.snake is not None else (),
            food=self.food,
            tiles_x=self.grid.tiles_x,
            tiles_y=self.grid.tiles_y,
            cell_size=self.grid.cell_size,
            score=self.score,
            level=self.level,
            high_score=self.high_score,
            difficulty=self.difficulty,
            tick=self.tick,
            interval=self.clock.interval,
        )

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return self.snapshot().to_dict()

    def render(self) -> Snapshot:
        """Draw the field, plus the overlay when not actively playing."""
        snapshot = self.snapshot()
        self.renderer.draw_field(snapshot)
        if snapshot.state is not GameState.PLAYING:
            self.renderer.draw_overlay(snapshot)
        return snapshot

    # --- internals ---

    def _new_session(self) -> None:
        self.grid = Grid.from_area(self.width, self.height, self.cell_size)
        center = self.grid.center()
        head = Cell(max(center.x, INITIAL_LENGTH - 1), center.y)
        self.snake = Snake.spawn(head, Direction.RIGHT, INITIAL_LENGTH)
        self.score = 0
        self.level = 1
        self.tick = 0
        self._pending_direction = None
        self.clock = GameClock(self.difficulty)
        self.food = self.food_spawner.place(self.grid, self.snake.occupied())
        self.state = GameState.PLAYING
        logger.info(
            "Game started on a %dx%d grid (difficulty=%s, interval=%dms).",
            self.grid.tiles_x, self.grid.tiles_y,
            self.difficulty.value, self.clock.interval,
        )
        self.render()

    def _end_session(self, state: GameState, reason: str) -> None:
        """Finish the session and record a new high score if one was set.

        The store is re-read first since other engines may share it; the
        persisted value never goes down.
        """
        self.state = state
        logger.info(
            "Snake %s at tick %d with score %d.", reason, self.tick, self.score,
        )
        self.high_score = max(self.high_score, self.store.load_high_score())
        if self.score > self.high_score:
            self.high_score = self.score
            self.store.save_high_score(self.score)
            logger.info("New high score: %d.", self.score)
        self.render()
