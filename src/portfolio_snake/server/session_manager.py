"""In-memory session registry, lifecycle management, and frame loops."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field

from portfolio_snake.clock import Difficulty
from portfolio_snake.controls import Action, apply_action
from portfolio_snake.engine import GameEngine
from portfolio_snake.interfaces import HighScoreStore
from portfolio_snake.persistence import MemoryHighScoreStore
from portfolio_snake.runner import GameRunner
from portfolio_snake.server.feed import SnapshotFeed
from portfolio_snake.server.models import SessionSummary

logger = logging.getLogger(__name__)

_MAX_SESSIONS = 100

SELECT_DIFFICULTY = "select_difficulty"


@dataclass
class GameSession:
    """All state for a single player's game."""

    session_id: str
    engine: GameEngine
    runner: GameRunner
    feed: SnapshotFeed
    created_at: float = field(default_factory=time.monotonic)

    def summary(self) -> SessionSummary:
        return SessionSummary(
            session_id=self.session_id,
            state=self.engine.state,
            difficulty=self.engine.difficulty,
            score=self.engine.score,
            level=self.engine.level,
            high_score=self.engine.high_score,
        )


class SessionManager:
    """Central registry managing all game sessions.

    Sessions share one high-score store, mirroring a single browser's
    persisted best score.
    """

    def __init__(
        self,
        max_sessions: int = _MAX_SESSIONS,
        frame_interval: float = 1 / 60,
        store: HighScoreStore | None = None,
    ) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1.")
        self._sessions: dict[str, GameSession] = {}
        self._max_sessions = max_sessions
        self._frame_interval = frame_interval
        self._store = store if store is not None else MemoryHighScoreStore()

    async def create_session(
        self,
        width: int = 500,
        height: int = 300,
        cell_size: int = 20,
        difficulty: Difficulty | str = Difficulty.NORMAL,
        seed: int | None = None,
    ) -> GameSession:
        """Create a session in the menu state and start its frame loop.

        Raises :class:`ConfigurationError` for an unusable playable area and
        ``ValueError`` when the registry is full.
        """
        if len(self._sessions) >= self._max_sessions:
            raise ValueError("Session limit reached. Close a session first.")

        feed = SnapshotFeed()
        engine = GameEngine(
            width=width,
            height=height,
            cell_size=cell_size,
            difficulty=difficulty,
            renderer=feed,
            store=self._store,
            seed=seed,
        )
        runner = GameRunner(engine, frame_interval=self._frame_interval)
        session_id = uuid.uuid4().hex[:12]
        session = GameSession(
            session_id=session_id, engine=engine, runner=runner, feed=feed,
        )
        self._sessions[session_id] = session
        await runner.start()
        logger.info(
            "Session %s created (%dx%d tiles, difficulty=%s).",
            session_id, engine.grid.tiles_x, engine.grid.tiles_y,
            engine.difficulty.value,
        )
        return session

    def get_session(self, session_id: str) -> GameSession | None:
        return self._sessions.get(session_id)

    def list_sessions(self) -> list[SessionSummary]:
        return [s.summary() for s in self._sessions.values()]

    def apply(
        self,
        session_id: str,
        action: str,
        difficulty: Difficulty | str | None = None,
    ) -> bool:
        """Apply a named control action to a session.

        Returns whether the engine changed state. Unknown actions raise
        ``ValueError``; unknown sessions raise ``KeyError``.
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")

        if action == SELECT_DIFFICULTY:
            if difficulty is None:
                raise ValueError("select_difficulty requires a difficulty.")
            return session.engine.select_difficulty(difficulty)

        try:
            parsed = Action(action)
        except ValueError:
            raise ValueError(f"Unknown action {action!r}.") from None
        return apply_action(session.engine, parsed)

    async def close_session(self, session_id: str) -> None:
        """Stop a session's frame loop and drop it from the registry."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise KeyError(f"Session {session_id} not found.")
        await session.runner.stop()
        logger.info("Session %s closed.", session_id)

    async def cleanup(self) -> None:
        """Cancel all running frame loops."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        await asyncio.gather(
            *(s.runner.stop() for s in sessions), return_exceptions=True,
        )
        logger.info("SessionManager cleanup complete.")
