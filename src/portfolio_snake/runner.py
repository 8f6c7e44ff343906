"""Cancellable asyncio frame loop driving a game engine."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from portfolio_snake.engine import GameEngine

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class GameRunner:
    """Calls :meth:`GameEngine.update` once per frame on the event loop.

    The frame rate is independent of the tick rate: the engine's clock decides
    when a frame also advances the simulation. Only one loop task exists per
    runner; :meth:`start` awaits the cancellation of the previous one first.
    """

    def __init__(
        self,
        engine: GameEngine,
        frame_interval: float = 1 / 60,
        now: Callable[[], float] = _monotonic_ms,
    ) -> None:
        if frame_interval <= 0:
            raise ValueError("frame_interval must be positive.")
        self.engine = engine
        self.frame_interval = frame_interval
        self._now = now
        self._task: asyncio.Task | None = None
        self.frames = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """(Re)start the frame loop."""
        await self.stop()
        self.engine.clock.reset()
        self._task = asyncio.create_task(self._frame_loop())
        logger.info("Frame loop started (%.1f fps).", 1 / self.frame_interval)

    async def stop(self) -> None:
        """Cancel the frame loop and wait until it has exited."""
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    async def _frame_loop(self) -> None:
        try:
            while True:
                self.engine.update(self._now())
                self.frames += 1
                await asyncio.sleep(self.frame_interval)
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled after %d frames.", self.frames)
            raise
        except Exception:
            logger.exception("Frame loop error; stopping.")
