"""Renderer that fans snapshots out to connected WebSocket clients."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from portfolio_snake.engine import Snapshot


class SnapshotFeed:
    """Engine renderer publishing snapshots to per-client queues.

    The engine redraws every frame; only snapshots that differ from the last
    published one are queued. Each queue holds a single entry, so a slow
    client skips stale frames instead of buffering them.
    """

    def __init__(self) -> None:
        self._subscribers: set[asyncio.Queue[dict]] = set()
        self._last: Snapshot | None = None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[dict]:
        queue: asyncio.Queue[dict] = asyncio.Queue(maxsize=1)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[dict]) -> None:
        self._subscribers.discard(queue)

    def draw_field(self, snapshot: Snapshot) -> None:
        self._publish(snapshot)

    def draw_overlay(self, snapshot: Snapshot) -> None:
        self._publish(snapshot)

    def _publish(self, snapshot: Snapshot) -> None:
        if snapshot == self._last:
            return
        self._last = snapshot
        payload = snapshot.to_dict()
        for queue in self._subscribers:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(payload)
