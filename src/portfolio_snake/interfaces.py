"""Collaborator contracts the engine drives: renderers and score stores."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from portfolio_snake.engine import Snapshot


class Renderer(Protocol):
    """Draws the playable field and the state overlays."""

    def draw_field(self, snapshot: Snapshot) -> None: ...

    def draw_overlay(self, snapshot: Snapshot) -> None: ...


class HighScoreStore(Protocol):
    """Persists the best score across sessions."""

    def load_high_score(self) -> int: ...

    def save_high_score(self, score: int) -> None: ...


class NullRenderer:
    """Renderer that draws nothing, for headless simulation."""

    def draw_field(self, snapshot: Snapshot) -> None:
        pass

    def draw_overlay(self, snapshot: Snapshot) -> None:
        pass


class RecordingRenderer:
    """Keeps the most recent snapshots handed to it."""

    def __init__(self, maxlen: int = 100) -> None:
        self.fields: deque[Snapshot] = deque(maxlen=maxlen)
        self.overlays: deque[Snapshot] = deque(maxlen=maxlen)

    @property
    def last(self) -> Snapshot | None:
        return self.fields[-1] if self.fields else None

    def draw_field(self, snapshot: Snapshot) -> None:
        self.fields.append(snapshot)

    def draw_overlay(self, snapshot: Snapshot) -> None:
        self.overlays.append(snapshot)
