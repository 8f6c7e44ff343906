"""Difficulty profiles and the tick clock that gates simulation steps."""

from __future__ import annotations

import enum
from dataclasses import dataclass

POINTS_PER_LEVEL = 5


class Difficulty(str, enum.Enum):
    """Named timing profiles selectable before a session starts."""

    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Difficulty | str) -> Difficulty:
        """Parse a difficulty name, accepting ``"medium"`` for NORMAL."""
        if isinstance(value, Difficulty):
            return value
        name = value.strip().lower()
        if name == "medium":
            return cls.NORMAL
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown difficulty {value!r}.") from None


@dataclass(frozen=True)
class SpeedProfile:
    """Milliseconds between ticks at level 1, per level, and at the floor."""

    base: int
    increment: int
    floor: int


SPEED_PROFILES: dict[Difficulty, SpeedProfile] = {
    Difficulty.EASY: SpeedProfile(base=140, increment=4, floor=80),
    Difficulty.NORMAL: SpeedProfile(base=80, increment=3, floor=40),
    Difficulty.HARD: SpeedProfile(base=40, increment=2, floor=20),
}


def level_for_score(score: int) -> int:
    """Return the level reached with *score* points."""
    return score // POINTS_PER_LEVEL + 1


def tick_interval(difficulty: Difficulty, level: int) -> int:
    """Return the milliseconds between ticks for *difficulty* at *level*."""
    profile = SPEED_PROFILES[difficulty]
    return max(profile.base - (level - 1) * profile.increment, profile.floor)


class GameClock:
    """Converts wall time into discrete ticks at a difficulty-derived rate.

    The caller feeds timestamps in milliseconds to :meth:`poll` as often as it
    redraws; a tick is reported only once more than :attr:`interval` has
    elapsed since the last one. The first poll after construction or
    :meth:`reset` only records its timestamp as the base.
    """

    def __init__(self, difficulty: Difficulty, level: int = 1) -> None:
        if level < 1:
            raise ValueError("level must be at least 1.")
        self.difficulty = difficulty
        self.level = level
        self._last_tick: float | None = None

    @property
    def interval(self) -> int:
        return tick_interval(self.difficulty, self.level)

    def set_level(self, level: int) -> None:
        if level < 1:
            raise ValueError("level must be at least 1.")
        self.level = level

    def should_tick(self, elapsed: float) -> bool:
        """Check whether *elapsed* ms since the last tick exceeds the interval."""
        return elapsed > self.interval

    def poll(self, now: float) -> bool:
        """Report whether a tick is due at timestamp *now* (ms).

        On a due tick the base moves to *now*, not to zero.
        """
        if self._last_tick is None:
            self._last_tick = now
            return False
        if self.should_tick(now - self._last_tick):
            self._last_tick = now
            return True
        return False

    def reset(self) -> None:
        """Forget the timing base so a long gap is not read as missed ticks."""
        self._last_tick = None
