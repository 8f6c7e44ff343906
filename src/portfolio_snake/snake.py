"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from typing import NamedTuple


class Cell(NamedTuple):
    """A grid cell addressed as (column, row)."""

    x: int
    y: int


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        dx, dy = self.value
        return Direction((-dx, -dy))

    def is_reverse_of(self, other: Direction) -> bool:
        """Check whether turning from *other* to this would be a 180° turn."""
        return self.opposite is other

    @classmethod
    def from_name(cls, name: str) -> Direction:
        """Parse a direction name such as ``"up"`` or ``"LEFT"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown direction {name!r}.") from None


class Snake:
    """A snake represented as an ordered deque of cells.

    The head is ``segments[0]``; the tail is ``segments[-1]``. Moving is split
    into :meth:`advance` (prepend a head) and :meth:`grow_or_shrink` (drop the
    tail unless food was eaten) so the engine can run its collision checks
    between the two.
    """

    def __init__(
        self,
        segments: list[Cell],
        direction: Direction = Direction.RIGHT,
    ) -> None:
        if not segments:
            raise ValueError("Snake length must be at least 1.")
        self.segments: deque[Cell] = deque(Cell(*seg) for seg in segments)
        self.direction = direction

    @classmethod
    def spawn(
        cls,
        head: Cell,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
    ) -> Snake:
        """Lay out *length* segments behind *head*, opposite to travel."""
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        dx, dy = direction.value
        segments = [Cell(head[0] - dx * i, head[1] - dy * i) for i in range(length)]
        return cls(segments, direction)

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def head(self) -> Cell:
        """Return the head cell."""
        return self.segments[0]

    @property
    def tail(self) -> Cell:
        """Return the tail cell."""
        return self.segments[-1]

    def next_head(self, direction: Direction | None = None) -> Cell:
        """Compute the next head position without moving."""
        dx, dy = (direction or self.direction).value
        x, y = self.head
        return Cell(x + dx, y + dy)

    def advance(self, direction: Direction) -> Cell:
        """Prepend a new head one unit away in *direction* and return it."""
        new_head = self.next_head(direction)
        self.direction = direction
        self.segments.appendleft(new_head)
        return new_head

    def grow_or_shrink(self, ate_food: bool) -> Cell | None:
        """Drop the tail unless food was eaten.

        Returns the vacated tail cell, or ``None`` if the snake grew.
        """
        if ate_food:
            return None
        return self.segments.pop()

    def collides_with_self(self, head: Cell, ate_food: bool = False) -> bool:
        """Check a candidate *head* against the body that will remain.

        The current tail moves away this tick unless food is eaten, so it only
        counts as an obstacle when the snake is about to grow.
        """
        body = list(self.segments)
        if not ate_food:
            body = body[:-1]
        return head in body

    def occupies(self, cell: Cell) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.segments

    def occupied(self) -> frozenset[Cell]:
        return frozenset(self.segments)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "segments": [list(seg) for seg in self.segments],
            "direction": self.direction.name.lower(),
        }
