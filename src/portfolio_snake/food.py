"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

import numpy as np

from portfolio_snake.errors import SpawnExhaustion
from portfolio_snake.snake import Cell

if TYPE_CHECKING:
    from portfolio_snake.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Chooses a free cell for the next food item.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Sampling is uniform over the grid interior (one cell in from each edge)
    and rejects occupied cells. After ``max_attempts`` misses it draws from
    the exact list of free interior cells, and only when the interior is full
    does it fall back to the border ring. A full board raises
    :class:`SpawnExhaustion` instead of looping.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        max_attempts: int = 64,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def place(self, grid: Grid, occupied: Iterable[Cell]) -> Cell:
        """Return a random cell that is not in *occupied*."""
        taken = {Cell(*c) for c in occupied}
        xs, ys = grid.interior_bounds()

        if xs and ys:
            for _ in range(self.max_attempts):
                cell = Cell(
                    int(self.rng.integers(xs.start, xs.stop)),
                    int(self.rng.integers(ys.start, ys.stop)),
                )
                if cell not in taken:
                    return cell

        free = grid.free_cells(taken) or grid.free_cells(taken, margin=0)
        if not free:
            logger.warning("No free cells available for food placement.")
            raise SpawnExhaustion("No free cell left for food.")
        return free[int(self.rng.integers(len(free)))]
