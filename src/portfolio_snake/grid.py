"""Playable grid derived from a pixel area and a fixed cell size."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import numpy as np

from portfolio_snake.errors import ConfigurationError
from portfolio_snake.snake import Cell

MIN_TILES = 3

# Food never spawns on the outermost ring of cells.
SPAWN_MARGIN = 1


@dataclass(frozen=True)
class Grid:
    """Immutable playable area measured in tiles.

    Coordinates are (x, y) = (column, row); the origin is the top-left cell.
    """

    tiles_x: int
    tiles_y: int
    cell_size: int

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ConfigurationError("cell_size must be positive.")
        if self.tiles_x < MIN_TILES or self.tiles_y < MIN_TILES:
            raise ConfigurationError(
                f"Playable area yields a {self.tiles_x}×{self.tiles_y} grid; "
                f"at least {MIN_TILES}×{MIN_TILES} tiles are required."
            )

    @classmethod
    def from_area(cls, width: int, height: int, cell_size: int) -> Grid:
        """Build a grid from a playable pixel area."""
        if cell_size <= 0:
            raise ConfigurationError("cell_size must be positive.")
        if width < 0 or height < 0:
            raise ConfigurationError("Playable area cannot be negative.")
        return cls(
            tiles_x=int(width // cell_size),
            tiles_y=int(height // cell_size),
            cell_size=int(cell_size),
        )

    @property
    def pixel_size(self) -> tuple[int, int]:
        return self.tiles_x * self.cell_size, self.tiles_y * self.cell_size

    def in_bounds(self, cell: Cell) -> bool:
        """Check whether a cell lies within the grid."""
        x, y = cell
        return 0 <= x < self.tiles_x and 0 <= y < self.tiles_y

    def center(self) -> Cell:
        return Cell(self.tiles_x // 2, self.tiles_y // 2)

    def interior_bounds(self) -> tuple[range, range]:
        """Return the x and y ranges of cells eligible for food."""
        return (
            range(SPAWN_MARGIN, self.tiles_x - SPAWN_MARGIN),
            range(SPAWN_MARGIN, self.tiles_y - SPAWN_MARGIN),
        )

    def free_cells(
        self, occupied: Iterable[Cell], margin: int = SPAWN_MARGIN,
    ) -> list[Cell]:
        """Return every cell at least *margin* cells from the edge and not
        present in *occupied*, in row-major order.
        """
        xs = range(margin, self.tiles_x - margin)
        ys = range(margin, self.tiles_y - margin)
        free = np.ones((self.tiles_y, self.tiles_x), dtype=bool)
        for x, y in occupied:
            if self.in_bounds(Cell(x, y)):
                free[y, x] = False
        window = free[ys.start:ys.stop, xs.start:xs.stop]
        rows, cols = np.nonzero(window)
        return [
            Cell(c + xs.start, r + ys.start)
            for r, c in zip(rows.tolist(), cols.tolist(), strict=True)
        ]

    def to_dict(self) -> dict:
        """Serialize grid dimensions to a dictionary."""
        return {
            "tiles_x": self.tiles_x,
            "tiles_y": self.tiles_y,
            "cell_size": self.cell_size,
        }
