from __future__ import annotations

from typing import Optional

import numpy as np

from .pieces import Color, color_token


class GameGrid:
    """Fixed-size board of empty and occupied cells.

    `cells` holds 0 for empty cells and the TetrominoType value of the locked
    piece otherwise. `colors` carries the RGB triple of that piece so hosts can
    draw it. y=0 is the top row.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.cells = np.zeros((self.height, self.width), dtype=np.int8)
        self.colors = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    @classmethod
    def empty(cls, width: int = 10, height: int = 20) -> "GameGrid":
        return cls(width, height)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return bool(self.cells[y, x] != 0)

    def fill(self, x: int, y: int, value: int, color: Color) -> None:
        self.cells[y, x] = value
        self.colors[y, x] = color

    def color_at(self, x: int, y: int) -> Optional[str]:
        if not self.is_occupied(x, y):
            return None
        r, g, b = (int(c) for c in self.colors[y, x])
        return color_token((r, g, b))

    def complete_rows(self) -> np.ndarray:
        """Indices of rows with no empty cell, top to bottom."""
        return np.where(np.all(self.cells != 0, axis=1))[0]

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.width, self.height)
        new_grid.cells = self.cells.copy()
        new_grid.colors = self.colors.copy()
        return new_grid

    def clone_state(self) -> np.ndarray:
        return self.cells.copy()
