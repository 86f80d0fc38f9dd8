"""Collision and landing queries.

Every function here is pure: the piece, position and grid passed in are read,
never modified.
"""

from __future__ import annotations

from dataclasses import dataclass

from .grid import GameGrid
from .pieces import Piece


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def moved(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class GuideLine:
    left: int
    right: int
    stop_y: int


def has_collision(piece: Piece, position: Position, grid: GameGrid) -> bool:
    for x, y in piece.cells_at(position.x, position.y):
        if x < 0 or x >= grid.width or y >= grid.height:
            return True
        # Rows above the board are always clear; topping out is caught at
        # spawn and at lock time instead.
        if y >= 0 and grid.is_occupied(x, y):
            return True
    return False


def compute_guide_lines(piece: Piece, position: Position, grid: GameGrid) -> GuideLine:
    columns = [x for x, _ in piece.cells_at(position.x, position.y)]
    min_x = min(columns)
    max_x = max(columns)

    stop_y = grid.height
    start_y = max(0, position.y + piece.height)
    for x in range(max(0, min_x), min(grid.width - 1, max_x) + 1):
        y = start_y
        while y < grid.height and not grid.is_occupied(x, y):
            y += 1
        stop_y = min(stop_y, y)
    return GuideLine(left=min_x, right=max_x, stop_y=stop_y)


def compute_hard_drop_position(piece: Piece, position: Position, grid: GameGrid) -> Position:
    y = position.y
    while not has_collision(piece, Position(position.x, y + 1), grid):
        y += 1
    return Position(position.x, y)
