from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .grid import GameGrid
from .pieces import Piece
from .placement import Position


@dataclass
class LockResult:
    grid: Optional[GameGrid]
    game_over: bool


def lock_piece(grid: GameGrid, piece: Piece, position: Position) -> LockResult:
    """Merge `piece` into a copy of `grid`.

    A piece that still has a cell above row 0 when it lands ends the game; in
    that case no grid is produced and the input grid is left untouched.
    """
    cells = piece.cells_at(position.x, position.y)
    if any(y < 0 for _, y in cells):
        return LockResult(grid=None, game_over=True)
    merged = grid.copy()
    for x, y in cells:
        merged.fill(x, y, int(piece.kind), piece.color)
    return LockResult(grid=merged, game_over=False)


def clear_completed_rows(grid: GameGrid) -> Tuple[GameGrid, int]:
    full_rows = grid.complete_rows()
    cleared = grid.copy()
    if full_rows.size == 0:
        return cleared, 0
    num = int(full_rows.size)
    # Remove full rows and add empty rows at the top
    cells = np.delete(grid.cells, full_rows, axis=0)
    colors = np.delete(grid.colors, full_rows, axis=0)
    cleared.cells = np.vstack((np.zeros((num, grid.width), dtype=np.int8), cells))
    cleared.colors = np.concatenate(
        (np.zeros((num, grid.width, 3), dtype=np.uint8), colors), axis=0
    )
    assert cleared.cells.shape[0] == grid.height
    return cleared, num
