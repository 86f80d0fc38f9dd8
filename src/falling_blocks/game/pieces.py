from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Sequence, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray
Color = Tuple[int, int, int]


_RAW_SHAPES: Dict[TetrominoType, List[List[int]]] = {
    TetrominoType.I: [[1, 1, 1, 1]],
    TetrominoType.J: [[1, 0, 0], [1, 1, 1]],
    TetrominoType.L: [[0, 0, 1], [1, 1, 1]],
    TetrominoType.O: [[1, 1], [1, 1]],
    TetrominoType.S: [[0, 1, 1], [1, 1, 0]],
    TetrominoType.T: [[0, 1, 0], [1, 1, 1]],
    TetrominoType.Z: [[1, 1, 0], [0, 1, 1]],
}


def _frozen(shape: Shape) -> Shape:
    out = np.array(shape, dtype=np.int8, copy=True)
    out.setflags(write=False)
    return out


def validate_shape(rows: Sequence[Sequence[int]]) -> Shape:
    """Turn a nested list into a read-only 0/1 matrix.

    Raises ValueError for empty, ragged or non-binary matrices; a bad catalog
    entry is an initialization error, not something the engine recovers from.
    """
    if len(rows) == 0 or len(rows[0]) == 0:
        raise ValueError("shape matrix must have at least one row and one column")
    width = len(rows[0])
    for r, row in enumerate(rows):
        if len(row) != width:
            raise ValueError(f"shape row {r} has {len(row)} cells, expected {width}")
        for v in row:
            if v not in (0, 1):
                raise ValueError(f"shape cells must be 0 or 1, got {v!r}")
    shape = np.array(rows, dtype=np.int8)
    if not shape.any():
        raise ValueError("shape matrix has no occupied cells")
    return _frozen(shape)


def build_catalog(raw: Dict[TetrominoType, List[List[int]]]) -> Dict[TetrominoType, Shape]:
    return {kind: validate_shape(rows) for kind, rows in raw.items()}


BASE_SHAPES: Dict[TetrominoType, Shape] = build_catalog(_RAW_SHAPES)


def rotate_cw(shape: Shape) -> Shape:
    # rotated[col][rows - 1 - row] = shape[row][col]
    return _frozen(np.rot90(shape, 1, axes=(1, 0)))


def color_token(color: Color) -> str:
    r, g, b = color
    return f"rgb({r}, {g}, {b})"


@dataclass(frozen=True, eq=False)
class Piece:
    """A tetromino shape plus its display color.

    Pieces never change; `rotated()` hands back a new one. Color is cosmetic
    and plays no part in collision, rotation or clearing.
    """

    kind: TetrominoType
    color: Color = (255, 255, 255)
    shape: Shape = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        shape = BASE_SHAPES[self.kind] if self.shape is None else _frozen(self.shape)
        object.__setattr__(self, "shape", shape)

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def color_token(self) -> str:
        return color_token(self.color)

    def rotated(self) -> "Piece":
        return Piece(self.kind, self.color, rotate_cw(self.shape))

    def same_shape(self, other: "Piece") -> bool:
        return np.array_equal(self.shape, other.shape)

    def cells(self) -> List[Tuple[int, int]]:
        ys, xs = np.nonzero(self.shape)
        return [(int(x), int(y)) for y, x in zip(ys, xs)]

    def cells_at(self, origin_x: int, origin_y: int) -> List[Tuple[int, int]]:
        return [(origin_x + dx, origin_y + dy) for dx, dy in self.cells()]
