from __future__ import annotations

import random
from typing import Optional

from .pieces import Color, Piece, TetrominoType


class PieceFactory:
    """Draws pieces uniformly and independently from the seven kinds.

    There is no bag: the same kind can come up several times in a row.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = random.Random(seed)

    def random_color(self) -> Color:
        return (self.rng.randrange(255), self.rng.randrange(255), self.rng.randrange(255))

    def next_piece(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return Piece(kind=kind, color=self.random_color())
