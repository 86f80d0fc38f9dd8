from __future__ import annotations

import os
from typing import Iterable, List

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

from falling_blocks.game import (  # noqa: E402
    FallingBlocksGame,
    GameConfig,
    GameGrid,
    Piece,
    PieceFactory,
    Position,
    TetrominoType,
)


class SequenceFactory(PieceFactory):
    """Hands out a fixed, repeating sequence of kinds."""

    def __init__(self, kinds: Iterable[TetrominoType]) -> None:
        super().__init__(seed=0)
        self.kinds: List[TetrominoType] = list(kinds)
        self.drawn = 0

    def next_piece(self) -> Piece:
        kind = self.kinds[self.drawn % len(self.kinds)]
        self.drawn += 1
        return Piece(kind=kind, color=(10, 20, 30))


def fill_row(grid: GameGrid, y: int, skip: Iterable[int] = ()) -> None:
    skipped = set(skip)
    for x in range(grid.width):
        if x not in skipped:
            grid.fill(x, y, 1, (200, 200, 200))


@pytest.fixture
def empty_grid() -> GameGrid:
    return GameGrid.empty(10, 20)


@pytest.fixture
def make_game():
    def _make(*kinds: TetrominoType) -> FallingBlocksGame:
        factory = SequenceFactory(kinds or (TetrominoType.O,))
        game = FallingBlocksGame(GameConfig(), factory=factory)
        game.start()
        return game

    return _make


def place(game: FallingBlocksGame, grid: GameGrid, piece: Piece, position: Position) -> None:
    """Put the game into a hand-built running position."""
    game.session.grid = grid
    game.session.current = piece
    game.session.position = position
