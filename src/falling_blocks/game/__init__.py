"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- GameGrid: Board of empty and occupied cells
- Piece: Immutable tetromino with clockwise rotation
- TetrominoType: Enum of available piece types
- PieceFactory: Uniform random piece and color source
- has_collision / compute_guide_lines / compute_hard_drop_position: placement queries
- lock_piece / clear_completed_rows: merging landed pieces and clearing rows
- ScoringRules: Points per cleared row
- FallingBlocksGame: Lifecycle state machine driven by ticks and input
"""

from .grid import GameGrid
from .pieces import BASE_SHAPES, Piece, TetrominoType
from .factory import PieceFactory
from .placement import (
    GuideLine,
    Position,
    compute_guide_lines,
    compute_hard_drop_position,
    has_collision,
)
from .lock import LockResult, clear_completed_rows, lock_piece
from .rules import ScoringRules
from .core import Action, FallingBlocksGame, GameConfig, GameSession, GameState

__all__ = [
    "GameGrid",
    "BASE_SHAPES",
    "Piece",
    "TetrominoType",
    "PieceFactory",
    "GuideLine",
    "Position",
    "compute_guide_lines",
    "compute_hard_drop_position",
    "has_collision",
    "LockResult",
    "clear_completed_rows",
    "lock_piece",
    "ScoringRules",
    "Action",
    "FallingBlocksGame",
    "GameConfig",
    "GameSession",
    "GameState",
]
