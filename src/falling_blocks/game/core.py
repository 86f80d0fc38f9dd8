from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple

import numpy as np

from .factory import PieceFactory
from .grid import GameGrid
from .lock import clear_completed_rows, lock_piece
from .pieces import Piece
from .placement import (
    GuideLine,
    Position,
    compute_guide_lines,
    compute_hard_drop_position,
    has_collision,
)
from .rules import ScoringRules


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE_CW = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class GameState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_y: int = 0
    tick_interval_ms: int = 1500


@dataclass
class GameSession:
    """Everything that changes during one game, owned by FallingBlocksGame."""

    grid: GameGrid
    current: Optional[Piece] = None
    next: Optional[Piece] = None
    position: Position = Position(0, 0)
    score: int = 0
    lines_cleared: int = 0
    state: GameState = GameState.NOT_STARTED
    guide: Optional[GuideLine] = None


class FallingBlocksGame:
    """Lifecycle of a single game: NOT_STARTED -> RUNNING -> GAME_OVER.

    Commands run to completion one at a time; the host delivers `tick()` on
    a fixed interval while the game is running and stops once it is not.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        factory: Optional[PieceFactory] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.factory = factory or PieceFactory(self.config.random_seed)
        self.session = GameSession(grid=self._empty_grid())

    def _empty_grid(self) -> GameGrid:
        return GameGrid.empty(self.config.width, self.config.height)

    @property
    def spawn_position(self) -> Position:
        return Position(self.config.width // 2 - 1, self.config.spawn_y)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start(self) -> None:
        grid = self._empty_grid()
        current = self.factory.next_piece()
        upcoming = self.factory.next_piece()
        position = self.spawn_position
        if has_collision(current, position, grid):
            self.session = GameSession(grid=grid, state=GameState.GAME_OVER)
            return
        self.session = GameSession(
            grid=grid,
            current=current,
            next=upcoming,
            position=position,
            state=GameState.RUNNING,
            guide=compute_guide_lines(current, position, grid),
        )

    def abort(self) -> None:
        if self.session.state is GameState.NOT_STARTED:
            return
        self.session = GameSession(grid=self._empty_grid())

    def tick(self) -> bool:
        return self.move_piece(0, 1)

    def move_piece(self, dx: int, dy: int) -> bool:
        s = self.session
        if s.state is not GameState.RUNNING:
            return False
        assert s.current is not None
        candidate = s.position.moved(dx, dy)
        if not has_collision(s.current, candidate, s.grid):
            s.position = candidate
            s.guide = compute_guide_lines(s.current, candidate, s.grid)
            return True
        if dy > 0:
            self._lock_current()
        return False

    def rotate(self) -> bool:
        s = self.session
        if s.state is not GameState.RUNNING:
            return False
        assert s.current is not None
        rotated = s.current.rotated()
        if has_collision(rotated, s.position, s.grid):
            return False
        s.current = rotated
        s.guide = compute_guide_lines(rotated, s.position, s.grid)
        return True

    def hard_drop(self) -> None:
        s = self.session
        if s.state is not GameState.RUNNING:
            return
        assert s.current is not None
        s.position = compute_hard_drop_position(s.current, s.position, s.grid)
        # The piece now rests on something, so this move is blocked and locks it
        self.move_piece(0, 1)

    def _lock_current(self) -> None:
        s = self.session
        assert s.current is not None
        result = lock_piece(s.grid, s.current, s.position)
        if result.game_over:
            s.state = GameState.GAME_OVER
            s.guide = None
            return
        assert result.grid is not None
        s.grid, lines = clear_completed_rows(result.grid)
        s.lines_cleared += lines
        s.score += self.rules.score_for_lines(lines)
        self._spawn_next()

    def _spawn_next(self) -> None:
        s = self.session
        s.current = s.next
        s.next = self.factory.next_piece()
        s.position = self.spawn_position
        assert s.current is not None
        if has_collision(s.current, s.position, s.grid):
            s.state = GameState.GAME_OVER
            s.guide = None
            return
        s.guide = compute_guide_lines(s.current, s.position, s.grid)

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if self.session.state is not GameState.RUNNING:
            return self.get_state(), 0, self.game_over, {}

        score_before = self.session.score
        if action == Action.LEFT:
            self.move_piece(-1, 0)
        elif action == Action.RIGHT:
            self.move_piece(1, 0)
        elif action == Action.ROTATE_CW:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.move_piece(0, 1)
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

        reward = self.session.score - score_before
        info = {
            "score": self.session.score,
            "lines_cleared_total": self.session.lines_cleared,
        }
        return self.get_state(), reward, self.game_over, info

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        return self.session.state

    @property
    def running(self) -> bool:
        return self.session.state is GameState.RUNNING

    @property
    def game_over(self) -> bool:
        return self.session.state is GameState.GAME_OVER

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def lines_cleared(self) -> int:
        return self.session.lines_cleared

    @property
    def current_piece(self) -> Optional[Piece]:
        return self.session.current

    @property
    def next_piece(self) -> Optional[Piece]:
        return self.session.next

    @property
    def position(self) -> Position:
        return self.session.position

    @property
    def guide_lines(self) -> Optional[GuideLine]:
        if not self.running:
            return None
        return self.session.guide

    @property
    def grid(self) -> GameGrid:
        return self.session.grid.copy()

    def can_move(self, dx: int, dy: int) -> bool:
        s = self.session
        if not self.running or s.current is None:
            return False
        return not has_collision(s.current, s.position.moved(dx, dy), s.grid)

    def can_rotate(self) -> bool:
        s = self.session
        if not self.running or s.current is None:
            return False
        return not has_collision(s.current.rotated(), s.position, s.grid)

    def composited_grid(self) -> GameGrid:
        """Copy of the locked grid with the falling piece drawn in."""
        s = self.session
        display = s.grid.copy()
        if s.current is not None and self.running:
            for x, y in s.current.cells_at(s.position.x, s.position.y):
                if display.is_inside(x, y):
                    display.fill(x, y, int(s.current.kind), s.current.color)
        return display

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        s = self.session
        state = s.grid.clone_state()
        if s.current is not None and self.running:
            for x, y in s.current.cells_at(s.position.x, s.position.y):
                if 0 <= y < s.grid.height and 0 <= x < s.grid.width:
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(s.current.kind)
        return state
