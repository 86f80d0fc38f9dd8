from __future__ import annotations

from typing import Optional, Tuple

import pygame

from falling_blocks.game import FallingBlocksGame, GameGrid, GameState, Piece


EMPTY_COLOR = (20, 20, 26)
BACKGROUND = (10, 10, 14)
GUIDE_COLOR = (0, 255, 255)
TEXT_COLOR = (230, 230, 230)

CONTROLS = (
    "Left/Right : Move",
    "Up : Rotate",
    "Down : Accelerate drop",
    "Space : Instant drop",
    "Esc : Stop",
    "Enter : Start",
)


def _cell_color(board: GameGrid, x: int, y: int) -> Tuple[int, int, int]:
    if not board.is_occupied(x, y):
        return EMPTY_COLOR
    r, g, b = (int(c) for c in board.colors[y, x])
    return (r, g, b)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_cells: int = 7) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_cells = panel_cells
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, game: FallingBlocksGame) -> Tuple[int, int]:
        board_w = game.config.width * self.cell_size
        board_h = game.config.height * self.cell_size
        panel_w = self.panel_cells * self.cell_size
        return (self.margin * 3 + board_w + panel_w, self.margin * 2 + board_h)

    def _grid_surface(self, board: GameGrid) -> pygame.Surface:
        width = board.width * self.cell_size
        height = board.height * self.cell_size
        surf = pygame.Surface((width, height))
        surf.fill((30, 30, 36))
        for y in range(board.height):
            for x in range(board.width):
                rect = pygame.Rect(
                    x * self.cell_size,
                    y * self.cell_size,
                    self.cell_size - 1,
                    self.cell_size - 1,
                )
                pygame.draw.rect(surf, _cell_color(board, x, y), rect)
        return surf

    def _draw_dashed_vline(self, surf: pygame.Surface, x: int, top: int, bottom: int, dash: int = 4) -> None:
        y = top
        while y < bottom:
            end = min(y + dash, bottom)
            pygame.draw.line(surf, GUIDE_COLOR, (x, y), (x, end), 2)
            y += dash * 2

    def draw_guide_lines(self, surf: pygame.Surface, game: FallingBlocksGame) -> None:
        guide = game.guide_lines
        piece = game.current_piece
        if guide is None or piece is None:
            return
        if guide.left < 0 or guide.stop_y > game.config.height:
            return
        top = (game.position.y + piece.height) * self.cell_size
        bottom = guide.stop_y * self.cell_size
        if bottom <= top:
            return
        self._draw_dashed_vline(surf, guide.left * self.cell_size, top, bottom)
        self._draw_dashed_vline(surf, (guide.right + 1) * self.cell_size - 1, top, bottom)

    def board_surface(self, game: FallingBlocksGame) -> pygame.Surface:
        surf = self._grid_surface(game.composited_grid())
        self.draw_guide_lines(surf, game)
        return surf

    def preview_surface(self, piece: Piece) -> pygame.Surface:
        # Just big enough for the piece
        surf = pygame.Surface((piece.width * self.cell_size, piece.height * self.cell_size))
        surf.fill((255, 255, 255))
        for dx, dy in piece.cells():
            rect = pygame.Rect(dx * self.cell_size, dy * self.cell_size, self.cell_size - 1, self.cell_size - 1)
            pygame.draw.rect(surf, piece.color, rect)
        return surf

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None or self._big_font is None:
            self._font = pygame.font.SysFont(None, 24)
            self._big_font = pygame.font.SysFont(None, 40)
        return self._font, self._big_font

    def _draw_panel(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        font, big = self._fonts()
        x0 = self.margin * 2 + game.config.width * self.cell_size
        y = self.margin
        screen.blit(big.render(str(game.score), True, TEXT_COLOR), (x0, y))
        y += 50
        screen.blit(font.render("Next", True, TEXT_COLOR), (x0, y))
        y += 28
        if game.next_piece is not None:
            screen.blit(self.preview_surface(game.next_piece), (x0, y))
        y += 4 * self.cell_size + 20
        for line in CONTROLS:
            screen.blit(font.render(line, True, TEXT_COLOR), (x0, y))
            y += 22
        if game.state is GameState.NOT_STARTED:
            y += 10
            screen.blit(font.render("Press Enter to start", True, GUIDE_COLOR), (x0, y))

    def _draw_game_over(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        font, big = self._fonts()
        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 128))
        screen.blit(shade, (0, 0))
        cx, cy = screen.get_width() // 2, screen.get_height() // 2
        lines = [
            (big, "Game Over!"),
            (font, f"Your final score: {game.score} points"),
            (font, "Press Enter to play again"),
        ]
        for i, (f, text) in enumerate(lines):
            surf = f.render(text, True, (255, 255, 255))
            screen.blit(surf, surf.get_rect(center=(cx, cy - 30 + i * 34)))

    def draw(self, screen: pygame.Surface, game: FallingBlocksGame) -> None:
        screen.fill(BACKGROUND)
        screen.blit(self.board_surface(game), (self.margin, self.margin))
        self._draw_panel(screen, game)
        if game.game_over:
            self._draw_game_over(screen, game)
        pygame.display.flip()
