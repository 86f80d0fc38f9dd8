from __future__ import annotations

import argparse
from typing import Callable, Dict, Optional

import pygame

from falling_blocks.game import FallingBlocksGame, GameConfig
from .renderer import Renderer


KEY_TO_COMMAND: Dict[int, Callable[[FallingBlocksGame], object]] = {
    pygame.K_LEFT: lambda game: game.move_piece(-1, 0),
    pygame.K_RIGHT: lambda game: game.move_piece(1, 0),
    pygame.K_DOWN: lambda game: game.move_piece(0, 1),
    pygame.K_UP: lambda game: game.rotate(),
    pygame.K_SPACE: lambda game: game.hard_drop(),
}


def handle_key(game: FallingBlocksGame, key: int) -> None:
    if not game.running:
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            game.start()
        elif key == pygame.K_ESCAPE:
            game.abort()
        return
    if key == pygame.K_ESCAPE:
        game.abort()
        return
    command = KEY_TO_COMMAND.get(key)
    if command is not None:
        command(game)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--tick-ms", type=int, default=None,
                   help="Gravity interval in milliseconds (default: GameConfig.tick_interval_ms)")
    return p


def run(config: Optional[GameConfig] = None, cell_size: int = 28) -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = FallingBlocksGame(config)
        renderer = Renderer(cell_size=cell_size)

        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Falling Blocks")

        gravity_ms = game.config.tick_interval_ms
        last_fall = pygame.time.get_ticks()

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    was_running = game.running
                    handle_key(game, event.key)
                    if game.running and not was_running:
                        last_fall = pygame.time.get_ticks()

            # Gravity only while a game is in progress
            now = pygame.time.get_ticks()
            if game.running and now - last_fall >= gravity_ms:
                game.tick()
                last_fall = now

            renderer.draw(screen, game)
            clock.tick(60)
    finally:
        pygame.quit()
    print(f"Final score: {game.score}  lines: {game.lines_cleared}")


def main() -> None:
    args = build_parser().parse_args()
    config = GameConfig(random_seed=args.seed)
    if args.tick_ms is not None:
        config.tick_interval_ms = args.tick_ms
    run(config, cell_size=args.cell_size)


if __name__ == "__main__":  # pragma: no cover
    main()
