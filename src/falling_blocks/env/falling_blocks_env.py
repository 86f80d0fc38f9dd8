from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import Action, FallingBlocksGame, GameConfig, PieceFactory


_EMPTY_RGB = (30, 30, 36)
_NO_GUIDE = (-1, -1, 0)


def compute_action_mask(game: FallingBlocksGame) -> np.ndarray:
    """True for actions that would change the game when applied now."""
    mask = np.zeros((len(Action),), dtype=np.bool_)
    if not game.running:
        mask[Action.NONE] = True
        return mask
    mask[Action.LEFT] = game.can_move(-1, 0)
    mask[Action.RIGHT] = game.can_move(1, 0)
    mask[Action.ROTATE_CW] = game.can_rotate()
    # A blocked soft drop still locks the piece, so it is always meaningful
    mask[Action.SOFT_DROP] = True
    mask[Action.HARD_DROP] = True
    mask[Action.NONE] = True
    return mask


class FallingBlocksEnv(gym.Env):
    """Single-player falling-block game exposed as a gymnasium environment.

    Each step applies one Action, then a gravity tick every `gravity_every`
    steps. The reward is the score gained during the step.
    """

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 gravity_every: int = 1,
                 max_episode_steps: int = 10000,
                 terminal_penalty: float = 0.0) -> None:
        super().__init__()
        self.game = FallingBlocksGame(config)
        self.render_mode = render_mode
        self.gravity_every = max(1, int(gravity_every))
        self.max_episode_steps = int(max_episode_steps)
        self.terminal_penalty = float(terminal_penalty)

        width = self.game.config.width
        height = self.game.config.height

        # Grid holds locked kinds (1..7) and the falling piece as negatives
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-7, high=7, shape=(height, width), dtype=np.int8),
                "next_piece": spaces.Discrete(8),
                # left, right, stop_y; (-1, -1, 0) when there is no guide
                "guide": spaces.Box(low=-1, high=max(width, height), shape=(3,), dtype=np.int64),
            }
        )
        self.action_space = spaces.Discrete(len(Action))

        self._steps = 0

        # Rendering state (lazy)
        self._renderer = None
        self._screen = None

    def _get_obs(self) -> Dict[str, Any]:
        upcoming = self.game.next_piece
        guide = self.game.guide_lines
        guide_arr = np.array(
            _NO_GUIDE if guide is None else (guide.left, guide.right, guide.stop_y),
            dtype=np.int64,
        )
        obs: Dict[str, Any] = {
            "grid": self.game.get_state().astype(np.int8),
            "next_piece": 0 if upcoming is None else int(upcoming.kind),
            "guide": guide_arr,
        }
        return obs

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": compute_action_mask(self.game),
            "score": self.game.score,
            "lines_cleared_total": self.game.lines_cleared,
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.game)

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.game.factory = PieceFactory(seed)
        self.game.start()
        self._steps = 0
        obs = self._get_obs()
        return obs, self._get_info()

    def step(self, action):
        _, reward, terminated, _ = self.game.step(Action(int(action)))
        self._steps += 1
        if not terminated and self._steps % self.gravity_every == 0:
            score_before = self.game.score
            self.game.tick()
            reward += self.game.score - score_before
            terminated = self.game.game_over

        reward = float(reward)
        if terminated:
            reward += self.terminal_penalty
        truncated = self._steps >= self.max_episode_steps

        obs = self._get_obs()
        info = self._get_info()
        if self.render_mode == "human":
            self.render()
        return obs, reward, bool(terminated), bool(truncated), info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            return self._rgb_array()
        if self.render_mode == "human":
            import pygame

            from falling_blocks.visualization.renderer import Renderer

            if self._renderer is None:
                pygame.init()
                self._renderer = Renderer(cell_size=24)
                self._screen = pygame.display.set_mode(self._renderer.window_size(self.game))
                pygame.display.set_caption("Falling Blocks - Env")
            pygame.event.pump()
            self._renderer.draw(self._screen, self.game)
        return None

    def _rgb_array(self, cell: int = 12) -> np.ndarray:
        board = self.game.composited_grid()
        h, w = board.height, board.width
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = tuple(int(c) for c in board.colors[y, x]) if board.is_occupied(x, y) else _EMPTY_RGB
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        if self._renderer is not None:
            import pygame

            pygame.quit()
            self._renderer = None
            self._screen = None
