from __future__ import annotations

import argparse

import gymnasium as gym
import numpy as np

from falling_blocks.env import ENV_ID  # ensure registration


def run_random(steps: int = 200, seed: int | None = None) -> float:
    env = gym.make(ENV_ID)
    rng = np.random.default_rng(seed)
    obs, info = env.reset(seed=seed)
    total_reward = 0.0
    episodes = 0
    for _ in range(steps):
        # Prefer actions that change the game
        valid = np.flatnonzero(info.get("action_mask", np.ones(env.action_space.n, dtype=bool)))
        action = int(rng.choice(valid)) if valid.size else env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total_reward += float(reward)
        if terminated or truncated:
            episodes += 1
            print(f"episode {episodes}: score {info['score']} lines {info['lines_cleared_total']}")
            obs, info = env.reset()
    env.close()
    print(f"Random agent total reward: {total_reward:.2f}")
    return total_reward


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--steps", type=int, default=200)
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    run_random(args.steps, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
