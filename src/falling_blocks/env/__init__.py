"""Gymnasium environments for Falling Blocks."""

from __future__ import annotations

from gymnasium.envs.registration import register

ENV_ID = "FallingBlocks-10x20-v0"

# Register default 10x20 environment (6 discrete actions)
register(
    id=ENV_ID,
    entry_point="falling_blocks.env.falling_blocks_env:FallingBlocksEnv",
)

__all__ = ["ENV_ID"]
