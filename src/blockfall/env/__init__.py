"""Gymnasium environments for Block Fall."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Register the default 10x20 falling-block environment
register(
    id="BlockFall-10x20-v0",
    entry_point="blockfall.env.blockfall_env:BlockFallEnv",
)

__all__ = ["BlockFall-10x20-v0"]
