from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from blockfall.game import Action, BlockFallGame, GameConfig
from blockfall.visualization.palette import color_for_value


# Agent actions map onto a subset of engine commands (no pause / reset)
AGENT_ACTIONS: Tuple[Action, ...] = (
    Action.MOVE_LEFT,
    Action.MOVE_RIGHT,
    Action.ROTATE,
    Action.SOFT_DROP,
    Action.HARD_DROP,
)


class BlockFallEnv(gym.Env):
    """Falling-block engine as a gymnasium environment.

    Each step applies one command, then one gravity tick unless the
    command was itself a drop. Line-clear animations complete within the
    same step. Reward is the change in engine score.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        self.game = BlockFallGame(config)
        self.render_mode = render_mode
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.game.config.height, self.game.config.width
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(low=-7, high=7, shape=(h, w), dtype=np.int8),
                "next": spaces.Discrete(8),
            }
        )
        self.action_space = spaces.Discrete(len(AGENT_ACTIONS))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        return {
            "grid": self.game.get_state().astype(np.int8),
            "next": int(self.game.next_kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.game.score,
            "lines_cleared": self.game.lines_cleared,
            "level": self.game.level,
            "max_height": self.game.grid.get_max_height(),
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.game.reset(seed)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        command = AGENT_ACTIONS[int(action)]
        score_before = self.game.score

        accepted = self.game.apply(command)
        if command not in (Action.SOFT_DROP, Action.HARD_DROP):
            self.game.tick()
        # No wall clock here: finish the clear right away
        self.game.complete_line_clear()

        self._steps += 1
        reward = float(self.game.score - score_before)
        terminated = bool(self.game.is_game_over)
        truncated = self._steps >= self.max_episode_steps

        info = self._get_info()
        info["accepted"] = accepted
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode == "rgb_array":
            grid = self.game.get_state()
            cell = 12
            h, w = grid.shape
            img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
            for y in range(h):
                for x in range(w):
                    img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color_for_value(int(grid[y, x]))
            return img
        return None

    def close(self) -> None:
        pass
