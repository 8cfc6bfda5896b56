from __future__ import annotations

import argparse
import logging
import os
from typing import Dict, Optional

import pygame

from blockfall.game import Action, BlockFallGame, GameConfig, GameDriver
from blockfall.storage import HighScoreTracker, JsonFileHighScoreStore
from .renderer import Renderer


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.MOVE_LEFT,
    pygame.K_RIGHT: Action.MOVE_RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_p: Action.TOGGLE_PAUSE,
    pygame.K_ESCAPE: Action.TOGGLE_PAUSE,
    pygame.K_r: Action.RESET,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Block Fall with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell-size", type=int, default=28)
    p.add_argument("--high-score-file", type=str, default="~/.blockfall/high_score.json")
    p.add_argument("--log-level", type=str, default="INFO")
    return p


def run(seed: Optional[int] = None, cell_size: int = 28,
        high_score_file: str = "~/.blockfall/high_score.json") -> None:
    pygame.init()
    try:
        clock = pygame.time.Clock()
        tracker = HighScoreTracker(JsonFileHighScoreStore(os.path.expanduser(high_score_file)))
        game = BlockFallGame(GameConfig(random_seed=seed), high_scores=tracker)
        driver = GameDriver(game, now_ms=pygame.time.get_ticks())
        renderer = Renderer(cell_size=cell_size)

        screen = pygame.display.set_mode(renderer.window_size(game.config.width, game.config.height))
        pygame.display.set_caption("Block Fall")

        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    action = KEY_TO_ACTION.get(event.key)
                    if action is not None:
                        driver.handle(action, pygame.time.get_ticks())

            # Gravity and line-clear timer
            driver.update(pygame.time.get_ticks())

            renderer.draw(screen, game.snapshot())
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="[BLOCKFALL] %(asctime)s %(levelname)s %(name)s - %(message)s")
    run(seed=args.seed, cell_size=args.cell_size, high_score_file=args.high_score_file)


if __name__ == "__main__":  # pragma: no cover
    main()
