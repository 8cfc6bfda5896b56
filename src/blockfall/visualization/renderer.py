from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from blockfall.game import GameSnapshot
from .palette import CLEARING_RGB, COLOR_RGB, color_for_value


PANEL_WIDTH = 180


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 3 + PANEL_WIDTH,
            height * self.cell_size + self.margin * 2,
        )

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None or self._big_font is None:
            self._font = pygame.font.SysFont(None, 24)
            self._big_font = pygame.font.SysFont(None, 40)
        return self._font, self._big_font

    def _cell_rect(self, x0: int, y0: int, row: int, col: int) -> pygame.Rect:
        return pygame.Rect(
            x0 + col * self.cell_size,
            y0 + row * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, snap: GameSnapshot) -> pygame.Surface:
        h, w = snap.grid.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                if snap.clearing[y, x]:
                    color = CLEARING_RGB
                else:
                    color = color_for_value(int(snap.grid[y, x]))
                pygame.draw.rect(surf, color, self._cell_rect(0, 0, y, x))

        if not (snap.is_game_over or snap.is_animating):
            self._draw_piece(surf, snap.active_shape, snap.ghost_row, snap.active.col,
                             COLOR_RGB[snap.active.color], outline=True)
            self._draw_piece(surf, snap.active_shape, snap.active.row, snap.active.col,
                             COLOR_RGB[snap.active.color])
        return surf

    def _draw_piece(self, surf: pygame.Surface, shape: np.ndarray, row: int, col: int,
                    color: Tuple[int, int, int], outline: bool = False) -> None:
        h, w = surf.get_height() // self.cell_size, surf.get_width() // self.cell_size
        for dy, dx in zip(*np.nonzero(shape)):
            r, c = row + int(dy), col + int(dx)
            if 0 <= r < h and 0 <= c < w:
                pygame.draw.rect(surf, color, self._cell_rect(0, 0, r, c), 2 if outline else 0)

    def _draw_panel(self, screen: pygame.Surface, snap: GameSnapshot, x0: int) -> None:
        font, _ = self._fonts()
        y = self.margin
        screen.blit(font.render("Next", True, (220, 220, 220)), (x0, y))
        y += 28
        next_color = color_for_value(int(snap.next_kind))
        for dy, dx in zip(*np.nonzero(snap.next_shape)):
            pygame.draw.rect(screen, next_color, self._cell_rect(x0, y, int(dy), int(dx)))
        y += self.cell_size * 4 + 12
        for label, value in (
            ("Score", snap.score),
            ("High score", snap.high_score),
            ("Level", snap.level),
            ("Lines", snap.lines_cleared),
        ):
            screen.blit(font.render(f"{label}: {value}", True, (220, 220, 220)), (x0, y))
            y += 28

    def _draw_banner(self, screen: pygame.Surface, text: str, board_w: int, board_h: int) -> None:
        _, big_font = self._fonts()
        msg = big_font.render(text, True, (255, 220, 220))
        rect = msg.get_rect(center=(self.margin + board_w // 2, self.margin + board_h // 2))
        screen.blit(msg, rect)

    def draw(self, screen: pygame.Surface, snap: GameSnapshot) -> None:
        grid_surf = self._grid_surface(snap)
        screen.fill((10, 10, 14))
        screen.blit(grid_surf, (self.margin, self.margin))
        self._draw_panel(screen, snap, self.margin * 2 + grid_surf.get_width())
        if snap.is_game_over:
            self._draw_banner(screen, "GAME OVER (R)", grid_surf.get_width(), grid_surf.get_height())
        elif snap.is_paused:
            self._draw_banner(screen, "PAUSED", grid_surf.get_width(), grid_surf.get_height())
        pygame.display.flip()
