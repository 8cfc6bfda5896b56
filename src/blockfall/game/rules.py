from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


# Gravity period in milliseconds. Levels past the table use the last entry.
SPEED_BY_LEVEL: Dict[int, int] = {
    1: 800,
    2: 700,
    3: 600,
    4: 500,
    5: 400,
    6: 350,
    7: 300,
    8: 250,
    9: 200,
    10: 150,
}
MAX_SPEED_LEVEL = max(SPEED_BY_LEVEL)

LINE_CLEAR_ANIMATION_MS = 500


def gravity_interval_ms(level: int) -> int:
    return SPEED_BY_LEVEL[min(max(int(level), 1), MAX_SPEED_LEVEL)]


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    hard_drop_points_per_row: int = 2
    lines_per_level: int = 10

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        """Points for clearing `lines` rows at once while at `level`."""
        if not 1 <= lines <= len(self.line_clear_scores):
            return 0
        return self.line_clear_scores[lines - 1] * level

    def score_for_hard_drop(self, rows_dropped: int) -> int:
        return max(0, rows_dropped) * self.hard_drop_points_per_row

    def level_for_lines(self, lines_cleared: int) -> int:
        return 1 + lines_cleared // self.lines_per_level
