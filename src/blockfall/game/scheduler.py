from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .core import Action, BlockFallGame
from .rules import LINE_CLEAR_ANIMATION_MS, gravity_interval_ms


@dataclass
class _PendingClear:
    due_ms: int
    generation: int


class GameDriver:
    """Feeds the engine its two time-based triggers from a millisecond clock.

    Gravity fires every ``gravity_interval_ms(level)``; a line clear is
    completed ``animation_ms`` after the engine starts animating. Each
    trigger carries the game generation it was scheduled under, so the
    engine drops anything left over from before a reset.
    """

    def __init__(self, game: BlockFallGame, now_ms: int = 0,
                 animation_ms: int = LINE_CLEAR_ANIMATION_MS) -> None:
        self.game = game
        self.animation_ms = int(animation_ms)
        self._pending_clear: Optional[_PendingClear] = None
        self._restart_gravity(now_ms)

    def _restart_gravity(self, now_ms: int) -> None:
        self._gravity_generation = self.game.generation
        self._next_gravity_ms = now_ms + gravity_interval_ms(self.game.level)

    def _watch_for_clear(self, now_ms: int) -> None:
        pending = self._pending_clear
        if pending is not None and pending.generation != self.game.generation:
            self._pending_clear = None
        if self.game.is_animating and self._pending_clear is None:
            self._pending_clear = _PendingClear(now_ms + self.animation_ms, self.game.generation)

    def handle(self, action: Action, now_ms: int) -> bool:
        accepted = self.game.apply(action)
        if action == Action.RESET:
            self._pending_clear = None
            self._restart_gravity(now_ms)
        self._watch_for_clear(now_ms)
        return accepted

    def update(self, now_ms: int) -> None:
        game = self.game
        self._watch_for_clear(now_ms)

        pending = self._pending_clear
        if pending is not None and now_ms >= pending.due_ms:
            self._pending_clear = None
            if game.complete_line_clear(pending.generation):
                self._restart_gravity(now_ms)

        if game.generation != self._gravity_generation:
            self._restart_gravity(now_ms)
            return

        if now_ms >= self._next_gravity_ms:
            game.tick(self._gravity_generation)
            self._next_gravity_ms = now_ms + gravity_interval_ms(game.level)
            self._watch_for_clear(now_ms)

    @property
    def next_gravity_ms(self) -> int:
        return self._next_gravity_ms
