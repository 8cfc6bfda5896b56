from __future__ import annotations

import json
import logging
import os
from typing import Optional, Protocol


logger = logging.getLogger(__name__)


class HighScoreStore(Protocol):
    def load(self) -> int: ...

    def save(self, score: int) -> None: ...


class MemoryHighScoreStore:
    def __init__(self, initial: int = 0) -> None:
        self.value = int(initial)

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)


class JsonFileHighScoreStore:
    """Stores ``{"high_score": n}`` in a JSON file. A missing file reads as 0."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = os.fspath(path)

    def load(self) -> int:
        if not os.path.exists(self.path):
            return 0
        with open(self.path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        return int(data.get("high_score", 0))

    def save(self, score: int) -> None:
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self.path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                json.dump({"high_score": int(score)}, fh)
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class HighScoreTracker:
    """Best score seen so far, written through to a store when possible.

    Store failures are logged once and the tracker keeps going in memory
    for the rest of the session.
    """

    def __init__(self, store: Optional[HighScoreStore] = None) -> None:
        self.store = store if store is not None else MemoryHighScoreStore()
        self.persistent = True
        self.best = 0
        try:
            self.best = max(0, int(self.store.load()))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            self._degrade("load", e)

    def submit(self, score: int) -> bool:
        """Record `score` if it beats the best so far. Returns True if it did."""
        if score <= self.best:
            return False
        self.best = int(score)
        if self.persistent:
            try:
                self.store.save(self.best)
            except (OSError, ValueError, TypeError) as e:
                self._degrade("save", e)
        return True

    def _degrade(self, operation: str, error: Exception) -> None:
        self.persistent = False
        logger.warning(
            "High score %s failed (%s); keeping high score in memory for this session",
            operation,
            error,
        )
