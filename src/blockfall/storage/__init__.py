"""High-score persistence for Block Fall.

- HighScoreStore: protocol implemented by the stores below
- MemoryHighScoreStore: session-only store
- JsonFileHighScoreStore: store backed by a small JSON document
- HighScoreTracker: keeps the best score and degrades to memory on I/O errors
"""

from .highscore import (
    HighScoreStore,
    HighScoreTracker,
    JsonFileHighScoreStore,
    MemoryHighScoreStore,
)

__all__ = [
    "HighScoreStore",
    "HighScoreTracker",
    "JsonFileHighScoreStore",
    "MemoryHighScoreStore",
]
