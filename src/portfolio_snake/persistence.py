"""High-score stores."""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class MemoryHighScoreStore:
    """Keeps the high score in memory for the lifetime of the process."""

    def __init__(self, initial: int = 0) -> None:
        self.value = initial
        self.saves = 0

    def load_high_score(self) -> int:
        return self.value

    def save_high_score(self, score: int) -> None:
        self.value = score
        self.saves += 1


class JsonHighScoreStore:
    """Stores the high score in a small JSON file.

    A missing or unreadable file counts as a high score of 0.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load_high_score(self) -> int:
        if not self.path.exists():
            return 0
        try:
            raw = json.loads(self.path.read_text())
            score = int(raw["high_score"])
        except (OSError, ValueError, KeyError, TypeError):
            logger.warning("Ignoring unreadable high score file %s", self.path)
            return 0
        return max(score, 0)

    def save_high_score(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"high_score": score}))
        logger.info("High score %d saved to %s", score, self.path)
