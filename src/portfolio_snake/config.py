"""Session configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from portfolio_snake.clock import Difficulty

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameConfig:
    """Inputs fixed at session start, plus host settings.

    Supports JSON serialization so a setup can be reproduced.
    """

    # Playable area, in pixels
    width: int = 500
    height: int = 300
    cell_size: int = 20

    difficulty: str = Difficulty.NORMAL.value
    seed: int | None = None

    # Host
    high_score_path: str | None = None
    frame_interval: float = 1 / 60

    def __post_init__(self) -> None:
        if self.cell_size <= 0:
            raise ValueError("cell_size must be positive.")
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive.")
        if self.frame_interval <= 0:
            raise ValueError("frame_interval must be positive.")
        # Normalise aliases such as "medium".
        object.__setattr__(
            self, "difficulty", Difficulty.parse(self.difficulty).value,
        )

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
