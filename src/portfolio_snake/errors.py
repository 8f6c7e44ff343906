"""Exception types raised by the game core."""

from __future__ import annotations


class ConfigurationError(ValueError):
    """The playable area or cell size cannot form a usable grid."""


class SpawnExhaustion(RuntimeError):
    """No free cell is left for the next food item."""
