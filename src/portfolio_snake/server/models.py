"""Pydantic models for API request/response schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field

from portfolio_snake.clock import Difficulty
from portfolio_snake.engine import GameState


class CreateSessionRequest(BaseModel):
    """Request body for POST /sessions."""

    width: int = Field(default=500, ge=1, le=4000)
    height: int = Field(default=300, ge=1, le=4000)
    cell_size: int = Field(default=20, ge=1, le=200)
    difficulty: Difficulty = Difficulty.NORMAL
    seed: int | None = None


class ActionRequest(BaseModel):
    """Request body for POST /sessions/{session_id}/actions."""

    action: str = Field(min_length=1, max_length=32)
    difficulty: Difficulty | None = None


class SessionSummary(BaseModel):
    """Compact session info for list endpoints."""

    session_id: str
    state: GameState
    difficulty: Difficulty
    score: int
    level: int
    high_score: int


class ActionResponse(BaseModel):
    """Outcome of a control action."""

    session_id: str
    action: str
    applied: bool
    state: GameState

