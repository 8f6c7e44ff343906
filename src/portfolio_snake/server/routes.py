"""REST API route handlers for session lifecycle management."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from portfolio_snake.errors import ConfigurationError
from portfolio_snake.server.models import (
    ActionRequest,
    ActionResponse,
    CreateSessionRequest,
    SessionSummary,
)
from portfolio_snake.server.session_manager import SessionManager

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


@router.post("", status_code=201)
async def create_session(
    body: CreateSessionRequest, request: Request,
) -> SessionSummary:
    """Create a new game session sitting in the menu."""
    manager = _get_manager(request)
    try:
        session = await manager.create_session(
            width=body.width,
            height=body.height,
            cell_size=body.cell_size,
            difficulty=body.difficulty,
            seed=body.seed,
        )
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return session.summary()


@router.get("")
async def list_sessions(request: Request) -> list[SessionSummary]:
    """List all sessions."""
    return _get_manager(request).list_sessions()


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> dict:
    """Get the current snapshot of a session."""
    session = _get_manager(request).get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found.")
    return {"session_id": session_id, **session.engine.get_state()}


@router.post("/{session_id}/actions")
async def post_action(
    session_id: str, body: ActionRequest, request: Request,
) -> ActionResponse:
    """Apply a control action (start, pause, resume, restart, ...)."""
    manager = _get_manager(request)
    try:
        applied = manager.apply(session_id, body.action, body.difficulty)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    session = manager.get_session(session_id)
    assert session is not None  # noqa: S101
    return ActionResponse(
        session_id=session_id,
        action=body.action,
        applied=applied,
        state=session.engine.state,
    )


@router.delete("/{session_id}", status_code=204)
async def delete_session(session_id: str, request: Request) -> None:
    """Stop and discard a session."""
    try:
        await _get_manager(request).close_session(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
