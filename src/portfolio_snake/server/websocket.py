"""WebSocket handler streaming snapshots and accepting player input."""

from __future__ import annotations

import asyncio
import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from portfolio_snake.controls import Action, apply_action, handle_key, steer
from portfolio_snake.server.session_manager import SessionManager
from portfolio_snake.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.session_manager


async def _pump(websocket: WebSocket, queue: asyncio.Queue[dict]) -> None:
    """Forward queued snapshots to the client."""
    while True:
        payload = await queue.get()
        await websocket.send_text(json.dumps(payload, separators=(",", ":")))


@ws_router.websocket("/sessions/{session_id}/play")
async def play(websocket: WebSocket, session_id: str) -> None:
    """Player WebSocket: send keys/actions, receive a snapshot per change.

    Accepted messages: ``{"direction": "up"}``, ``{"action": "pause"}`` or
    ``{"key": "ArrowLeft"}``. Anything else is ignored.
    """
    manager = _get_manager(websocket)
    session = manager.get_session(session_id)
    if session is None:
        await websocket.close(code=4004, reason="Session not found.")
        return

    await websocket.accept()
    logger.info("Player connected to session %s.", session_id)

    # Send an initial snapshot so the client gets immediate feedback.
    await websocket.send_text(
        json.dumps(session.engine.get_state(), separators=(",", ":")),
    )

    queue = session.feed.subscribe()
    sender = asyncio.create_task(_pump(websocket, queue))
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                continue
            if not isinstance(msg, dict):
                continue

            engine = session.engine
            key = msg.get("key")
            if isinstance(key, str):
                handle_key(engine, key)
                continue

            if "direction" in msg:
                name = msg["direction"]
                if not isinstance(name, str):
                    continue
                try:
                    direction = Direction.from_name(name)
                except ValueError:
                    continue
                steer(engine, direction)
                continue

            name = msg.get("action")
            if not isinstance(name, str):
                continue
            try:
                action = Action(name.lower())
            except ValueError:
                continue
            apply_action(engine, action)
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", session_id)
    finally:
        sender.cancel()
        await asyncio.gather(sender, return_exceptions=True)
        session.feed.unsubscribe(queue)
