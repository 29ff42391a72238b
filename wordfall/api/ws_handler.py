"""WebSocket handler for real-time game streaming and player input.

Provides:
- ConnectionManager for managing active WebSocket connections
- game_websocket_endpoint: pushes snapshots out, takes keystrokes in
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Optional

import structlog
from fastapi import WebSocket, WebSocketDisconnect

from wordfall.core.input_buffer import InputBuffer
from wordfall.core.snapshot import snapshot_to_dict
from wordfall.narration import Narrator, narrate_safely

if TYPE_CHECKING:
    from wordfall.core.engine import GameEngine

logger = structlog.get_logger()


class ConnectionManager:
    """Tracks player connections and their keystroke buffers.

    Every connected client gets its own InputBuffer so partial words typed
    on one screen never leak into another. Snapshots and narration requests
    are fanned out to all clients.
    """

    def __init__(self) -> None:
        self.active_connections: list[WebSocket] = []
        self.buffers: dict[WebSocket, InputBuffer] = {}

    async def connect(self, websocket: WebSocket) -> InputBuffer:
        """Accept a player connection and give it an empty keystroke buffer.

        Returns:
            The buffer for this connection.
        """
        await websocket.accept()
        self.active_connections.append(websocket)
        buffer = self.buffers[websocket] = InputBuffer()
        logger.info(
            "ws_player_connected",
            total_connections=len(self.active_connections),
            origin=websocket.headers.get("origin", "unknown"),
        )
        return buffer

    def disconnect(self, websocket: WebSocket) -> None:
        """Forget a player connection and drop its keystroke buffer."""
        self.buffers.pop(websocket, None)
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info(
                "ws_player_disconnected",
                total_connections=len(self.active_connections),
            )

    def clear_buffers(self) -> None:
        """Discard partially typed words on every connection (new game)."""
        for buffer in self.buffers.values():
            buffer.clear()

    async def broadcast_json(self, data: dict[str, Any]) -> None:
        """Broadcast a JSON message to all connected clients.

        Args:
            data: JSON-serializable payload.

        Note:
            Removes disconnected clients automatically.
        """
        if not self.active_connections:
            return

        text = json.dumps(data)
        disconnected: list[WebSocket] = []

        for connection in self.active_connections:
            try:
                await connection.send_text(text)
            except Exception as exc:
                logger.warning(
                    "ws_broadcast_error",
                    error=str(exc),
                    error_type=type(exc).__name__,
                )
                disconnected.append(connection)

        for connection in disconnected:
            self.disconnect(connection)


async def handle_client_message(
    message: dict[str, Any],
    engine: GameEngine,
    buffer: InputBuffer,
    narrator: Optional[Narrator] = None,
) -> Optional[str]:
    """Apply one message from a client to the engine.

    Message types:
    - {"type": "start"}: start or restart the game
    - {"type": "input", "text": ...}: keystrokes, submitted when a word ends
    - {"type": "submit", "text": ...}: explicit submit of the given text,
      or of the buffered keystrokes when text is omitted

    Args:
        message: Decoded JSON message.
        engine: Engine to drive.
        buffer: This connection's keystroke buffer.
        narrator: Optional narrator for matched words.

    Returns:
        The matched word, if the message produced a match.
    """
    msg_type = message.get("type")

    if msg_type == "start":
        buffer.clear()
        engine.start()
        return None

    if msg_type == "input":
        completed = buffer.feed(str(message.get("text", "")))
        if completed is None:
            return None
        submitted = completed
    elif msg_type == "submit":
        text = message.get("text")
        if text is None:
            submitted = buffer.flush()
        else:
            # An explicit word replaces whatever was half typed.
            buffer.clear()
            submitted = str(text)
    else:
        logger.debug("ws_unknown_message", message_type=msg_type)
        return None

    matched = engine.submit(submitted)
    if matched is not None and narrator is not None:
        await narrate_safely(narrator, matched)
    return matched


async def game_websocket_endpoint(
    websocket: WebSocket,
    manager: ConnectionManager,
    engine: GameEngine,
    narrator: Optional[Narrator] = None,
) -> None:
    """WebSocket endpoint for playing the game.

    Args:
        websocket: The WebSocket connection.
        manager: The connection manager instance.
        engine: The game engine.
        narrator: Optional narrator for matched words.

    Note:
        Snapshots are pushed by the game loop. The current snapshot is sent
        once on connect so the client can render before the next tick.
    """
    buffer = await manager.connect(websocket)

    try:
        await websocket.send_text(
            json.dumps({"type": "snapshot", "data": snapshot_to_dict(engine.snapshot())})
        )

        while True:
            raw = await websocket.receive_text()
            if raw == "ping":
                continue

            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("ws_malformed_message", message=raw[:100])
                continue
            if not isinstance(message, dict):
                logger.warning("ws_malformed_message", message=raw[:100])
                continue

            await handle_client_message(message, engine, buffer, narrator)
            if message.get("type") == "start":
                manager.clear_buffers()

    except WebSocketDisconnect:
        manager.disconnect(websocket)
        logger.info("ws_client_disconnected_gracefully")
    except Exception as exc:
        logger.error(
            "ws_endpoint_error",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        manager.disconnect(websocket)
