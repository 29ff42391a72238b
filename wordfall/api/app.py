"""FastAPI application factory with dependency injection.

This module provides the create_app() factory function that creates a
configured FastAPI application. The app receives the GameEngine and its
collaborators from main.py rather than creating them itself.
"""

from __future__ import annotations

import time
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from wordfall.api.ws_handler import ConnectionManager, game_websocket_endpoint
from wordfall.core.engine import GameEngine
from wordfall.core.loop import GameLoop
from wordfall.narration import BroadcastNarrator, Narrator


class AppState:
    """Application state container for dependency injection.

    This class holds references to shared components that need to be
    accessed by API routes.
    """

    def __init__(
        self,
        engine: GameEngine,
        start_time: float,
        ws_manager: ConnectionManager,
        narrator: Narrator,
        loop: Optional[GameLoop] = None,
    ) -> None:
        """Initialize app state.

        Args:
            engine: The GameEngine instance.
            start_time: Server start timestamp for uptime calculation.
            ws_manager: WebSocket connection manager for real-time streaming.
            narrator: Speaks matched words.
            loop: The frame loop driving the engine, if running.
        """
        self.engine = engine
        self.start_time = start_time
        self.ws_manager = ws_manager
        self.narrator = narrator
        self.loop = loop


def create_app(
    engine: GameEngine,
    ws_manager: Optional[ConnectionManager] = None,
    narrator: Optional[Narrator] = None,
    loop: Optional[GameLoop] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        engine: GameEngine instance (already created in main.py).
        ws_manager: WebSocket connection manager for real-time streaming.
        narrator: Narrator for matched words. Defaults to broadcasting
            narration requests to WebSocket clients.
        loop: Frame loop driving the engine, reported by /health.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="Wordfall",
        description="Falling-words typing game server",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if ws_manager is None:
        ws_manager = ConnectionManager()
    if narrator is None:
        narrator = BroadcastNarrator(ws_manager)

    app.state.app_state = AppState(
        engine=engine,
        start_time=time.time(),
        ws_manager=ws_manager,
        narrator=narrator,
        loop=loop,
    )

    from wordfall.api.routes_game import router as game_router

    app.include_router(game_router, prefix="/api", tags=["game"])

    @app.websocket("/ws/game")
    async def game_ws(websocket: WebSocket) -> None:
        """Stream snapshots and accept player input."""
        app_state = app.state.app_state
        await game_websocket_endpoint(
            websocket,
            app_state.ws_manager,
            app_state.engine,
            app_state.narrator,
        )

    @app.get("/", tags=["health"])
    async def root() -> dict[str, str]:
        """Root endpoint - basic health check."""
        return {
            "status": "ok",
            "service": "Wordfall API",
            "version": "0.1.0",
        }

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        """Health check endpoint for monitoring."""
        app_state = app.state.app_state
        loop_running = app_state.loop.running if app_state.loop is not None else False
        return {
            "status": "healthy",
            "loop_running": str(loop_running),
            "game_status": app_state.engine.status.value,
            "uptime_seconds": str(round(time.time() - app_state.start_time, 1)),
        }

    return app
