"""Wordfall entry point: game loop runner with FastAPI server.

This module initializes all components and starts both:
- The frame loop (GameLoop) driving the GameEngine
- The FastAPI REST/WebSocket server (uvicorn)

Can be run directly via `python -m wordfall.main` or the `wordfall` script.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

import structlog
import uvicorn

from wordfall import __version__
from wordfall.api.app import create_app
from wordfall.api.ws_handler import ConnectionManager
from wordfall.config import Settings
from wordfall.core.engine import GameEngine
from wordfall.core.levels import default_catalog
from wordfall.core.loop import GameLoop
from wordfall.narration import BroadcastNarrator


def configure_logging(level: str = "info") -> None:
    """Configure structured logging for the whole process."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


logger = structlog.get_logger()


class GameRunner:
    """Manages game server lifecycle and graceful shutdown."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        """Initialize the runner."""
        self.settings = settings or Settings()
        self.loop: Optional[GameLoop] = None
        self.uvicorn_server: Optional[uvicorn.Server] = None
        self.shutdown_event = asyncio.Event()

    async def run(self) -> None:
        """Initialize and run the game loop with the FastAPI server.

        Sets up all components:
        - Level catalog
        - GameEngine
        - WebSocket connection manager and narrator
        - GameLoop
        - FastAPI application

        Then runs the loop and the API server until a shutdown signal.
        """
        settings = self.settings
        logger.info("wordfall_starting", version=__version__)

        catalog = default_catalog()
        logger.info(
            "level_catalog_loaded",
            levels=catalog.level_count,
            total_words=catalog.total_words,
        )

        engine = GameEngine(catalog=catalog, settings=settings)
        logger.info(
            "game_engine_initialized",
            max_hp=settings.max_hp,
            hp_penalty=settings.hp_penalty,
            max_active_words=settings.max_active_words,
            spawn_interval_sec=settings.spawn_interval_sec,
        )

        ws_manager = ConnectionManager()
        narrator = BroadcastNarrator(ws_manager)

        self.loop = GameLoop(engine=engine, settings=settings, ws_manager=ws_manager)
        logger.info("game_loop_initialized", tick_rate_ms=settings.tick_rate_ms)

        app = create_app(
            engine=engine,
            ws_manager=ws_manager,
            narrator=narrator,
            loop=self.loop,
        )
        logger.info("fastapi_app_created")

        config = uvicorn.Config(
            app,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level,
            access_log=False,
        )
        self.uvicorn_server = uvicorn.Server(config)
        logger.info("uvicorn_configured", host=settings.host, port=settings.port)

        def handle_shutdown(sig: int) -> None:
            logger.info("shutdown_signal_received", signal=sig)
            self.shutdown_event.set()

        event_loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            event_loop.add_signal_handler(sig, lambda s=sig: handle_shutdown(s))

        loop_task = asyncio.create_task(self.loop.run())
        server_task = asyncio.create_task(self.uvicorn_server.serve())

        logger.info(
            "services_running",
            api_server=f"http://{settings.host}:{settings.port}",
            websocket=f"ws://{settings.host}:{settings.port}/ws/game",
        )

        await self.shutdown_event.wait()

        logger.info("initiating_graceful_shutdown")
        self.loop.stop()
        self.uvicorn_server.should_exit = True

        try:
            await asyncio.wait_for(
                asyncio.gather(loop_task, server_task, return_exceptions=True),
                timeout=5.0,
            )
        except asyncio.TimeoutError:
            logger.warning("shutdown_timeout")
            loop_task.cancel()
            server_task.cancel()

        logger.info("all_services_stopped")


async def main() -> None:
    """Main entry point."""
    settings = Settings()
    configure_logging(settings.log_level)
    runner = GameRunner(settings)
    try:
        await runner.run()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt_received")
    except Exception as exc:
        logger.error("fatal_error", error=str(exc), error_type=type(exc).__name__)
        raise


def cli() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    cli()
