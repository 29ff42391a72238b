"""Frame clock driver: advances the engine and streams snapshots.

The engine has no timers of its own; this loop is the external clock that
calls advance(now) once per frame.
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Callable, Optional

import structlog

from wordfall.config import Settings
from wordfall.core.engine import GameEngine
from wordfall.core.snapshot import snapshot_to_dict

if TYPE_CHECKING:
    from wordfall.api.ws_handler import ConnectionManager

logger = structlog.get_logger()


class GameLoop:
    """Runs the frame clock for a GameEngine."""

    def __init__(
        self,
        engine: GameEngine,
        settings: Settings,
        ws_manager: Optional[ConnectionManager] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the loop.

        Args:
            engine: Engine to advance each frame.
            settings: Provides tick_rate_ms.
            ws_manager: WebSocket connection manager for snapshot streaming.
            clock: Time source passed to engine.advance().
        """
        self.engine = engine
        self.settings = settings
        self.ws_manager = ws_manager
        self.clock = clock
        self.running = False
        self.frame_counter = 0
        self._last_status = engine.status

    async def run(self) -> None:
        """Main frame loop.

        Runs until stop() is called, executing one frame per iteration:
        1. Advance the engine to the current time
        2. Log status changes
        3. Broadcast the snapshot to connected clients
        4. Sleep until the next frame

        Note:
            A failing frame is logged and the loop carries on.
        """
        self.running = True
        frame_budget = self.settings.tick_rate_ms / 1000.0
        logger.info("game_loop_starting", tick_rate_ms=self.settings.tick_rate_ms)

        while self.running:
            frame_start = self.clock()

            try:
                await self.tick(frame_start)
            except Exception as exc:
                logger.error(
                    "tick_error",
                    frame=self.frame_counter,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

            frame_duration = self.clock() - frame_start
            if frame_duration > frame_budget:
                logger.warning(
                    "tick_overrun",
                    frame=self.frame_counter,
                    duration_ms=frame_duration * 1000,
                    budget_ms=self.settings.tick_rate_ms,
                )

            await asyncio.sleep(max(0.0, frame_budget - frame_duration))

    async def tick(self, now: float) -> None:
        """Run a single frame at time `now`."""
        self.frame_counter += 1
        self.engine.advance(now)
        self._log_status_change()

        # Idle and finished games still stream so clients can show overlays.
        if self.ws_manager is not None:
            snapshot = self.engine.snapshot(now)
            await self.ws_manager.broadcast_json(
                {"type": "snapshot", "data": snapshot_to_dict(snapshot)}
            )

    def _log_status_change(self) -> None:
        status = self.engine.status
        if status is self._last_status:
            return
        logger.info(
            "game_status_changed",
            previous=self._last_status.value,
            status=status.value,
            frame=self.frame_counter,
        )
        self._last_status = status

    def stop(self) -> None:
        """Stop the loop on its next iteration."""
        logger.info("game_loop_stopping", frame=self.frame_counter)
        self.running = False
