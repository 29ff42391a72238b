"""Unit tests for the GameLoop frame driver."""

from __future__ import annotations

import random
from unittest.mock import AsyncMock, MagicMock

import pytest

from wordfall.config import Settings
from wordfall.core.engine import GameEngine
from wordfall.core.levels import LevelCatalog
from wordfall.core.loop import GameLoop
from wordfall.core.state import GameStatus


@pytest.fixture
def settings() -> Settings:
    """Create test settings with a 1ms frame."""
    return Settings(tick_rate_ms=1)


@pytest.fixture
def engine(settings: Settings) -> GameEngine:
    """Create a test engine."""
    catalog = LevelCatalog.from_words([["cat"]], [0.5])
    return GameEngine(catalog=catalog, settings=settings, rng=random.Random(0), clock=lambda: 0.0)


@pytest.fixture
def ws_manager() -> MagicMock:
    """Create a mock connection manager."""
    manager = MagicMock()
    manager.broadcast_json = AsyncMock()
    return manager


def test_loop_initialization(engine: GameEngine, settings: Settings):
    """Test loop initializes stopped."""
    loop = GameLoop(engine=engine, settings=settings)

    assert loop.running is False
    assert loop.frame_counter == 0


def test_loop_stop(engine: GameEngine, settings: Settings):
    """Test stop() clears the running flag."""
    loop = GameLoop(engine=engine, settings=settings)
    loop.running = True

    loop.stop()

    assert loop.running is False


@pytest.mark.asyncio
async def test_tick_advances_engine_and_broadcasts(
    engine: GameEngine,
    settings: Settings,
    ws_manager: MagicMock,
):
    """Test a frame advances the engine and streams the snapshot."""
    loop = GameLoop(engine=engine, settings=settings, ws_manager=ws_manager)
    engine.start(now=0.0)

    await loop.tick(1.0)

    assert loop.frame_counter == 1
    assert engine.status is GameStatus.VICTORY
    ws_manager.broadcast_json.assert_awaited_once()
    message = ws_manager.broadcast_json.call_args[0][0]
    assert message["type"] == "snapshot"
    assert message["data"]["status"] == "victory"
    assert message["data"]["hp"] == 90


@pytest.mark.asyncio
async def test_tick_broadcasts_while_idle(
    engine: GameEngine,
    settings: Settings,
    ws_manager: MagicMock,
):
    """Test idle games still stream snapshots for the start overlay."""
    loop = GameLoop(engine=engine, settings=settings, ws_manager=ws_manager)

    await loop.tick(1.0)

    message = ws_manager.broadcast_json.call_args[0][0]
    assert message["data"]["status"] == "idle"


@pytest.mark.asyncio
async def test_run_survives_tick_errors(settings: Settings):
    """Test a failing frame is logged and does not crash the loop."""
    engine = MagicMock()
    loop = GameLoop(engine=engine, settings=settings, clock=lambda: 0.0)

    def failing_advance(now: float) -> None:
        loop.stop()
        raise RuntimeError("boom")

    engine.advance.side_effect = failing_advance

    await loop.run()

    assert loop.running is False
    assert loop.frame_counter == 1
    engine.advance.assert_called_once_with(0.0)


@pytest.mark.asyncio
async def test_run_drives_frames_until_stopped(
    engine: GameEngine,
    settings: Settings,
):
    """Test run() keeps advancing the engine on its own clock."""
    times = iter([0.0, 0.0, 0.2, 0.2, 0.6, 0.6])
    loop = GameLoop(engine=engine, settings=settings, clock=lambda: next(times))
    engine.start(now=0.0)

    original_advance = engine.advance

    def advance_and_maybe_stop(now: float) -> None:
        original_advance(now)
        if loop.frame_counter >= 3:
            loop.stop()

    engine.advance = advance_and_maybe_stop  # type: ignore[method-assign]

    await loop.run()

    assert loop.frame_counter == 3
    assert engine.status is GameStatus.VICTORY
    assert engine.hp == 90
