"""Game control API routes.

Provides endpoints for:
- Getting the current game snapshot
- Starting (or restarting) a game
- Submitting a typed word
- Inspecting the level catalog and gameplay constants
"""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from wordfall.core.snapshot import snapshot_to_dict
from wordfall.narration import narrate_safely

logger = structlog.get_logger()

router = APIRouter()


# -------------------------------------------------------------------------
# Request/Response Models
# -------------------------------------------------------------------------


class SubmitRequest(BaseModel):
    """Request model for a word submission."""

    text: str = Field(..., description="Text typed by the player")


class SubmitResponse(BaseModel):
    """Response model for a word submission."""

    matched: Optional[str] = Field(None, description="Matched word, or null if no match")
    snapshot: dict[str, Any] = Field(..., description="Game snapshot after the submission")


class LevelInfo(BaseModel):
    """Summary of a single level."""

    level_number: int = Field(..., description="1-based level number")
    word_count: int = Field(..., description="Number of words in the level")
    fall_duration: float = Field(..., description="Seconds for a word to reach the line")


class GameConfigResponse(BaseModel):
    """Gameplay constants loaded at startup."""

    max_hp: int
    hp_penalty: int
    max_active_words: int
    spawn_interval_sec: float
    tick_rate_ms: int


# -------------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------------


@router.get("/game/state")
async def get_game_state(request: Request) -> dict[str, Any]:
    """Get the current game snapshot."""
    engine = request.app.state.app_state.engine
    return snapshot_to_dict(engine.snapshot())


@router.post("/game/start")
async def start_game(request: Request) -> dict[str, Any]:
    """Start a new game, discarding any game in progress.

    Returns:
        Snapshot right after the first spawn.
    """
    app_state = request.app.state.app_state
    engine = app_state.engine
    engine.start()
    app_state.ws_manager.clear_buffers()
    logger.info("game_started_via_api")
    return snapshot_to_dict(engine.snapshot())


@router.post("/game/submit", response_model=SubmitResponse)
async def submit_word(body: SubmitRequest, request: Request) -> SubmitResponse:
    """Submit a typed word.

    Wrong words and submissions outside a running game are not errors;
    they simply return matched=null.
    """
    app_state = request.app.state.app_state
    engine = app_state.engine

    matched = engine.submit(body.text)
    if matched is not None:
        await narrate_safely(app_state.narrator, matched)

    return SubmitResponse(matched=matched, snapshot=snapshot_to_dict(engine.snapshot()))


@router.get("/levels", response_model=list[LevelInfo])
async def list_levels(request: Request) -> list[LevelInfo]:
    """List the level catalog."""
    catalog = request.app.state.app_state.engine.catalog
    return [
        LevelInfo(
            level_number=level.level_number,
            word_count=len(level.words),
            fall_duration=level.fall_duration,
        )
        for level in catalog.levels()
    ]


@router.get("/config", response_model=GameConfigResponse)
async def get_config(request: Request) -> GameConfigResponse:
    """Get the gameplay constants."""
    settings = request.app.state.app_state.engine.settings
    return GameConfigResponse(
        max_hp=settings.max_hp,
        hp_penalty=settings.hp_penalty,
        max_active_words=settings.max_active_words,
        spawn_interval_sec=settings.spawn_interval_sec,
        tick_rate_ms=settings.tick_rate_ms,
    )
