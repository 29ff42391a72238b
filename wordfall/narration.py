"""Narration of matched words.

Speech itself happens in the client. The server only announces which word
to speak; a failure here must never reach the game engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import structlog

if TYPE_CHECKING:
    from wordfall.api.ws_handler import ConnectionManager

logger = structlog.get_logger()


class Narrator(Protocol):
    """Anything that can speak a word."""

    async def speak(self, word: str) -> None: ...


class BroadcastNarrator:
    """Asks every connected client to speak the word."""

    def __init__(self, ws_manager: ConnectionManager) -> None:
        self.ws_manager = ws_manager

    async def speak(self, word: str) -> None:
        if not word:
            return
        await self.ws_manager.broadcast_json({"type": "narrate", "word": word})


async def narrate_safely(narrator: Narrator, word: str) -> None:
    """Speak `word`, logging and swallowing any narrator failure."""
    try:
        await narrator.speak(word)
    except Exception as exc:
        logger.warning(
            "narration_failed",
            word=word,
            error=str(exc),
            error_type=type(exc).__name__,
        )
