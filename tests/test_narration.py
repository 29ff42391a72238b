"""Tests for matched-word narration."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from wordfall.narration import BroadcastNarrator, narrate_safely


@pytest.fixture
def ws_manager() -> MagicMock:
    """Create a mock connection manager."""
    manager = MagicMock()
    manager.broadcast_json = AsyncMock()
    return manager


@pytest.mark.asyncio
async def test_broadcast_narrator_sends_word(ws_manager: MagicMock):
    """Test the narrator asks clients to speak the word."""
    narrator = BroadcastNarrator(ws_manager)

    await narrator.speak("cat")

    ws_manager.broadcast_json.assert_awaited_once_with({"type": "narrate", "word": "cat"})


@pytest.mark.asyncio
async def test_broadcast_narrator_skips_empty_word(ws_manager: MagicMock):
    """Test empty words are not narrated."""
    narrator = BroadcastNarrator(ws_manager)

    await narrator.speak("")

    ws_manager.broadcast_json.assert_not_awaited()


@pytest.mark.asyncio
async def test_narrate_safely_swallows_errors():
    """Test narrator failures never propagate."""
    narrator = MagicMock()
    narrator.speak = AsyncMock(side_effect=RuntimeError("speech unavailable"))

    await narrate_safely(narrator, "cat")

    narrator.speak.assert_awaited_once_with("cat")


@pytest.mark.asyncio
async def test_narrate_safely_passes_word_through(ws_manager: MagicMock):
    """Test a working narrator is called normally."""
    await narrate_safely(BroadcastNarrator(ws_manager), "dog")

    ws_manager.broadcast_json.assert_awaited_once_with({"type": "narrate", "word": "dog"})
