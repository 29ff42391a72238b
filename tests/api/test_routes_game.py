"""Tests for game control API endpoints."""

from __future__ import annotations

import random
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from wordfall.api.app import create_app
from wordfall.api.ws_handler import ConnectionManager
from wordfall.config import Settings
from wordfall.core.engine import GameEngine
from wordfall.core.input_buffer import InputBuffer
from wordfall.core.levels import LevelCatalog


class FakeClock:
    """Manually advanced clock for deterministic tests."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FailingNarrator:
    """Narrator whose speech backend is always broken."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def speak(self, word: str) -> None:
        self.calls.append(word)
        raise RuntimeError("speech unavailable")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def engine(clock: FakeClock) -> GameEngine:
    """Create an engine over a two-level catalog."""
    catalog = LevelCatalog.from_words([["cat", "dog"], ["tree"]], [10.0, 8.0])
    return GameEngine(
        catalog=catalog,
        settings=Settings(max_hp=100, hp_penalty=10, max_active_words=5, spawn_interval_sec=2.0),
        rng=random.Random(0),
        clock=clock,
    )


@pytest.fixture
def client(engine: GameEngine) -> TestClient:
    """Create a test client."""
    return TestClient(create_app(engine=engine))


def test_root(client: TestClient):
    """Test root health endpoint."""
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_health_reports_game_status(client: TestClient):
    """Test /health includes the game status."""
    response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["game_status"] == "idle"
    assert data["loop_running"] == "False"


def test_state_before_start(client: TestClient):
    """Test state endpoint on an idle game."""
    response = client.get("/api/game/state")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "idle"
    assert data["hp"] == 100
    assert data["words"] == []


def test_start_game(client: TestClient):
    """Test starting a game spawns the first word."""
    response = client.post("/api/game/start")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "running"
    assert [word["text"] for word in data["words"]] == ["cat"]
    assert data["level_number"] == 1


def test_start_game_clears_typed_input(engine: GameEngine):
    """Test a restart over REST discards keystrokes buffered on sockets."""
    manager = ConnectionManager()
    buffer = InputBuffer()
    buffer.feed("ca")
    manager.buffers[MagicMock()] = buffer
    client = TestClient(create_app(engine=engine, ws_manager=manager))

    response = client.post("/api/game/start")

    assert response.status_code == 200
    assert buffer.text == ""


def test_submit_match(client: TestClient, clock: FakeClock):
    """Test a matching submission returns the word and refills the field."""
    client.post("/api/game/start")
    clock.now = 1.0

    response = client.post("/api/game/submit", json={"text": " CAT "})

    assert response.status_code == 200
    data = response.json()
    assert data["matched"] == "cat"
    assert [word["text"] for word in data["snapshot"]["words"]] == ["dog"]


def test_submit_miss(client: TestClient):
    """Test a wrong word returns null without penalty."""
    client.post("/api/game/start")

    response = client.post("/api/game/submit", json={"text": "cow"})

    assert response.status_code == 200
    data = response.json()
    assert data["matched"] is None
    assert data["snapshot"]["hp"] == 100


def test_submit_before_start(client: TestClient):
    """Test submitting while idle is a no-op, not an error."""
    response = client.post("/api/game/submit", json={"text": "cat"})

    assert response.status_code == 200
    assert response.json()["matched"] is None
    assert response.json()["snapshot"]["status"] == "idle"


def test_submit_requires_text(client: TestClient):
    """Test request validation for the submit body."""
    response = client.post("/api/game/submit", json={})

    assert response.status_code == 422


def test_narration_failure_does_not_affect_game(engine: GameEngine):
    """Test a broken narrator leaves the match and game state intact."""
    narrator = FailingNarrator()
    client = TestClient(create_app(engine=engine, narrator=narrator))
    client.post("/api/game/start")

    response = client.post("/api/game/submit", json={"text": "cat"})

    assert response.status_code == 200
    assert response.json()["matched"] == "cat"
    assert narrator.calls == ["cat"]
    assert engine.status.value == "running"


def test_list_levels(client: TestClient):
    """Test the level catalog summary."""
    response = client.get("/api/levels")

    assert response.status_code == 200
    assert response.json() == [
        {"level_number": 1, "word_count": 2, "fall_duration": 10.0},
        {"level_number": 2, "word_count": 1, "fall_duration": 8.0},
    ]


def test_get_config(client: TestClient):
    """Test the gameplay constants endpoint."""
    response = client.get("/api/config")

    assert response.status_code == 200
    data = response.json()
    assert data["max_hp"] == 100
    assert data["hp_penalty"] == 10
    assert data["max_active_words"] == 5
    assert data["spawn_interval_sec"] == 2.0
