"""Read-only snapshots of game state for the presentation layer.

The renderer never touches GameState directly; it receives a GameSnapshot
each frame and draws from that.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Optional

from wordfall.core.state import GameStatus

if TYPE_CHECKING:
    from wordfall.core.engine import GameEngine


@dataclass(frozen=True)
class WordView:
    """A falling word as the renderer sees it.

    Attributes:
        text: The word to display.
        x_fraction: Horizontal placement in [0, 1].
        progress: Fraction of the way to the danger line, in [0, 1].
    """

    text: str
    x_fraction: float
    progress: float


@dataclass(frozen=True)
class GameSnapshot:
    """Immutable snapshot of game state at a specific moment.

    Attributes:
        status: Lifecycle status.
        hp: Remaining hit points.
        max_hp: Hit point ceiling.
        elapsed: Seconds since start, frozen at completion after victory.
        elapsed_display: `elapsed` formatted as MM:SS.mmm.
        level_number: Level of the word cursor.
        words: Active words in spawn order.
        words_remaining: Unspawned words plus words on the field.
        timestamp: Time at which word progress was evaluated.
    """

    status: GameStatus
    hp: int
    max_hp: int
    elapsed: float
    elapsed_display: str
    level_number: int
    words: tuple[WordView, ...]
    words_remaining: int
    timestamp: float


def format_duration(seconds: float) -> str:
    """Format a duration as MM:SS.mmm for the HUD.

    Args:
        seconds: Non-negative duration in seconds.

    Returns:
        Zero-padded minutes, seconds and milliseconds.
    """
    total_ms = max(0, int(round(seconds * 1000)))
    minutes, remainder = divmod(total_ms, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{minutes:02d}:{secs:02d}.{millis:03d}"


def collect_snapshot(engine: GameEngine, now: Optional[float] = None) -> GameSnapshot:
    """Collect a snapshot of the engine's current state.

    Args:
        engine: The GameEngine to read from.
        now: Time at which word progress is evaluated. Defaults to the last
            tick, or the engine clock before the first tick.

    Returns:
        GameSnapshot sharing no mutable objects with the engine.
    """
    state = engine.state
    if now is None:
        now = state.last_tick if state.last_tick is not None else engine.clock()

    if state.status is GameStatus.VICTORY and state.completion_time is not None:
        elapsed = state.completion_time
    else:
        elapsed = state.elapsed

    words = tuple(
        WordView(text=word.text, x_fraction=word.x_fraction, progress=word.progress(now))
        for word in state.active_words
    )

    return GameSnapshot(
        status=state.status,
        hp=state.hp,
        max_hp=engine.settings.max_hp,
        elapsed=elapsed,
        elapsed_display=format_duration(elapsed),
        level_number=engine.current_level_number(),
        words=words,
        words_remaining=engine.words_remaining(),
        timestamp=now,
    )


def snapshot_to_dict(snapshot: GameSnapshot) -> dict[str, Any]:
    """Convert a snapshot to a JSON-serializable dict."""
    data = asdict(snapshot)
    data["status"] = snapshot.status.value
    data["words"] = [asdict(word) for word in snapshot.words]
    return data
