"""Game status state machine and the mutable game state aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from wordfall.core.words import ActiveWord


class GameStatus(str, Enum):
    """Lifecycle of a game session.

    IDLE is the initial state; RUNNING is the only state in which time
    advances and input is accepted. VICTORY and GAME_OVER are terminal
    until the next start.
    """

    IDLE = "idle"
    RUNNING = "running"
    VICTORY = "victory"
    GAME_OVER = "game_over"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.VICTORY, GameStatus.GAME_OVER)


# RUNNING -> RUNNING is a restart while a game is in progress.
ALLOWED_TRANSITIONS: dict[GameStatus, frozenset[GameStatus]] = {
    GameStatus.IDLE: frozenset({GameStatus.RUNNING}),
    GameStatus.RUNNING: frozenset(
        {GameStatus.RUNNING, GameStatus.VICTORY, GameStatus.GAME_OVER}
    ),
    GameStatus.VICTORY: frozenset({GameStatus.RUNNING}),
    GameStatus.GAME_OVER: frozenset({GameStatus.RUNNING}),
}


class InvalidTransitionError(RuntimeError):
    """Raised when code attempts a status change the state machine forbids."""

    def __init__(self, current: GameStatus, target: GameStatus) -> None:
        super().__init__(f"cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target


@dataclass
class GameState:
    """All mutable state of one game session, owned by the engine.

    Attributes:
        status: Current lifecycle status.
        hp: Remaining hit points, within [0, max_hp].
        current_level_index: Level cursor for the next spawn.
        next_word_index: Word cursor within the current level.
        active_words: Words on the field, in spawn order.
        started_at: Timestamp of the last start().
        elapsed: Seconds since start, updated every tick.
        completion_time: Elapsed time frozen at the victory moment.
        last_spawn_time: Timestamp of the most recent spawn.
        last_tick: Timestamp of the most recent advance().
    """

    status: GameStatus = GameStatus.IDLE
    hp: int = 100
    current_level_index: int = 0
    next_word_index: int = 0
    active_words: list[ActiveWord] = field(default_factory=list)
    started_at: Optional[float] = None
    elapsed: float = 0.0
    completion_time: Optional[float] = None
    last_spawn_time: Optional[float] = None
    last_tick: Optional[float] = None

    def transition(self, target: GameStatus) -> None:
        """Move to `target`, enforcing the allowed transition table.

        Raises:
            InvalidTransitionError: If the transition is not allowed.
        """
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidTransitionError(self.status, target)
        self.status = target
