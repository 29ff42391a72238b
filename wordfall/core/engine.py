"""Game simulation engine: spawning, expiry, matching and win/loss.

This module provides the GameEngine class which owns the GameState and
advances it in response to two external drivers: a frame clock calling
advance(now) and an input path calling submit(text, now). The engine keeps
no timers of its own; every decision is a comparison against the
caller-supplied timestamp.
"""

from __future__ import annotations

import random
import time
from typing import Callable, Optional

import structlog

from wordfall.config import Settings
from wordfall.core.levels import LevelCatalog
from wordfall.core.snapshot import GameSnapshot, collect_snapshot
from wordfall.core.state import GameState, GameStatus
from wordfall.core.words import ActiveWord

logger = structlog.get_logger()

# Horizontal placement range for new words, as a fraction of field width.
_X_MIN = 0.1
_X_MAX = 0.9


class GameEngine:
    """Single-player typing game simulation.

    Coordinates:
    - Level/word progression through the catalog
    - Spawn pacing (replacement and periodic spawns)
    - Expiry detection and HP accounting
    - Submission matching
    - Victory and game over detection
    """

    def __init__(
        self,
        catalog: LevelCatalog,
        settings: Settings,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the engine in the IDLE state.

        Args:
            catalog: Levels and word lists to play through.
            settings: Gameplay constants (max_hp, hp_penalty, ...).
            rng: Random source for word placement. Pass a seeded instance
                for reproducible placement.
            clock: Time source used when start()/submit() get no timestamp.
        """
        self.catalog = catalog
        self.settings = settings
        self.rng = rng if rng is not None else random.Random()
        self.clock = clock
        self.state = GameState(hp=settings.max_hp)

        # Per-session counters (reset on start)
        self.stats: dict[str, int] = {"spawned": 0, "matched": 0, "expired": 0}

    @property
    def status(self) -> GameStatus:
        return self.state.status

    @property
    def hp(self) -> int:
        return self.state.hp

    @property
    def active_words(self) -> list[ActiveWord]:
        return self.state.active_words

    def start(self, now: Optional[float] = None) -> None:
        """Start a new game, discarding any previous session.

        Resets HP, cursors, active words and timestamps, then performs one
        spawn attempt so the player sees a word immediately.

        Args:
            now: Start timestamp. Defaults to the engine clock.
        """
        if now is None:
            now = self.clock()

        restarted = self.state.status is GameStatus.RUNNING
        self.state.transition(GameStatus.RUNNING)

        state = self.state
        state.hp = self.settings.max_hp
        state.current_level_index = 0
        state.next_word_index = 0
        state.active_words.clear()
        state.started_at = now
        state.elapsed = 0.0
        state.completion_time = None
        state.last_spawn_time = None
        state.last_tick = now
        self.stats = {"spawned": 0, "matched": 0, "expired": 0}

        logger.info(
            "game_started",
            restarted=restarted,
            levels=self.catalog.level_count,
            total_words=self.catalog.total_words,
        )

        self.try_spawn(now)

    def advance(self, now: float) -> None:
        """Advance the simulation to time `now`.

        Called once per frame. Does nothing unless the game is RUNNING.
        Order of work:
        1. Update elapsed time
        2. Remove expired words and apply HP penalties
        3. Stop with GAME_OVER if HP is depleted
        4. One replacement spawn per expired word
        5. Periodic spawn
        6. Victory check

        Args:
            now: Current timestamp in seconds, from the same clock as start().
        """
        state = self.state
        if state.status is not GameStatus.RUNNING:
            return

        state.last_tick = now
        if state.started_at is not None:
            state.elapsed = now - state.started_at

        expired_count = self._remove_expired_words(now)

        if state.hp <= 0:
            state.hp = 0
            state.transition(GameStatus.GAME_OVER)
            logger.info(
                "game_over",
                elapsed=round(state.elapsed, 3),
                level=self.current_level_number(),
                **self.stats,
            )
            return

        for _ in range(expired_count):
            self.try_spawn(now)

        self._maybe_spawn_periodic(now)
        self._check_victory()

    def submit(self, raw_text: str, now: Optional[float] = None) -> Optional[str]:
        """Resolve a word submitted by the player.

        Input is trimmed and lower-cased. The first active word (in spawn
        order) with the same text is removed, a replacement spawn is
        attempted and victory is checked. Wrong guesses are ignored without
        penalty.

        Args:
            raw_text: Text as typed by the player.
            now: Submission timestamp. Defaults to the engine clock.

        Returns:
            The matched word's text, or None if nothing matched or the game
            is not running.
        """
        state = self.state
        text = raw_text.strip().lower()
        if state.status is not GameStatus.RUNNING or not text:
            return None

        if now is None:
            now = self.clock()

        matched: Optional[ActiveWord] = None
        for index, word in enumerate(state.active_words):
            if word.text == text:
                matched = state.active_words.pop(index)
                break

        if matched is None:
            logger.debug("submission_unmatched", text=text)
            return None

        self.stats["matched"] += 1
        # Snapshots taken after a typed victory report the submit time.
        if state.last_tick is None or now > state.last_tick:
            state.last_tick = now
        if state.started_at is not None:
            state.elapsed = max(state.elapsed, now - state.started_at)

        logger.debug(
            "word_matched",
            word=matched.text,
            progress=round(matched.progress(now), 3),
        )

        self.try_spawn(now)
        self._check_victory()
        return matched.text

    def try_spawn(self, now: float) -> bool:
        """Spawn the next word from the catalog if capacity allows.

        Walks forward from the level cursor, skipping exhausted levels. When
        a spawn exhausts a level that is not the last one, the cursor moves
        to the next level straight away.

        Args:
            now: Spawn timestamp.

        Returns:
            True if a word was spawned, False if the game is not running,
            the field is full or the catalog is exhausted.
        """
        state = self.state
        if len(state.active_words) >= self.settings.max_active_words:
            return False
        if state.status is not GameStatus.RUNNING:
            return False

        catalog = self.catalog
        while state.current_level_index < catalog.level_count:
            level_index = state.current_level_index
            if state.next_word_index >= catalog.word_count(level_index):
                if not catalog.is_last(level_index):
                    self._advance_level()
                    continue
                return False

            text = catalog.word_at(level_index, state.next_word_index)
            state.next_word_index += 1

            word = ActiveWord(
                text=text,
                spawned_at=now,
                fall_duration=catalog.fall_duration(level_index),
                x_fraction=self.rng.uniform(_X_MIN, _X_MAX),
            )
            state.active_words.append(word)
            state.last_spawn_time = now
            self.stats["spawned"] += 1

            logger.debug(
                "word_spawned",
                word=text,
                level=catalog.level(level_index).level_number,
                active=len(state.active_words),
            )

            if state.next_word_index >= catalog.word_count(level_index) and not catalog.is_last(
                level_index
            ):
                self._advance_level()

            return True

        return False

    def has_pending_words(self) -> bool:
        """Check whether any word in the catalog has not been spawned yet."""
        return (
            self.catalog.remaining_after(
                self.state.current_level_index, self.state.next_word_index
            )
            > 0
        )

    def words_remaining(self) -> int:
        """Count unspawned words plus words still on the field."""
        state = self.state
        unspawned = self.catalog.remaining_after(
            state.current_level_index, state.next_word_index
        )
        return unspawned + len(state.active_words)

    def current_level_number(self) -> int:
        """Level number shown to the player for the current cursor."""
        index = min(self.state.current_level_index, self.catalog.level_count - 1)
        return self.catalog.level(index).level_number

    def snapshot(self, now: Optional[float] = None) -> GameSnapshot:
        """Build a read-only snapshot for rendering.

        Args:
            now: Time at which word progress is evaluated. Defaults to the
                last tick.
        """
        return collect_snapshot(self, now)

    def _remove_expired_words(self, now: float) -> int:
        """Remove words that reached the danger line and apply HP penalties.

        Returns:
            Number of words removed.
        """
        state = self.state
        if not state.active_words:
            return 0

        expired = [word for word in state.active_words if word.is_expired(now)]
        if not expired:
            return 0

        state.active_words = [word for word in state.active_words if not word.is_expired(now)]
        loss = len(expired) * self.settings.hp_penalty
        state.hp = max(0, state.hp - loss)
        self.stats["expired"] += len(expired)

        logger.info(
            "words_expired",
            count=len(expired),
            words=[word.text for word in expired],
            hp=state.hp,
        )
        return len(expired)

    def _maybe_spawn_periodic(self, now: float) -> None:
        """Spawn on the regular interval while there is room and words remain."""
        state = self.state
        if len(state.active_words) >= self.settings.max_active_words:
            return
        if not self.has_pending_words():
            return
        if (
            state.last_spawn_time is None
            or now - state.last_spawn_time >= self.settings.spawn_interval_sec
        ):
            self.try_spawn(now)

    def _check_victory(self) -> None:
        """Declare victory once the catalog is exhausted and the field is clear."""
        state = self.state
        if state.status is not GameStatus.RUNNING:
            return
        if self.has_pending_words() or state.active_words:
            return

        state.transition(GameStatus.VICTORY)
        state.completion_time = state.elapsed
        logger.info(
            "victory",
            completion_time=round(state.elapsed, 3),
            hp=state.hp,
            **self.stats,
        )

    def _advance_level(self) -> None:
        state = self.state
        state.current_level_index += 1
        state.next_word_index = 0
        logger.info(
            "level_advanced",
            level=self.catalog.level(state.current_level_index).level_number,
        )
