"""Level catalog: ordered word lists with per-level fall durations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from wordfall.core.word_lists import (
    LEVEL_1_WORDS,
    LEVEL_2_WORDS,
    LEVEL_3_WORDS,
    LEVEL_4_WORDS,
    LEVEL_5_WORDS,
)


@dataclass(frozen=True)
class Level:
    """A single level of the game.

    Attributes:
        level_number: 1-based number shown to the player.
        words: Words in spawn order.
        fall_duration: Seconds a word takes to reach the danger line.
    """

    level_number: int
    words: tuple[str, ...]
    fall_duration: float


class LevelCatalog:
    """Read-only, ordered collection of levels.

    Levels are traversed in ascending order and words within a level are
    spawned in list order.
    """

    def __init__(self, levels: Iterable[Level]) -> None:
        """Initialize the catalog.

        Args:
            levels: Levels in play order.

        Raises:
            ValueError: If no levels are given.
        """
        self._levels: tuple[Level, ...] = tuple(levels)
        if not self._levels:
            raise ValueError("level catalog needs at least one level")

    @classmethod
    def from_words(
        cls,
        word_lists: Sequence[Sequence[str]],
        fall_durations: Sequence[float],
    ) -> LevelCatalog:
        """Build a catalog from parallel word lists and fall durations."""
        if len(word_lists) != len(fall_durations):
            raise ValueError("word_lists and fall_durations must have the same length")
        return cls(
            Level(level_number=i + 1, words=tuple(words), fall_duration=duration)
            for i, (words, duration) in enumerate(zip(word_lists, fall_durations))
        )

    @property
    def level_count(self) -> int:
        return len(self._levels)

    @property
    def total_words(self) -> int:
        return sum(len(level.words) for level in self._levels)

    def level(self, level_index: int) -> Level:
        return self._levels[level_index]

    def levels(self) -> tuple[Level, ...]:
        return self._levels

    def word_at(self, level_index: int, word_index: int) -> str:
        return self._levels[level_index].words[word_index]

    def word_count(self, level_index: int) -> int:
        return len(self._levels[level_index].words)

    def fall_duration(self, level_index: int) -> float:
        return self._levels[level_index].fall_duration

    def is_last(self, level_index: int) -> bool:
        return level_index >= len(self._levels) - 1

    def remaining_after(self, level_index: int, word_index: int) -> int:
        """Count words not yet spawned from a cursor to the end of the catalog.

        Args:
            level_index: Level cursor.
            word_index: Index of the next word to spawn within that level.

        Returns:
            Number of unspawned words, 0 once the cursor is past the end.
        """
        if level_index >= len(self._levels):
            return 0
        remaining = max(0, self.word_count(level_index) - word_index)
        for level in self._levels[level_index + 1:]:
            remaining += len(level.words)
        return remaining


def default_catalog() -> LevelCatalog:
    """Reference configuration: five levels, each falling one second faster."""
    return LevelCatalog.from_words(
        [LEVEL_1_WORDS, LEVEL_2_WORDS, LEVEL_3_WORDS, LEVEL_4_WORDS, LEVEL_5_WORDS],
        [15.0, 14.0, 13.0, 12.0, 11.0],
    )
