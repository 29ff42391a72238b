"""ActiveWord model: a word currently falling toward the danger line."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ActiveWord:
    """A word on the field.

    Created on spawn and discarded on expiry or match. Placement is fixed
    for the word's lifetime.
    """

    text: str
    spawned_at: float  # monotonic seconds
    fall_duration: float  # seconds
    x_fraction: float  # horizontal placement in [0, 1]

    def progress(self, now: float) -> float:
        """Fraction of the way to the danger line at time `now`.

        Args:
            now: Current timestamp in seconds.

        Returns:
            Value clamped to [0, 1]. A non-positive fall duration counts as
            already complete.
        """
        if self.fall_duration <= 0:
            return 1.0
        fraction = (now - self.spawned_at) / self.fall_duration
        return min(1.0, max(0.0, fraction))

    def is_expired(self, now: float) -> bool:
        """Check whether the word has reached the danger line."""
        return now - self.spawned_at >= self.fall_duration
