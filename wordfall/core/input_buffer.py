"""Keystroke buffering: turns typed characters into word submissions."""

from __future__ import annotations

from typing import Optional


class InputBuffer:
    """Accumulates typed text until the player ends a word.

    A word ends when the buffer ends with a space or contains a newline,
    matching how the input field submits on space/enter.
    """

    def __init__(self) -> None:
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def feed(self, chunk: str) -> Optional[str]:
        """Append typed text.

        Args:
            chunk: One or more typed characters.

        Returns:
            The buffered text (untrimmed) if the word is complete, else None.
            The buffer is cleared when a word is returned.
        """
        self._text += chunk
        if self._text.endswith(" ") or "\n" in self._text:
            return self.flush()
        return None

    def flush(self) -> str:
        """Return the buffered text and clear the buffer (explicit submit)."""
        text, self._text = self._text, ""
        return text

    def clear(self) -> None:
        self._text = ""
