"""Unit tests for InputBuffer."""

from __future__ import annotations

from wordfall.core.input_buffer import InputBuffer


def test_partial_word_is_buffered():
    """Test typing without a terminator returns nothing."""
    buffer = InputBuffer()

    assert buffer.feed("c") is None
    assert buffer.feed("at") is None
    assert buffer.text == "cat"


def test_space_completes_word():
    """Test a trailing space submits and clears the buffer."""
    buffer = InputBuffer()
    buffer.feed("ca")

    assert buffer.feed("t ") == "cat "
    assert buffer.text == ""


def test_newline_completes_word():
    """Test a newline anywhere in the buffer submits it."""
    buffer = InputBuffer()

    assert buffer.feed("dog\n") == "dog\n"
    assert buffer.text == ""


def test_flush_returns_partial_word():
    """Test explicit submit returns whatever is buffered."""
    buffer = InputBuffer()
    buffer.feed("tre")

    assert buffer.flush() == "tre"
    assert buffer.flush() == ""


def test_clear_discards_text():
    """Test clear() empties the buffer."""
    buffer = InputBuffer()
    buffer.feed("fish")
    buffer.clear()

    assert buffer.text == ""
