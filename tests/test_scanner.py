"""Unit tests for the one-character-lookahead scanner."""

from __future__ import annotations

import pytest

from inip.core.errors import UnterminatedConstructError
from inip.parsers.scanner import LF, Scanner, is_literal_char, is_whitespace


def test_empty_input_starts_at_eof() -> None:
    """An empty buffer must not read a character."""

    s = Scanner(b"")
    assert s.at_eof
    assert s.ch is None
    assert s.peek() is None
    assert bytes(s.read_literal()) == b""


def test_digit_zero_is_not_end_of_input() -> None:
    """The byte '0' is ordinary input, distinct from the end-of-input state."""

    s = Scanner(b"0")
    assert s.ch == ord("0")
    assert not s.at_eof
    assert bytes(s.read_literal()) == b"0"
    assert s.at_eof


def test_position_trails_read_position_by_one() -> None:
    """Lookahead invariant holds while scanning and at end of input."""

    s = Scanner(b"ab")
    assert (s.position, s.read_position) == (0, 1)
    s.read_char()
    assert (s.position, s.read_position) == (1, 2)
    s.read_char()
    assert s.at_eof
    assert (s.position, s.read_position) == (2, 3)

    # reading past the end is a no-op
    s.read_char()
    assert (s.position, s.read_position) == (2, 3)


def test_read_literal_stops_at_non_literal_char() -> None:
    """Literals are maximal runs of letters, digits and underscore."""

    s = Scanner(b"key_1 = v")
    literal = s.read_literal()
    assert isinstance(literal, memoryview)
    assert bytes(literal) == b"key_1"
    assert s.ch == ord(" ")


def test_line_and_column_tracking() -> None:
    """Line/column describe the current character and reset after a newline."""

    s = Scanner(b"a\nbc")
    assert (s.line, s.column) == (1, 1)
    s.read_char()
    assert s.ch == LF
    assert (s.line, s.column) == (1, 2)
    s.read_char()
    assert s.ch == ord("b")
    assert (s.line, s.column) == (2, 1)


def test_skip_whitespace_variants() -> None:
    """Inline skipping stops at newlines; full skipping crosses them."""

    s = Scanner(b" \t\r\n x")
    s.skip_inline_whitespace()
    assert s.ch == LF
    s.skip_whitespace()
    assert s.ch == ord("x")


def test_skip_to_next_line_stops_on_newline() -> None:
    """Comment skipping leaves the cursor on the terminating newline."""

    s = Scanner(b"; note\nx")
    s.skip_to_next_line()
    assert s.ch == LF


def test_skip_to_next_line_at_eof_is_unterminated() -> None:
    """Running out of input inside a comment is an error, not a silent stop."""

    s = Scanner(b"; no newline")
    with pytest.raises(UnterminatedConstructError) as exc_info:
        s.skip_to_next_line()
    assert exc_info.value.construct == "comment"


@pytest.mark.parametrize("ch", [b"a", b"Z", b"0", b"9", b"_"])
def test_literal_characters(ch: bytes) -> None:
    """Letters, digits and underscore are literal characters."""

    assert is_literal_char(ch[0])


@pytest.mark.parametrize("ch", [b"-", b".", b" ", b"=", b"[", b"\xc3"])
def test_non_literal_characters(ch: bytes) -> None:
    """Punctuation, whitespace and non-ASCII bytes are not literal characters."""

    assert not is_literal_char(ch[0])
    assert not is_literal_char(None)


def test_whitespace_class() -> None:
    """Space, tab, CR and LF are whitespace; EOF is not."""

    assert all(is_whitespace(c) for c in b" \t\r\n")
    assert not is_whitespace(ord("x"))
    assert not is_whitespace(None)
