from __future__ import annotations

from typing import Optional, Union

from inip.core.errors import UnterminatedConstructError

TAB = 0x09
LF = 0x0A
CR = 0x0D
SPACE = 0x20
SEMICOLON = 0x3B
EQUALS = 0x3D
LBRACKET = 0x5B
RBRACKET = 0x5D
UNDERSCORE = 0x5F

INLINE_WHITESPACE = frozenset((SPACE, TAB, CR))
WHITESPACE = INLINE_WHITESPACE | {LF}


def is_literal_char(ch: Optional[int]) -> bool:
    if ch is None:
        return False
    return (
        0x61 <= ch <= 0x7A  # a-z
        or 0x41 <= ch <= 0x5A  # A-Z
        or 0x30 <= ch <= 0x39  # 0-9
        or ch == UNDERSCORE
    )


def is_whitespace(ch: Optional[int]) -> bool:
    return ch is not None and ch in WHITESPACE


class Scanner:
    """
    Single-pass cursor over a byte span with one character of lookahead.

    `ch` is the byte at `position`, or None once the input is exhausted.
    `read_position` is always one past `position`. Line and column are
    1-based and describe `ch`.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview]) -> None:
        self._data = data if isinstance(data, memoryview) else memoryview(data)
        self._length = len(self._data)
        self.position = 0
        self.read_position = 0
        self.ch: Optional[int] = None
        self.line = 1
        self.column = 0
        self.read_char()

    @property
    def at_eof(self) -> bool:
        return self.ch is None

    def read_char(self) -> None:
        if self.read_position > self._length:
            return

        if self.ch == LF:
            self.line += 1
            self.column = 1
        else:
            self.column += 1

        if self.read_position >= self._length:
            self.ch = None
        else:
            self.ch = self._data[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek(self) -> Optional[int]:
        if self.read_position >= self._length:
            return None
        return self._data[self.read_position]

    def skip_whitespace(self) -> None:
        while self.ch is not None and self.ch in WHITESPACE:
            self.read_char()

    def skip_inline_whitespace(self) -> None:
        while self.ch is not None and self.ch in INLINE_WHITESPACE:
            self.read_char()

    def skip_to_next_line(self, construct: str = "comment") -> None:
        """Advance until `ch` is a newline. Running out of input first is an error."""
        while self.ch != LF:
            if self.ch is None:
                raise UnterminatedConstructError(construct, line=self.line, column=self.column)
            self.read_char()

    def read_literal(self) -> memoryview:
        """
        Consume a maximal run of literal characters.

        The returned view points into the scanned buffer and does not own its
        bytes; copy it before the buffer is released or reused.
        """
        start = self.position
        while is_literal_char(self.ch):
            self.read_char()
        return self._data[start:self.position]
