from __future__ import annotations

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    OK = 0
    NOT_FOUND = 1
    ERROR = 2


class InipError(RuntimeError):
    """Base class for every error raised by the arena, table and parser."""

    def __init__(
        self,
        detail: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.line = line
        self.column = column
        self.hint = hint

    @property
    def location(self) -> str:
        if self.line is None:
            return ""
        if self.column is None:
            return f"line {self.line}"
        return f"line {self.line}, column {self.column}"

    def __str__(self) -> str:
        loc = self.location
        return f"{self.detail} ({loc})" if loc else self.detail


# ----------------------------
# Memory
# ----------------------------

class OutOfMemoryError(InipError):
    """Arena exhausted or table load ceiling reached."""


class ArenaFullError(OutOfMemoryError):
    def __init__(self, requested: int, offset: int, capacity: int) -> None:
        super().__init__(
            f"arena exhausted: requested {requested} bytes at offset {offset} "
            f"(capacity {capacity})",
            hint="Raise arena.capacity in .inip.toml or pass --arena-capacity.",
        )
        self.requested = requested
        self.offset = offset
        self.capacity = capacity


class TableFullError(OutOfMemoryError):
    def __init__(self, length: int, capacity: int) -> None:
        super().__init__(
            f"string table full: {length} of {capacity} slots used "
            f"(load factor must stay below 50%)",
            hint="Raise table.capacity in .inip.toml or pass --table-capacity.",
        )
        self.length = length
        self.capacity = capacity


class ArenaClosedError(InipError):
    """Raised when a destroyed arena is used again."""

    def __init__(self) -> None:
        super().__init__("arena has been destroyed")


class StaleReferenceError(InipError):
    """Raised when an arena string is read after its arena was reset."""

    def __init__(self, generation: int, current: int) -> None:
        super().__init__(
            f"arena string from generation {generation} used after reset "
            f"(arena is at generation {current})"
        )
        self.generation = generation
        self.current = current


# ----------------------------
# Syntax
# ----------------------------

class IniSyntaxError(InipError):
    """Base class for malformed INI input."""


class UnexpectedCharacterError(IniSyntaxError):
    def __init__(
        self,
        char: int,
        *,
        expected: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        msg = f"illegal character {describe_char(char)}"
        if expected:
            msg += f", expected {expected}"
        super().__init__(msg, line=line, column=column)
        self.char = char
        self.expected = expected


class UnterminatedConstructError(IniSyntaxError):
    def __init__(
        self,
        construct: str,
        *,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"unterminated {construct}: reached end of input",
            line=line,
            column=column,
        )
        self.construct = construct


# ----------------------------
# I/O
# ----------------------------

class IniIOError(InipError):
    """File could not be opened, read, or exceeds the configured size limit."""

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"cannot read {path}: {detail}")
        self.path = path


def describe_char(char: int) -> str:
    if 0x20 < char < 0x7F:
        return repr(chr(char))
    return f"0x{char:02x}"
