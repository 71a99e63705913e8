from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

from loguru import logger

from inip.core.arena import Arena, ArenaString
from inip.core.errors import (
    IniSyntaxError,
    UnexpectedCharacterError,
    UnterminatedConstructError,
)
from inip.core.models import DEFAULT_ARENA_CAPACITY, DEFAULT_TABLE_CAPACITY
from inip.core.table import StringTable
from inip.parsers.scanner import (
    EQUALS,
    LBRACKET,
    LF,
    RBRACKET,
    SEMICOLON,
    Scanner,
    is_literal_char,
)
from inip.parsers.types import SECTION_SEPARATOR, IniEntry, composite_key

InputData = Union[str, bytes, bytearray, memoryview]


def _is_literal_name(name: str) -> bool:
    data = name.encode("utf-8")
    return bool(data) and all(is_literal_char(b) for b in data)


class IniDocument:
    """
    Parsed INI data.

    Lookups go through the string table using `section:key` composite keys.
    `entries` keeps every pair in input order, including pairs that a later
    line overwrote. All values live in the arena and are only readable until
    the arena is reset or destroyed (see `close()`).
    """

    def __init__(
        self,
        *,
        arena: Arena,
        table: StringTable,
        entries: List[IniEntry],
        sections: List[str],
    ) -> None:
        self.arena = arena
        self.table = table
        self.entries = entries
        self._sections = sections

    def _table_key(self, section: str, key: str) -> Optional[str]:
        # names that could not come out of the parser must not reach into
        # another section through the `section:key` encoding
        if not _is_literal_name(key) or (section and not _is_literal_name(section)):
            return None
        return composite_key(section, key)

    def get(self, section: str, key: str, default: Optional[str] = None) -> Optional[str]:
        table_key = self._table_key(section, key)
        if table_key is None:
            return default
        value = self.table.lookup(table_key)
        if value is None:
            return default
        return str(value)

    def __getitem__(self, item: Tuple[str, str]) -> str:
        section, key = item
        table_key = self._table_key(section, key)
        if table_key is None:
            raise KeyError(item)
        return str(self.table.get(table_key))

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        section, key = item
        table_key = self._table_key(str(section), str(key))
        return table_key is not None and table_key in self.table

    def __len__(self) -> int:
        return len(self.table)

    def __iter__(self) -> Iterator[IniEntry]:
        return iter(self.entries)

    def sections(self) -> List[str]:
        """Section names in first-seen order; "" is the implicit section."""
        return list(self._sections)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        out: Dict[str, Dict[str, str]] = {}
        for section in self._sections:
            out[section] = {}
        for e in self.entries:
            out.setdefault(e.section, {})[e.key] = e.value
        return out

    def close(self) -> None:
        self.arena.destroy()

    def __enter__(self) -> "IniDocument":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"IniDocument(keys={len(self)}, sections={len(self._sections)})"


class IniParser:
    """
    Single-pass INI parser.

    Walks the scanner one construct at a time and writes every pair into the
    string table. Literals come out of the scanner as views into the input and
    are copied into the arena before they are stored.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview], arena: Arena, table: StringTable) -> None:
        self._scanner = Scanner(data)
        self._arena = arena
        self._table = table
        self._section: Optional[ArenaString] = None
        self._section_name = ""
        self._entries: List[IniEntry] = []
        self._sections: List[str] = []

    @property
    def current_section(self) -> str:
        return self._section_name

    def parse(self) -> IniDocument:
        while self.parse_next():
            pass
        logger.debug(
            "parsed {} entries, {} keys, {} sections",
            len(self._entries),
            len(self._table),
            len(self._sections),
        )
        return IniDocument(
            arena=self._arena,
            table=self._table,
            entries=self._entries,
            sections=self._sections,
        )

    def parse_next(self) -> bool:
        """Consume one construct. Returns False once the input is exhausted."""
        s = self._scanner
        s.skip_whitespace()

        if s.ch is None:
            return False

        if s.ch == LBRACKET:
            self._parse_section_header()
            self._finish_construct()
        elif s.ch == SEMICOLON:
            s.skip_to_next_line("comment")
            s.read_char()
        elif is_literal_char(s.ch):
            self._parse_key_value()
            self._finish_construct()
        else:
            raise UnexpectedCharacterError(s.ch, line=s.line, column=s.column)
        return True

    # ----------------------------
    # Constructs
    # ----------------------------

    def _error(self, expected: str, construct: str) -> IniSyntaxError:
        s = self._scanner
        if s.ch is None:
            return UnterminatedConstructError(construct, line=s.line, column=s.column)
        return UnexpectedCharacterError(s.ch, expected=expected, line=s.line, column=s.column)

    def _parse_section_header(self) -> None:
        s = self._scanner
        s.read_char()
        if not is_literal_char(s.ch):
            raise self._error("section name", "section header")

        name = s.read_literal()
        if s.ch != RBRACKET:
            raise self._error("']'", "section header")
        s.read_char()

        self._section = self._arena.strdup(name)
        self._section_name = str(self._section)
        if self._section_name not in self._sections:
            self._sections.append(self._section_name)
        logger.debug("entering section [{}] at line {}", self._section_name, s.line)

    def _parse_key_value(self) -> None:
        s = self._scanner
        line = s.line

        key = s.read_literal()
        s.skip_inline_whitespace()
        if s.ch != EQUALS:
            raise self._error("'='", "key/value pair")
        s.read_char()
        s.skip_inline_whitespace()
        val = s.read_literal()

        value = self._arena.strdup(val)
        if self._section is not None:
            stored_key = self._section.tobytes() + SECTION_SEPARATOR.encode("ascii") + bytes(key)
        else:
            stored_key = bytes(key)
        self._table.set(stored_key, value)

        if not self._section_name and "" not in self._sections:
            self._sections.insert(0, "")
        self._entries.append(
            IniEntry(
                section=self._section_name,
                key=bytes(key).decode("ascii"),
                value=str(value),
                line=line,
            )
        )

    def _finish_construct(self) -> None:
        # a construct may be followed by inline whitespace, a comment, a newline or EOF
        s = self._scanner
        s.skip_inline_whitespace()
        if s.ch is None or s.ch == SEMICOLON:
            return
        if s.ch == LF:
            s.read_char()
            return
        raise UnexpectedCharacterError(s.ch, expected="end of line", line=s.line, column=s.column)


def parse_ini(
    data: InputData,
    *,
    arena: Optional[Arena] = None,
    table: Optional[StringTable] = None,
    arena_capacity: int = DEFAULT_ARENA_CAPACITY,
    table_capacity: int = DEFAULT_TABLE_CAPACITY,
) -> IniDocument:
    """
    Parse INI text into an IniDocument.

    When no arena/table is supplied a fresh arena of `arena_capacity` bytes is
    created and the table is carved from it. Text input is UTF-8 encoded.
    """
    raw = data.encode("utf-8") if isinstance(data, str) else data
    if arena is None:
        arena = Arena(arena_capacity)
    if table is None:
        table = StringTable(arena, table_capacity)
    return IniParser(raw, arena, table).parse()
