from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

SECTION_SEPARATOR = ":"


def composite_key(section: str, key: str) -> str:
    """
    Table key for `key` inside `section`.

    Keys in the implicit (unnamed) section are stored bare. Literals cannot
    contain the separator, so `db:host` never collides with a bare `host`.
    """
    return f"{section}{SECTION_SEPARATOR}{key}" if section else key


@dataclass(frozen=True)
class IniEntry:
    """ One key/value pair as it appeared in the input."""
    section: str
    key: str
    value: str
    line: Optional[int] = None

    @property
    def qualified_key(self) -> str:
        return composite_key(self.section, self.key)
