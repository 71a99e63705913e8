from __future__ import annotations

from inip.parsers.ini_parser import IniDocument, IniParser, parse_ini
from inip.parsers.scanner import Scanner
from inip.parsers.types import IniEntry, composite_key

__all__ = [
    "IniDocument",
    "IniEntry",
    "IniParser",
    "Scanner",
    "composite_key",
    "parse_ini",
]
