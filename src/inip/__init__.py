"""INI parsing on top of a bump-pointer arena and a fixed-capacity string table."""

from loguru import logger

from inip.core.arena import Arena, ArenaString
from inip.core.engine import ParseResult, parse_file, parse_text
from inip.core.errors import (
    ArenaFullError,
    IniIOError,
    InipError,
    IniSyntaxError,
    OutOfMemoryError,
    TableFullError,
    UnexpectedCharacterError,
    UnterminatedConstructError,
)
from inip.core.table import StringTable, fnv1a_64
from inip.parsers.ini_parser import IniDocument, IniParser, parse_ini
from inip.parsers.types import IniEntry

__version__ = "0.1.0"

# library is silent unless the application enables it (the CLI does)
logger.disable("inip")

__all__ = [
    "Arena",
    "ArenaFullError",
    "ArenaString",
    "IniDocument",
    "IniEntry",
    "IniIOError",
    "IniParser",
    "IniSyntaxError",
    "InipError",
    "OutOfMemoryError",
    "ParseResult",
    "StringTable",
    "TableFullError",
    "UnexpectedCharacterError",
    "UnterminatedConstructError",
    "__version__",
    "fnv1a_64",
    "parse_file",
    "parse_ini",
    "parse_text",
]
