from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from inip.core.arena import Arena
from inip.core.errors import IniIOError, InipError
from inip.core.models import InipConfig, ParseSource, ParseStats
from inip.core.reader import read_file
from inip.core.table import StringTable
from inip.parsers.ini_parser import IniDocument, IniParser


@dataclass(frozen=True)
class ParseResult:
    document: IniDocument
    stats: ParseStats
    source: ParseSource


def _run(
    *,
    name: str,
    path: Optional[Path],
    text: Optional[bytes],
    config: InipConfig,
) -> ParseResult:
    """
    Orchestrate one parse:
    arena -> table -> (file read) -> parser -> ParseResult.

    The arena is destroyed if anything fails; on success it is owned by the
    returned document.
    """
    t0 = time.perf_counter()
    started_at = datetime.now(timezone.utc)

    arena = Arena(config.arena.capacity)
    try:
        table = StringTable(arena, config.table.capacity)

        if path is not None:
            data = read_file(path, arena, max_bytes=config.limits.max_input_bytes)
        else:
            assert text is not None
            if len(text) > config.limits.max_input_bytes:
                raise IniIOError(
                    name, f"input is {len(text)} bytes, limit is {config.limits.max_input_bytes}"
                )
            data = memoryview(text)

        document = IniParser(data, arena, table).parse()
    except InipError as e:
        logger.debug("parse of {} failed: {}", name, e)
        arena.destroy()
        raise

    stats = ParseStats(
        bytes_read=len(data),
        entries=len(document.entries),
        keys=len(document),
        sections=len(document.sections()),
        arena_used=arena.offset,
        arena_capacity=arena.capacity,
        table_capacity=table.capacity,
        duration_ms=int((time.perf_counter() - t0) * 1000),
    )
    source = ParseSource(
        name=name,
        path=str(path) if path is not None else None,
        started_at=started_at,
        finished_at=datetime.now(timezone.utc),
    )
    logger.debug(
        "{}: {} keys in {} sections, arena {}/{} bytes",
        name,
        stats.keys,
        stats.sections,
        stats.arena_used,
        stats.arena_capacity,
    )
    return ParseResult(document=document, stats=stats, source=source)


def parse_text(
    text: Union[str, bytes],
    config: Optional[InipConfig] = None,
    *,
    name: str = "<string>",
) -> ParseResult:
    config = config or InipConfig()
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    return _run(name=name, path=None, text=raw, config=config)


def parse_file(
    path: Union[str, Path],
    config: Optional[InipConfig] = None,
) -> ParseResult:
    config = config or InipConfig()
    p = Path(path)
    return _run(name=str(p), path=p, text=None, config=config)
