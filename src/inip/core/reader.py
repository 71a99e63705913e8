from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from loguru import logger

from inip.core.arena import Arena
from inip.core.errors import IniIOError


def read_file(
    path: Union[str, Path],
    arena: Arena,
    *,
    max_bytes: Optional[int] = None,
) -> memoryview:
    """
    Read a whole file into an arena-owned buffer.

    Returns a view of exactly the file's bytes. Raises IniIOError when the
    file cannot be opened or read or is larger than `max_bytes`, and
    ArenaFullError when the arena cannot hold it.
    """
    p = Path(path)
    try:
        with p.open("rb") as fh:
            size = fh.seek(0, 2)
            if max_bytes is not None and size > max_bytes:
                raise IniIOError(str(p), f"file is {size} bytes, limit is {max_bytes}")
            fh.seek(0)

            buf = arena.alloc(size)
            read = fh.readinto(buf)
    except OSError as e:
        raise IniIOError(str(p), e.strerror or str(e)) from e

    if read != size:
        raise IniIOError(str(p), f"short read: expected {size} bytes, got {read}")

    logger.debug("read {} bytes from {}", size, p)
    return buf
