from __future__ import annotations

from pathlib import Path


def ensure_dir(p: Path) -> None:
    p.mkdir(parents=True, exist_ok=True)


def write_file(path: Path, content: str, *, force: bool) -> bool:
    """Write `content` unless the file exists and `force` is off. Returns True if written."""
    if path.exists() and not force:
        return False
    ensure_dir(path.parent)
    path.write_text(content, encoding="utf-8")
    return True
