"""Shared pytest fixtures for the inip test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

SAMPLE_INI = "[db]\nhost=localhost\nport=5432\n;comment\n[cache]\nhost=redis\n"


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory so no global config leaks into tests."""

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def sample_ini() -> str:
    """Provide the canonical two-section sample document."""

    return SAMPLE_INI


@pytest.fixture
def write_ini(tmp_path: Path) -> Callable[..., Path]:
    """Write INI text into a fresh project directory and return the file path."""

    project = tmp_path / "project"
    project.mkdir(exist_ok=True)

    def _write(text: str, name: str = "app.ini") -> Path:
        path = project / name
        path.write_bytes(text.encode("utf-8"))
        return path

    return _write
