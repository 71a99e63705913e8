from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from inip.core.models import InipConfig

# Python 3.11+ has tomllib; for 3.9/3.10 use tomli
try:
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore


# Project-local config (next to the INI files being parsed, or any parent dir)
DEFAULT_PROJECT_CONFIG_FILES = (
    ".inip.toml",
    ".config/inip.toml",
)

# Global config (applies on this machine for all runs)
DEFAULT_GLOBAL_CONFIG_FILES = (
    "~/.config/inip/config.toml",
    "~/.inip.toml",
)


def _read_toml(path: Path) -> Dict[str, Any]:
    data = tomllib.loads(path.read_text(encoding="utf-8", errors="replace"))
    if not isinstance(data, dict):
        return {}
    return data


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep-merge override into base (dict-only). Lists/scalars are replaced.
    """
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def _expand_paths(paths: tuple[str, ...]) -> list[Path]:
    return [Path(p).expanduser().resolve() for p in paths]


def find_project_config(start_dir: Path) -> Optional[Path]:
    """
    Walk upward to find the closest project config.
    """
    cur = start_dir.resolve()
    for parent in [cur, *cur.parents]:
        for rel in DEFAULT_PROJECT_CONFIG_FILES:
            p = (parent / rel).resolve()
            if p.exists() and p.is_file():
                return p
    return None


def find_global_config() -> Optional[Path]:
    for p in _expand_paths(DEFAULT_GLOBAL_CONFIG_FILES):
        if p.exists() and p.is_file():
            return p
    return None


@dataclass(frozen=True)
class LoadedConfig:
    config: InipConfig
    global_path: Optional[Path]
    project_path: Optional[Path]


def load_config(
    start_dir: Path,
    cli_overrides: Optional[Dict[str, Any]] = None,
) -> LoadedConfig:
    """
    Precedence (lowest -> highest):
      defaults (InipConfig) ->
      global config ->
      project config (closest) ->
      cli_overrides
    """
    cli_overrides = cli_overrides or {}

    global_path = find_global_config()
    project_path = find_project_config(start_dir)

    merged: Dict[str, Any] = {}

    if global_path:
        logger.debug("global config: {}", global_path)
        merged = _deep_merge(merged, _read_toml(global_path))

    if project_path:
        logger.debug("project config: {}", project_path)
        merged = _deep_merge(merged, _read_toml(project_path))

    # CLI overrides are expected to be in the same shape as TOML (namespaced)
    merged = _deep_merge(merged, cli_overrides)

    # Only the known tables are validated; unknown top-level tables are ignored
    known = {k: v for k, v in merged.items() if k in ("arena", "table", "limits") and isinstance(v, dict)}
    config = InipConfig.model_validate(known)

    return LoadedConfig(
        config=config,
        global_path=global_path,
        project_path=project_path,
    )
