from __future__ import annotations

import sys

from loguru import logger


def _stderr_sink(message: str) -> None:
    # resolve sys.stderr per message so redirected streams are honored
    sys.stderr.write(message)


def configure_logging(*, verbose: bool) -> None:
    """Route `inip` log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logger.remove()
    logger.add(
        _stderr_sink,
        format="[{level}] {message}",
        level="DEBUG" if verbose else "WARNING",
        colorize=False,
    )
    logger.enable("inip")
