"""Logging setup shared by the CLI and the engine modules.

Engine modules log through ``get_logger(__name__)``: solve start and outcome
at INFO, per-clue candidate counts and validator rejections at DEBUG, skipped
or ambiguous templates and CP-SAT misses at WARNING. Library callers that never
configure logging still get the default handler on first use.
"""

from __future__ import annotations

import logging
from typing import Optional


def configure_logging(level: int = logging.INFO) -> None:
    """Install a single stderr handler on the root logger at ``level``.

    Calling it again replaces the handler, so the CLI can re-apply
    ``--log-level`` without duplicating output in bulk runs.
    """

    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``name``'s logger, or the package logger ``gridsmith``."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "gridsmith")
