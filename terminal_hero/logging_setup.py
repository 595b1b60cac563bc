from __future__ import annotations

import logging
import os
from typing import Any, Optional

LEVEL_ENV = "TERMINAL_HERO_LOG_LEVEL"


def _parse_level(s: Optional[str]) -> Optional[int]:
    if not s:
        return None
    v = str(s).strip().upper()
    if not v:
        return None
    mapping = {
        "CRITICAL": logging.CRITICAL,
        "ERROR": logging.ERROR,
        "WARNING": logging.WARNING,
        "WARN": logging.WARNING,
        "INFO": logging.INFO,
        "DEBUG": logging.DEBUG,
        "NOTSET": logging.NOTSET,
    }
    return mapping.get(v)


def resolve_level(args: Any = None) -> int:
    """Pick the log level.

    Priority (highest first):
    - env TERMINAL_HERO_LOG_LEVEL
    - CLI flags: --basic_debug, then --quiet (if present on args)
    - default: INFO
    """
    env_level = _parse_level(os.environ.get(LEVEL_ENV))
    if env_level is not None:
        return int(env_level)

    if args is not None and bool(getattr(args, "basic_debug", False)):
        return logging.DEBUG
    if args is not None and bool(getattr(args, "quiet", False)):
        return logging.WARNING
    return logging.INFO


def setup_logging(args: Any = None, *, name: str = "terminal_hero") -> None:
    """Configure python logging once; later calls are no-ops."""

    root = logging.getLogger()
    if root.handlers:
        return

    level = resolve_level(args)

    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%H:%M:%S"

    logging.basicConfig(level=level, format=fmt, datefmt=datefmt)

    logging.getLogger(name).debug("logging initialized (level=%s)", logging.getLevelName(level))
