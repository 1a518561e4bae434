"""Centralized logging bootstrap for git-delve.

Every module logs through `logging.getLogger(__name__)`; records end up on the
`git_delve` logger, which writes to a rotating per-process file and to stderr.
The stderr copy is muted while the Textual app owns the terminal.

// [LAW:single-enforcer] Logger handler wiring is enforced in this module only.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOGGER_NAME = "git_delve"
DEFAULT_LOG_DIR = "~/.local/share/git-delve/logs"

_MAX_LOG_BYTES = 5 * 1024 * 1024
_LOG_BACKUPS = 3
_STDERR_FORMAT = "git-delve: %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
_MUTED = logging.CRITICAL + 1


@dataclass(frozen=True)
class LoggingRuntime:
    """What configure() resolved, plus the handlers it attached."""

    level_name: str
    level: int
    file_path: str
    stream_handler: logging.Handler
    file_handler: logging.Handler


_RUNTIME: LoggingRuntime | None = None


def parse_level(raw: str | None) -> tuple[str, int]:
    """Map a level name to (canonical name, number); unknown names mean INFO."""
    level = getattr(logging, str(raw or "INFO").strip().upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    return logging.getLevelName(level), level


def _log_file_path() -> Path:
    explicit = os.environ.get("GIT_DELVE_LOG_FILE")
    if explicit:
        return Path(explicit)
    log_dir = Path(os.environ.get("GIT_DELVE_LOG_DIR") or os.path.expanduser(DEFAULT_LOG_DIR))
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return log_dir / f"git-delve-{stamp}-{os.getpid()}.log"


def _build_handlers(level: int, file_path: Path) -> tuple[logging.Handler, logging.Handler]:
    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(_STDERR_FORMAT))

    file_path.parent.mkdir(parents=True, exist_ok=True)
    rotating = RotatingFileHandler(
        file_path, maxBytes=_MAX_LOG_BYTES, backupCount=_LOG_BACKUPS, encoding="utf-8"
    )
    rotating.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    for handler in (stream, rotating):
        handler.setLevel(level)
    return stream, rotating


def configure(level: str | None = None) -> LoggingRuntime:
    """Attach stderr and file handlers to the git_delve logger, once.

    `level` wins over $GIT_DELVE_LOG_LEVEL. Later calls return the runtime of
    the first call unchanged.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level_no = parse_level(level or os.environ.get("GIT_DELVE_LOG_LEVEL"))
    file_path = _log_file_path()
    stream, rotating = _build_handlers(level_no, file_path)

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers[:] = [stream, rotating]
    logger.setLevel(level_no)
    logger.propagate = False
    logging.captureWarnings(True)

    _RUNTIME = LoggingRuntime(level_name, level_no, str(file_path), stream, rotating)
    return _RUNTIME


def set_stream_enabled(enabled: bool) -> None:
    """Mute the stderr handler while the TUI owns the terminal."""
    if _RUNTIME is None:
        return
    _RUNTIME.stream_handler.setLevel(_RUNTIME.level if enabled else _MUTED)


def reset() -> None:
    """Detach and close the handlers configure() attached."""
    global _RUNTIME
    if _RUNTIME is None:
        return
    logger = logging.getLogger(LOGGER_NAME)
    for handler in (_RUNTIME.stream_handler, _RUNTIME.file_handler):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    logging.captureWarnings(False)
    _RUNTIME = None
