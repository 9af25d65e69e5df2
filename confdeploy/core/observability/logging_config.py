"""
Logging setup for confdeploy runs.

The CLI calls ``configure_from_env`` once; library code only ever does
``logger = logging.getLogger(__name__)``.

Console level precedence:
    --debug / --verbose / --quiet  >  CONFDEPLOY_LOG_LEVEL  >  log_level in
    confdeploy.yml  >  WARNING

A log file is added when CONFDEPLOY_LOG_FILE is set. It records at
CONFDEPLOY_LOG_FILE_LEVEL (default: the console level) with full detail,
which is handy to keep a DEBUG trace of a deployment while the console
stays quiet.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

LOG_LEVEL_ENV = "CONFDEPLOY_LOG_LEVEL"
LOG_FILE_ENV = "CONFDEPLOY_LOG_FILE"
LOG_FILE_LEVEL_ENV = "CONFDEPLOY_LOG_FILE_LEVEL"

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

# HTTP stacks a remote client is likely to bring along
_CLIENT_LOGGERS = ("urllib3", "requests", "httpx", "httpcore")


class ConsoleFormatter(logging.Formatter):
    """Plain status lines; problems get a level prefix.

    At DEBUG the formatter switches to the detailed layout with logger
    name and line number.
    """

    def __init__(self, level: int):
        self._detailed = level <= logging.DEBUG
        if self._detailed:
            super().__init__(_DETAILED, datefmt="%H:%M:%S")
        elif level <= logging.INFO:
            super().__init__("%(asctime)s %(message)s", datefmt="%H:%M:%S")
        else:
            super().__init__("%(message)s")

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if not self._detailed and record.levelno >= logging.WARNING:
            return f"{record.levelname.lower()}: {text}"
        return text


def resolve_level(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    configured: str | None = None,
) -> str:
    """Pick the console level from CLI flags, falling back to settings/env."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return configured or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Install console (and optional file) handlers on the root logger.

    Replaces any handlers installed by an earlier call, so it is safe to
    call more than once in one process.
    """
    console_level = _parse_level(level)
    handlers: list[logging.Handler] = [_console_handler(console_level)]
    root_level = console_level

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(Path(log_file), file_level))
        root_level = min(root_level, file_level)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(root_level)

    if quiet_third_party and console_level > logging.DEBUG:
        for name in _CLIENT_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logging.raiseExceptions = False


def configure_from_env(
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    configured: str | None = None,
) -> str:
    """Set up logging from CLI flags plus the CONFDEPLOY_LOG_* variables.

    Args:
        configured: Level from the settings file, already overridden by
            CONFDEPLOY_LOG_LEVEL when that is set. None reads the
            variable directly.

    Returns:
        The console level that was applied.
    """
    if configured is None:
        configured = os.environ.get(LOG_LEVEL_ENV)
    level = resolve_level(debug, verbose, quiet, configured)
    setup_logging(
        level=level,
        log_file=os.environ.get(LOG_FILE_ENV) or None,
        log_file_level=os.environ.get(LOG_FILE_LEVEL_ENV) or None,
        quiet_third_party=not debug,
    )
    return level


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter(level))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DETAILED, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    numeric = logging.getLevelName(level.upper()) if level else logging.WARNING
    return numeric if isinstance(numeric, int) else logging.WARNING
