"""
Logging configuration — one-time setup for the installer CLI.

User-facing progress goes through the Interaction port on stdout.
Logging is for diagnostics and always goes to stderr (plus an optional
file), so it never interleaves with prompts the user has to answer.

Levels are resolved in precedence order:
    --debug  >  --verbose  >  --quiet  >  DARLING_LOG_LEVEL  >  WARNING

``DARLING_LOG_FILE`` adds a file sink at ``DARLING_LOG_FILE_LEVEL``
(default: the console level).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping

LEVEL_ENV_VAR = "DARLING_LOG_LEVEL"
FILE_ENV_VAR = "DARLING_LOG_FILE"
FILE_LEVEL_ENV_VAR = "DARLING_LOG_FILE_LEVEL"

# ── Formats, (threshold, fmt, datefmt), most detailed first ─────

_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"

_CONSOLE_FORMATS = (
    (logging.DEBUG, _DETAILED, "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = (_DETAILED, "%Y-%m-%d %H:%M:%S")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return (environ or {}).get(LEVEL_ENV_VAR, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with the installer's.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path of a log file to append to.
        log_file_level: Level for the log file. Defaults to ``level``.
    """
    console_level = _parse_level(level)
    handlers = [
        _handler(logging.StreamHandler(sys.stderr), console_level, *_console_format(console_level)),
    ]

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(
            _handler(logging.FileHandler(log_file, encoding="utf-8"), file_level, *_FILE_FORMAT),
        )

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    # The root must let through whatever the most verbose sink wants
    root.setLevel(min(h.level for h in handlers))


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return fmt, datefmt
    return _CONSOLE_DEFAULT


def _handler(
    handler: logging.Handler,
    level: int,
    fmt: str,
    datefmt: str | None,
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    value = logging.getLevelName(level.upper()) if level else None
    return value if isinstance(value, int) else logging.WARNING
