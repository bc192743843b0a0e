"""Minimal levelled logging to a stream with an HH:MM:SS timestamp."""

from __future__ import annotations

import sys
import time
from enum import IntEnum
from typing import TextIO


class LogLevel(IntEnum):
    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3


_LEVEL_NAMES = {
    LogLevel.DEBUG: "DBG",
    LogLevel.INFO: "INF",
    LogLevel.WARN: "WAR",
    LogLevel.ERROR: "ERR",
}

_current_level = LogLevel.INFO


def set_level(level: LogLevel) -> None:
    """Set the lowest level that is written."""
    global _current_level
    _current_level = LogLevel(level)


def get_level() -> LogLevel:
    """Return the lowest level that is written."""
    return _current_level


def level_name(level: int) -> str:
    """Return the three-letter tag of ``level``, or ``???`` if unknown."""
    try:
        return _LEVEL_NAMES[LogLevel(level)]
    except ValueError:
        return "???"


def log(level: int, msg: str, *args: object, stream: TextIO | None = None) -> None:
    """Write ``msg % args`` with a timestamp and level tag if ``level`` is enabled."""
    if level < _current_level:
        return
    text = msg % args if args else msg
    stamp = time.strftime("%H:%M:%S", time.localtime())
    out = stream if stream is not None else sys.stdout
    out.write(f"{stamp} {level_name(level)}: {text}\n")
    out.flush()


def debug(msg: str, *args: object) -> None:
    log(LogLevel.DEBUG, msg, *args)


def info(msg: str, *args: object) -> None:
    log(LogLevel.INFO, msg, *args)


def warn(msg: str, *args: object) -> None:
    log(LogLevel.WARN, msg, *args)


def error(msg: str, *args: object) -> None:
    log(LogLevel.ERROR, msg, *args)