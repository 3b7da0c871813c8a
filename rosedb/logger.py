"""A small levelled logger with optional ANSI highlighting."""

from __future__ import annotations

import os
import sys
import threading
import time
from enum import IntFlag
from typing import Any, NoReturn, TextIO


class LogType(IntFlag):
    """Kind of a single log message."""

    FATAL = 0x1
    ERROR = 0x2
    WARNING = 0x4
    INFO = 0x8
    DEBUG = 0x10


class LogLevel(IntFlag):
    """Set of message kinds a logger lets through."""

    NONE = 0x0
    FATAL = 0x1
    ERROR = 0x3
    WARN = 0x7
    INFO = 0xF
    DEBUG = 0x1F
    ALL = 0x1F


_LEVEL_NAMES = {
    "fatal": LogLevel.FATAL,
    "error": LogLevel.ERROR,
    "warn": LogLevel.WARN,
    "warning": LogLevel.WARN,
    "debug": LogLevel.DEBUG,
    "info": LogLevel.INFO,
}

_TYPE_NAMES = {
    LogType.FATAL: ("fatal", "[0;31"),
    LogType.ERROR: ("error", "[0;31"),
    LogType.WARNING: ("warning", "[0;33"),
    LogType.DEBUG: ("debug", "[0;36"),
    LogType.INFO: ("info", "[0;37"),
}


def string_to_log_level(level: str) -> LogLevel:
    """Map a level name to a LogLevel; unknown names enable everything."""
    return _LEVEL_NAMES.get(level, LogLevel.ALL)


def log_type_to_string(t: LogType) -> tuple[str, str]:
    """Return the display name and colour code of a message kind."""
    return _TYPE_NAMES.get(t, ("unknown", "[0;37"))


def _format(msg: Any, args: tuple) -> str:
    return str(msg) % args if args else str(msg)


class Logger:
    """Writes timestamped messages whose kind is enabled by ``level``."""

    def __init__(self, stream: TextIO | None = None, prefix: str = "") -> None:
        self.stream = stream
        self.prefix = prefix
        env_level = os.environ.get("LOG_LEVEL", "")
        self.level = string_to_log_level(env_level) if env_level else LogLevel.INFO
        self.highlighting = True
        self._lock = threading.Lock()

    def set_highlighting(self, highlighting: bool) -> None:
        self.highlighting = highlighting

    def set_level(self, level: LogLevel) -> None:
        self.level = level

    def set_level_by_string(self, level: str) -> None:
        self.level = string_to_log_level(level)

    def _output(self, text: str) -> None:
        stamp = time.strftime("%Y/%m/%d %H:%M:%S ")
        line = f"{self.prefix}{stamp}{text}"
        if not line.endswith("\n"):
            line += "\n"
        stream = self.stream if self.stream is not None else sys.stderr
        with self._lock:
            stream.write(line)
            stream.flush()

    def _log(self, t: LogType, msg: Any, args: tuple) -> None:
        if int(self.level) | int(t) != int(self.level):
            return
        name, color = log_type_to_string(t)
        body = _format(msg, args)
        if self.highlighting:
            text = f"\033{color}m[{name}] {body}\033[0m"
        else:
            text = f"[{name}] {body}"
        self._output(text)

    def debug(self, msg: Any, *args: Any) -> None:
        self._log(LogType.DEBUG, msg, args)

    def info(self, msg: Any, *args: Any) -> None:
        self._log(LogType.INFO, msg, args)

    def warn(self, msg: Any, *args: Any) -> None:
        self._log(LogType.WARNING, msg, args)

    def error(self, msg: Any, *args: Any) -> None:
        self._log(LogType.ERROR, msg, args)

    def fatal(self, msg: Any, *args: Any) -> NoReturn:
        """Log the message, then exit with status -1."""
        self._log(LogType.FATAL, msg, args)
        sys.exit(-1)

    def panic(self, msg: Any, *args: Any) -> NoReturn:
        """Write the message regardless of level, then raise RuntimeError."""
        text = _format(msg, args)
        self._output(text)
        raise RuntimeError(text)


def new_logger(stream: TextIO | None, prefix: str) -> Logger:
    """Create a logger writing to ``stream`` (stderr when None)."""
    return Logger(stream, prefix)


_log = new_logger(None, "")
_log.set_highlighting(os.name != "nt")


def set_level(level: LogLevel) -> None:
    _log.set_level(level)


def get_log_level() -> LogLevel:
    return _log.level


def set_level_by_string(level: str) -> None:
    _log.set_level_by_string(level)


def set_highlighting(highlighting: bool) -> None:
    _log.set_highlighting(highlighting)


def debug(msg: Any, *args: Any) -> None:
    _log.debug(msg, *args)


def info(msg: Any, *args: Any) -> None:
    _log.info(msg, *args)


def warn(msg: Any, *args: Any) -> None:
    _log.warn(msg, *args)


def error(msg: Any, *args: Any) -> None:
    _log.error(msg, *args)


def fatal(msg: Any, *args: Any) -> NoReturn:
    _log.fatal(msg, *args)


def panic(msg: Any, *args: Any) -> NoReturn:
    _log.panic(msg, *args)