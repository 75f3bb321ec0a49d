"""Levelled logging with stdout and daily-rolling file handlers."""

from __future__ import annotations

import abc
import dataclasses
import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import IO, Any, Iterable


class Level(IntEnum):
    """Severity of a log record."""

    INFO = 0
    WARN = 1
    ERROR = 2

    def __str__(self) -> str:
        return self.name


@dataclass
class Config:
    """Logging configuration."""

    stdout: bool = False
    debug: bool = False
    log: str = ""
    log_vl: int = 0
    family: str = ""
    host: str = ""


def _format_line(level: Level, msg: str) -> str:
    stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
    return f"{stamp} [{level}] {msg}\n"


class Handler(abc.ABC):
    """Receives log records and writes them somewhere."""

    @abc.abstractmethod
    def log(self, level: Level, msg: str) -> None:
        """Handle one log record."""

    def close(self) -> None:
        """Release any resources held by the handler."""


class Handlers(list, Handler):
    """A group of handlers that all receive every record."""

    def __init__(self, handlers: Iterable[Handler] = ()) -> None:
        super().__init__(handlers)

    def log(self, level: Level, msg: str) -> None:
        for handler in self:
            handler.log(level, msg)

    def close(self) -> None:
        """Close every handler; re-raise the last failure, if any."""
        failure: Exception | None = None
        for handler in self:
            try:
                handler.close()
            except Exception as exc:  # noqa: BLE001 - every handler must be closed
                failure = exc
        if failure is not None:
            raise failure


class StdoutHandler(Handler):
    """Writes records to standard output (or another text stream)."""

    def __init__(self, stream: IO[str] | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def log(self, level: Level, msg: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(_format_line(level, msg))
            stream.flush()

    def close(self) -> None:
        return None


class FileHandler(Handler):
    """Appends records to ``<base_path>.<YYYY-MM-DD>``, rolling daily."""

    _DAILY_FORMAT = "%Y-%m-%d"

    def __init__(self, base_path: str) -> None:
        if not os.path.basename(base_path):
            raise ValueError("invalid base path")
        self.base_path = base_path
        self.file_path = ""
        self._fragment = ""
        self._file: IO[str] | None = None
        self._lock = threading.Lock()
        with self._lock:
            self._roll()

    def _roll(self) -> None:
        suffix = datetime.now().strftime(self._DAILY_FORMAT)
        if self._file is not None:
            if suffix == self._fragment:
                return
            self._file.close()
            self._file = None
        self._fragment = suffix
        self.file_path = f"{self.base_path}.{suffix}"
        directory = os.path.dirname(self.base_path)
        if directory and directory != ".":
            os.makedirs(directory, mode=0o777, exist_ok=True)
        self._file = open(self.file_path, "a", encoding="utf-8")

    def log(self, level: Level, msg: str) -> None:
        with self._lock:
            try:
                self._roll()
            except OSError:
                pass
            if self._file is None:
                return
            self._file.write(_format_line(level, msg))
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if self._file is not None:
                self._file.close()
                self._file = None


@dataclass
class _Flags:
    std: bool = False
    debug: bool = False
    log_file: str = ""
    log_vl: int = 0


@dataclass
class _State:
    flags: _Flags = dataclasses.field(default_factory=_Flags)
    handler: Handler | None = None
    verbose_level: int = 0


_state = _State()


def set_flags(std: bool, debug: bool, log_file: str, log_vl: int) -> None:
    """Set command-line overrides that take priority over a Config."""
    _state.flags = _Flags(std=std, debug=debug, log_file=log_file, log_vl=log_vl)


def set_default_verbose_level(level: int) -> None:
    """Set the level up to which ``v(level)`` is enabled."""
    _state.verbose_level = level


def init(config: Config | None = None) -> bool:
    """Install handlers described by ``config``; return whether any were set."""
    config = dataclasses.replace(config) if config is not None else Config()
    flags = _state.flags
    if flags.log_file:
        config.log = flags.log_file
    if flags.log_vl != 0:
        config.log_vl = flags.log_vl
    config.stdout = flags.std
    config.debug = flags.debug

    handlers: list[Handler] = []
    if config.debug or config.stdout:
        handlers.append(StdoutHandler())
    if config.log:
        handlers.append(FileHandler(config.log))
    if config.log_vl != 0:
        _state.verbose_level = config.log_vl
    if handlers:
        _state.handler = Handlers(handlers)
        return True
    return False


def init_handle(*args: Handler) -> None:
    """Install the given handlers, replacing any current ones."""
    _state.handler = Handlers(args)


def _sprint(args: tuple[Any, ...]) -> str:
    parts: list[str] = []
    prev_is_str = True
    for position, arg in enumerate(args):
        is_str = isinstance(arg, str)
        if position and not is_str and not prev_is_str:
            parts.append(" ")
        parts.append(str(arg))
        prev_is_str = is_str
    return "".join(parts)


def _logs(level: Level, args: tuple[Any, ...]) -> None:
    if _state.handler is None:
        return
    _state.handler.log(level, _sprint(args))


def _logf(level: Level, format: str, args: tuple[Any, ...]) -> None:
    if _state.handler is None:
        return
    msg = format % args if args else format
    _state.handler.log(level, msg)


def info(*args: Any) -> None:
    _logs(Level.INFO, args)


def warn(*args: Any) -> None:
    _logs(Level.WARN, args)


def error(*args: Any) -> None:
    _logs(Level.ERROR, args)


def infof(format: str, *args: Any) -> None:
    _logf(Level.INFO, format, args)


def warnf(format: str, *args: Any) -> None:
    _logf(Level.WARN, format, args)


def errorf(format: str, *args: Any) -> None:
    _logf(Level.ERROR, format, args)


def close() -> None:
    """Close the installed handlers, if any."""
    if _state.handler is not None:
        _state.handler.close()


@dataclass(frozen=True)
class Verbose:
    """A logger that only emits when its verbosity level is enabled."""

    enabled: bool

    def __bool__(self) -> bool:
        return self.enabled

    def info(self, *args: Any) -> None:
        if self.enabled:
            _logs(Level.INFO, args)

    def warn(self, *args: Any) -> None:
        if self.enabled:
            _logs(Level.WARN, args)

    def error(self, *args: Any) -> None:
        if self.enabled:
            _logs(Level.ERROR, args)

    def infof(self, format: str, *args: Any) -> None:
        if self.enabled:
            _logf(Level.INFO, format, args)

    def warnf(self, format: str, *args: Any) -> None:
        if self.enabled:
            _logf(Level.WARN, format, args)

    def errorf(self, format: str, *args: Any) -> None:
        if self.enabled:
            _logf(Level.ERROR, format, args)

    def close(self) -> None:
        close()


def v(level: int) -> Verbose:
    """Return a logger enabled when ``level`` is within the default verbosity."""
    return Verbose(level <= _state.verbose_level)