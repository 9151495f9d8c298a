"""The command line logger: leveled, thread safe, newline terminated output."""

from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from typing import Any

from kindkit.errors import _sprintf
from kindkit.log import Level
from kindkit.terminal import is_smart_terminal


def _is_spinner(writer: Any) -> bool:
    return all(callable(getattr(writer, name, None)) for name in ("start", "stop", "set_prefix", "set_suffix"))


def _caller_location() -> tuple[str, int]:
    frame = inspect.currentframe()
    while frame is not None and frame.f_code.co_filename == __file__:
        frame = frame.f_back
    if frame is None:
        return "???", 1
    path = frame.f_code.co_filename.replace("\\", "/")
    name = path
    slash = path.rfind("/")
    if slash >= 0:
        dirsep = path.rfind("/", 0, slash)
        name = path[dirsep + 1 :] if dirsep >= 0 else path[slash + 1 :]
    return name, frame.f_lineno


def _debug_header() -> str:
    name, line = _caller_location()
    return f"DEBUG: {name}:{line}] "


class Logger:
    """Logger writing to one writer; info above the verbosity is dropped.

    A writer of None discards everything.
    """

    def __init__(self, writer: Any, verbosity: Level = 0) -> None:
        self._lock = threading.Lock()
        self._verbosity = verbosity
        self._writer: Any = None
        self._smart = False
        self.set_writer(writer)

    @property
    def writer(self) -> Any:
        """The current output writer."""
        with self._lock:
            return self._writer

    @property
    def verbosity(self) -> Level:
        return self._verbosity

    def set_writer(self, writer: Any) -> None:
        """Set the output writer."""
        with self._lock:
            self._writer = writer
            self._smart = writer is not None and (_is_spinner(writer) or is_smart_terminal(writer))

    def color_enabled(self) -> bool:
        """Whether colored output is appropriate for the writer."""
        with self._lock:
            return self._smart

    def set_verbosity(self, verbosity: Level) -> None:
        """Set the highest info level that is written."""
        self._verbosity = verbosity

    def _emit(self, text: str) -> None:
        if not text.endswith("\n"):
            text += "\n"
        with self._lock:
            writer = self._writer
            if writer is None:
                return
            try:
                try:
                    writer.write(text)
                except TypeError:
                    writer.write(text.encode("utf-8"))
                flush = getattr(writer, "flush", None)
                if callable(flush):
                    flush()
            except (OSError, ValueError):
                # nowhere left to report a failure of the log writer itself
                pass

    def _print(self, message: str) -> None:
        self._emit(message)

    def _printf(self, format: str, *args: Any) -> None:
        self._emit(_sprintf(format, *args))

    def _debug(self, message: str) -> None:
        self._emit(_debug_header() + message)

    def _debugf(self, format: str, *args: Any) -> None:
        self._emit(_debug_header() + _sprintf(format, *args))

    def warn(self, message: str) -> None:
        self._print(message)

    def warnf(self, format: str, *args: Any) -> None:
        self._printf(format, *args)

    def error(self, message: str) -> None:
        self._print(message)

    def errorf(self, format: str, *args: Any) -> None:
        self._printf(format, *args)

    def v(self, level: Level) -> _InfoLogger:
        """Return an info logger for ``level``, enabled if within the verbosity."""
        return _InfoLogger(self, level, level <= self._verbosity)


@dataclass(frozen=True)
class _InfoLogger:
    logger: Logger
    level: Level
    is_enabled: bool

    def enabled(self) -> bool:
        return self.is_enabled

    def info(self, message: str) -> None:
        if not self.is_enabled:
            return
        # levels above zero are debug output and carry the caller's location
        if self.level > 0:
            self.logger._debug(message)
        else:
            self.logger._print(message)

    def infof(self, format: str, *args: Any) -> None:
        if not self.is_enabled:
            return
        if self.level > 0:
            self.logger._debugf(format, *args)
        else:
            self.logger._printf(format, *args)