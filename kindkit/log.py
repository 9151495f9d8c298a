"""Logging interfaces and a logger that discards everything."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

Level = int


@runtime_checkable
class InfoLogger(Protocol):
    """Writes informational messages at one verbosity level."""

    def info(self, message: str) -> None:
        """Write a user facing status message."""
        ...

    def infof(self, format: str, *args: Any) -> None:
        """Write a formatted user facing status message."""
        ...

    def enabled(self) -> bool:
        """Whether this verbosity level is enabled."""
        ...


@runtime_checkable
class Logger(Protocol):
    """The logging interface: warnings, errors and leveled info."""

    def warn(self, message: str) -> None:
        """Write a user facing warning."""
        ...

    def warnf(self, format: str, *args: Any) -> None:
        """Write a formatted user facing warning."""
        ...

    def error(self, message: str) -> None:
        """Write an error message."""
        ...

    def errorf(self, format: str, *args: Any) -> None:
        """Write a formatted error message."""
        ...

    def v(self, level: Level) -> InfoLogger:
        """Return an info logger for verbosity ``level``."""
        ...


class _DiscardWriter:
    """A writer that accepts everything and keeps nothing."""

    def write(self, data: str | bytes) -> int:
        return len(data)


_DISCARD = _DiscardWriter()


class NoopInfoLogger:
    """An info logger that is never enabled and never writes."""

    def enabled(self) -> bool:
        return False

    def info(self, message: str) -> None:
        """Discard the message."""
        if self.enabled():
            return
        _DISCARD.write(message)

    def infof(self, format: str, *args: Any) -> None:
        """Discard the message."""
        if self.enabled():
            return
        _DISCARD.write(format)


class NoopLogger:
    """A logger that never writes anything."""

    def warn(self, message: str) -> None:
        """Discard the message."""
        _DISCARD.write(message)

    def warnf(self, format: str, *args: Any) -> None:
        """Discard the message."""
        _DISCARD.write(format)

    def error(self, message: str) -> None:
        """Discard the message."""
        _DISCARD.write(message)

    def errorf(self, format: str, *args: Any) -> None:
        """Discard the message."""
        _DISCARD.write(format)

    def v(self, level: Level) -> NoopInfoLogger:
        return NoopInfoLogger()