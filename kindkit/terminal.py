"""Detection of terminals and of terminals that understand escape codes."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from typing import Any


class FakeTerminal:
    """A writer that always reports being a terminal; useful in tests."""

    def write(self, data: Any) -> int:
        return len(data)

    def isatty(self) -> bool:
        return True


def is_terminal(stream: Any) -> bool:
    """Return True if ``stream`` is attached to a terminal."""
    if isinstance(stream, FakeTerminal):
        return True
    fileno = getattr(stream, "fileno", None)
    if fileno is None:
        return False
    try:
        fd = fileno()
    except (OSError, ValueError):
        return False
    return os.isatty(fd)


def is_smart_terminal(
    stream: Any,
    platform: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> bool:
    """Return True if ``stream`` is a terminal that likely handles VT escape codes.

    ``platform`` defaults to ``sys.platform`` ("windows" and "win32" both
    count as Windows); ``environ`` defaults to ``os.environ``.
    """
    if not is_terminal(stream):
        return False
    if platform is None:
        platform = sys.platform
    if environ is None:
        environ = os.environ

    # explicit request for no ANSI escape codes
    if "NO_COLOR" in environ:
        return False

    term = environ.get("TERM", "")
    if term in ("dumb", "st-256color"):
        return False

    # on Windows only the modern terminal sets WT_SESSION
    if platform.startswith("win") and not environ.get("WT_SESSION", ""):
        return False

    # Travis CI has a poor fake TTY
    if environ.get("HAS_JOSH_K_SEAL_OF_APPROVAL", "") == "true" and environ.get("TRAVIS", "") == "true":
        return False

    return True