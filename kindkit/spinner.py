"""A small loading spinner for terminals that also acts as a writer."""

from __future__ import annotations

import itertools
import sys
import threading
from typing import Any

SPINNER_FRAMES = (
    "⠈⠁",
    "⠈⠑",
    "⠈⠱",
    "⠈⡱",
    "⢀⡱",
    "⢄⡱",
    "⢄⡱",
    "⢆⡱",
    "⢎⡱",
    "⢎⡰",
    "⢎⡠",
    "⢎⡀",
    "⢎⠁",
    "⠎⠁",
    "⠊⠁",
)

_FRAME_FORMAT = "\x1b[?7l\r{prefix}{frame}{suffix}\x1b[?7h"
# toggling line wrapping behaves poorly on Windows consoles
_WINDOWS_FRAME_FORMAT = "\r{prefix}{frame}{suffix}"


def _write_text(writer: Any, data: str | bytes) -> None:
    """Write ``data`` to a text or binary writer, converting as needed."""
    try:
        writer.write(data)
    except TypeError:
        if isinstance(data, str):
            writer.write(data.encode("utf-8"))
        else:
            writer.write(bytes(data).decode("utf-8", errors="replace"))
    flush = getattr(writer, "flush", None)
    if callable(flush):
        flush()


class Spinner:
    """Draws spinner frames on one line; writing through it interrupts the line.

    It assumes the line length does not change while it spins.
    """

    def __init__(self, writer: Any, interval: float = 0.1, platform: str | None = None) -> None:
        self.writer = writer
        self.interval = interval
        self.prefix = ""
        self.suffix = ""
        if platform is None:
            platform = sys.platform
        self.frame_format = _WINDOWS_FRAME_FORMAT if platform.startswith("win") else _FRAME_FORMAT
        self._lock = threading.Lock()
        self._running = False
        self._stop_event: threading.Event | None = None
        self._thread: threading.Thread | None = None

    def set_prefix(self, prefix: str) -> None:
        """Set the text printed before the spinner."""
        with self._lock:
            self.prefix = prefix

    def set_suffix(self, suffix: str) -> None:
        """Set the text printed after the spinner."""
        with self._lock:
            self.suffix = suffix

    def start(self) -> None:
        """Start spinning in the background; does nothing if already running."""
        with self._lock:
            if self._running:
                return
            self._running = True
            event = threading.Event()
            self._stop_event = event
            self._thread = threading.Thread(target=self._spin, args=(event,), daemon=True)
            self._thread.start()

    def _spin(self, stop: threading.Event) -> None:
        for frame in itertools.cycle(SPINNER_FRAMES):
            if stop.wait(self.interval):
                break
            with self._lock:
                text = self.frame_format.format(prefix=self.prefix, frame=frame, suffix=self.suffix)
                try:
                    _write_text(self.writer, text)
                except (OSError, ValueError):
                    pass
        with self._lock:
            self._running = False

    def stop(self) -> None:
        """Stop spinning and wait until the background drawing has ended."""
        with self._lock:
            if not self._running:
                return
            event, thread = self._stop_event, self._thread
        if event is not None:
            event.set()
        if thread is not None:
            thread.join()

    def write(self, data: str | bytes) -> int:
        """Write ``data`` to the inner writer, returning to the line start first if spinning."""
        with self._lock:
            if self._running:
                _write_text(self.writer, "\r" if isinstance(data, str) else b"\r")
            _write_text(self.writer, data)
        return len(data)