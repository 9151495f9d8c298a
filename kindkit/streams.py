"""Standard input/output streams and the default command line logger."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any

from kindkit.logger import Logger
from kindkit.spinner import Spinner
from kindkit.terminal import is_smart_terminal


@dataclass
class IOStreams:
    """The three standard streams, grouped so they can be replaced in tests."""

    in_: Any
    out: Any
    err_out: Any


def standard_io_streams() -> IOStreams:
    """Return the process's stdin, stdout and stderr."""
    return IOStreams(sys.stdin, sys.stdout, sys.stderr)


def new_logger() -> Logger:
    """Return the command line logger writing to stderr, with a spinner on smart terminals."""
    writer: Any = sys.stderr
    if is_smart_terminal(writer):
        writer = Spinner(writer)
    return Logger(writer, 0)


def color_enabled(logger: Any) -> bool:
    """Whether ``logger`` supports and allows colored output."""
    check = getattr(logger, "color_enabled", None)
    return bool(callable(check) and check())