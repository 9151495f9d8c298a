"""Progress status lines, with a spinner when attached to a terminal."""

from __future__ import annotations

from typing import Any

from kindkit.logger import Logger
from kindkit.spinner import Spinner, _write_text


class Status:
    """Tracks the current step of a long operation and reports its outcome."""

    def __init__(
        self,
        logger: Any,
        spinner: Spinner | None = None,
        success_format: str = " ✓ %s\n",
        failure_format: str = " ✗ %s\n",
    ) -> None:
        self.logger = logger
        self.spinner = spinner
        self.success_format = success_format
        self.failure_format = failure_format
        self.status = ""

    def start(self, status: str) -> None:
        """End any current step as a success and begin a new one."""
        self.end(True)
        self.status = status
        if self.spinner is not None:
            self.spinner.set_suffix(f" {self.status} ")
            self.spinner.start()
        else:
            self.logger.v(0).infof(" • %s  ...\n", self.status)

    def end(self, success: bool) -> None:
        """Finish the current step, marking it as success or failure."""
        if not self.status:
            return
        if self.spinner is not None:
            self.spinner.stop()
            _write_text(self.spinner.writer, "\r")
        fmt = self.success_format if success else self.failure_format
        self.logger.v(0).infof(fmt, self.status)
        self.status = ""


def status_for_logger(logger: Any) -> Status:
    """Return a Status for ``logger``, using its spinner if it writes to one."""
    if isinstance(logger, Logger) and isinstance(logger.writer, Spinner):
        return Status(
            logger,
            logger.writer,
            success_format=" \x1b[32m✓\x1b[0m %s\n",
            failure_format=" \x1b[31m✗\x1b[0m %s\n",
        )
    return Status(logger)