import io

from kindkit.log import NoopLogger
from kindkit.logger import Logger
from kindkit.spinner import Spinner
from kindkit.status import status_for_logger


def test_plain_start_and_success():
    out = io.StringIO()
    status = status_for_logger(Logger(out))
    assert status.spinner is None
    status.start("Doing")
    assert out.getvalue() == " • Doing  ...\n"
    assert status.status == "Doing"
    status.end(True)
    assert out.getvalue() == " • Doing  ...\n ✓ Doing\n"
    assert status.status == ""


def test_plain_failure():
    out = io.StringIO()
    status = status_for_logger(Logger(out))
    status.start("Doing")
    status.end(False)
    assert out.getvalue().endswith(" ✗ Doing\n")


def test_end_without_status_writes_nothing():
    out = io.StringIO()
    status = status_for_logger(Logger(out))
    status.end(True)
    assert out.getvalue() == ""


def test_start_ends_previous_step_as_success():
    out = io.StringIO()
    status = status_for_logger(Logger(out))
    status.start("one")
    status.start("two")
    lines = out.getvalue().splitlines()
    assert lines == [" • one  ...", " ✓ one", " • two  ..."]
    assert status.status == "two"


def test_noop_logger_has_no_spinner():
    status = status_for_logger(NoopLogger())
    status.start("x")
    assert status.spinner is None
    assert status.status == "x"


def test_spinner_logger_uses_colored_output():
    inner = io.StringIO()
    spinner = Spinner(inner, interval=10)
    logger = Logger(spinner)
    status = status_for_logger(logger)
    assert status.spinner is spinner
    status.start("Work")
    assert spinner.suffix == " Work "
    status.end(True)
    assert inner.getvalue().endswith("\r \x1b[32m✓\x1b[0m Work\n")


def test_spinner_logger_failure_is_red():
    inner = io.StringIO()
    status = status_for_logger(Logger(Spinner(inner, interval=10)))
    status.start("Work")
    status.end(False)
    assert inner.getvalue().endswith("\r \x1b[31m✗\x1b[0m Work\n")