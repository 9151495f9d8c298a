import io
import sys

from kindkit.log import NoopLogger
from kindkit.logger import Logger
from kindkit.spinner import Spinner
from kindkit.streams import IOStreams, color_enabled, new_logger, standard_io_streams


def test_standard_io_streams():
    streams = standard_io_streams()
    assert streams.in_ is sys.stdin
    assert streams.out is sys.stdout
    assert streams.err_out is sys.stderr


def test_iostreams_holds_given_streams():
    a, b, c = io.StringIO(), io.StringIO(), io.StringIO()
    streams = IOStreams(a, b, c)
    assert (streams.in_, streams.out, streams.err_out) == (a, b, c)


def test_new_logger_plain_stderr(monkeypatch):
    fake = io.StringIO()
    monkeypatch.setattr(sys, "stderr", fake)
    logger = new_logger()
    assert logger.writer is fake
    assert logger.verbosity == 0
    assert color_enabled(logger) is False


def test_new_logger_smart_terminal_uses_spinner(monkeypatch):
    class Tty(io.StringIO):
        def isatty(self):
            return True

    tty = Tty()
    monkeypatch.setattr(sys, "stderr", tty)
    monkeypatch.setattr("kindkit.streams.is_smart_terminal", lambda w: w is tty)
    logger = new_logger()
    assert isinstance(logger.writer, Spinner)
    assert logger.writer.writer is tty
    assert color_enabled(logger) is True


def test_color_enabled_for_various_loggers():
    assert color_enabled(NoopLogger()) is False
    assert color_enabled(Logger(io.StringIO())) is False
    assert color_enabled(Logger(Spinner(io.StringIO()))) is True