import inspect
import io
import sys
import threading

from kindkit import log
from kindkit.logger import Logger
from kindkit.terminal import FakeTerminal


class SpinnerLike:
    def __init__(self):
        self.data = []

    def write(self, text):
        self.data.append(text)
        return len(text)

    def start(self):
        pass

    def stop(self):
        pass

    def set_prefix(self, prefix):
        pass

    def set_suffix(self, suffix):
        pass


def test_warn_adds_newline():
    out = io.StringIO()
    Logger(out).warn("foo")
    assert out.getvalue() == "foo\n"


def test_warn_keeps_existing_newline():
    out = io.StringIO()
    Logger(out).warn("foo\n")
    assert out.getvalue() == "foo\n"


def test_empty_message_writes_newline():
    out = io.StringIO()
    Logger(out).error("")
    assert out.getvalue() == "\n"


def test_formatted_messages():
    out = io.StringIO()
    logger = Logger(out)
    logger.warnf("%s-%d", "a", 1)
    logger.errorf("name %q", "kind")
    assert out.getvalue().splitlines() == ["a-1", 'name "kind"']


def test_bytes_writer():
    out = io.BytesIO()
    Logger(out).warn("héllo")
    assert out.getvalue() == "héllo".encode() + b"\n"


def test_verbosity_gates_info():
    out = io.StringIO()
    logger = Logger(out)
    assert logger.v(0).enabled() is True
    assert logger.v(1).enabled() is False
    logger.v(1).info("hidden")
    logger.v(2).infof("hidden %d", 2)
    assert out.getvalue() == ""
    logger.v(0).info("shown")
    assert out.getvalue() == "shown\n"


def test_debug_header_names_caller():
    out = io.StringIO()
    logger = Logger(out, 3)
    line = inspect.currentframe().f_lineno + 1
    logger.v(1).info("x")
    text = out.getvalue()
    assert text.startswith("DEBUG: ")
    assert text.endswith(f"test_logger.py:{line}] x\n")


def test_debugf_header_and_format():
    out = io.StringIO()
    logger = Logger(out)
    logger.set_verbosity(2)
    assert logger.verbosity == 2
    logger.v(2).infof("value=%v", True)
    text = out.getvalue()
    assert text.startswith("DEBUG: ")
    assert text.endswith("] value=true\n")


def test_level_zero_infof_has_no_header():
    out = io.StringIO()
    Logger(out, 5).v(0).infof("plain %s", "text")
    assert out.getvalue() == "plain text\n"


def test_none_writer_discards():
    out = io.StringIO()
    logger = Logger(out)
    logger.set_writer(None)
    logger.warn("lost")
    assert out.getvalue() == ""
    assert logger.writer is None
    assert logger.color_enabled() is False


def test_color_disabled_for_plain_buffer():
    assert Logger(io.StringIO()).color_enabled() is False


def test_color_enabled_for_spinner_like_writer():
    spinner = SpinnerLike()
    logger = Logger(spinner)
    assert logger.color_enabled() is True
    assert logger.writer is spinner
    logger.warn("w")
    assert spinner.data == ["w\n"]


def test_color_enabled_for_smart_terminal(monkeypatch):
    for name in ("NO_COLOR", "TRAVIS", "HAS_JOSH_K_SEAL_OF_APPROVAL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TERM", "xterm")
    monkeypatch.setattr(sys, "platform", "linux")
    assert Logger(FakeTerminal()).color_enabled() is True


def test_color_disabled_with_no_color(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert Logger(FakeTerminal()).color_enabled() is False


def test_concurrent_writes_stay_whole():
    out = io.StringIO()
    logger = Logger(out)

    def work():
        for _ in range(50):
            logger.warn("line")

    threads = [threading.Thread(target=work) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    lines = out.getvalue().splitlines()
    assert len(lines) == 400
    assert set(lines) == {"line"}


def test_satisfies_logger_protocol():
    logger = Logger(io.StringIO())
    assert isinstance(logger, log.Logger)
    assert isinstance(logger.v(0), log.InfoLogger)
    assert logger.v(0).enabled() is True