import io

import pytest

from kindkit.app import build_parser, run
from kindkit.logger import Logger
from kindkit.spinner import Spinner
from kindkit.streams import IOStreams
from kindkit.version import display_version, version


@pytest.fixture
def env():
    log_out = io.StringIO()
    logger = Logger(log_out)
    streams = IOStreams(io.StringIO(), io.StringIO(), io.StringIO())
    return logger, log_out, streams


def test_version_subcommand(env):
    logger, _, streams = env
    assert run(["version"], logger, streams) == 0
    assert streams.out.getvalue() == display_version() + "\n"


def test_version_flag(env):
    logger, _, streams = env
    assert run(["--version"], logger, streams) == 0
    assert streams.out.getvalue() == "kind version " + version() + "\n"


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["--loglevel", "debug"], 3),
        (["--loglevel", "trace"], 2147483647),
        (["--loglevel", "debug", "-v", "1"], 1),
        (["-v", "2", "version"], 2),
        (["version", "--verbosity", "2"], 2),
        (["version"], 0),
    ],
)
def test_verbosity_handling(env, argv, expected):
    logger, _, streams = env
    assert run(argv, logger, streams) == 0
    assert logger.verbosity == expected


def test_loglevel_warns_plainly(env):
    logger, log_out, streams = env
    run(["--loglevel", "debug"], logger, streams)
    assert "WARNING: --loglevel is deprecated, please switch to -v and -q!" in log_out.getvalue()


def test_loglevel_warns_in_color_on_spinner():
    inner = io.StringIO()
    logger = Logger(Spinner(inner))
    streams = IOStreams(io.StringIO(), io.StringIO(), io.StringIO())
    run(["--loglevel", "info"], logger, streams)
    assert "\x1b[93mWARNING\x1b[0m: --loglevel is deprecated" in inner.getvalue()


def test_quiet_discards_log_output(env):
    logger, log_out, streams = env
    run(["-q", "--loglevel", "debug"], logger, streams)
    assert logger.writer is None
    assert log_out.getvalue() == ""


def test_unknown_command_is_an_error(env):
    logger, log_out, streams = env
    assert run(["bogus"], logger, streams) == 1
    assert log_out.getvalue().startswith("ERROR:")


def test_version_rejects_arguments(env):
    logger, _, streams = env
    assert run(["version", "extra"], logger, streams) == 1
    assert streams.out.getvalue() == ""


def test_subcommand_help(env):
    logger, _, streams = env
    assert run(["version", "-h"], logger, streams) == 0
    assert "Prints the kind CLI version" in streams.out.getvalue()


def test_build_parser_parses_version():
    ns = build_parser().parse_args(["version", "-q"])
    assert ns.command == "version"
    assert ns.quiet is True