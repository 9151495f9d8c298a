"""The root command: global logging flags and the version subcommand."""

from __future__ import annotations

import argparse
from typing import Any, NoReturn

from kindkit.errors import KindError
from kindkit.streams import IOStreams, color_enabled, new_logger, standard_io_streams
from kindkit.version import display_version, version

_DEPRECATION = "--loglevel is deprecated, please switch to -v and -q!"


class _UsageError(KindError):
    """The command line could not be parsed."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise _UsageError(message)


def _add_global_flags(parser: argparse.ArgumentParser, inherited: bool) -> None:
    def default(value: Any) -> Any:
        return argparse.SUPPRESS if inherited else value

    parser.add_argument("-h", "--help", action="store_true", default=default(False), help="help for this command")
    parser.add_argument("--loglevel", default=default(None), help="DEPRECATED: see -v instead")
    parser.add_argument("-v", "--verbosity", type=int, default=default(None), help="info log verbosity")
    parser.add_argument("-q", "--quiet", action="store_true", default=default(False), help="silence all stderr output")


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the root command."""
    root = _Parser(
        prog="kind",
        description="kind creates and manages local Kubernetes clusters using Docker container 'nodes'",
        add_help=False,
    )
    _add_global_flags(root, inherited=False)
    root.add_argument("--version", action="store_true", help="version for kind")
    root.set_defaults(command=None, parser=root)
    subcommands = root.add_subparsers(dest="command", metavar="command")
    version_parser = subcommands.add_parser(
        "version",
        help="Prints the kind CLI version",
        description="Prints the kind CLI version",
        add_help=False,
    )
    _add_global_flags(version_parser, inherited=True)
    version_parser.set_defaults(parser=version_parser)
    return root


def _maybe_call(logger: Any, method: str, value: Any) -> None:
    func = getattr(logger, method, None)
    if callable(func):
        func(value)


def _configure_logging(logger: Any, ns: argparse.Namespace) -> None:
    set_log_level = ns.loglevel is not None
    set_verbosity = ns.verbosity is not None
    verbosity = ns.verbosity if set_verbosity else 0
    if set_log_level and not set_verbosity:
        if ns.loglevel == "debug":
            verbosity = 3
        elif ns.loglevel == "trace":
            verbosity = 2147483647
    if ns.quiet:
        _maybe_call(logger, "set_writer", None)
    _maybe_call(logger, "set_verbosity", verbosity)
    if set_log_level:
        if color_enabled(logger):
            logger.warn("\x1b[93mWARNING\x1b[0m: " + _DEPRECATION)
        else:
            logger.warn("WARNING: " + _DEPRECATION)


def run(argv: list[str] | None = None, logger: Any = None, streams: IOStreams | None = None) -> int:
    """Run the command line ``argv``; return the process exit code."""
    if logger is None:
        logger = new_logger()
    if streams is None:
        streams = standard_io_streams()
    parser = build_parser()
    try:
        ns = parser.parse_args(argv)
    except _UsageError as err:
        logger.error(f"ERROR: {err}")
        return 1

    if ns.help:
        streams.out.write(ns.parser.format_help())
        return 0
    if ns.command is None and ns.version:
        streams.out.write(f"kind version {version()}\n")
        return 0

    _configure_logging(logger, ns)

    if ns.command == "version":
        text = display_version() if logger.v(0).enabled() else version()
        streams.out.write(text + "\n")
        return 0
    streams.out.write(parser.format_help())
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point of the command line tool."""
    return run(argv, new_logger(), standard_io_streams())