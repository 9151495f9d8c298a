"""The command line tool's version."""

from __future__ import annotations

import platform
import sys

VERSION_CORE = "0.11.0"
"""The core portion of the version, per Semantic Versioning 2.0.0."""

VERSION_PRE_RELEASE = "alpha"
"""The pre-release portion of the version."""

GIT_COMMIT = ""
"""The commit the tool was built from, if known."""


def truncate(s: str, max_len: int) -> str:
    """Return ``s`` cut to at most ``max_len`` characters."""
    if len(s) < max_len:
        return s
    return s[:max_len]


def version(git_commit: str | None = None) -> str:
    """Return the semantic version; pre-releases carry a short commit as build metadata.

    ``git_commit`` defaults to GIT_COMMIT.
    """
    if git_commit is None:
        git_commit = GIT_COMMIT
    v = VERSION_CORE
    if VERSION_PRE_RELEASE:
        v += "-" + VERSION_PRE_RELEASE
        if git_commit:
            v += "+" + truncate(git_commit, 14)
    return v


def display_version() -> str:
    """Return the version line printed by the version command."""
    machine = platform.machine().lower() or "unknown"
    runtime = "python" + platform.python_version()
    return f"kind v{version()} {runtime} {sys.platform}/{machine}"