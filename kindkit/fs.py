"""Host filesystem helpers that play well with container bind mounts."""

from __future__ import annotations

import os
import posixpath
import shutil
import stat
import sys
import tempfile


def temp_dir(dir: str | None = None, prefix: str | None = None) -> str:
    """Create a temporary directory and return a path usable for mounting."""
    name = tempfile.mkdtemp(prefix=prefix or "", dir=dir or None)
    # on macOS /var/... is not mountable, /private/var/... is
    if sys.platform == "darwin" and name.startswith("/var/"):
        name = os.path.join("/private", name.lstrip("/"))
    return name


def is_abs(host_path: str) -> bool:
    """Like os.path.isabs, but POSIX absolute paths always count as absolute."""
    return posixpath.isabs(host_path) or os.path.isabs(host_path)


def copy(src: str, dst: str) -> None:
    """Recursively copy ``src`` to ``dst``, keeping modes and following symlinks."""
    info = os.lstat(src)
    os.makedirs(os.path.dirname(dst) or ".", exist_ok=True)
    _copy(src, dst, info)


def copy_file(src: str, dst: str) -> None:
    """Copy the file ``src`` to ``dst``, keeping its mode."""
    info = os.stat(src)
    _copy_file(src, dst, info)


def _copy(src: str, dst: str, info: os.stat_result) -> None:
    if stat.S_ISLNK(info.st_mode):
        _copy_symlink(src, dst)
    elif stat.S_ISDIR(info.st_mode):
        _copy_dir(src, dst, info)
    else:
        _copy_file(src, dst, info)


def _copy_file(src: str, dst: str, info: os.stat_result) -> None:
    flags = os.O_RDWR | os.O_CREAT | os.O_TRUNC | getattr(os, "O_BINARY", 0)
    with open(src, "rb") as fin:
        fd = os.open(dst, flags, stat.S_IMODE(info.st_mode))
        with os.fdopen(fd, "wb") as fout:
            shutil.copyfileobj(fin, fout)
            fout.flush()
            os.fsync(fout.fileno())


def _copy_symlink(src: str, dst: str) -> None:
    real_src = os.path.realpath(src, strict=True) if sys.version_info >= (3, 10) else os.path.realpath(src)
    _copy(real_src, dst, os.lstat(real_src))


def _copy_dir(src: str, dst: str, info: os.stat_result) -> None:
    os.makedirs(dst, stat.S_IMODE(info.st_mode), exist_ok=True)
    for name in sorted(os.listdir(src)):
        entry_src = os.path.join(src, name)
        entry_dst = os.path.join(dst, name)
        _copy(entry_src, entry_dst, os.lstat(entry_src))