import os
import stat

import pytest

from kindkit.fs import copy, copy_file, is_abs, temp_dir


def test_temp_dir_creates_directory(tmp_path):
    name = temp_dir(str(tmp_path), "images-tar")
    assert os.path.isdir(name)
    assert os.path.basename(name).startswith("images-tar")
    assert os.path.samefile(os.path.dirname(name), tmp_path)


def test_temp_dir_unique(tmp_path):
    first = temp_dir(str(tmp_path), "")
    second = temp_dir(str(tmp_path), "")
    assert first != second
    assert os.path.isdir(first) and os.path.isdir(second)


@pytest.mark.parametrize(
    "path, expected",
    [("/foo/bar", True), ("relative/path", False), ("", False)],
)
def test_is_abs(path, expected):
    assert is_abs(path) is expected


def test_copy_tree(tmp_path):
    src = tmp_path / "src"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_bytes(b"alpha")
    (src / "sub" / "b.txt").write_bytes(b"beta")
    dst = tmp_path / "out" / "nested" / "dst"
    copy(str(src), str(dst))
    assert (dst / "a.txt").read_bytes() == b"alpha"
    assert (dst / "sub" / "b.txt").read_bytes() == b"beta"
    assert sorted(os.listdir(dst)) == sorted(os.listdir(src))


def test_copy_dereferences_symlinks(tmp_path):
    target = tmp_path / "target.txt"
    target.write_bytes(b"content")
    src = tmp_path / "tree"
    src.mkdir()
    (src / "link").symlink_to(target)
    dst = tmp_path / "copied"
    copy(str(src), str(dst))
    assert not os.path.islink(dst / "link")
    assert (dst / "link").read_bytes() == b"content"


def test_copy_top_level_symlink(tmp_path):
    target = tmp_path / "target.txt"
    target.write_bytes(b"data")
    link = tmp_path / "link"
    link.symlink_to(target)
    dst = tmp_path / "dst.txt"
    copy(str(link), str(dst))
    assert not os.path.islink(dst)
    assert dst.read_bytes() == b"data"


def test_copy_keeps_mode(tmp_path):
    src = tmp_path / "script.sh"
    src.write_bytes(b"#!/bin/sh\n")
    os.chmod(src, 0o700)
    dst = tmp_path / "copy.sh"
    copy(str(src), str(dst))
    assert stat.S_IMODE(os.stat(dst).st_mode) == stat.S_IMODE(os.stat(src).st_mode)


def test_copy_file_truncates_existing(tmp_path):
    src = tmp_path / "short"
    src.write_bytes(b"ab")
    dst = tmp_path / "long"
    dst.write_bytes(b"a much longer existing content")
    copy_file(str(src), str(dst))
    assert dst.read_bytes() == src.read_bytes()


def test_copy_missing_source(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy(str(tmp_path / "missing"), str(tmp_path / "dst"))
    with pytest.raises(FileNotFoundError):
        copy_file(str(tmp_path / "missing"), str(tmp_path / "dst"))