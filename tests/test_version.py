import pytest

import kindkit.version as version_module
from kindkit.version import display_version, truncate, version


@pytest.mark.parametrize(
    "value, max_length, expected",
    [
        ("A Really Long String", 1, "A"),
        ("A Short String", 10, "A Short St"),
        ("Under Max Length String", 1000, "Under Max Length String"),
    ],
)
def test_truncate(value, max_length, expected):
    result = truncate(value, max_length)
    assert len(result) <= max_length
    assert result == expected


def test_version_without_commit():
    assert version("") == "0.11.0-alpha"


def test_version_with_commit_is_truncated():
    assert version("0123456789abcdef0123") == "0.11.0-alpha+0123456789abcd"


def test_version_defaults_to_module_commit(monkeypatch):
    monkeypatch.setattr(version_module, "GIT_COMMIT", "abc")
    assert version() == "0.11.0-alpha+abc"


def test_display_version_starts_with_version():
    text = display_version()
    assert text.startswith("kind v" + version() + " ")
    assert "/" in text.split(" ")[-1]