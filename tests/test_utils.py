from __future__ import annotations

from pathlib import Path

import pytest

from utils import is_within, last_segments, normalize_path, parent_dir


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("/proj//lib/./a/../b.py", "/proj/lib/b.py"),
        ("/proj/lib/", "/proj/lib"),
        ("C:\\proj\\lib\\b.py", "C:/proj/lib/b.py"),
        ("/../../x.py", "/x.py"),
        ("lib/a.py", "lib/a.py"),
    ],
)
def test_normalize_path(raw: str, expected: str) -> None:
    assert normalize_path(raw) == expected


def test_normalize_path_accepts_path_objects() -> None:
    assert normalize_path(Path("/proj/lib/a.py")) == "/proj/lib/a.py"


def test_parent_dir() -> None:
    assert parent_dir("/proj/lib/a.py") == "/proj/lib"
    assert parent_dir("/a.py") == "/"
    assert parent_dir("a.py") == ""


def test_is_within_respects_segment_boundaries() -> None:
    assert is_within("/proj/lib/a.py", "/proj")
    assert is_within("/proj", "/proj")
    assert not is_within("/project/a.py", "/proj")
    assert not is_within("/other/a.py", "/proj")


def test_last_segments() -> None:
    assert last_segments("/proj/lib/domain/user.py") == "domain/user.py"
    assert last_segments("/proj/lib/domain/user.py", count=3) == "lib/domain/user.py"
    assert last_segments("user.py") == "user.py"
