"""Tests for chartpub.platform.files."""

from __future__ import annotations

from pathlib import Path

from chartpub.core.result import Err, Ok
from chartpub.platform.files import reset_dir


def test_creates_missing_directory(tmp_path: Path) -> None:
    target = tmp_path / ".cr-index"

    result = reset_dir(target)

    assert isinstance(result, Ok)
    assert target.is_dir()


def test_clears_existing_content(tmp_path: Path) -> None:
    target = tmp_path / ".cr-release-packages"
    (target / "nested").mkdir(parents=True)
    (target / "old-0.1.0.tgz").write_text("stale")

    result = reset_dir(target)

    assert isinstance(result, Ok)
    assert list(target.iterdir()) == []


def test_replaces_file_with_directory(tmp_path: Path) -> None:
    target = tmp_path / ".cr-index"
    target.write_text("not a dir")

    result = reset_dir(target)

    assert isinstance(result, Ok)
    assert target.is_dir()


def test_error_when_parent_is_file(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    result = reset_dir(blocker / "child")

    assert isinstance(result, Err)
    assert "cannot reset" in result.error
