"""Tests for chartpub.charts.manifest."""

from __future__ import annotations

from pathlib import Path

import pytest

from chartpub.charts.manifest import ChartManifest, manifest_reader, read_manifest
from chartpub.core.result import Err, Ok


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_reads_name_and_version(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "Chart.yaml",
        "apiVersion: v2\nname: foo\nversion: 1.2.0\ndescription: A chart\n",
    )

    assert read_manifest(path) == Ok(ChartManifest(name="foo", version="1.2.0"))


def test_missing_file(tmp_path: Path) -> None:
    result = read_manifest(tmp_path / "Chart.yaml")

    assert isinstance(result, Err)
    assert result.error.message == "file not found"


def test_invalid_yaml(tmp_path: Path) -> None:
    path = _write(tmp_path / "Chart.yaml", "name: [unclosed\n")

    result = read_manifest(path)

    assert isinstance(result, Err)
    assert "invalid YAML" in result.error.message


@pytest.mark.parametrize(
    ("content", "fragment"),
    [
        ("- a\n- b\n", "mapping"),
        ("version: 1.0.0\n", "'name'"),
        ("name: foo\n", "'version'"),
        ("name: foo\nversion: 1.10\n", "quote"),
        ("name: ''\nversion: 1.0.0\n", "'name'"),
    ],
)
def test_rejects_incomplete_manifests(tmp_path: Path, content: str, fragment: str) -> None:
    path = _write(tmp_path / "Chart.yaml", content)

    result = read_manifest(path)

    assert isinstance(result, Err)
    assert fragment in result.error.message


def test_reader_resolves_relative_paths(tmp_path: Path) -> None:
    _write(tmp_path / "charts" / "foo" / "Chart.yaml", "name: foo\nversion: '2.0'\n")
    read = manifest_reader(tmp_path)

    assert read("charts/foo/Chart.yaml") == Ok(ChartManifest(name="foo", version="2.0"))

    missing = read("charts/bar/Chart.yaml")
    assert isinstance(missing, Err)
    assert missing.error.path == "charts/bar/Chart.yaml"
