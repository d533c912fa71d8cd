"""Tests for chartpub.tools.chart_releaser."""

from __future__ import annotations

import io
import os
import shutil
import tarfile
from pathlib import Path
from typing import BinaryIO

import pytest

from chartpub.core.result import Err, Ok
from chartpub.tools.chart_releaser import asset_name, download_url, ensure_chart_releaser
from chartpub.tools.http import HttpError, MockHttpClient

URL = (
    "https://github.com/helm/chart-releaser/releases/download/"
    "v1.6.1/chart-releaser_1.6.1_linux_amd64.tar.gz"
)


def _archive(members: dict[str, bytes]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _ensure(http: MockHttpClient, cache: Path):
    return ensure_chart_releaser(
        version="1.6.1", cache_dir=cache, http=http, system="Linux", machine="x86_64"
    )


class TestAssetName:
    def test_known_platforms(self) -> None:
        assert asset_name("1.6.1", "Linux", "x86_64") == Ok("chart-releaser_1.6.1_linux_amd64.tar.gz")
        assert asset_name("1.6.1", "Darwin", "arm64") == Ok("chart-releaser_1.6.1_darwin_arm64.tar.gz")

    def test_unsupported_platform(self) -> None:
        result = asset_name("1.6.1", "Windows", "AMD64")

        assert isinstance(result, Err)
        assert result.error.kind == "tool_missing"

    def test_download_url(self) -> None:
        assert download_url("1.6.1", "chart-releaser_1.6.1_linux_amd64.tar.gz") == URL


class TestEnsureChartReleaser:
    def test_downloads_and_extracts(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, _archive({"LICENSE": b"MIT", "cr": b"#!/bin/sh\n"}))

        result = _ensure(http, tmp_path)

        assert isinstance(result, Ok)
        binary = result.value
        assert binary == tmp_path / "chart-releaser" / "1.6.1" / "cr"
        assert binary.read_bytes() == b"#!/bin/sh\n"
        assert os.access(binary, os.X_OK)
        assert http.calls == [URL]

    def test_uses_cached_binary(self, tmp_path: Path) -> None:
        cached = tmp_path / "chart-releaser" / "1.6.1" / "cr"
        cached.parent.mkdir(parents=True)
        cached.write_bytes(b"cached")
        http = MockHttpClient()

        result = _ensure(http, tmp_path)

        assert result == Ok(cached)
        assert http.calls == []

    def test_download_failure(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, HttpError(url=URL, status=404, message="Not Found"))

        result = _ensure(http, tmp_path)

        assert isinstance(result, Err)
        assert result.error.kind == "tool_download_failed"
        assert "HTTP 404" in (result.error.hint or "")

    def test_archive_without_binary(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, _archive({"README.md": b"hi"}))

        result = _ensure(http, tmp_path)

        assert isinstance(result, Err)
        assert "cr not found" in result.error.message

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        http = MockHttpClient()
        http.set_download(URL, b"not a tarball")

        result = _ensure(http, tmp_path)

        assert isinstance(result, Err)
        assert result.error.kind == "tool_download_failed"

    def test_interrupted_extract_leaves_no_binary(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        http = MockHttpClient()
        http.set_download(URL, _archive({"cr": b"#!/bin/sh\necho full\n"}))
        binary = tmp_path / "chart-releaser" / "1.6.1" / "cr"

        def truncated_copy(source: BinaryIO, out: BinaryIO) -> None:
            out.write(source.read(4))
            raise OSError("No space left on device")

        with monkeypatch.context() as m:
            m.setattr(shutil, "copyfileobj", truncated_copy)
            failed = _ensure(http, tmp_path)

        assert isinstance(failed, Err)
        assert not binary.exists()
        assert not binary.with_name("cr.part").exists()

        retried = _ensure(http, tmp_path)

        assert retried == Ok(binary)
        assert binary.read_bytes() == b"#!/bin/sh\necho full\n"
