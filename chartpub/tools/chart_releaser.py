"""Fetch a pinned chart-releaser (cr) binary.

The release archive is downloaded once into the tool cache and only the
``cr`` executable is extracted:

    <cache>/downloads/chart-releaser_<ver>_<os>_<arch>.tar.gz
    <cache>/chart-releaser/<ver>/cr
"""

from __future__ import annotations

import platform
import shutil
import stat
import tarfile
from pathlib import Path, PurePosixPath

from chartpub.core.result import Err, Ok, Result
from chartpub.release.errors import ReleaseError
from chartpub.tools.http import HttpClient

__all__ = ["asset_name", "download_url", "ensure_chart_releaser"]

_DOWNLOAD_BASE = "https://github.com/helm/chart-releaser/releases/download"
_BINARY = "cr"

_OS_NAMES = {"linux": "linux", "darwin": "darwin"}
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def asset_name(version: str, system: str | None = None, machine: str | None = None) -> Result[str, ReleaseError]:
    sys_id = (system or platform.system()).lower()
    arch_id = (machine or platform.machine()).lower()
    os_name = _OS_NAMES.get(sys_id)
    arch = _ARCH_NAMES.get(arch_id)
    if os_name is None or arch is None:
        return Err(
            ReleaseError(
                kind="tool_missing",
                message=f"no chart-releaser build for {sys_id}/{arch_id}",
                hint="Install cr yourself and pass --cr-path",
            )
        )
    return Ok(f"chart-releaser_{version}_{os_name}_{arch}.tar.gz")


def download_url(version: str, asset: str) -> str:
    return f"{_DOWNLOAD_BASE}/v{version}/{asset}"


def _extract_binary(archive: Path, dest: Path) -> Result[Path, ReleaseError]:
    # Only a complete, executable binary ever appears at dest.
    partial = dest.with_name(dest.name + ".part")
    try:
        with tarfile.open(archive, "r:gz") as tar:
            member = next(
                (
                    m
                    for m in tar.getmembers()
                    if m.isfile() and PurePosixPath(m.name).name == _BINARY
                ),
                None,
            )
            if member is None:
                return Err(
                    ReleaseError(
                        kind="tool_download_failed",
                        message=f"{_BINARY} not found in {archive.name}",
                    )
                )
            source = tar.extractfile(member)
            if source is None:
                return Err(
                    ReleaseError(
                        kind="tool_download_failed",
                        message=f"cannot read {member.name} from {archive.name}",
                    )
                )
            dest.parent.mkdir(parents=True, exist_ok=True)
            with source, open(partial, "wb") as out:
                shutil.copyfileobj(source, out)
        partial.chmod(partial.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        partial.replace(dest)
    except (tarfile.TarError, OSError) as e:
        partial.unlink(missing_ok=True)
        return Err(
            ReleaseError(
                kind="tool_download_failed",
                message=f"cannot extract {archive.name}: {e}",
            )
        )

    return Ok(dest)


def ensure_chart_releaser(
    *,
    version: str,
    cache_dir: Path,
    http: HttpClient,
    system: str | None = None,
    machine: str | None = None,
) -> Result[Path, ReleaseError]:
    """Return the path of the cr binary for ``version``, downloading if needed.

    Args:
        version: chart-releaser version without the leading "v"
        cache_dir: Tool cache root
        http: Client used for the download
        system: Override for platform.system() (tests)
        machine: Override for platform.machine() (tests)

    Returns:
        Ok(path to cr) or Err(ReleaseError)
    """
    binary = cache_dir / "chart-releaser" / version / _BINARY
    if binary.is_file():
        return Ok(binary)

    asset = asset_name(version, system, machine)
    if isinstance(asset, Err):
        return asset

    archive = cache_dir / "downloads" / asset.value
    url = download_url(version, asset.value)
    downloaded = http.download(url, archive)
    if isinstance(downloaded, Err):
        return Err(
            ReleaseError(
                kind="tool_download_failed",
                message=f"cannot download chart-releaser {version}",
                hint=str(downloaded.error),
            )
        )

    return _extract_binary(archive, binary)
