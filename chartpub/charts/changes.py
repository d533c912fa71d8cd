"""Map the latest commit's changed paths to chart versions.

Only a change to ``<root>/<chart>/Chart.yaml`` itself counts. Templates,
values files or nested charts changing on their own do not trigger a release;
a release needs a version bump in the manifest.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePosixPath

from chartpub.charts.manifest import MANIFEST_FILENAME, ManifestError, ManifestReader
from chartpub.charts.model import ChangeRecord, ChangeSet
from chartpub.core.result import Err, Ok, Result

__all__ = ["extract_changes", "manifest_chart_dir"]


def _parts(path: str) -> tuple[str, ...]:
    return tuple(p for p in PurePosixPath(path.replace("\\", "/")).parts if p not in ("", "."))


def manifest_chart_dir(path: str, root_dir: str) -> str | None:
    """Return the chart directory if ``path`` is a chart manifest under ``root_dir``.

    ``charts/foo/Chart.yaml`` under ``charts`` gives ``charts/foo``;
    ``charts/foo/values.yaml`` and ``charts-old/foo/Chart.yaml`` give None.
    """
    root = _parts(root_dir)
    parts = _parts(path)
    if parts[: len(root)] != root:
        return None

    remainder = parts[len(root) :]
    if len(remainder) < 2:
        return None
    chart, *rel = remainder
    if tuple(rel) != (MANIFEST_FILENAME,):
        return None
    return "/".join((*root, chart))


def extract_changes(
    changed_paths: Iterable[str],
    root_dir: str,
    read_manifest: ManifestReader,
) -> Result[ChangeSet, ManifestError]:
    """Build the change set for the given changed paths.

    Records use the name and version declared in each manifest, not the
    directory name, and keep the order in which paths were given.

    Args:
        changed_paths: Workspace-relative paths changed by the latest commit
        root_dir: Directory holding one chart per subdirectory
        read_manifest: Parses a workspace-relative manifest path

    Returns:
        Ok(ChangeSet), or Err(ManifestError) for the first unreadable manifest
    """
    changed: list[ChangeRecord] = []
    for path in changed_paths:
        chart_dir = manifest_chart_dir(path, root_dir)
        if chart_dir is None:
            continue

        manifest = read_manifest(path)
        if isinstance(manifest, Err):
            return manifest

        changed.append(
            ChangeRecord(
                package=manifest.value.name,
                version=manifest.value.version,
                chart_path=chart_dir,
            )
        )
    return Ok(tuple(changed))
