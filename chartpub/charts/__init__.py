"""Chart change detection."""

from chartpub.charts.changes import extract_changes, manifest_chart_dir
from chartpub.charts.manifest import (
    MANIFEST_FILENAME,
    ChartManifest,
    ManifestError,
    manifest_reader,
    read_manifest,
)
from chartpub.charts.model import ChangeRecord, ChangeSet, describe, tag_collisions, version_tag

__all__ = [
    "MANIFEST_FILENAME",
    "ChangeRecord",
    "ChangeSet",
    "ChartManifest",
    "ManifestError",
    "describe",
    "extract_changes",
    "manifest_chart_dir",
    "manifest_reader",
    "read_manifest",
    "tag_collisions",
    "version_tag",
]
