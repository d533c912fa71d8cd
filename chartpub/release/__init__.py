"""Tag and release reconciliation and the release run."""

from chartpub.release.errors import ReleaseError, ReleaseErrorKind
from chartpub.release.gh import (
    ReleaseFound,
    ReleaseLookup,
    ReleaseLookupFailed,
    ReleaseMissing,
    lookup_release,
)
from chartpub.release.orchestrator import DryRunGuard, RunReport, run_release
from chartpub.release.reconcile import needed_builds, needed_tags
from chartpub.release.releaser import ChartReleaser

__all__ = [
    "ChartReleaser",
    "DryRunGuard",
    "ReleaseError",
    "ReleaseErrorKind",
    "ReleaseFound",
    "ReleaseLookup",
    "ReleaseLookupFailed",
    "ReleaseMissing",
    "RunReport",
    "lookup_release",
    "needed_builds",
    "needed_tags",
    "run_release",
]
