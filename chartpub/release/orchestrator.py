"""Release run sequencing.

Steps run strictly in order:

    prepare -> extract -> reconcile tags -> reconcile releases
            -> tag -> package -> publish -> index

Prepare always runs. Every mutating step goes through ``DryRunGuard``.
Package, publish and index only make sense as a batch and are skipped
together when no chart needs a release. Nothing is rolled back on failure:
a re-run skips whatever the failed run already completed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol

from chartpub.charts.changes import extract_changes
from chartpub.charts.manifest import ManifestReader
from chartpub.charts.model import ChangeRecord, ChangeSet, describe, tag_collisions, version_tag
from chartpub.core.config import ReleaseConfig
from chartpub.core.result import Err, Ok, Result
from chartpub.git.repository import GitError
from chartpub.output.console import ConsoleProtocol
from chartpub.platform.files import reset_dir
from chartpub.release.errors import ReleaseError
from chartpub.release.reconcile import LookupRelease, needed_builds, needed_tags

__all__ = [
    "DryRunGuard",
    "ReleaseTool",
    "RunReport",
    "TagStore",
    "prepare_workdirs",
    "run_release",
]


class TagStore(Protocol):
    def has_tag(self, tag: str) -> Result[bool, GitError]: ...

    def create_tag(self, tag: str, ref: str | None = None) -> Result[None, GitError]: ...


class ReleaseTool(Protocol):
    def package(self, change: ChangeRecord) -> Result[None, ReleaseError]: ...

    def upload(self, commit: str) -> Result[None, ReleaseError]: ...

    def index(self) -> Result[None, ReleaseError]: ...


type Step = Callable[[], Result[None, ReleaseError]]


@dataclass(frozen=True, slots=True)
class RunReport:
    """What a release run decided and did."""

    changes: ChangeSet
    needed_tags: ChangeSet
    needed_builds: ChangeSet
    dry_run: bool
    tags_created: tuple[str, ...] = ()
    packaged: tuple[str, ...] = ()
    published: bool = False
    indexed: bool = False

    @property
    def nothing_to_do(self) -> bool:
        return not self.needed_tags and not self.needed_builds


class DryRunGuard:
    """Single gate for every mutating step.

    Calling the guard runs ``step`` and returns Ok(True), or in dry-run mode
    logs what would have run and returns Ok(False).
    """

    def __init__(self, *, dry_run: bool, console: ConsoleProtocol) -> None:
        self.dry_run = dry_run
        self._console = console

    def __call__(self, label: str, step: Step) -> Result[bool, ReleaseError]:
        if self.dry_run:
            self._console.info(f"would run: {label} (skipped due to dry_run)")
            return Ok(False)

        result = step()
        if isinstance(result, Err):
            return result
        return Ok(True)


def prepare_workdirs(config: ReleaseConfig) -> Result[None, ReleaseError]:
    """Start from empty package and index directories."""
    for path in (config.packages_dir, config.index_dir):
        result = reset_dir(path)
        if isinstance(result, Err):
            return Err(ReleaseError(kind="workdir_failed", message=result.error))
    return Ok(None)


def _create_tags(
    tags: TagStore, changes: ChangeSet, commit: str, created: list[str]
) -> Result[None, ReleaseError]:
    for change in changes:
        tag = version_tag(change)
        result = tags.create_tag(tag, commit)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"cannot create tag {tag}",
                    hint=result.error.message,
                )
            )
        created.append(tag)
    return Ok(None)


def _package_charts(
    tool: ReleaseTool, changes: ChangeSet, packaged: list[str]
) -> Result[None, ReleaseError]:
    for change in changes:
        result = tool.package(change)
        if isinstance(result, Err):
            return result
        packaged.append(version_tag(change))
    return Ok(None)


def _warn_tag_collisions(changes: Iterable[ChangeRecord], console: ConsoleProtocol) -> None:
    for tag, records in tag_collisions(changes).items():
        names = ", ".join(f"{r.package} {r.version}" for r in records)
        console.warning(f"charts share the tag {tag} and cannot both be released: {names}")


def run_release(
    *,
    config: ReleaseConfig,
    commit: str,
    changed_paths: Iterable[str],
    read_manifest: ManifestReader,
    tags: TagStore,
    lookup_release: LookupRelease,
    tool: ReleaseTool,
    console: ConsoleProtocol,
) -> Result[RunReport, ReleaseError]:
    """Bring tags and releases in line with the charts changed by ``commit``.

    Args:
        config: Run configuration (dry_run, chart_dir, workspace)
        commit: Commit that new tags and releases point at
        changed_paths: Paths changed by the latest commit
        read_manifest: Parses a workspace-relative Chart.yaml
        tags: Tag oracle and creator
        lookup_release: Release oracle
        tool: Packaging, publishing and indexing
        console: Progress and decision log

    Returns:
        Ok(RunReport), or Err(ReleaseError) for the first fatal failure
    """
    guard = DryRunGuard(dry_run=config.dry_run, console=console)

    prepared = prepare_workdirs(config)
    if isinstance(prepared, Err):
        return prepared

    extracted = extract_changes(changed_paths, config.chart_dir, read_manifest)
    if isinstance(extracted, Err):
        return Err(
            ReleaseError(
                kind="manifest_invalid",
                message=f"cannot read chart manifest {extracted.error.path}",
                hint=extracted.error.message,
            )
        )
    changes = extracted.value
    if changes:
        console.info(f"Changed charts: {describe(changes)}")
    else:
        console.info(f"No chart manifests changed under {config.chart_dir}/")
    _warn_tag_collisions(changes, console)

    missing_tags = needed_tags(changes, tags.has_tag, console)
    if isinstance(missing_tags, Err):
        return missing_tags
    tag_todo = missing_tags.value
    build_todo = needed_builds(changes, lookup_release, console)

    created: list[str] = []
    if tag_todo:
        console.info(f"Creating tags: {describe(tag_todo)}")
        tagged = guard(
            f"create tags {describe(tag_todo)}",
            lambda: _create_tags(tags, tag_todo, commit, created),
        )
        if isinstance(tagged, Err):
            return tagged
    else:
        console.info("No tags to create")

    packaged: list[str] = []
    published = False
    indexed = False
    if build_todo:
        console.info(f"Packaging charts: {describe(build_todo)}")
        packed = guard(
            f"package {describe(build_todo)}",
            lambda: _package_charts(tool, build_todo, packaged),
        )
        if isinstance(packed, Err):
            return packed

        console.info(f"Publishing charts: {describe(build_todo)}")
        uploaded = guard(f"upload releases at {commit}", lambda: tool.upload(commit))
        if isinstance(uploaded, Err):
            return uploaded
        published = uploaded.value

        console.info("Generating chart repo index")
        reindexed = guard(f"index {config.chart_repo_url}", tool.index)
        if isinstance(reindexed, Err):
            return reindexed
        indexed = reindexed.value
    else:
        console.info("Nothing to build")

    return Ok(
        RunReport(
            changes=changes,
            needed_tags=tag_todo,
            needed_builds=build_todo,
            dry_run=config.dry_run,
            tags_created=tuple(created),
            packaged=tuple(packaged),
            published=published,
            indexed=indexed,
        )
    )
