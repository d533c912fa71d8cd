"""Decide which changed chart versions still need a tag or a release.

Tags and releases are checked independently. A previous run may have
created a tag and then failed before publishing (or the other way round), so
neither check may be inferred from the other. Both filters keep input order.
"""

from __future__ import annotations

from collections.abc import Callable

from chartpub.charts.model import ChangeRecord, ChangeSet, version_tag
from chartpub.core.result import Err, Ok, Result
from chartpub.git.repository import GitError
from chartpub.output.console import ConsoleProtocol
from chartpub.release.errors import ReleaseError
from chartpub.release.gh import ReleaseFound, ReleaseLookup, ReleaseLookupFailed

__all__ = [
    "LOOKUP_FAILURE_MEANS_MISSING",
    "LookupRelease",
    "TagExists",
    "needed_builds",
    "needed_tags",
    "release_missing",
]

type TagExists = Callable[[str], Result[bool, GitError]]
type LookupRelease = Callable[[str], ReleaseLookup]

# A release lookup that errors out cannot be told apart from "no release".
# Treating it as missing makes the run attempt the release again, which is
# safe because `cr upload --skip-existing` tolerates an existing release.
LOOKUP_FAILURE_MEANS_MISSING = True


def needed_tags(
    changes: ChangeSet,
    tag_exists: TagExists,
    console: ConsoleProtocol,
) -> Result[ChangeSet, ReleaseError]:
    """Keep the records whose tag does not exist yet.

    A failing tag query aborts the run.
    """
    needed: list[ChangeRecord] = []
    for change in changes:
        tag = version_tag(change)
        exists = tag_exists(tag)
        if isinstance(exists, Err):
            return Err(
                ReleaseError(
                    kind="git_failed",
                    message=f"cannot check tag {tag}",
                    hint=exists.error.message,
                )
            )
        if exists.value:
            console.debug(f"Skipping existing tag {tag}")
        else:
            needed.append(change)
    return Ok(tuple(needed))


def release_missing(lookup: ReleaseLookup) -> bool:
    if isinstance(lookup, ReleaseFound):
        return False
    if isinstance(lookup, ReleaseLookupFailed):
        return LOOKUP_FAILURE_MEANS_MISSING
    return True


def needed_builds(
    changes: ChangeSet,
    lookup_release: LookupRelease,
    console: ConsoleProtocol,
) -> ChangeSet:
    """Keep the records that have no published release yet."""
    needed: list[ChangeRecord] = []
    for change in changes:
        tag = version_tag(change)
        lookup = lookup_release(tag)
        if isinstance(lookup, ReleaseLookupFailed):
            console.warning(f"release lookup failed for {tag}, treating as missing: {lookup.detail}")

        if release_missing(lookup):
            needed.append(change)
        else:
            console.debug(f"Skipping existing release {tag}")
    return tuple(needed)
