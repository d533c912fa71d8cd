from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One releasable chart version.

    Identity is ``(package, version)``, compared exactly. ``chart_path`` is
    where the chart lives in the workspace and does not take part in equality.
    """

    package: str
    version: str
    chart_path: str = field(default="", compare=False)

    @property
    def tag(self) -> str:
        return version_tag(self)


# Discovery order; duplicates are kept.
type ChangeSet = tuple[ChangeRecord, ...]


def version_tag(record: ChangeRecord) -> str:
    """Tag and release name for a chart version: ``{package}-{version}``."""
    return f"{record.package}-{record.version}"


def describe(changes: Iterable[ChangeRecord]) -> str:
    return ", ".join(version_tag(c) for c in changes)


def tag_collisions(changes: Iterable[ChangeRecord]) -> dict[str, tuple[ChangeRecord, ...]]:
    """Group distinct records that map to the same tag.

    ``foo`` 1-0.0 and ``foo-1`` 0.0 are different records but share the tag
    ``foo-1-0.0``; only one of them can ever be tagged or released.
    """
    by_tag: dict[str, list[ChangeRecord]] = {}
    for record in changes:
        seen = by_tag.setdefault(version_tag(record), [])
        if record not in seen:
            seen.append(record)
    return {tag: tuple(records) for tag, records in by_tag.items() if len(records) > 1}
