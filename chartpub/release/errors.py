from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "config",
    "tool_missing",
    "tool_download_failed",
    "gh_failed",
    "manifest_invalid",
    "git_failed",
    "workdir_failed",
    "package_failed",
    "publish_failed",
    "index_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
