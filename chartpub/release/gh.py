from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from time import sleep
from urllib.parse import quote

from chartpub.core.result import Err, Ok, Result
from chartpub.platform.process import ProcessError, env_with
from chartpub.platform.process import run as run_process
from chartpub.release.errors import ReleaseError
from chartpub.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)


@dataclass(frozen=True, slots=True)
class ReleaseFound:
    tag: str


@dataclass(frozen=True, slots=True)
class ReleaseMissing:
    tag: str


@dataclass(frozen=True, slots=True)
class ReleaseLookupFailed:
    tag: str
    detail: str


type ReleaseLookup = ReleaseFound | ReleaseMissing | ReleaseLookupFailed


def _error_text(error: ProcessError) -> str:
    return f"{error.stderr}\n{error.stdout}".lower()


def _is_not_found(error: ProcessError) -> bool:
    return "http 404" in _error_text(error)


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = _error_text(error)
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "tls handshake timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def gh_env(token: str | None) -> dict[str, str] | None:
    return env_with({"GH_TOKEN": token} if token else {})


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="tool_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def lookup_release(
    *,
    workspace_root: Path,
    repo: str,
    tag: str,
    token: str | None = None,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> ReleaseLookup:
    """Ask the platform whether a release named ``tag`` exists in ``repo``.

    A 404 is a definite "missing". Transient failures are retried; whatever
    still fails is reported as ``ReleaseLookupFailed`` with the gh output.
    """
    endpoint = f"repos/{repo}/releases/tags/{quote(tag, safe='')}"
    cmd = ["gh", "api", "-X", "GET", endpoint, "--silent"]
    env = gh_env(token)

    attempts = max(1, retry_attempts)
    detail = "no attempt made"
    for attempt in range(attempts):
        result = run_process(cmd, cwd=workspace_root, env=env, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return ReleaseFound(tag=tag)

        error = result.error
        if _is_not_found(error):
            return ReleaseMissing(tag=tag)

        detail = error.stderr.strip() or str(error)
        if attempt < attempts - 1 and _is_transient_gh_error(error):
            sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue
        break

    return ReleaseLookupFailed(tag=tag, detail=detail)
