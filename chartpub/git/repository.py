"""Git repository abstraction.

This module provides the Repository class for the git operations a release run
needs: what changed in the latest commit, whether a tag exists on the remote,
and creating/pushing tags. All operations return Result types.

Usage:
    repo = Repository(Path("/path/to/workspace"))

    match repo.latest_changed_paths():
        case Ok(paths):
            print(f"{len(paths)} files changed")
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from chartpub.core.result import Err, Ok, Result
from chartpub.platform.process import ProcessError
from chartpub.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

# `git ls-remote --exit-code` exits 2 when no matching ref was found.
_LS_REMOTE_NO_MATCH = 2

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """Git repository abstraction.

    Attributes:
        path: Path to the repository root
        remote: Remote that tags are checked against and pushed to
    """

    def __init__(self, path: Path, *, remote: str = "origin") -> None:
        self.path = path
        self.remote = remote

    def head_sha(self) -> Result[str, GitError]:
        """Resolve the full SHA of HEAD."""
        result = self._run(["rev-parse", "HEAD"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse HEAD", e, "cannot resolve HEAD"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def latest_changed_paths(self) -> Result[list[str], GitError]:
        """List paths changed by the most recent commit, relative to the root.

        Deleted paths are left out. ``--root`` makes the initial commit
        report all of its files. ``-z`` keeps paths unquoted.
        """
        result = self._run(
            [
                "diff-tree",
                "--no-commit-id",
                "--name-only",
                "-z",
                "-r",
                "--root",
                "--diff-filter=d",
                "HEAD",
            ]
        )
        match result:
            case Err(e):
                return Err(self._error("diff-tree", e, "cannot list changed files"))
            case Ok(stdout):
                return Ok([path for path in stdout.split("\0") if path.strip()])

    def has_tag(self, tag: str) -> Result[bool, GitError]:
        """Check whether ``tag`` exists on the remote."""
        result = self._run(
            ["ls-remote", "--exit-code", "--tags", self.remote, f"refs/tags/{tag}"]
        )
        match result:
            case Ok(_):
                return Ok(True)
            case Err(e) if e.returncode == _LS_REMOTE_NO_MATCH:
                return Ok(False)
            case Err(e):
                return Err(self._error("ls-remote", e, f"cannot query tag {tag}"))

    def create_tag(self, tag: str, ref: str | None = None) -> Result[None, GitError]:
        """Create a lightweight tag at ``ref`` (HEAD if None) and push it.

        ``-f`` replaces a local tag left behind by an earlier failed push.
        """
        result = self._run(["tag", "-f", tag, ref or "HEAD"])
        if isinstance(result, Err):
            return Err(self._error("tag", result.error, f"cannot create tag {tag}"))

        pushed = self._run(["push", self.remote, f"refs/tags/{tag}"])
        if isinstance(pushed, Err):
            return Err(self._error("push", pushed.error, f"cannot push tag {tag}"))
        return Ok(None)

    def _error(self, command: str, error: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=error.stderr.strip() or error.stdout.strip() or fallback,
            returncode=error.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push", "ls-remote"}
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
