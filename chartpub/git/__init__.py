"""Git operations used by the release run.

Usage:
    from chartpub.git import Repository

    repo = Repository(workspace)
    changed = repo.latest_changed_paths()
"""

from chartpub.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
