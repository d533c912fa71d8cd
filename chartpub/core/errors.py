"""Error codes for CLI exit status.

The values map to process exit codes seen by the CI platform and should
remain stable:
- 0: Success (including "nothing to build")
- 1: Configuration error (missing workspace, bad inputs)
- 2: Environment error (gh missing or failing, cr unavailable)
- 3: Release error (bad manifest, git, packaging, publishing, indexing)
- 4: Network error (tool download failed)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the release run."""

    OK = 0
    CONFIG_ERROR = 1
    ENV_ERROR = 2
    RELEASE_ERROR = 3
    NETWORK_ERROR = 4

    def __str__(self) -> str:
        """Return human-readable name."""
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        """Check if this code indicates success."""
        return self == ErrorCode.OK
