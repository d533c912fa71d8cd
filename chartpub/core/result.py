"""Result type for explicit error handling.

Fallible steps of a release run return ``Ok(value)`` or ``Err(error)`` instead
of raising, so each caller decides whether a failure aborts the run.

Usage:
    def read_version(path: Path) -> Result[str, ManifestError]:
        if not path.exists():
            return Err(ManifestError(path=str(path), message="missing"))
        return Ok("1.2.0")

    match read_version(path):
        case Ok(version):
            print(f"version: {version}")
        case Err(error):
            print(f"failed: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Represents a successful result containing a value.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Represents a failed result containing an error.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
