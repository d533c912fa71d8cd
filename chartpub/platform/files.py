"""Filesystem helpers."""

from __future__ import annotations

import shutil
from pathlib import Path

from chartpub.core.result import Err, Ok, Result

__all__ = ["reset_dir"]


def reset_dir(path: Path) -> Result[Path, str]:
    """Remove ``path`` recursively (if present) and recreate it empty."""
    try:
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        elif path.exists() or path.is_symlink():
            path.unlink()
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(f"cannot reset {path}: {e}")
    return Ok(path)
