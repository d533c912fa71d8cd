"""Chart.yaml parsing.

Only ``name`` and ``version`` matter to the release run; every other key is
ignored. A manifest that cannot be read is an error, never a silent skip.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import yaml

from chartpub.core.result import Err, Ok, Result
from chartpub.core.structured import as_str_dict, get_str

__all__ = [
    "MANIFEST_FILENAME",
    "ChartManifest",
    "ManifestError",
    "ManifestReader",
    "manifest_reader",
    "read_manifest",
]

MANIFEST_FILENAME = "Chart.yaml"


@dataclass(frozen=True, slots=True)
class ChartManifest:
    name: str
    version: str


@dataclass(frozen=True, slots=True)
class ManifestError:
    """A chart manifest that cannot be parsed.

    Attributes:
        path: Manifest path as it was requested
        message: What is wrong with it
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


type ManifestReader = Callable[[str], Result[ChartManifest, ManifestError]]


def read_manifest(path: Path) -> Result[ChartManifest, ManifestError]:
    """Parse a Chart.yaml file into its declared name and version."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ManifestError(path=str(path), message="file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ManifestError(path=str(path), message=f"cannot read: {e}"))

    try:
        data_obj: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(ManifestError(path=str(path), message=f"invalid YAML: {e}"))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ManifestError(path=str(path), message="manifest root must be a mapping"))

    name = get_str(data, "name")
    if name is None:
        return Err(ManifestError(path=str(path), message="missing or non-string 'name'"))

    version = get_str(data, "version")
    if version is None:
        # `version: 1.10` loads as a float and would lose digits.
        return Err(
            ManifestError(
                path=str(path),
                message="missing or non-string 'version' (quote numeric versions)",
            )
        )

    return Ok(ChartManifest(name=name, version=version))


def manifest_reader(workspace: Path) -> ManifestReader:
    """Reader resolving workspace-relative manifest paths."""

    def _read(rel_path: str) -> Result[ChartManifest, ManifestError]:
        result = read_manifest(workspace / rel_path)
        if isinstance(result, Err):
            return Err(ManifestError(path=rel_path, message=result.error.message))
        return result

    return _read
