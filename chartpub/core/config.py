"""Typed release configuration.

The configuration is read once at process entry from CLI options and the
GitHub Actions environment, then passed explicitly to every component.
Nothing below the CLI layer reads ``os.environ``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "ConfigError",
    "ConfigOverrides",
    "ReleaseConfig",
    "load_release_config",
    "DEFAULT_CHART_DIR",
    "DEFAULT_CR_VERSION",
    "PACKAGES_DIR_NAME",
    "INDEX_DIR_NAME",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_CHART_DIR = "charts"
DEFAULT_CR_VERSION = "1.6.1"

# Working directories used by cr, relative to the workspace
PACKAGES_DIR_NAME = ".cr-release-packages"
INDEX_DIR_NAME = ".cr-index"

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the release configuration cannot be built."""

    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ConfigOverrides:
    """Values given explicitly on the command line (None = not given)."""

    workspace: Path | None = None
    chart_dir: str | None = None
    chart_repo_url: str | None = None
    dry_run: bool | None = None
    cr_version: str | None = None
    cr_path: Path | None = None
    verbose: bool | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Immutable settings for one release run.

    Attributes:
        workspace: Checked-out repository root.
        owner: Repository owner on the release platform.
        repo: Repository name on the release platform.
        chart_repo_url: Public URL of the chart repository (index location).
        git_ref: Commit the tags and releases point at. None means HEAD.
        chart_dir: Workspace-relative directory holding one chart per subdirectory.
        dry_run: Decide and report, but skip every mutating step.
        cr_version: chart-releaser version to fetch.
        cr_path: Use this cr binary instead of fetching one.
        token: Token forwarded to gh and cr.
        verbose: Show streamed tool output and skip decisions.
    """

    workspace: Path
    owner: str
    repo: str
    chart_repo_url: str
    git_ref: str | None = None
    chart_dir: str = DEFAULT_CHART_DIR
    dry_run: bool = False
    cr_version: str = DEFAULT_CR_VERSION
    cr_path: Path | None = None
    token: str | None = None
    verbose: bool = False

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def packages_dir(self) -> Path:
        return self.workspace / PACKAGES_DIR_NAME

    @property
    def index_dir(self) -> Path:
        return self.workspace / INDEX_DIR_NAME

    @property
    def tool_cache_dir(self) -> Path:
        return self.workspace / ".chartpub" / "tools"


def _env(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_bool(name: str, raw: str | None, default: bool) -> Result[bool, ConfigError]:
    if raw is None:
        return Ok(default)
    if raw in _TRUE_VALUES:
        return Ok(True)
    if raw in _FALSE_VALUES:
        return Ok(False)
    return Err(
        ConfigError(
            f"Input does not meet YAML 1.2 core schema boolean: {name}={raw!r}",
            hint="Use true or false",
        )
    )


def _parse_slug(raw: str | None) -> Result[tuple[str, str], ConfigError]:
    if raw is None:
        return Err(
            ConfigError(
                "Unable to determine repository (GITHUB_REPOSITORY is not set)",
                hint="Set GITHUB_REPOSITORY=owner/repo",
            )
        )
    owner, sep, repo = raw.partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return Err(ConfigError(f"Invalid repository slug: {raw!r}", hint="Expected owner/repo"))
    return Ok((owner, repo))


def _normalize_chart_dir(raw: str) -> str:
    return raw.strip().strip("/") or DEFAULT_CHART_DIR


def load_release_config(
    env: Mapping[str, str],
    overrides: ConfigOverrides | None = None,
) -> Result[ReleaseConfig, ConfigError]:
    """Build the release configuration.

    Precedence is CLI override, then environment, then default.

    Args:
        env: Process environment (GitHub Actions variables and INPUT_* inputs)
        overrides: Explicit CLI values

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    ov = overrides or ConfigOverrides()

    workspace_raw = ov.workspace or (Path(w) if (w := _env(env, "GITHUB_WORKSPACE")) else None)
    if workspace_raw is None:
        return Err(
            ConfigError(
                "Unable to locate workspace!",
                hint="Set GITHUB_WORKSPACE or pass --workspace",
            )
        )
    workspace = workspace_raw.expanduser().resolve()
    if not workspace.is_dir():
        return Err(ConfigError(f"Workspace is not a directory: {workspace}"))

    slug = _parse_slug(_env(env, "GITHUB_REPOSITORY"))
    if isinstance(slug, Err):
        return slug
    owner, repo = slug.value

    dry_run = ov.dry_run
    if dry_run is None:
        parsed = _parse_bool("dry_run", _env(env, "INPUT_DRY_RUN"), False)
        if isinstance(parsed, Err):
            return parsed
        dry_run = parsed.value

    chart_repo_url = (
        ov.chart_repo_url
        or _env(env, "INPUT_CHART_REPO_URL")
        or f"https://{owner}.github.io/{repo}"
    )
    chart_dir = _normalize_chart_dir(
        ov.chart_dir or _env(env, "INPUT_CHART_DIR") or DEFAULT_CHART_DIR
    )
    cr_version = (
        ov.cr_version or _env(env, "INPUT_CHART_RELEASER_VERSION") or DEFAULT_CR_VERSION
    ).removeprefix("v")

    verbose = ov.verbose if ov.verbose is not None else _env(env, "RUNNER_DEBUG") == "1"

    return Ok(
        ReleaseConfig(
            workspace=workspace,
            owner=owner,
            repo=repo,
            chart_repo_url=chart_repo_url,
            git_ref=_env(env, "GITHUB_SHA"),
            chart_dir=chart_dir,
            dry_run=dry_run,
            cr_version=cr_version,
            cr_path=ov.cr_path,
            token=_env(env, "CR_TOKEN"),
            verbose=verbose,
        )
    )
