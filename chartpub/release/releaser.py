"""chart-releaser (cr) invocations.

Each call blocks until cr exits; its output is forwarded line by line to the
console's debug sink while it runs.
"""

from __future__ import annotations

from pathlib import Path

from chartpub.charts.model import ChangeRecord
from chartpub.core.config import ReleaseConfig
from chartpub.core.result import Err, Ok, Result
from chartpub.output.console import ConsoleProtocol
from chartpub.platform.process import ProcessError, env_with, run_logged
from chartpub.release.errors import ReleaseError, ReleaseErrorKind

__all__ = ["ChartReleaser"]


class ChartReleaser:
    """Runs ``cr package``, ``cr upload`` and ``cr index`` for one workspace."""

    def __init__(self, *, cr: Path, config: ReleaseConfig, console: ConsoleProtocol) -> None:
        self.cr = cr
        self._config = config
        self._console = console

    def package(self, change: ChangeRecord) -> Result[None, ReleaseError]:
        return self._run(
            [
                "package",
                change.chart_path,
                "--package-path",
                str(self._config.packages_dir),
            ],
            kind="package_failed",
            what=f"packaging {change.chart_path}",
        )

    def upload(self, commit: str) -> Result[None, ReleaseError]:
        cfg = self._config
        return self._run(
            [
                "upload",
                "--owner",
                cfg.owner,
                "--git-repo",
                cfg.repo,
                "--commit",
                commit,
                "--package-path",
                str(cfg.packages_dir),
                "--skip-existing",
            ],
            kind="publish_failed",
            what="publishing charts",
        )

    def index(self) -> Result[None, ReleaseError]:
        cfg = self._config
        return self._run(
            [
                "index",
                "--owner",
                cfg.owner,
                "--git-repo",
                cfg.repo,
                "--charts-repo",
                cfg.chart_repo_url,
                "--package-path",
                str(cfg.packages_dir),
                "--index-path",
                str(cfg.index_dir / "index.yaml"),
                "--push",
            ],
            kind="index_failed",
            what="updating chart index",
        )

    def _run(self, args: list[str], *, kind: ReleaseErrorKind, what: str) -> Result[None, ReleaseError]:
        token = self._config.token
        result = run_logged(
            [str(self.cr), *args],
            cwd=self._config.workspace,
            sink=self._console.debug,
            env=env_with({"CR_TOKEN": token} if token else {}),
        )
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind=kind,
                    message=f"{what} failed: {result.error}",
                    hint=_tail(result.error),
                )
            )
        return Ok(None)


def _tail(error: ProcessError) -> str | None:
    text = (error.stderr or error.stdout).strip()
    if not text:
        return None
    return text.splitlines()[-1]
