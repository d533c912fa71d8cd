from __future__ import annotations

import traceback
from pathlib import Path

import typer

from chartpub.charts.manifest import manifest_reader
from chartpub.cli.context import CLIContext, build_context
from chartpub.core.config import ConfigOverrides
from chartpub.core.errors import ErrorCode
from chartpub.core.result import Err, Ok, Result
from chartpub.git.repository import Repository
from chartpub.output.console import ConsoleProtocol, Style
from chartpub.release.errors import ReleaseError, ReleaseErrorKind
from chartpub.release.gh import ensure_gh_available, lookup_release
from chartpub.release.orchestrator import RunReport, run_release
from chartpub.release.releaser import ChartReleaser
from chartpub.release.timeouts import TOOL_DOWNLOAD_TIMEOUT_SECONDS
from chartpub.tools.chart_releaser import ensure_chart_releaser
from chartpub.tools.http import RealHttpClient

_EXIT_CODES: dict[ReleaseErrorKind, ErrorCode] = {
    "config": ErrorCode.CONFIG_ERROR,
    "tool_missing": ErrorCode.ENV_ERROR,
    "gh_failed": ErrorCode.ENV_ERROR,
    "tool_download_failed": ErrorCode.NETWORK_ERROR,
    "manifest_invalid": ErrorCode.RELEASE_ERROR,
    "git_failed": ErrorCode.RELEASE_ERROR,
    "workdir_failed": ErrorCode.RELEASE_ERROR,
    "package_failed": ErrorCode.RELEASE_ERROR,
    "publish_failed": ErrorCode.RELEASE_ERROR,
    "index_failed": ErrorCode.RELEASE_ERROR,
}


def exit_code_for(error: ReleaseError) -> ErrorCode:
    return _EXIT_CODES.get(error.kind, ErrorCode.RELEASE_ERROR)


def _print_release_error(console: ConsoleProtocol, error: ReleaseError) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def _print_report(console: ConsoleProtocol, report: RunReport) -> None:
    if report.dry_run:
        console.print("dry run: no tags, packages or releases were created", Style.DIM)
    if report.tags_created:
        console.print(f"tags created: {', '.join(report.tags_created)}", Style.DIM)
    if report.packaged:
        console.print(f"charts packaged: {', '.join(report.packaged)}", Style.DIM)


def _execute(ctx: CLIContext) -> Result[RunReport, ReleaseError]:
    config = ctx.config
    console = ctx.console

    gh_ok = ensure_gh_available()
    if isinstance(gh_ok, Err):
        return gh_ok

    repo = Repository(config.workspace)
    commit = config.git_ref
    if commit is None:
        head = repo.head_sha()
        if isinstance(head, Err):
            return Err(ReleaseError(kind="git_failed", message=head.error.message))
        commit = head.value

    if config.cr_path is not None:
        cr = config.cr_path
    else:
        fetched = ensure_chart_releaser(
            version=config.cr_version,
            cache_dir=config.tool_cache_dir,
            http=RealHttpClient(timeout=TOOL_DOWNLOAD_TIMEOUT_SECONDS),
        )
        if isinstance(fetched, Err):
            return fetched
        cr = fetched.value
    console.debug(f"using cr: {cr}")

    changed = repo.latest_changed_paths()
    if isinstance(changed, Err):
        return Err(
            ReleaseError(
                kind="git_failed",
                message="cannot list files changed by the latest commit",
                hint=changed.error.message,
            )
        )

    return run_release(
        config=config,
        commit=commit,
        changed_paths=changed.value,
        read_manifest=manifest_reader(config.workspace),
        tags=repo,
        lookup_release=lambda tag: lookup_release(
            workspace_root=config.workspace,
            repo=config.slug,
            tag=tag,
            token=config.token,
        ),
        tool=ChartReleaser(cr=cr, config=config, console=console),
        console=console,
    )


def release(
    workspace: Path | None = typer.Option(
        None, "--workspace", help="Repository checkout (default: $GITHUB_WORKSPACE)."
    ),
    chart_dir: str | None = typer.Option(
        None, "--chart-dir", help="Directory holding the charts (default: charts)."
    ),
    chart_repo_url: str | None = typer.Option(
        None, "--chart-repo-url", help="Public chart repository URL."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report what would happen without changing anything."
    ),
    cr_version: str | None = typer.Option(
        None, "--cr-version", help="chart-releaser version to fetch."
    ),
    cr_path: Path | None = typer.Option(
        None, "--cr-path", help="Use this cr binary instead of fetching one."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show tool output and skip decisions."
    ),
) -> None:
    """Tag, package and publish the charts changed by the latest commit."""
    ctx = build_context(
        ConfigOverrides(
            workspace=workspace,
            chart_dir=chart_dir,
            chart_repo_url=chart_repo_url,
            dry_run=True if dry_run else None,
            cr_version=cr_version,
            cr_path=cr_path,
            verbose=True if verbose else None,
        )
    )
    console = ctx.console

    try:
        result = _execute(ctx)
    except Exception as e:  # noqa: BLE001
        console.error(f"Error during release run! {e}")
        console.print(traceback.format_exc(), Style.DIM)
        raise typer.Exit(code=int(ErrorCode.RELEASE_ERROR))

    match result:
        case Err(error):
            _print_release_error(console, error)
            raise typer.Exit(code=int(exit_code_for(error)))
        case Ok(report):
            _print_report(console, report)
            console.success("Release run completed successfully")
