"""Tests for git/repository.py."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from chartpub.core.result import Err, Ok, Result
from chartpub.git import repository as repo_mod
from chartpub.git.repository import Repository
from chartpub.platform.process import ProcessError
from chartpub.platform.process import run as run_process


def _fail(cmd: list[str], returncode: int, stderr: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=returncode, stdout="", stderr=stderr))


class FakeGit:
    """Replays canned results keyed on the git subcommand."""

    def __init__(self, responses: dict[str, Result[str, ProcessError]]) -> None:
        self.responses = responses
        self.calls: list[list[str]] = []

    def __call__(
        self, cmd: list[str], *, cwd: Path, timeout: float | None = None
    ) -> Result[str, ProcessError]:
        del cwd, timeout
        self.calls.append(cmd)
        # cmd = ["git", "-C", path, subcommand, ...]
        return self.responses[cmd[3]]


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    return Repository(tmp_path)


class TestLatestChangedPaths:
    def test_lists_paths(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"diff-tree": Ok("charts/foo/Chart.yaml\0README.md\0")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.latest_changed_paths()

        assert result == Ok(["charts/foo/Chart.yaml", "README.md"])
        cmd = fake.calls[0]
        assert "-z" in cmd
        assert "--root" in cmd
        assert "--diff-filter=d" in cmd
        assert cmd[-1] == "HEAD"

    def test_error(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"diff-tree": _fail(["git"], 128, "fatal: bad object HEAD")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.latest_changed_paths()

        assert isinstance(result, Err)
        assert result.error.message == "fatal: bad object HEAD"
        assert result.error.returncode == 128

    def test_unusual_names_are_not_quoted(
        self, monkeypatch: pytest.MonkeyPatch, repo: Repository
    ) -> None:
        fake = FakeGit({"diff-tree": Ok("charts/f\u00f6o/Chart.yaml\0charts/a b/Chart.yaml\0")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.latest_changed_paths()

        assert result == Ok(["charts/f\u00f6o/Chart.yaml", "charts/a b/Chart.yaml"])


class TestHasTag:
    def test_present(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"ls-remote": Ok("abc123\trefs/tags/foo-1.0.0\n")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        assert repo.has_tag("foo-1.0.0") == Ok(True)
        assert fake.calls[0][-2:] == ["origin", "refs/tags/foo-1.0.0"]

    def test_absent_on_exit_2(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"ls-remote": _fail(["git"], 2)})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        assert repo.has_tag("foo-1.0.0") == Ok(False)

    def test_other_failure_is_error(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"ls-remote": _fail(["git"], 128, "fatal: could not read from remote")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.has_tag("foo-1.0.0")

        assert isinstance(result, Err)
        assert "could not read" in result.error.message


class TestCreateTag:
    def test_tags_and_pushes(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"tag": Ok(""), "push": Ok("")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.create_tag("foo-1.0.0", "deadbeef")

        assert result == Ok(None)
        assert fake.calls[0][3:] == ["tag", "-f", "foo-1.0.0", "deadbeef"]
        assert fake.calls[1][3:] == ["push", "origin", "refs/tags/foo-1.0.0"]

    def test_defaults_to_head(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"tag": Ok(""), "push": Ok("")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        repo.create_tag("foo-1.0.0")

        assert fake.calls[0][3:] == ["tag", "-f", "foo-1.0.0", "HEAD"]

    def test_tag_failure_skips_push(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"tag": _fail(["git"], 128, "fatal: tag 'foo-1.0.0' already exists")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.create_tag("foo-1.0.0")

        assert isinstance(result, Err)
        assert result.error.command == "tag"
        assert len(fake.calls) == 1

    def test_push_failure(self, monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
        fake = FakeGit({"tag": Ok(""), "push": _fail(["git"], 1, "rejected")})
        monkeypatch.setattr(repo_mod, "run_process", fake)

        result = repo.create_tag("foo-1.0.0")

        assert isinstance(result, Err)
        assert result.error.command == "push"


def test_head_sha(monkeypatch: pytest.MonkeyPatch, repo: Repository) -> None:
    monkeypatch.setattr(repo_mod, "run_process", FakeGit({"rev-parse": Ok("f" * 40 + "\n")}))

    assert repo.head_sha() == Ok("f" * 40)


def _git(path: Path, *args: str) -> None:
    result = run_process(["git", "-C", str(path), *args], cwd=path)
    assert isinstance(result, Ok), result


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
class TestWithRealGit:
    @pytest.fixture
    def workspace(self, tmp_path: Path) -> Path:
        remote = tmp_path / "remote.git"
        work = tmp_path / "work"
        remote.mkdir()
        work.mkdir()
        _git(remote, "init", "--bare", "-q")
        _git(work, "init", "-q")
        (work / "charts" / "föo").mkdir(parents=True)
        (work / "charts" / "föo" / "Chart.yaml").write_text("name: foo\nversion: 1.0.0\n", encoding="utf-8")
        _git(work, "add", ".")
        _git(
            work,
            "-c",
            "user.name=test",
            "-c",
            "user.email=test@example.com",
            "commit",
            "-q",
            "-m",
            "init",
        )
        _git(work, "remote", "add", "origin", str(remote))
        return work

    def test_changed_paths_keep_non_ascii_names(self, workspace: Path) -> None:
        result = Repository(workspace).latest_changed_paths()

        assert result == Ok(["charts/föo/Chart.yaml"])

    def test_retag_after_failed_push(self, workspace: Path, tmp_path: Path) -> None:
        repo = Repository(workspace)
        _git(workspace, "remote", "set-url", "origin", str(tmp_path / "missing.git"))

        first = repo.create_tag("foo-1.0.0")
        assert isinstance(first, Err)
        assert first.error.command == "push"

        _git(workspace, "remote", "set-url", "origin", str(tmp_path / "remote.git"))
        assert repo.has_tag("foo-1.0.0") == Ok(False)

        assert repo.create_tag("foo-1.0.0") == Ok(None)
        assert repo.has_tag("foo-1.0.0") == Ok(True)
