"""Subprocess execution with Result-based error handling.

Output is decoded as UTF-8 with undecodable bytes replaced. Two flavours
are provided:
- ``run`` captures output, for short queries (git, gh)
- ``run_streaming`` / ``run_logged`` forward output line by line while the
  process runs, for long tool invocations (cr package/upload/index)

Usage:
    result = run(["git", "rev-parse", "HEAD"], cwd=workspace)
    match result:
        case Ok(stdout):
            print(stdout.strip())
        case Err(error):
            print(f"Failed: {error.stderr}")

    result = run_logged(["cr", "package", "charts/foo"], cwd=workspace, sink=console.debug)
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from chartpub.core.result import Err, Ok, Result

__all__ = ["ProcessError", "StreamingProcess", "env_with", "run", "run_logged", "run_streaming"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never ran).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        """Format error for display."""
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


class StreamingProcess:
    """A running process whose merged stdout/stderr is consumed lazily.

    Iterate ``lines()`` to completion, then call ``wait()`` for the status.
    Only the last lines are kept for error reporting.
    """

    _TAIL_LINES = 20

    def __init__(self, cmd: list[str], proc: subprocess.Popen[str]) -> None:
        self._cmd = tuple(cmd)
        self._proc = proc
        self._tail: list[str] = []

    def lines(self) -> Iterator[str]:
        stream = self._proc.stdout
        if stream is None:
            return
        for raw in stream:
            line = raw.rstrip("\r\n")
            self._tail.append(line)
            if len(self._tail) > self._TAIL_LINES:
                self._tail.pop(0)
            yield line

    def wait(self) -> Result[None, ProcessError]:
        # Drain anything the caller did not read so the child cannot block on a full pipe.
        for _ in self.lines():
            pass
        returncode = self._proc.wait()
        if self._proc.stdout is not None:
            self._proc.stdout.close()
        if returncode != 0:
            return Err(
                ProcessError(
                    command=self._cmd,
                    returncode=returncode,
                    stdout="\n".join(self._tail),
                    stderr="",
                )
            )
        return Ok(None)


def run_streaming(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[StreamingProcess, ProcessError]:
    """Start a command with stdout and stderr merged into one line stream.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).

    Returns:
        Ok(StreamingProcess) once started, Err(ProcessError) if it cannot start.
    """
    try:
        proc = subprocess.Popen(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=str(e),
            )
        )
    return Ok(StreamingProcess(cmd, proc))


def run_logged(
    cmd: list[str],
    cwd: Path,
    sink: Callable[[str], None],
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Run a command to completion, feeding each output line to ``sink``.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        sink: Called once per output line, as the line arrives.
        env: Environment variables (uses current env if None).

    Returns:
        Ok(None) on exit 0, Err(ProcessError) otherwise.
    """
    started = run_streaming(cmd, cwd=cwd, env=env)
    if isinstance(started, Err):
        return started

    process = started.value
    for line in process.lines():
        sink(line)
    return process.wait()


def env_with(extra: dict[str, str]) -> dict[str, str] | None:
    """Current environment plus ``extra``; None (inherit) when nothing is added."""
    if not extra:
        return None
    env = os.environ.copy()
    env.update(extra)
    return env
