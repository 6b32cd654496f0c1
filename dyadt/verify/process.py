"""Process runners for command and git evidence."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass


@dataclass(frozen=True)
class ExecResult:
    """Result envelope for subprocess execution."""

    argv: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    def detail(self) -> str:
        return (self.stderr or self.stdout).strip()


def run_command(argv: list[str]) -> ExecResult:
    """
    Run a command without a shell and capture its output.

    No timeout is applied; the call returns when the process exits.

    Raises:
        OSError: If the process cannot be started (e.g. executable not found)
    """
    completed = subprocess.run(
        argv,
        capture_output=True,
        text=True,
        errors="replace",
        check=False,
    )
    return ExecResult(
        argv=tuple(argv),
        returncode=completed.returncode,
        stdout=completed.stdout,
        stderr=completed.stderr,
    )


def run_git(args: list[str], *, repo_path: str, git_executable: str = "git") -> ExecResult:
    """Run a git command scoped to `repo_path` via `git -C`."""
    return run_command([git_executable, "-C", repo_path, *args])
