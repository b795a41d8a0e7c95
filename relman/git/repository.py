"""Git repository abstraction.

The release engine uses git for exactly three things: listing tags,
committing the manifest and creating the release tag. Nothing here talks to a
remote; publishing is left to the operator.

Usage:
    repo = Repository(Path("/path/to/repo"))

    match repo.list_tags():
        case Ok(tags):
            print(tags)
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from relman.core.result import Err, Ok, Result
from relman.platform.process import ProcessError
from relman.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0

__all__ = [
    "NotARepository",
    "Repository",
    "VersionControl",
    "VersionControlFailure",
]


@dataclass(frozen=True, slots=True)
class VersionControlFailure:
    """Error from a git operation.

    Attributes:
        command: The git subcommand line that failed (without "git")
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1

    def __str__(self) -> str:
        return f"git {self.command} failed (exit {self.returncode}): {self.message}"


@dataclass(frozen=True, slots=True)
class NotARepository:
    path: Path

    def __str__(self) -> str:
        return f"not a git repository: {self.path}"


class VersionControl(Protocol):
    """The version-control operations a release run consumes."""

    def require_work_tree(self) -> Result[None, NotARepository]: ...

    def list_tags(self) -> Result[list[str], VersionControlFailure]: ...

    def commit_path(self, path: Path, message: str) -> Result[None, VersionControlFailure]: ...

    def create_tag(self, name: str) -> Result[None, VersionControlFailure]: ...


class Repository:
    """Git repository rooted at ``path``.

    Attributes:
        path: Path to the repository root (working directory for git)
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if path is inside a git work tree."""
        result = self._run(["rev-parse", "--is-inside-work-tree"])
        match result:
            case Ok(stdout):
                return stdout.strip() == "true"
            case Err(_):
                return False

    def require_work_tree(self) -> Result[None, NotARepository]:
        if not self.exists():
            return Err(NotARepository(path=self.path))
        return Ok(None)

    def list_tags(self) -> Result[list[str], VersionControlFailure]:
        """Return every local tag name (``git tag``)."""
        result = self._run(["tag"])
        match result:
            case Err(e):
                return Err(self._failure("tag", e))
            case Ok(stdout):
                return Ok([line.strip() for line in stdout.splitlines() if line.strip()])

    def commit_path(self, path: Path, message: str) -> Result[None, VersionControlFailure]:
        """Stage one path and commit it with message."""
        rel = self._relative(path)
        add = self._run(["add", "--", rel])
        if isinstance(add, Err):
            return Err(self._failure(f"add {rel}", add.error))

        commit = self._run(["commit", "-m", message])
        if isinstance(commit, Err):
            e = commit.error
            message_text = e.stderr.strip() or e.stdout.strip()
            if not message_text:
                message_text = "configure git user.name/user.email, then retry"
            return Err(
                VersionControlFailure(
                    command="commit",
                    message=message_text,
                    returncode=e.returncode,
                )
            )
        return Ok(None)

    def create_tag(self, name: str) -> Result[None, VersionControlFailure]:
        """Create a lightweight tag on HEAD."""
        result = self._run(["tag", name])
        if isinstance(result, Err):
            return Err(self._failure(f"tag {name}", result.error))
        return Ok(None)

    def _relative(self, path: Path) -> str:
        try:
            return str(path.resolve().relative_to(self.path.resolve()))
        except ValueError:
            return str(path)

    def _failure(self, command: str, e: ProcessError) -> VersionControlFailure:
        return VersionControlFailure(
            command=command,
            message=e.stderr.strip() or f"git {command} failed",
            returncode=e.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        return run_process(
            ["git", "-C", str(self.path), *args],
            cwd=self.path,
            timeout=_GIT_TIMEOUT_SECONDS,
        )
