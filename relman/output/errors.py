"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from relman.core.errors import ErrorCode
from relman.git.repository import NotARepository, VersionControlFailure
from relman.output.console import Style
from relman.release.manifest import ManifestUnreadable, ManifestUnwritable

if TYPE_CHECKING:
    from relman.output.console import ConsoleProtocol
    from relman.release.errors import ReleaseError

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print a fatal release error with a hint where one helps."""
    match error:
        case ManifestUnreadable(path=path, reason=reason):
            console.error(f"cannot read manifest {path}")
            console.print(f"reason: {reason}", Style.DIM)
        case ManifestUnwritable(path=path, reason=reason):
            console.error(f"cannot write manifest {path}")
            console.print(f"reason: {reason}", Style.DIM)
        case NotARepository(path=path):
            console.error(f"not a git repository: {path}")
            console.print(
                "hint: nothing was written; run from the repository root or pass --repo",
                Style.DIM,
            )
        case VersionControlFailure(command=command, message=message, returncode=rc):
            console.error(f"git {command} failed (exit {rc})")
            console.print(message, Style.DIM)
            console.print(
                "hint: commits made before this step are kept; inspect `git log` before retrying",
                Style.DIM,
            )


def release_error_exit_code(error: ReleaseError) -> int:
    match error:
        case ManifestUnreadable() | ManifestUnwritable():
            return int(ErrorCode.IO_ERROR)
        case NotARepository():
            return int(ErrorCode.ENV_ERROR)
        case VersionControlFailure():
            return int(ErrorCode.VCS_ERROR)
