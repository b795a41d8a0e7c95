"""Process exit codes.

A release run is a batch job driven by CI or an operator shell, so the exit
status is its only machine-readable outcome. The values must stay stable:
- 0: Success, including "no updates found"
- 1: User error (bad arguments, invalid config)
- 2: Environment error (git missing, not a repository)
- 3: Version-control error (add, commit, tag or tag listing failed)
- 5: I/O error (manifest unreadable or unwritable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VCS_ERROR = 3
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
