"""Git operations used by a release run.

Usage:
    from relman.git import Repository

    repo = Repository(Path.cwd())
    tags = repo.list_tags()
"""

from relman.git.repository import (
    NotARepository,
    Repository,
    VersionControl,
    VersionControlFailure,
)

__all__ = [
    "NotARepository",
    "Repository",
    "VersionControl",
    "VersionControlFailure",
]
