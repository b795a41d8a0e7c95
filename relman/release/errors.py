"""Fatal error types for a release run.

Recoverable conditions never reach this union: a MalformedVersion degrades
to PATCH severity and a RegistryUnavailable skips one service.
"""

from __future__ import annotations

from relman.git.repository import NotARepository, VersionControlFailure
from relman.release.manifest import ManifestUnreadable, ManifestUnwritable

__all__ = ["ReleaseError"]

ReleaseError = ManifestUnreadable | ManifestUnwritable | NotARepository | VersionControlFailure
