"""Release run sequencing.

A run is: load the manifest, scan the registry, write the manifest, commit,
allocate the next aggregate version from the tag list, write the manifest
again, commit, tag. Any failure stops the run where it is; commits that were
already made stay in history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path

from relman.core.config import GitConfig
from relman.core.result import Err, Ok, Result
from relman.git.repository import VersionControl, VersionControlFailure
from relman.output.console import ConsoleProtocol, Style
from relman.release.allocator import next_release_version
from relman.release.errors import ReleaseError
from relman.release.manifest import ManifestUnreadable, load_manifest, save_manifest
from relman.release.scanner import LatestTagSource, ScanResult, scan_updates
from relman.release.version import IncrementSeverity

__all__ = ["ReleaseOutcome", "check_updates", "preview_next_version", "run_release"]


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    """What a release run did.

    ``version`` is None when no service changed (no files written, no git
    commands run).
    """

    scan: ScanResult
    version: str | None
    dry_run: bool = False

    @property
    def released(self) -> bool:
        return self.version is not None


def check_updates(
    *,
    manifest_path: Path,
    resolver: LatestTagSource,
    console: ConsoleProtocol,
) -> Result[ScanResult, ManifestUnreadable]:
    """Scan without writing anything."""
    loaded = load_manifest(manifest_path)
    if isinstance(loaded, Err):
        return loaded
    return Ok(scan_updates(loaded.value, resolver=resolver, console=console))


def preview_next_version(
    *,
    git: VersionControl,
    severity: IncrementSeverity,
    today: date | None = None,
) -> Result[str, VersionControlFailure]:
    tags = git.list_tags()
    if isinstance(tags, Err):
        return tags
    return Ok(next_release_version(severity, tags.value, today=today or date.today()))


def _commit(
    *,
    git: VersionControl,
    path: Path,
    message: str,
    console: ConsoleProtocol,
    dry_run: bool,
) -> Result[None, VersionControlFailure]:
    console.print(f"git add {path.name}", Style.DIM)
    console.print(f'git commit -m "{message}"', Style.DIM)
    if dry_run:
        return Ok(None)
    return git.commit_path(path, message)


def run_release(
    *,
    manifest_path: Path,
    git: VersionControl,
    resolver: LatestTagSource,
    console: ConsoleProtocol,
    git_config: GitConfig | None = None,
    today: date | None = None,
    dry_run: bool = False,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Run one release transaction against a local repository.

    Args:
        manifest_path: Manifest file inside the repository
        git: Version-control collaborator (tag listing, commit, tag)
        resolver: Latest-tag source for each service image
        console: Progress output
        git_config: Commit messages
        today: Date used for the week bucket (defaults to today)
        dry_run: Scan and allocate only; print git commands without running
            them and leave the manifest untouched

    Returns:
        Ok(ReleaseOutcome) on success or no-op, Err(ReleaseError) on the
        first fatal failure.
    """
    git_config = git_config or GitConfig()

    loaded = load_manifest(manifest_path)
    if isinstance(loaded, Err):
        return loaded
    manifest = loaded.value

    console.header(f"Scanning {len(manifest.services)} service(s)")
    scan = scan_updates(manifest, resolver=resolver, console=console)
    if not scan.updated:
        console.success("no updates found")
        return Ok(ReleaseOutcome(scan=scan, version=None, dry_run=dry_run))

    work_tree = git.require_work_tree()
    if isinstance(work_tree, Err):
        return work_tree

    console.header("Recording service updates")
    if not dry_run:
        saved = save_manifest(manifest_path, manifest)
        if isinstance(saved, Err):
            return saved

    committed = _commit(
        git=git,
        path=manifest_path,
        message=git_config.update_message,
        console=console,
        dry_run=dry_run,
    )
    if isinstance(committed, Err):
        return committed

    tags = git.list_tags()
    if isinstance(tags, Err):
        return tags
    version = next_release_version(scan.max_severity, tags.value, today=today or date.today())
    console.header(f"Releasing {version} ({scan.max_severity} bump)")

    manifest.release_version = version
    if not dry_run:
        saved = save_manifest(manifest_path, manifest)
        if isinstance(saved, Err):
            return saved

    committed = _commit(
        git=git,
        path=manifest_path,
        message=git_config.release_message_for(version),
        console=console,
        dry_run=dry_run,
    )
    if isinstance(committed, Err):
        return committed

    console.print(f"git tag {version}", Style.DIM)
    if not dry_run:
        tagged = git.create_tag(version)
        if isinstance(tagged, Err):
            return tagged

    if dry_run:
        console.info(f"dry run: would release {version}; nothing was written")
    else:
        console.success(f"release {version} created locally")
        console.print("push manually: git push && git push --tags", Style.DIM)

    return Ok(ReleaseOutcome(scan=scan, version=version, dry_run=dry_run))
