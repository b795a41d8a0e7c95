"""Tests for relman.release.orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

import pytest

from relman.core.config import GitConfig
from relman.core.result import Err, Ok, Result
from relman.git.repository import NotARepository, VersionControlFailure
from relman.output.console import MockConsole
from relman.registry.tags import RegistryUnavailable
from relman.release.manifest import (
    Manifest,
    ManifestUnreadable,
    ManifestUnwritable,
    Service,
    load_manifest,
    save_manifest,
)
from relman.release.errors import ReleaseError
from relman.release.orchestrator import (
    ReleaseOutcome,
    check_updates,
    preview_next_version,
    run_release,
)
from relman.release.version import IncrementSeverity

WEEK_52 = date(2024, 12, 23)


class FakeResolver:
    def __init__(self, tags: dict[str, str | None]) -> None:
        self.tags = tags

    def latest_tag(self, image: str) -> Result[str | None, RegistryUnavailable]:
        return Ok(self.tags.get(image))


def _no_ops() -> list[tuple[str, ...]]:
    return []


@dataclass
class FakeGit:
    """Records operations; snapshots the manifest at each commit."""

    tags: list[str] = field(default_factory=list)
    fail_on: str | None = None
    is_repository: bool = True
    ops: list[tuple[str, ...]] = field(default_factory=_no_ops)
    committed: list[str] = field(default_factory=list)

    def _fail(self, command: str) -> Err[VersionControlFailure]:
        return Err(VersionControlFailure(command=command, message="boom", returncode=1))

    def require_work_tree(self) -> Result[None, NotARepository]:
        if not self.is_repository:
            return Err(NotARepository(path=Path("/nowhere")))
        return Ok(None)

    def list_tags(self) -> Result[list[str], VersionControlFailure]:
        self.ops.append(("list_tags",))
        if self.fail_on == "list_tags":
            return self._fail("tag")
        return Ok(list(self.tags))

    def commit_path(self, path: Path, message: str) -> Result[None, VersionControlFailure]:
        self.ops.append(("commit", path.name, message))
        if self.fail_on == "commit":
            return self._fail("commit")
        self.committed.append(path.read_text(encoding="utf-8"))
        return Ok(None)

    def create_tag(self, name: str) -> Result[None, VersionControlFailure]:
        self.ops.append(("tag", name))
        if self.fail_on == "tag":
            return self._fail(f"tag {name}")
        self.tags.append(name)
        return Ok(None)


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    path = tmp_path / "release_manifest.json"
    save_manifest(
        path,
        Manifest(
            release_version="v202452.0.0",
            services=[
                Service(name="web", image="nginx", version="1.27.0"),
                Service(name="api", image="acme/api", version="v2.3.1"),
            ],
        ),
    )
    return path


def _release(
    manifest_path: Path,
    git: FakeGit,
    tags: dict[str, str | None],
    *,
    dry_run: bool = False,
    console: MockConsole | None = None,
) -> Result[ReleaseOutcome, ReleaseError]:
    return run_release(
        manifest_path=manifest_path,
        git=git,
        resolver=FakeResolver(tags),
        console=console or MockConsole(),
        git_config=GitConfig(),
        today=WEEK_52,
        dry_run=dry_run,
    )


class TestRunRelease:
    def test_full_sequence(self, manifest_path: Path) -> None:
        git = FakeGit(tags=["v202452.0.0"])

        result = _release(manifest_path, git, {"nginx": "1.27.1", "acme/api": "v2.3.1"})

        assert isinstance(result, Ok)
        assert git.ops == [
            ("commit", "release_manifest.json", "chore: update services to latest versions"),
            ("list_tags",),
            ("commit", "release_manifest.json", "chore: release v202452.0.1"),
            ("tag", "v202452.0.1"),
        ]
        loaded = load_manifest(manifest_path)
        assert isinstance(loaded, Ok)
        assert loaded.value.release_version == "v202452.0.1"
        assert loaded.value.services[0].version == "1.27.1"

    def test_first_commit_has_old_release_version(self, manifest_path: Path) -> None:
        git = FakeGit(tags=["v202452.0.0"])

        _release(manifest_path, git, {"nginx": "1.27.1"})

        assert '"release_version": "v202452.0.0"' in git.committed[0]
        assert '"version": "1.27.1"' in git.committed[0]
        assert '"release_version": "v202452.0.0"' not in git.committed[1]

    def test_minor_update_bumps_minor(self, manifest_path: Path) -> None:
        git = FakeGit(tags=["v202452.0.0", "v202452.0.1"])

        result = _release(manifest_path, git, {"acme/api": "v2.4.0"})

        assert isinstance(result, Ok)
        assert result.value.version == "v202452.1.0"
        assert result.value.scan.max_severity == IncrementSeverity.MINOR

    def test_no_updates_has_no_side_effects(self, manifest_path: Path) -> None:
        before = manifest_path.read_bytes()
        mtime = manifest_path.stat().st_mtime_ns
        git = FakeGit()
        console = MockConsole()

        result = _release(manifest_path, git, {}, console=console)

        assert isinstance(result, Ok)
        assert result.value.released is False
        assert git.ops == []
        assert manifest_path.read_bytes() == before
        assert manifest_path.stat().st_mtime_ns == mtime
        assert console.find("no updates found")

    def test_second_run_is_a_no_op(self, manifest_path: Path) -> None:
        git = FakeGit()
        upstream = {"nginx": "1.27.1", "acme/api": "v2.3.1"}

        _release(manifest_path, git, upstream)
        ops_after_first = list(git.ops)
        result = _release(manifest_path, git, upstream)

        assert isinstance(result, Ok)
        assert result.value.released is False
        assert git.ops == ops_after_first

    def test_outside_a_repository_with_updates_writes_nothing(self, manifest_path: Path) -> None:
        before = manifest_path.read_bytes()
        git = FakeGit(is_repository=False)

        result = _release(manifest_path, git, {"nginx": "1.27.1"})

        assert isinstance(result, Err)
        assert isinstance(result.error, NotARepository)
        assert git.ops == []
        assert manifest_path.read_bytes() == before

    def test_outside_a_repository_without_updates_is_a_no_op(self, manifest_path: Path) -> None:
        result = _release(manifest_path, FakeGit(is_repository=False), {})

        assert isinstance(result, Ok)
        assert result.value.released is False

    def test_unreadable_manifest(self, tmp_path: Path) -> None:
        git = FakeGit()

        result = _release(tmp_path / "missing.json", git, {"nginx": "2.0.0"})

        assert isinstance(result, Err)
        assert isinstance(result.error, ManifestUnreadable)
        assert git.ops == []

    def test_commit_failure_aborts(self, manifest_path: Path) -> None:
        git = FakeGit(fail_on="commit")

        result = _release(manifest_path, git, {"nginx": "1.27.1"})

        assert isinstance(result, Err)
        assert isinstance(result.error, VersionControlFailure)
        assert git.ops == [
            ("commit", "release_manifest.json", "chore: update services to latest versions")
        ]

    def test_tag_failure_keeps_prior_commits(self, manifest_path: Path) -> None:
        git = FakeGit(fail_on="tag")

        result = _release(manifest_path, git, {"nginx": "1.27.1"})

        assert isinstance(result, Err)
        assert [op[0] for op in git.ops] == ["commit", "list_tags", "commit", "tag"]
        assert len(git.committed) == 2

    def test_tag_listing_failure_aborts_before_second_write(self, manifest_path: Path) -> None:
        git = FakeGit(fail_on="list_tags")

        result = _release(manifest_path, git, {"nginx": "1.27.1"})

        assert isinstance(result, Err)
        loaded = load_manifest(manifest_path)
        assert isinstance(loaded, Ok)
        assert loaded.value.release_version == "v202452.0.0"
        assert loaded.value.services[0].version == "1.27.1"

    def test_unwritable_manifest(self, manifest_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import relman.release.orchestrator as orchestrator

        def fail_save(path: Path, _manifest: Manifest) -> Err[ManifestUnwritable]:
            return Err(ManifestUnwritable(path=path, reason="read-only file system"))

        monkeypatch.setattr(orchestrator, "save_manifest", fail_save)
        git = FakeGit()

        result = _release(manifest_path, git, {"nginx": "1.27.1"})

        assert isinstance(result, Err)
        assert isinstance(result.error, ManifestUnwritable)
        assert git.ops == []

    def test_dry_run_writes_nothing(self, manifest_path: Path) -> None:
        before = manifest_path.read_bytes()
        git = FakeGit(tags=["v202452.0.4"])
        console = MockConsole()

        result = _release(manifest_path, git, {"nginx": "1.27.1"}, dry_run=True, console=console)

        assert isinstance(result, Ok)
        assert result.value.version == "v202452.0.5"
        assert git.ops == [("list_tags",)]
        assert manifest_path.read_bytes() == before
        assert "git tag v202452.0.5" in console.messages

    def test_success_message_says_push_manually(self, manifest_path: Path) -> None:
        console = MockConsole()
        _release(manifest_path, FakeGit(), {"nginx": "1.27.1"}, console=console)

        assert console.find("release v202452.0.0 created locally")
        assert console.find("push manually")


class TestCheckUpdates:
    def test_reports_without_writing(self, manifest_path: Path) -> None:
        before = manifest_path.read_bytes()

        result = check_updates(
            manifest_path=manifest_path,
            resolver=FakeResolver({"acme/api": "v3.0.0"}),
            console=MockConsole(),
        )

        assert isinstance(result, Ok)
        assert result.value.max_severity == IncrementSeverity.MAJOR
        assert manifest_path.read_bytes() == before

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = check_updates(
            manifest_path=tmp_path / "missing.json",
            resolver=FakeResolver({}),
            console=MockConsole(),
        )
        assert isinstance(result, Err)


class TestPreviewNextVersion:
    def test_uses_tag_history(self) -> None:
        git = FakeGit(tags=["v202452.0.0", "v202452.0.1"])
        result = preview_next_version(git=git, severity=IncrementSeverity.MINOR, today=WEEK_52)
        assert result == Ok("v202452.1.0")

    def test_propagates_git_failure(self) -> None:
        git = FakeGit(fail_on="list_tags")
        result = preview_next_version(git=git, severity=IncrementSeverity.PATCH, today=WEEK_52)
        assert isinstance(result, Err)
