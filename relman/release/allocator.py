"""Aggregate release version allocation.

Release tags look like ``v<ISO year><ISO week>.<minor>.<patch>``, e.g.
``v202452.1.3``. The week prefix is the bucket; within a bucket the
``(minor, patch)`` pair only ever grows. Nothing is stored besides the git
tags themselves, so the allocator derives the next pair from the tag list:

- no tag in the current bucket: start from ``(0, -1)``
- PATCH scan: ``patch + 1``
- MINOR or MAJOR scan: ``minor + 1`` and ``patch = 0``

Tags from other weeks never influence the result.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date

from relman.release.version import IncrementSeverity

__all__ = ["bucket_versions", "next_release_version", "week_prefix"]


_NUMBER_RE = re.compile(r"[0-9]+")


def week_prefix(today: date) -> str:
    iso = today.isocalendar()
    return f"v{iso.year}{iso.week:02d}"


def bucket_versions(tags: Iterable[str], prefix: str) -> list[tuple[int, int]]:
    """Return the sorted ``(minor, patch)`` pairs of tags in the bucket.

    Tags in the bucket without two numeric components after the prefix are
    ignored.
    """
    versions: list[tuple[int, int]] = []
    for raw in tags:
        tag = raw.strip()
        if not tag.startswith(prefix + "."):
            continue
        parts = tag.split(".")
        if len(parts) < 3:
            continue
        minor_s, patch_s = parts[1], parts[2]
        if _NUMBER_RE.fullmatch(minor_s) is None or _NUMBER_RE.fullmatch(patch_s) is None:
            continue
        versions.append((int(minor_s), int(patch_s)))
    versions.sort()
    return versions


def next_release_version(
    severity: IncrementSeverity,
    tags: Iterable[str],
    *,
    today: date,
) -> str:
    prefix = week_prefix(today)
    versions = bucket_versions(tags, prefix)

    minor, patch = versions[-1] if versions else (0, -1)
    if severity >= IncrementSeverity.MINOR:
        minor += 1
        patch = 0
    else:
        patch += 1

    return f"{prefix}.{minor}.{patch}"
