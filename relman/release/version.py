from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum

from relman.core.result import Err, Ok, Result

__all__ = [
    "IncrementSeverity",
    "MalformedVersion",
    "SemVer",
    "compare_severity",
    "parse_version",
]


_DIGITS_RE = re.compile(r"[0-9]+")


class IncrementSeverity(IntEnum):
    """Magnitude of a detected change; ordered so max() gives the worst."""

    PATCH = 0
    MINOR = 1
    MAJOR = 2

    def __str__(self) -> str:
        return self.name.lower()

    # IntEnum formats as the integer in f-strings otherwise
    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)


@dataclass(frozen=True, slots=True)
class MalformedVersion:
    value: str
    reason: str

    def __str__(self) -> str:
        return f"invalid version format: {self.value!r} ({self.reason})"


@dataclass(frozen=True, slots=True, order=True)
class SemVer:
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(value: str) -> Result[SemVer, MalformedVersion]:
    """Parse ``[v]MAJOR.MINOR.PATCH[.anything]``.

    Segments past the third are ignored; the first three must be plain
    base-10 digits.
    """
    s = value.removeprefix("v")
    parts = s.split(".")
    if len(parts) < 3:
        return Err(MalformedVersion(value=value, reason="expected major.minor.patch"))

    numbers: list[int] = []
    for label, part in zip(("major", "minor", "patch"), parts[:3]):
        if _DIGITS_RE.fullmatch(part) is None:
            return Err(MalformedVersion(value=value, reason=f"{label} is not a number: {part!r}"))
        numbers.append(int(part))

    return Ok(SemVer(numbers[0], numbers[1], numbers[2]))


def compare_severity(old: str, new: str) -> IncrementSeverity:
    """Classify the change from old to new.

    Unparseable input on either side (e.g. the ``latest`` alias) counts as
    a patch-level change. A minor increase counts as MINOR even when the
    major went down.
    """
    old_r = parse_version(old)
    new_r = parse_version(new)
    if isinstance(old_r, Err) or isinstance(new_r, Err):
        return IncrementSeverity.PATCH

    o = old_r.value
    n = new_r.value
    if n.major > o.major:
        return IncrementSeverity.MAJOR
    if n.minor > o.minor:
        return IncrementSeverity.MINOR
    return IncrementSeverity.PATCH
