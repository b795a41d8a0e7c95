from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from relman.core.result import Err, Result
from relman.output.console import ConsoleProtocol, Style
from relman.registry.tags import RegistryUnavailable
from relman.release.manifest import Manifest
from relman.release.version import IncrementSeverity, compare_severity

__all__ = ["LatestTagSource", "ScanResult", "ServiceUpdate", "scan_updates"]


class LatestTagSource(Protocol):
    def latest_tag(self, image: str) -> Result[str | None, RegistryUnavailable]: ...


@dataclass(frozen=True, slots=True)
class ServiceUpdate:
    name: str
    old_version: str
    new_version: str
    severity: IncrementSeverity


@dataclass(frozen=True, slots=True)
class ScanResult:
    updates: tuple[ServiceUpdate, ...] = ()
    skipped: tuple[RegistryUnavailable, ...] = ()
    max_severity: IncrementSeverity = IncrementSeverity.PATCH

    @property
    def updated(self) -> bool:
        return bool(self.updates)


def scan_updates(
    manifest: Manifest,
    *,
    resolver: LatestTagSource,
    console: ConsoleProtocol,
) -> ScanResult:
    """Check every service in manifest order and apply newer tags in place.

    A registry failure skips that one service. The returned max_severity is
    PATCH when nothing changed.
    """
    updates: list[ServiceUpdate] = []
    skipped: list[RegistryUnavailable] = []
    max_severity = IncrementSeverity.PATCH

    for service in manifest.services:
        console.print(f"checking {service.name} (current: {service.version})")
        latest = resolver.latest_tag(service.image)
        if isinstance(latest, Err):
            console.warning(f"skipping {service.name}: {latest.error}")
            skipped.append(latest.error)
            continue

        tag = latest.value
        if not tag or tag == service.version:
            console.print(f"no update for {service.name}", Style.DIM)
            continue

        severity = compare_severity(service.version, tag)
        console.info(f"found update for {service.name}: {service.version} -> {tag} ({severity})")
        updates.append(
            ServiceUpdate(
                name=service.name,
                old_version=service.version,
                new_version=tag,
                severity=severity,
            )
        )
        max_severity = max(max_severity, severity)
        service.version = tag

    return ScanResult(updates=tuple(updates), skipped=tuple(skipped), max_severity=max_severity)
