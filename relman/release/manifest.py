"""Release manifest persistence.

The manifest is a JSON object::

    {
      "release_version": "v202452.0.1",
      "services": [
        {"name": "api", "image": "acme/api", "version": "1.4.2"}
      ]
    }

It is always rewritten in full, pretty-printed with 2-space indentation.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from relman.core.result import Err, Ok, Result
from relman.core.structured import as_str_dict, get_list, get_raw_str
from relman.platform.files import atomic_write_text

__all__ = [
    "Manifest",
    "ManifestUnreadable",
    "ManifestUnwritable",
    "Service",
    "load_manifest",
    "manifest_to_json",
    "save_manifest",
]


@dataclass(slots=True)
class Service:
    """A tracked service. ``version`` is updated in place by the scanner."""

    name: str
    image: str
    version: str


def _empty_services() -> list[Service]:
    return []


@dataclass(slots=True)
class Manifest:
    release_version: str = ""
    services: list[Service] = field(default_factory=_empty_services)


@dataclass(frozen=True, slots=True)
class ManifestUnreadable:
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"cannot read manifest {self.path}: {self.reason}"


@dataclass(frozen=True, slots=True)
class ManifestUnwritable:
    path: Path
    reason: str

    def __str__(self) -> str:
        return f"cannot write manifest {self.path}: {self.reason}"


def manifest_to_json(manifest: Manifest) -> str:
    payload: dict[str, object] = {
        "release_version": manifest.release_version,
        "services": [
            {"name": s.name, "image": s.image, "version": s.version} for s in manifest.services
        ],
    }
    return json.dumps(payload, indent=2) + "\n"


def load_manifest(path: Path) -> Result[Manifest, ManifestUnreadable]:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return Err(ManifestUnreadable(path=path, reason=str(e)))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ManifestUnreadable(path=path, reason=f"invalid JSON: {e}"))

    data = as_str_dict(obj)
    if data is None:
        return Err(ManifestUnreadable(path=path, reason="root must be a JSON object"))

    release_version = data.get("release_version")
    if release_version is None:
        release_version = ""
    if not isinstance(release_version, str):
        return Err(ManifestUnreadable(path=path, reason="release_version must be a string"))

    raw_services = get_list(data, "services")
    if raw_services is None:
        if "services" in data and data["services"] is not None:
            return Err(ManifestUnreadable(path=path, reason="services must be a list"))
        raw_services = []

    services: list[Service] = []
    for index, item in enumerate(raw_services):
        entry = as_str_dict(item)
        if entry is None:
            return Err(ManifestUnreadable(path=path, reason=f"services[{index}] must be an object"))
        name = get_raw_str(entry, "name")
        image = get_raw_str(entry, "image")
        version = get_raw_str(entry, "version")
        if name is None or image is None or version is None:
            return Err(
                ManifestUnreadable(
                    path=path,
                    reason=f"services[{index}] needs string name, image and version",
                )
            )
        services.append(Service(name=name, image=image, version=version))

    return Ok(Manifest(release_version=release_version, services=services))


def save_manifest(path: Path, manifest: Manifest) -> Result[None, ManifestUnwritable]:
    try:
        atomic_write_text(path, manifest_to_json(manifest), encoding="utf-8")
    except OSError as e:
        return Err(ManifestUnwritable(path=path, reason=str(e)))
    return Ok(None)
