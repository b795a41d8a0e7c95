"""Typed configuration loading and access.

This module provides dataclasses for the relman.toml structure. Every key is
optional; a missing file means "all defaults".
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_int, get_str, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "ManifestConfig",
    "RegistryConfig",
    "load_config",
    "load_config_or_default",
    "CONFIG_FILE_NAME",
    "DEFAULT_MANIFEST_PATH",
    "DEFAULT_REGISTRY_URL",
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_NAMESPACE",
    "FLOATING_ALIAS",
    "UPDATE_COMMIT_MESSAGE",
    "RELEASE_COMMIT_MESSAGE",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

CONFIG_FILE_NAME = "relman.toml"
DEFAULT_MANIFEST_PATH = "release_manifest.json"

DEFAULT_REGISTRY_URL = "https://hub.docker.com"
DEFAULT_PAGE_SIZE = 5
# Images without a namespace segment are official images.
DEFAULT_NAMESPACE = "library"
FLOATING_ALIAS = "latest"

UPDATE_COMMIT_MESSAGE = "chore: update services to latest versions"
RELEASE_COMMIT_MESSAGE = "chore: release {version}"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    path: str = DEFAULT_MANIFEST_PATH


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Tag-listing registry settings.

    ``timeout`` is None by default: the registry call then waits as long as
    the transport does.
    """

    base_url: str = DEFAULT_REGISTRY_URL
    page_size: int = DEFAULT_PAGE_SIZE
    default_namespace: str = DEFAULT_NAMESPACE
    floating_alias: str = FLOATING_ALIAS
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    update_message: str = UPDATE_COMMIT_MESSAGE
    release_message: str = RELEASE_COMMIT_MESSAGE

    def release_message_for(self, version: str) -> str:
        return self.release_message.replace("{version}", version)


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    manifest: ManifestConfig = field(default_factory=ManifestConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        manifest: StrDict = get_table(data, "manifest") or {}
        registry: StrDict = get_table(data, "registry") or {}
        git: StrDict = get_table(data, "git") or {}

        page_size = get_int(registry, "page_size")
        if page_size is not None and page_size <= 0:
            raise ValueError(f"registry.page_size must be positive, got {page_size}")
        timeout = get_float(registry, "timeout")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"registry.timeout must be positive, got {timeout}")

        return cls(
            manifest=ManifestConfig(
                path=get_str(manifest, "path") or DEFAULT_MANIFEST_PATH,
            ),
            registry=RegistryConfig(
                base_url=(get_str(registry, "base_url") or DEFAULT_REGISTRY_URL).rstrip("/"),
                page_size=page_size or DEFAULT_PAGE_SIZE,
                default_namespace=get_str(registry, "default_namespace") or DEFAULT_NAMESPACE,
                floating_alias=get_str(registry, "floating_alias") or FLOATING_ALIAS,
                timeout=timeout,
            ),
            git=GitConfig(
                update_message=get_str(git, "update_message") or UPDATE_COMMIT_MESSAGE,
                release_message=get_str(git, "release_message") or RELEASE_COMMIT_MESSAGE,
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (UnicodeDecodeError, OSError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relman.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[Config, ConfigError]:
    """Load config if the file exists, otherwise return defaults.

    A file that exists but is invalid is still an error.
    """
    if not path.exists():
        return Ok(Config())
    return load_config(path)
