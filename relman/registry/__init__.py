"""Container registry access: HTTP transport and tag resolution."""

from relman.registry.http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from relman.registry.tags import (
    RegistryUnavailable,
    TagResolver,
    repository_path,
    select_latest_tag,
)

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    "RegistryUnavailable",
    "TagResolver",
    "repository_path",
    "select_latest_tag",
]
