"""Latest-tag resolution against a Docker Hub style registry.

The registry lists tags most-recent first as ``{"results": [{"name": ...}]}``.
Registries usually include the floating ``latest`` alias near the top, and it
carries no ordering information, so the first concrete tag wins. The alias is
only returned when the page holds nothing else.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from relman.core.config import RegistryConfig
from relman.core.result import Err, Ok, Result
from relman.core.structured import as_obj_list, as_str_dict, get_raw_str
from relman.registry.http import HttpClient

__all__ = [
    "RegistryUnavailable",
    "TagResolver",
    "repository_path",
    "select_latest_tag",
]


@dataclass(frozen=True, slots=True)
class RegistryUnavailable:
    """The tag listing for one image could not be obtained.

    Attributes:
        image: Image reference as recorded in the manifest
        url: Endpoint that was queried
        status: HTTP status (0 for transport or decode failures)
        message: Human-readable reason
    """

    image: str
    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"registry returned {self.status} for {self.image}: {self.message}"
        return f"registry unavailable for {self.image}: {self.message}"


def repository_path(image: str, *, default_namespace: str) -> tuple[str, str]:
    """Split an image reference into (namespace, name).

    ``nginx`` -> (default_namespace, "nginx"); ``acme/api`` -> ("acme", "api").
    """
    namespace, sep, name = image.partition("/")
    if not sep:
        return (default_namespace, image)
    return (namespace, name)


def select_latest_tag(names: Sequence[str], *, floating_alias: str) -> str | None:
    """Pick the first concrete tag, in registry order.

    Returns None for an empty listing and the alias itself when the listing
    contains only the alias.
    """
    if not names:
        return None
    for name in names:
        if name != floating_alias:
            return name
    return names[0]


class TagResolver:
    """Resolve the latest concrete tag for an image.

    Attributes:
        config: Registry endpoint and selection settings
        client: HTTP transport
    """

    def __init__(self, config: RegistryConfig, client: HttpClient) -> None:
        self.config = config
        self.client = client

    def tags_url(self, image: str) -> str:
        namespace, name = repository_path(image, default_namespace=self.config.default_namespace)
        return (
            f"{self.config.base_url}/v2/repositories/"
            f"{quote(namespace, safe='')}/{quote(name, safe='/')}/tags"
            f"?page_size={self.config.page_size}"
        )

    def latest_tag(self, image: str) -> Result[str | None, RegistryUnavailable]:
        """Query the registry once and apply the selection policy.

        Returns:
            Ok(tag), Ok(None) when the registry lists no tags, or
            Err(RegistryUnavailable) on any transport, status or body error.
        """
        url = self.tags_url(image)
        response = self.client.get_json(url)
        if isinstance(response, Err):
            e = response.error
            return Err(RegistryUnavailable(image=image, url=url, status=e.status, message=e.message))

        raw_results = response.value.get("results")
        results = [] if raw_results is None else as_obj_list(raw_results)
        if results is None:
            return Err(
                RegistryUnavailable(
                    image=image, url=url, status=0, message="results is not a list"
                )
            )

        names: list[str] = []
        for item in results:
            entry = as_str_dict(item)
            if entry is None:
                continue
            name = get_raw_str(entry, "name")
            if name is not None:
                names.append(name)

        return Ok(select_latest_tag(names, floating_alias=self.config.floating_alias))
