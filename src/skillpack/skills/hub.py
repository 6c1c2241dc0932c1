"""Remote skill catalogs.

SkillHub talks to two keyword-search services:

- the primary registry, which also serves skill zip downloads
  (`/api/v1/search`, `/api/v1/download`)
- a secondary community catalog that points at git sources (`/api/search`)
"""

import logging
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict, Field, field_validator

from skillpack.config.constants import (
    DEFAULT_CATALOG_URL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_REGISTRY_URL,
    DEFAULT_SEARCH_LIMIT,
)
from skillpack.skills.errors import NetworkError, ValidationError

logger = logging.getLogger(__name__)

MAX_SEARCH_LIMIT = 100


class RegistrySearchResult(BaseModel):
    """One hit from the primary registry search."""

    slug: str = ""
    display_name: str | None = Field(default=None, alias="displayName")
    summary: str | None = None
    version: str | None = None
    score: float = 0.0
    updated_at: int | None = Field(default=None, alias="updatedAt")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("slug", mode="before")
    @classmethod
    def default_slug(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("score", mode="before")
    @classmethod
    def default_score(cls, v: Any) -> float:
        return 0.0 if v is None else v


class CatalogSearchResult(BaseModel):
    """One hit from the secondary catalog search."""

    slug: str = Field(default="", alias="id")
    name: str = ""
    source: str = ""
    installs: int = 0

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("slug", "name", "source", mode="before")
    @classmethod
    def default_text(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("installs", mode="before")
    @classmethod
    def default_installs(cls, v: Any) -> int:
        return 0 if v is None else v


def normalize_limit(limit: int) -> int:
    """Clamp a search limit to [1, MAX_SEARCH_LIMIT]."""
    return max(1, min(limit, MAX_SEARCH_LIMIT))


def _require_query(query: str) -> str:
    trimmed = query.strip()
    if not trimmed:
        raise ValidationError("query cannot be empty")
    return trimmed


class SkillHub:
    """HTTP client for the skill registry and community catalog.

    Example:
        >>> hub = SkillHub()
        >>> results = hub.search_registry("weather", limit=5)  # doctest: +SKIP
    """

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        catalog_url: str = DEFAULT_CATALOG_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        session: requests.Session | None = None,
    ):
        """Initialize SkillHub.

        Args:
            registry_url: Base URL of the primary registry
            catalog_url: Base URL of the secondary catalog
            timeout: Per-request timeout in seconds
            session: Optional requests session (a new one is created if omitted)
        """
        self.registry_url = registry_url.rstrip("/")
        self.catalog_url = catalog_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def search_registry(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[RegistrySearchResult]:
        """Search the primary registry.

        Args:
            query: Search keywords
            limit: Maximum results (clamped to 1..100; <= 0 omits the parameter)

        Returns:
            Ranked results

        Raises:
            ValidationError: If the query is blank
            NetworkError: On HTTP failure, unparsable JSON or mistyped fields
        """
        params = self._search_params(_require_query(query), limit)
        url = f"{self.registry_url}/api/v1/search"
        return self._get_results(url, params, "results", RegistrySearchResult)

    def search_catalog(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[CatalogSearchResult]:
        """Search the secondary community catalog.

        Args:
            query: Search keywords
            limit: Maximum results (clamped to 1..100; <= 0 omits the parameter)

        Returns:
            Ranked results

        Raises:
            ValidationError: If the query is blank
            NetworkError: On HTTP failure, unparsable JSON or mistyped fields
        """
        params = self._search_params(_require_query(query), limit)
        url = f"{self.catalog_url}/api/search"
        return self._get_results(url, params, "skills", CatalogSearchResult)

    def download(self, slug: str, version: str | None = None, tag: str | None = None) -> bytes:
        """Download a skill archive from the primary registry.

        Blank version or tag values are not sent.

        Returns:
            Zip archive bytes

        Raises:
            NetworkError: On HTTP failure
        """
        params = {"slug": slug}
        if version and version.strip():
            params["version"] = version.strip()
        if tag and tag.strip():
            params["tag"] = tag.strip()

        response = self._get(f"{self.registry_url}/api/v1/download", params)
        return response.content

    @staticmethod
    def _search_params(query: str, limit: int) -> dict[str, str]:
        params = {"q": query}
        if limit > 0:
            params["limit"] = str(normalize_limit(limit))
        return params

    def _get(self, url: str, params: dict[str, str]) -> requests.Response:
        logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(f"GET request failed: {url}: {e}", url=url) from e

        if response.ok:
            return response

        full_url = response.url or url
        snippet = (response.text or "").strip()
        message = f"request failed ({response.status_code}): {full_url}"
        if snippet:
            message = f"{message} -> {snippet}"
        raise NetworkError(message, url=full_url, status_code=response.status_code, snippet=snippet)

    def _get_results(
        self, url: str, params: dict[str, str], key: str, model: type[BaseModel]
    ) -> list[Any]:
        response = self._get(url, params)
        try:
            return [model.model_validate(item) for item in _list_field(response.json(), key)]
        except (ValueError, TypeError) as e:
            full_url = response.url or url
            snippet = (response.text or "").strip()[:200]
            message = f"failed to parse JSON response: {full_url}"
            if snippet:
                message = f"{message} -> {snippet}"
            raise NetworkError(
                message, url=full_url, status_code=response.status_code, snippet=snippet
            ) from e


def _list_field(data: Any, key: str) -> list[dict]:
    if not isinstance(data, dict):
        return []
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise TypeError(f"expected a list for '{key}', got {type(items).__name__}")
    return [item for item in items if isinstance(item, dict)]
