"""Search backend for Searchfox."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from backends.errors import UpstreamSearchError
from backends.models import NormalizedSearch, SearchQuery
from backends.normalizer import ResponseNormalizer

logger = logging.getLogger(__name__)


class AbstractSearchClient(ABC):
    """Abstract base class for search clients."""

    @abstractmethod
    def search(self, query: SearchQuery) -> Dict[str, Any]:
        """Search for code.

        Args:
            query: Validated search arguments

        Returns:
            Raw search payload

        Raises:
            UpstreamSearchError: If the backend fails or cannot be reached
        """
        pass

    @abstractmethod
    def format_results(self, payload: Any, limit: Any) -> NormalizedSearch:
        """Format search results.

        Args:
            payload: Raw search payload
            limit: Maximum number of results

        Returns:
            Normalized results and diagnostics
        """
        pass

    def run(self, query: SearchQuery) -> NormalizedSearch:
        """Search and format in one step, capped at ``query.limit``."""
        payload = self.search(query)
        normalized = self.format_results(payload, query.limit)
        logger.info(f"Search returned {len(normalized.results)} results")
        return normalized


class SearchfoxSearchClient(AbstractSearchClient):
    """Searchfox search client implementation."""

    def __init__(self, base_url: str, timeout: Optional[float] = None) -> None:
        """Initialize Searchfox client.

        Args:
            base_url: Searchfox base URL
            timeout: Optional request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._normalizer = ResponseNormalizer()

    def build_params(self, query: SearchQuery) -> Dict[str, str]:
        params = {
            "q": query.query,
            "case": "true" if query.case_sensitive else "false",
            "regexp": "true" if query.use_regexp else "false",
        }
        if query.path_filter:
            params["path"] = query.path_filter
        return params

    def search(self, query: SearchQuery) -> Dict[str, Any]:
        """Search using the Searchfox JSON endpoint."""
        url = f"{self.base_url}/{query.repo}/search"
        logger.info(f"Searching {query.repo} for {query.query!r}")

        try:
            response = requests.get(
                url,
                params=self.build_params(query),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as exc:
            raise UpstreamSearchError(f"Search failed: {exc}") from exc

        if not response.ok:
            raise UpstreamSearchError(
                f"Search failed: HTTP {response.status_code}: {response.reason}"
            )

        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamSearchError(f"Search failed: {exc}") from exc

    def format_results(self, payload: Any, limit: Any) -> NormalizedSearch:
        """Format Searchfox results."""
        return self._normalizer.normalize(payload, limit)
