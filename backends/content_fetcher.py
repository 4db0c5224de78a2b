"""Content fetcher backend for the GitHub mirror of Searchfox repositories."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Union

import requests

from backends.errors import FileRetrievalError
from backends.models import FileResult
from backends.repositories import RepositoryResolver

logger = logging.getLogger(__name__)

REMOTE_SOURCE = "remote"


@dataclass(frozen=True)
class FileLocation:
    """Resolved download and browse URLs for one file."""

    url: str
    browse_url: str


@dataclass(frozen=True)
class FetchedContent:
    text: str


@dataclass(frozen=True)
class FetchFailure:
    reason: str


FetchOutcome = Union[FetchedContent, FetchFailure]


class AbstractContentFetcher(ABC):
    """Abstract base class for content fetchers."""

    @abstractmethod
    def get_content(self, repo: str, path: str) -> FileResult:
        """Get file content.

        Args:
            repo: Logical repository name
            path: File path within repository

        Returns:
            File result; empty content with a note if the file could not
            be downloaded

        Raises:
            FileRetrievalError: If the request could not be set up
        """
        pass


class RawContentFetcher(AbstractContentFetcher):
    """Downloads files from a raw-content host such as raw.githubusercontent.com.

    A failed download (missing file, error status, network error) is an
    expected outcome and is returned as an annotated empty result. Only
    problems building the request itself are raised.
    """

    def __init__(self, resolver: RepositoryResolver, timeout: Optional[float] = None) -> None:
        """Initialize the fetcher.

        Args:
            resolver: Maps repository names to mirror locations
            timeout: Optional request timeout in seconds
        """
        self.resolver = resolver
        self.timeout = timeout

    def get_content(self, repo: str, path: str) -> FileResult:
        location = self._locate(repo, path)
        outcome = self._download(location.url)

        if isinstance(outcome, FetchFailure):
            logger.warning(f"Raw content fetch failed for {location.url}: {outcome.reason}")
            return FileResult(
                repo=repo,
                path=path,
                content="",
                browse_url=location.browse_url,
                note=f"Error: raw content fetch failed ({outcome.reason})",
            )

        return FileResult(
            repo=repo,
            path=path,
            content=outcome.text,
            source=REMOTE_SOURCE,
            url=location.url,
            browse_url=location.browse_url,
        )

    def _locate(self, repo: str, path: str) -> FileLocation:
        """Resolve ``repo``/``path`` into URLs, raising on setup errors."""
        location = self.resolver.resolve(repo)
        url = self.resolver.raw_url(location, path)
        try:
            requests.Request("GET", url).prepare()
        except requests.exceptions.RequestException as exc:
            raise FileRetrievalError(f"Failed to fetch file: {exc}") from exc
        return FileLocation(url=url, browse_url=location.browse_url(path))

    def _download(self, url: str) -> FetchOutcome:
        """Fetch ``url`` once; failures are returned, not raised."""
        logger.info(f"Fetching {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            return FetchFailure(reason=str(exc))

        if not response.ok:
            return FetchFailure(reason=f"HTTP {response.status_code}: {response.reason}")
        return FetchedContent(text=response.text)
