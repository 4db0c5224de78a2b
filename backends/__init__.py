"""Backend implementations for search and content fetching."""

from .content_fetcher import AbstractContentFetcher, RawContentFetcher
from .errors import (
    FileRetrievalError,
    InvalidInputError,
    SearchfoxError,
    UnknownOperationError,
    UpstreamSearchError,
)
from .models import FileResult, NormalizedResult, NormalizedSearch, SearchQuery
from .normalizer import ResponseNormalizer
from .repositories import RepositoryResolver
from .search import AbstractSearchClient, SearchfoxSearchClient

__all__ = [
    "AbstractSearchClient",
    "SearchfoxSearchClient",
    "AbstractContentFetcher",
    "RawContentFetcher",
    "ResponseNormalizer",
    "RepositoryResolver",
    "FileResult",
    "NormalizedResult",
    "NormalizedSearch",
    "SearchQuery",
    "SearchfoxError",
    "InvalidInputError",
    "UnknownOperationError",
    "UpstreamSearchError",
    "FileRetrievalError",
]
