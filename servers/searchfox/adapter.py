"""Argument validation and dispatch for the Searchfox tools."""

import json
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from backends.content_fetcher import AbstractContentFetcher
from backends.errors import InvalidInputError, UnknownOperationError
from backends.models import DEFAULT_LIMIT, DEFAULT_REPO, SearchQuery, SearchResponse
from backends.search import AbstractSearchClient

logger = logging.getLogger(__name__)

SEARCH_CODE = "search_code"
GET_FILE = "get_file"


def _str_or(value: Any, default: Optional[str]) -> Optional[str]:
    return value if isinstance(value, str) else default


def _bool_or(value: Any, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _number_or(value: Any, default: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value


def _required_str(args: Mapping[str, Any], key: str, message: str) -> str:
    value = args.get(key)
    if not value or not isinstance(value, str):
        raise InvalidInputError(message)
    return value


def to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


class QueryAdapter:
    """Validates tool arguments and routes calls to the backends.

    Required arguments are strict: a missing or non-string ``query`` or
    ``path`` is rejected. Every optional argument falls back to its
    default when it is absent or has the wrong type.
    """

    def __init__(
        self,
        search_client: AbstractSearchClient,
        content_fetcher: AbstractContentFetcher,
    ) -> None:
        """Initialize the adapter.

        Args:
            search_client: Backend used by ``search_code``
            content_fetcher: Backend used by ``get_file``
        """
        self.search_client = search_client
        self.content_fetcher = content_fetcher
        self._handlers: Dict[str, Callable[[Mapping[str, Any]], str]] = {
            SEARCH_CODE: self.search_code,
            GET_FILE: self.get_file,
        }

    @property
    def tool_names(self) -> Tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, name: str, args: Optional[Mapping[str, Any]]) -> str:
        """Run tool ``name`` with raw ``args`` and return its JSON text.

        Raises:
            InvalidInputError: If arguments are missing or invalid
            UnknownOperationError: If ``name`` is not a known tool
        """
        if args is None or not isinstance(args, Mapping):
            raise InvalidInputError("Missing arguments")

        handler = self._handlers.get(name)
        if handler is None:
            raise UnknownOperationError(f"Unknown tool: {name}")
        logger.info(f"Calling {name}")
        return handler(args)

    def parse_search_args(self, args: Mapping[str, Any]) -> SearchQuery:
        query = _required_str(
            args, "query", "Query parameter is required and must be a string"
        )
        return SearchQuery(
            query=query,
            repo=_str_or(args.get("repo"), DEFAULT_REPO),
            path_filter=_str_or(args.get("path"), None),
            case_sensitive=_bool_or(args.get("case"), False),
            use_regexp=_bool_or(args.get("regexp"), False),
            limit=_number_or(args.get("limit"), DEFAULT_LIMIT),
        )

    def parse_file_args(self, args: Mapping[str, Any]) -> Tuple[str, str]:
        path = _required_str(args, "path", "Path parameter is required and must be a string")
        return _str_or(args.get("repo"), DEFAULT_REPO), path

    def search_code(self, args: Mapping[str, Any]) -> str:
        query = self.parse_search_args(args)
        search = self.search_client.run(query)
        return to_json(SearchResponse(query=query, search=search).to_dict())

    def get_file(self, args: Mapping[str, Any]) -> str:
        repo, path = self.parse_file_args(args)
        return to_json(self.content_fetcher.get_content(repo, path).to_dict())
