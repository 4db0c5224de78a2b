"""Backend models for Searchfox search and file retrieval."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DEFAULT_REPO = "mozilla-central"
DEFAULT_LIMIT = 50

TIMED_OUT_NOTICE = "Search timed out - more results may be available"


def _without_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class SearchQuery:
    """Validated arguments of one ``search_code`` call."""

    query: str
    repo: str = DEFAULT_REPO
    path_filter: Optional[str] = None
    case_sensitive: bool = False
    use_regexp: bool = False
    limit: Optional[Union[int, float]] = DEFAULT_LIMIT


@dataclass(frozen=True)
class NormalizedResult:
    """A single line match flattened out of a Searchfox response."""

    path: Any
    line: Any
    column: Any
    snippet: Any
    context: Optional[str] = None
    context_symbol: Any = None
    peek_range: Any = None
    upsearch_hint: Any = None
    bounds: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using Searchfox's field names, omitting absent values."""
        return _without_none(
            {
                "path": self.path,
                "line": self.line,
                "column": self.column,
                "snippet": self.snippet,
                "context": self.context,
                "contextsym": self.context_symbol,
                "peekRange": self.peek_range,
                "upsearch": self.upsearch_hint,
                "bounds": self.bounds,
            }
        )


@dataclass(frozen=True)
class SearchDiagnostics:
    """Metadata Searchfox reports about the search itself."""

    timed_out: Any = None
    title: Any = None
    limits: Any = None


@dataclass(frozen=True)
class NormalizedSearch:
    """Results of one search together with the upstream diagnostics."""

    results: List[NormalizedResult]
    diagnostics: SearchDiagnostics = field(default_factory=SearchDiagnostics)


@dataclass(frozen=True)
class SearchResponse:
    """Payload returned to the host by ``search_code``."""

    query: SearchQuery
    search: NormalizedSearch

    def to_dict(self) -> Dict[str, Any]:
        diagnostics = self.search.diagnostics
        return _without_none(
            {
                "query": self.query.query,
                "repo": self.query.repo,
                "count": len(self.search.results),
                "title": diagnostics.title,
                "timedout": diagnostics.timed_out,
                "limits": diagnostics.limits,
                "total_available": TIMED_OUT_NOTICE if diagnostics.timed_out else None,
                "results": [result.to_dict() for result in self.search.results],
            }
        )


@dataclass(frozen=True)
class RepoLocation:
    """Where a logical repository's files can be downloaded and browsed."""

    hosting_repository: str
    branch: str
    source_browse_base_url: str

    def browse_url(self, path: str) -> str:
        """Searchfox source view URL of ``path`` in this repository."""
        return f"{self.source_browse_base_url}/{path}"


@dataclass(frozen=True)
class FileResult:
    """Payload returned to the host by ``get_file``."""

    repo: str
    path: str
    content: str = ""
    source: Optional[str] = None
    url: Optional[str] = None
    browse_url: Optional[str] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _without_none(
            {
                "repo": self.repo,
                "path": self.path,
                "content": self.content,
                "source": self.source,
                "url": self.url,
                "searchfoxUrl": self.browse_url,
                "note": self.note,
            }
        )
