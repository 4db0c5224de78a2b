"""Flattening of Searchfox search responses into uniform result records.

Searchfox groups hits under top-level section keys ("normal", "test",
"thirdparty", "Textual Occurrences", ...). A section is either a bare list
of files or a mapping from category ("Definitions (Foo)", "Uses (Foo)") to
a list of files. Keys wrapped in ``*`` carry metadata about the search.
Sections are never matched by name, so new ones Searchfox introduces fall
into one of the two shapes automatically.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from backends.models import NormalizedResult, NormalizedSearch, SearchDiagnostics

logger = logging.getLogger(__name__)

METADATA_PREFIX = "*"
TIMED_OUT_KEY = "*timedout*"
TITLE_KEY = "*title*"
LIMITS_KEY = "*limits*"


@dataclass(frozen=True)
class FlatSection:
    """Section whose value is a list of files; its key is the label."""

    key: str
    files: List[Any]


@dataclass(frozen=True)
class CategorizedSection:
    """Section whose value maps category labels to lists of files."""

    key: str
    categories: Mapping[str, Any]


Section = Union[FlatSection, CategorizedSection]


def is_metadata_key(key: str) -> bool:
    """Whether ``key`` carries search metadata rather than hits."""
    return key.startswith(METADATA_PREFIX)


def classify_section(key: str, value: Any) -> Optional[Section]:
    """Discriminate a section by the runtime shape of its value.

    Returns None for values that are neither a list nor a mapping.
    """
    if isinstance(value, list):
        return FlatSection(key=key, files=value)
    if isinstance(value, Mapping):
        return CategorizedSection(key=key, categories=value)
    return None


def read_diagnostics(payload: Mapping[str, Any]) -> SearchDiagnostics:
    """Read the timed-out flag, title and limits from the metadata keys."""
    return SearchDiagnostics(
        timed_out=payload.get(TIMED_OUT_KEY),
        title=payload.get(TITLE_KEY),
        limits=payload.get(LIMITS_KEY),
    )


def _effective_limit(limit: Any) -> Optional[Union[int, float]]:
    # 0, None and negative values all mean "no cap".
    if isinstance(limit, bool) or not isinstance(limit, (int, float)):
        return None
    return limit if limit > 0 else None


def _column(bounds: Any) -> Any:
    if isinstance(bounds, list) and bounds:
        return bounds[0] or 0
    return 0


class _ResultCollector:
    """Accumulates results and reports when the cap has been reached."""

    def __init__(self, limit: Any) -> None:
        self.limit = _effective_limit(limit)
        self.results: List[NormalizedResult] = []

    @property
    def full(self) -> bool:
        return self.limit is not None and len(self.results) >= self.limit

    def add(self, result: NormalizedResult) -> None:
        self.results.append(result)


class ResponseNormalizer:
    """Turns a raw Searchfox payload into a capped list of results."""

    def normalize(self, payload: Any, limit: Any = None) -> NormalizedSearch:
        """Flatten ``payload`` in key order, stopping once ``limit`` is hit.

        Args:
            payload: Decoded JSON body of a Searchfox search request
            limit: Maximum number of results; falsy or negative is unbounded

        Returns:
            Results in traversal order plus the search diagnostics
        """
        if not isinstance(payload, Mapping):
            logger.warning(
                f"Unexpected search payload type {type(payload).__name__}, ignoring"
            )
            return NormalizedSearch(results=[])

        collector = _ResultCollector(limit)
        for key, value in payload.items():
            if is_metadata_key(key):
                continue

            section = classify_section(key, value)
            if isinstance(section, FlatSection):
                self._collect_files(section.files, section.key, False, collector)
            elif isinstance(section, CategorizedSection):
                self._collect_categories(section, collector)
            else:
                logger.debug(f"Skipping section {key!r} with unsupported shape")

            if collector.full:
                break

        return NormalizedSearch(
            results=collector.results, diagnostics=read_diagnostics(payload)
        )

    def _collect_categories(
        self, section: CategorizedSection, collector: _ResultCollector
    ) -> None:
        for category, files in section.categories.items():
            if not isinstance(files, list):
                continue
            self._collect_files(files, f"{section.key}: {category}", True, collector)
            if collector.full:
                break

    def _collect_files(
        self,
        files: List[Any],
        label: str,
        prefer_line_context: bool,
        collector: _ResultCollector,
    ) -> None:
        for file_hit in files:
            if collector.full:
                return
            if not isinstance(file_hit, Mapping):
                continue
            lines = file_hit.get("lines")
            if not isinstance(lines, list):
                continue

            for line_hit in lines:
                if collector.full:
                    return
                if not isinstance(line_hit, Mapping):
                    continue
                context = label
                if prefer_line_context:
                    context = line_hit.get("context") or label
                collector.add(self._to_result(file_hit.get("path"), line_hit, context))

    @staticmethod
    def _to_result(path: Any, line_hit: Mapping[str, Any], context: str) -> NormalizedResult:
        bounds = line_hit.get("bounds")
        return NormalizedResult(
            path=path,
            line=line_hit.get("lno"),
            column=_column(bounds),
            snippet=line_hit.get("line"),
            context=context,
            context_symbol=line_hit.get("contextsym"),
            peek_range=line_hit.get("peekRange"),
            upsearch_hint=line_hit.get("upsearch"),
            bounds=bounds,
        )
