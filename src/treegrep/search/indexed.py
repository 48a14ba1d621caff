"""Disk-free search over a content index.

Reads lines from the index instead of the filesystem. Matching reuses the
scanner's matcher and result builder, so a hit here is the same hit the disk
path would produce. The cap is exact on this path since it runs on a
single thread.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from treegrep.search.aggregator import ResultAggregator
from treegrep.search.matcher import PatternMatcher
from treegrep.search.models import SearchOptions
from treegrep.search.scanner import build_result
from treegrep.search.walker import file_depth, name_allowed

if TYPE_CHECKING:
    from treegrep.index.indexer import Indexer

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class _Root:
    given: str
    absolute: str


def _display_path(abs_path: str, roots: list[_Root], options: SearchOptions) -> str | None:
    """Map an indexed path back to the path the walker would have yielded.

    Returns None if the file lies outside every root, too deep, or fails
    the name filter.
    """
    if not name_allowed(os.path.basename(abs_path), options.file_patterns):
        return None
    for root in roots:
        if abs_path == root.absolute:
            return root.given
        if not abs_path.startswith(root.absolute.rstrip(os.sep) + os.sep):
            continue
        if file_depth(root.absolute, abs_path) > options.max_depth:
            continue
        return os.path.join(root.given, os.path.relpath(abs_path, root.absolute))
    return None


def search_index(
    indexer: Indexer,
    options: SearchOptions,
    matcher: PatternMatcher,
    aggregator: ResultAggregator,
) -> int:
    """Search the index after any in-flight indexing pass completes.

    Returns the number of indexed files that contributed hits.
    """
    if indexer.is_indexing:
        logger.debug("waiting_for_indexing")
    indexer.wait_for_indexing()

    roots = [_Root(given=d, absolute=os.path.abspath(d)) for d in options.directories]
    matches = indexer.index.search_matcher(matcher)

    examined = 0
    for match in matches:
        if aggregator.cap_reached:
            break
        display = _display_path(match.file_path, roots, options)
        if display is None:
            continue
        indexed = indexer.index.get(match.file_path)
        if indexed is None:
            continue
        examined += 1
        for index in match.line_indices:
            if aggregator.cap_reached:
                break
            if index >= len(indexed.lines):
                break
            found, start, end = matcher.match(indexed.lines[index])
            if not found:
                # Re-indexed since the query ran
                continue
            aggregator.add(
                build_result(display, indexed.lines, index, options.context_lines, start, end)
            )
    return examined
