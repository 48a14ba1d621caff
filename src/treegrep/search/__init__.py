"""Concurrent literal/regex search over directory trees."""

from treegrep.search.aggregator import ErrorCollector, ResultAggregator
from treegrep.search.engine import search
from treegrep.search.matcher import PatternMatcher
from treegrep.search.models import SearchIssue, SearchOptions, SearchOutcome, SearchResult

__all__ = [
    "search",
    "ErrorCollector",
    "PatternMatcher",
    "ResultAggregator",
    "SearchIssue",
    "SearchOptions",
    "SearchOutcome",
    "SearchResult",
]
