"""Per-file scanning: read lines, match, build results with context."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from treegrep.search.aggregator import ErrorCollector, ResultAggregator
from treegrep.search.matcher import PatternMatcher
from treegrep.search.models import SearchResult


def split_lines(text: str) -> list[str]:
    """Split file text into lines.

    Lines end at ``\\n``; a trailing ``\\r`` is dropped and a final newline
    does not produce an extra empty line. Shared by the scanner and the
    content index so line numbers agree.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def read_lines(path: str | Path) -> list[str]:
    """Read a file into lines. Undecodable bytes are replaced, not fatal.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    text = Path(path).read_text(encoding="utf-8", errors="replace")
    return split_lines(text)


def context_window(lines: Sequence[str], index: int, context_lines: int) -> list[str]:
    """Lines around ``index`` (0-based), clipped to the file, excluding ``index``."""
    if context_lines <= 0:
        return []
    start = max(index - context_lines, 0)
    end = min(index + context_lines, len(lines) - 1)
    return [lines[i] for i in range(start, end + 1) if i != index]


def build_result(
    file_path: str,
    lines: Sequence[str],
    index: int,
    context_lines: int,
    match_start: int,
    match_end: int,
) -> SearchResult:
    return SearchResult(
        file_path=file_path,
        line=index + 1,
        content=lines[index],
        context=context_window(lines, index, context_lines),
        match_start=match_start,
        match_end=match_end,
    )


def scan_lines(
    file_path: str,
    lines: Sequence[str],
    matcher: PatternMatcher,
    context_lines: int,
    aggregator: ResultAggregator,
) -> int:
    """Match every line and push hits. Stops at the first hit after the cap.

    Returns the number of hits added.
    """
    added = 0
    for index, line in enumerate(lines):
        found, start, end = matcher.match(line)
        if not found:
            continue
        result = build_result(file_path, lines, index, context_lines, start, end)
        added += 1
        if aggregator.add(result):
            break
    return added


def scan_file(
    file_path: str,
    matcher: PatternMatcher,
    context_lines: int,
    aggregator: ResultAggregator,
    errors: ErrorCollector,
) -> int:
    """Scan one file from disk. Read failures go to ``errors``."""
    try:
        lines = read_lines(file_path)
    except OSError as e:
        errors.add(file_path, "read", e)
        return 0
    return scan_lines(file_path, lines, matcher, context_lines, aggregator)
