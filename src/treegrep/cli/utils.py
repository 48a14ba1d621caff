"""CLI utilities."""

from __future__ import annotations

import click

from treegrep.search.models import SearchResult


class FatalError(click.ClickException):
    """Search could not start (bad pattern, missing root, bad config)."""

    exit_code = 2


def split_context(result: SearchResult, context_lines: int) -> tuple[list[str], list[str]]:
    """Split a result's context into the lines before and after the hit."""
    before = min(result.line - 1, context_lines)
    return result.context[:before], result.context[before:]


def highlight(result: SearchResult) -> str:
    """Line content with the matched span styled (dropped by click when not a TTY)."""
    start, end = result.match_start, result.match_end
    if start < 0 or end <= start:
        return result.content
    text = result.content
    return text[:start] + click.style(text[start:end], fg="red", bold=True) + text[end:]


def format_result(result: SearchResult, context_lines: int) -> list[str]:
    """grep-style lines: ``path:N:text`` for the hit, ``path-N-text`` for context."""
    before, after = split_context(result, context_lines)
    path = click.style(result.file_path, fg="magenta")
    out: list[str] = []
    first_before = result.line - len(before)
    for offset, text in enumerate(before):
        out.append(f"{path}-{first_before + offset}-{text}")
    out.append(f"{path}:{click.style(str(result.line), fg='green')}:{highlight(result)}")
    for offset, text in enumerate(after, start=1):
        out.append(f"{path}-{result.line + offset}-{text}")
    return out
