"""treegrep search command - search files for a pattern."""

from __future__ import annotations

import json

import click

from treegrep.cli.utils import FatalError, format_result
from treegrep.config.constants import CONTEXT_LINES_MAX, WORKER_COUNT_MAX
from treegrep.config.models import TreegrepConfig
from treegrep.core.errors import SearchError
from treegrep.core.progress import pluralize, spinner, status
from treegrep.index.indexer import Indexer
from treegrep.search.engine import search
from treegrep.search.models import SearchOptions, SearchOutcome


def _build_indexer(config: TreegrepConfig, directories: tuple[str, ...]) -> Indexer:
    # Same file set as a walk: no excludes, no size limit, no keyword sets
    index_config = config.index.model_copy(
        update={
            "directories": list(directories),
            "recursive": True,
            "ignore_patterns": [],
            "include_extensions": [],
            "exclude_extensions": [],
            "skip_vcs_dirs": False,
            "max_file_size_mb": None,
            "keywords": [],
        }
    )
    indexer = Indexer(index_config)
    with spinner(f"Indexing {pluralize(len(directories), 'directory', 'directories')}"):
        indexer.index_now()
    return indexer


def _print_summary(outcome: SearchOutcome, *, verbose: bool, max_results: int) -> None:
    files_with_hits = len({r.file_path for r in outcome.results})
    summary = (
        f"{pluralize(outcome.match_count, 'match', 'matches')} "
        f"in {pluralize(files_with_hits, 'file')}"
    )
    if outcome.skipped_count:
        summary += f", {pluralize(outcome.skipped_count, 'file')} skipped"
    status(summary, style="warning" if outcome.partial else "success")

    if outcome.cap_reached:
        status(f"Stopped after reaching --max-results {max_results}", style="warning", indent=2)

    if verbose:
        for issue in outcome.issues:
            status(f"{issue.path}: {issue.message} ({issue.stage})", style="warning", indent=2)
    elif outcome.issues:
        status("Run with -v to list skipped files", indent=2)


@click.command()
@click.argument("pattern")
@click.argument("paths", nargs=-1, type=click.Path(path_type=str))
@click.option("-e", "--regex", "is_regex", is_flag=True, help="Treat PATTERN as a regular expression")
@click.option("-i", "--ignore-case", is_flag=True, help="Case-insensitive matching")
@click.option(
    "-g",
    "--glob",
    "globs",
    multiple=True,
    help="Only search files whose name matches this glob (repeatable)",
)
@click.option("-m", "--max-results", type=int, default=None, help="Stop after about N matches")
@click.option("-d", "--max-depth", type=int, default=None, help="Directory depth limit")
@click.option(
    "-C",
    "--context",
    "context_lines",
    type=click.IntRange(0, CONTEXT_LINES_MAX),
    default=None,
    help="Lines of context around each match",
)
@click.option(
    "-j",
    "--workers",
    "worker_count",
    type=click.IntRange(1, WORKER_COUNT_MAX),
    default=None,
    help="Scanner threads",
)
@click.option("--index", "use_index", is_flag=True, help="Load files into memory, then search")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search_command(
    ctx: click.Context,
    pattern: str,
    paths: tuple[str, ...],
    is_regex: bool,
    ignore_case: bool,
    globs: tuple[str, ...],
    max_results: int | None,
    max_depth: int | None,
    context_lines: int | None,
    worker_count: int | None,
    use_index: bool,
    as_json: bool,
) -> None:
    """Search PATHS (default: current directory) for PATTERN.

    Exits 0 when something matched, 1 when nothing did, 2 on errors.
    """
    config: TreegrepConfig = ctx.obj["config"]
    verbose: bool = ctx.obj["verbose"]
    directories = paths or (".",)

    indexer = _build_indexer(config, directories) if use_index else None

    options = SearchOptions.from_config(
        pattern,
        config.search,
        directories=directories,
        is_regex=is_regex,
        case_sensitive=not ignore_case,
        file_patterns=globs or None,
        max_results=max_results,
        max_depth=max_depth,
        context_lines=context_lines,
        worker_count=worker_count,
        use_index=use_index,
        indexer=indexer,
    )

    try:
        outcome = search(options)
    except SearchError as e:
        if as_json:
            click.echo(json.dumps({"error": e.to_dict()}))
            ctx.exit(2)
        raise FatalError(e.message) from e

    if as_json:
        click.echo(json.dumps(outcome.to_dict()))
    else:
        effective = options.normalized()
        for result in sorted(outcome.results, key=lambda r: (r.file_path, r.line)):
            for line in format_result(result, effective.context_lines):
                click.echo(line)
        _print_summary(outcome, verbose=verbose, max_results=effective.max_results)

    if not outcome.results:
        ctx.exit(1)
