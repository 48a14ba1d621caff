"""treegrep index command - build the content index and report on it."""

from __future__ import annotations

import json
import time

import click

from treegrep.config.models import TreegrepConfig, WatcherConfig
from treegrep.core.progress import get_console, make_extension_table, pluralize, spinner, status
from treegrep.index.indexer import Indexer
from treegrep.index.models import IndexStats
from treegrep.index.watcher import ChangeSummary, IndexWatcher


def _report_changes(summary: ChangeSummary) -> None:
    for path in summary.refreshed:
        status(f"updated {path}", indent=2)
    for path in summary.removed:
        status(f"removed {path}", indent=2)
    for path in summary.failed:
        status(f"unreadable {path}", style="warning", indent=2)


def _watch(indexer: Indexer, config: WatcherConfig) -> None:
    watcher = IndexWatcher(indexer, config, on_change=_report_changes)
    watcher.start()
    if not watcher.is_running:
        return
    status("Watching for changes (Ctrl-C to stop)")
    try:
        while watcher.is_running:
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass
    finally:
        watcher.stop()


@click.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("-k", "--keyword", "keywords", multiple=True, help="Pre-index a keyword (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--watch",
    is_flag=True,
    help="Keep the index current until interrupted (also on when watcher.enabled)",
)
@click.pass_context
def index_command(
    ctx: click.Context,
    paths: tuple[str, ...],
    keywords: tuple[str, ...],
    as_json: bool,
    watch: bool,
) -> None:
    """Load PATHS (default: current directory) into the in-memory index.

    Reports what was indexed. The index is not persisted.
    """
    config: TreegrepConfig = ctx.obj["config"]
    update: dict[str, object] = {"directories": list(paths or (".",))}
    if keywords:
        update["keywords"] = list(keywords)
    indexer = Indexer(config.index.model_copy(update=update))

    with spinner("Building content index"):
        stats = indexer.index_now()

    if as_json:
        payload = stats.to_dict()
        payload["keywords"] = {k: indexer.index.search_by_keyword(k) for k in keywords}
        click.echo(json.dumps(payload))
    else:
        _print_report(indexer, stats, keywords)

    if watch or config.watcher.enabled:
        _watch(indexer, config.watcher)


def _print_report(indexer: Indexer, stats: IndexStats, keywords: tuple[str, ...]) -> None:
    status(
        f"Indexed {pluralize(stats.total_files, 'file')}, "
        f"{pluralize(stats.total_lines, 'line')} in {stats.last_duration_ms or 0}ms",
        style="warning" if stats.last_error else "success",
    )
    if stats.last_error:
        status(stats.last_error, style="error", indent=2)
    if stats.extension_counts:
        get_console().print(make_extension_table(stats.extension_counts))
    for keyword in keywords:
        hits = indexer.index.search_by_keyword(keyword)
        status(f"{keyword!r}: {pluralize(len(hits), 'file')}", indent=2)
