"""treegrep CLI - treegrep command."""

from pathlib import Path

import click

from treegrep import __version__
from treegrep.cli.index import index_command
from treegrep.cli.search import search_command
from treegrep.cli.utils import FatalError
from treegrep.config.loader import load_config
from treegrep.core.errors import ConfigError
from treegrep.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="treegrep")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging and list skipped files")
@click.option(
    "--config-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding .treegrep.yaml (default: current directory)",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_dir: Path | None) -> None:
    """treegrep - concurrent text search with an optional in-memory index."""
    try:
        config = load_config(config_dir)
    except ConfigError as e:
        raise FatalError(e.message) from e

    logging_config = config.logging
    if verbose:
        logging_config = logging_config.model_copy(update={"level": "DEBUG"})
    configure_logging(config=logging_config)

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(search_command, name="search")
cli.add_command(index_command, name="index")


if __name__ == "__main__":
    cli()
