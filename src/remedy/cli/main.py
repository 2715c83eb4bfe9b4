"""Click CLI entry point for remedy."""

from __future__ import annotations

import logging

import click
from rich.logging import RichHandler

from remedy._version import __version__
from remedy.core.output import error_console


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="remedy")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """remedy - automatic issue remediation.

    Detect issues, fix the safe ones, and learn which fixes work.
    """
    setup_logging(verbose)


# Import and register subcommands
from remedy.cli.scan_cmd import scan  # noqa: E402
from remedy.cli.fix_cmd import fix  # noqa: E402
from remedy.cli.strategies_cmd import strategies  # noqa: E402
from remedy.cli.learning_cmd import learning  # noqa: E402
from remedy.cli.undo_cmd import undo  # noqa: E402

cli.add_command(scan)
cli.add_command(fix)
cli.add_command(strategies)
cli.add_command(learning)
cli.add_command(undo)


if __name__ == "__main__":
    cli()
