"""Main CLI entry point for zapdos."""

from __future__ import annotations

import click

from zapdos import __version__

# Import command groups
from zapdos.cli.config_cmd import config
from zapdos.cli.query import jobs, objects
from zapdos.cli.upload import upload, urls

# =============================================================================
# Main CLI Group
# =============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="zapdos")
def cli() -> None:
    """zapdos - Upload media to Zapdos and follow its indexing jobs.

    Get started:

      zapdos config init              # Create config file

      export ZAPDOS_API_KEY=...       # Authenticate

      zapdos upload clip.mp4          # Upload a file

    Use --help on any command for more information.
    """
    pass


# =============================================================================
# Register Commands
# =============================================================================

cli.add_command(config)
cli.add_command(upload)
cli.add_command(urls)
cli.add_command(objects)
cli.add_command(jobs)


if __name__ == "__main__":
    cli()
