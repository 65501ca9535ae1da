import logging

import click
from hnc_cli.tools.tools import tools
from hnc_core.codebase.debug import configure_logging


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log sizing and allocation decisions to stderr.")
def cli(verbose: bool) -> None:
    if verbose:
        configure_logging(logging.DEBUG)


# add cli groups here

cli.add_command(tools)
