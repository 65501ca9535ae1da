import click

from .fabric import fabric


@click.group()
def tools() -> None:
    """Utility commands for fabric sizing and uplink allocation."""
    pass


tools.add_command(fabric)
