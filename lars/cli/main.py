"""lars CLI"""

import click

from lars import __version__
from lars.cli.repository import delete, find, init, list_resources, state
from lars.cli.upload import upload

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="lars")
@click.pass_context
def cli(ctx):
    """
    Manage a repository of installable assets.
    """
    ctx.ensure_object(dict)


cli.add_command(add_debug_option(init))
cli.add_command(add_debug_option(list_resources))
cli.add_command(add_debug_option(find))
cli.add_command(add_debug_option(upload))
cli.add_command(add_debug_option(delete))
cli.add_command(add_debug_option(state))

add_debug_option(cli)


if __name__ == "__main__":
    cli()
