"""cli commands to inspect and manage a repository"""

import sys
from functools import wraps
from pathlib import Path

import click

from lars.cli.utils.logging import logger
from lars.config import ConfigAccessor
from lars.model.enums import ResourceType
from lars.model.state import State
from lars.remote.connection import SingleFileRepositoryConnection, get_connection
from lars.resources.exceptions import RepositoryError


def repository_option(func):
    """Add ``--repository`` and pass the opened connection as ``connection``."""

    @click.option(
        "--repository",
        "-r",
        type=str,
        default=None,
        help="Repository file. Defaults to $LARS_REPOSITORY or the configured location.",
    )
    @wraps(func)
    def wrapper(*args, repository=None, **kwargs):
        location = repository or ConfigAccessor().repository_location()
        if location is None:
            logger.error(
                "No repository given. Use --repository, set LARS_REPOSITORY "
                "or [repository] location in the configuration file."
            )
            sys.exit(1)
        connection = get_connection(location)
        try:
            connection.check_status()
        except RepositoryError as e:
            logger.error(f"Error: {e}")
            sys.exit(1)
        return func(*args, connection=connection, **kwargs)

    return wrapper


def _resource_type(ctx, param, value):
    if value is None:
        return None
    try:
        return ResourceType.from_name(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


type_option = click.option(
    "--type",
    "-t",
    "resource_type",
    callback=_resource_type,
    default=None,
    help="Only resources of this type, e.g. feature or com.ibm.websphere.Feature.",
)


def format_resource(resource) -> str:
    return (
        f"{resource.id}  {resource.state.value:<17}  "
        f"{resource.type.url_segment if resource.type else '-':<10}  "
        f"{resource.name}  [{resource.vanity_url or '-'}]"
    )


@click.command("init")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
def init(path):
    """Create an empty repository file."""
    try:
        SingleFileRepositoryConnection.create_empty_repository(path)
    except RepositoryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    click.echo(f"Created repository {path}")


@click.command("list")
@repository_option
@type_option
def list_resources(connection, resource_type):
    """List the resources in a repository."""
    try:
        resources = connection.get_all_resources(resource_type)
    except RepositoryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    for resource in sorted(resources, key=lambda r: (r.name or "", r.id)):
        click.echo(format_resource(resource))


@click.command("find")
@click.argument("search")
@repository_option
@type_option
def find(search, connection, resource_type):
    """Find resources whose name or description contains SEARCH."""
    try:
        resources = connection.find_resources(search, resource_type)
    except RepositoryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    if not resources:
        click.echo(f"No resources found for '{search}'")
        return
    for resource in resources:
        click.echo(format_resource(resource))


@click.command("delete")
@click.argument("resource_id")
@repository_option
def delete(resource_id, connection):
    """Delete a resource and its attachments."""
    try:
        resource = connection.get_resource(resource_id)
        resource.delete()
    except RepositoryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    click.echo(f"Deleted {resource.name} ({resource_id})")


@click.command("state")
@click.argument("resource_id")
@click.argument("target", type=click.Choice([s.value for s in State]))
@repository_option
def state(resource_id, target, connection):
    """Move a resource to the TARGET lifecycle state."""
    try:
        resource = connection.get_resource(resource_id)
        resource.move_to_state(State(target))
    except RepositoryError as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    click.echo(f"{resource.name} ({resource_id}) is {resource.state.value}")
