"""cli command to upload resources"""

import sys
from pathlib import Path
from typing import Optional

import click

from lars.cli.descriptor import DescriptorError, build_resource
from lars.cli.repository import repository_option
from lars.cli.utils.logging import logger
from lars.config import ConfigAccessor
from lars.model.state import State
from lars.resources.result import upload_resource
from lars.strategies import (
    STRATEGIES,
    AddNewStrategy,
    AddThenDeleteStrategy,
    AddThenHideOldStrategy,
    AssetOnlyReplacementStrategy,
    UploadStrategy,
    VisibilityCache,
)


def build_strategy(
    name: str,
    state: State,
    force: bool = False,
    edition_checking: bool = True,
    cache: Optional[VisibilityCache] = None,
) -> UploadStrategy:
    """
    Create the upload strategy called ``name``.

    Args:
        name: One of the STRATEGIES keys
        state: State for resources without a match
        force: Replace matches even when nothing changed
        edition_checking: Validate product editions
        cache: Visibility cache for add_then_hide_old

    Raises:
        ValueError: If the name is not a known strategy
    """
    if name not in STRATEGIES:
        raise ValueError(f"Unknown upload strategy '{name}'")
    if name == "add_new":
        return AddNewStrategy(None, state, edition_checking)
    if name == "replace":
        return AssetOnlyReplacementStrategy(force_replace=force, edition_checking=edition_checking)
    if name == "add_then_delete":
        return AddThenDeleteStrategy(
            None, state, force_replace=force, edition_checking=edition_checking
        )
    return AddThenHideOldStrategy(
        None, state, cache=cache, force_replace=force, edition_checking=edition_checking
    )


@click.command("upload")
@click.argument(
    "descriptors",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@repository_option
@click.option(
    "--strategy",
    "-s",
    type=click.Choice(sorted(STRATEGIES)),
    default=None,
    help="How to treat existing resources. Defaults to the configured strategy (add_then_hide_old).",
)
@click.option(
    "--state",
    "target_state",
    type=click.Choice([s.value for s in State]),
    default=None,
    help="State of resources that match nothing. Defaults to the configured state (draft).",
)
@click.option("--force", is_flag=True, default=False, help="Replace matches even when unchanged.")
@click.option(
    "--edition-checking/--no-edition-checking",
    default=None,
    help="Reject unknown product editions in applies-to headers.",
)
def upload(descriptors, connection, strategy, target_state, force, edition_checking):
    """Upload the resources described by DESCRIPTORS (YAML or JSON)."""
    config = ConfigAccessor()
    strategy_name = strategy or config.upload_strategy()
    try:
        state = State(target_state) if target_state else config.upload_state()
    except ValueError as e:
        logger.error(f"Error: invalid upload state in configuration: {e}")
        sys.exit(1)
    if edition_checking is None:
        edition_checking = config.edition_checking()

    # One cache for the whole batch
    cache = VisibilityCache()
    failures = 0
    for path in descriptors:
        try:
            resource = build_resource(connection, path)
            upload_strategy = build_strategy(strategy_name, state, force, edition_checking, cache)
        except (DescriptorError, ValueError) as e:
            logger.error(f"Error: {e}")
            failures += 1
            continue

        result = upload_resource(resource, upload_strategy)
        if result.ok:
            click.echo(
                f"Uploaded {resource.name} as {resource.id} ({resource.state.value})"
            )
        else:
            click.echo(f"Failed to upload {resource.name} ({result.kind.value}): {result.error}")
            failures += 1

    if failures:
        sys.exit(1)
