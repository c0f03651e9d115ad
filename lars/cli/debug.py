import click

from .utils.logging import configure_logging

DEBUG_KEY = "DEBUG"


def add_debug_option(cmd: click.Command) -> click.Command:
    """Give a click command or group a ``--debug`` flag."""
    if all(param.name != "debug" for param in cmd.params):
        cmd.params.insert(
            0,
            click.Option(
                ["--debug/--no-debug"],
                is_eager=True,
                expose_value=False,
                callback=_set_debug,
                help="Log every repository call and state change.",
            ),
        )
    return cmd


def _set_debug(ctx, param, value: bool) -> bool:
    # `lars --debug upload` and `lars upload --debug` both count; a
    # subcommand's default must not undo a --debug given on the group.
    root = ctx.find_root()
    root.ensure_object(dict)
    enabled = root.obj.get(DEBUG_KEY, False)
    if value or ctx is root:
        enabled = value
    root.obj[DEBUG_KEY] = enabled

    configure_logging(enabled)
    return enabled
