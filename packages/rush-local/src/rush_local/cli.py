"""CLI entry point for running single local actions."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from rush_local.config import AgentConfig
from rush_local.dispatcher import Dispatcher
from rush_local.errors import RushError
from rush_local.logging_config import setup_logging
from rush_local.requests import Action, parameter_names


@click.group()
def main():
    """rush-local: execute filesystem and process actions on this machine."""
    pass


@main.command()
@click.argument("action")
@click.argument("params", nargs=-1)
@click.option(
    "--payload-file",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Read the payload parameter from a file",
)
def call(action: str, params: tuple[str, ...], payload_file: str | None):
    """Dispatch ACTION with KEY=VALUE parameters and print the result."""
    request: dict[str, object] = {"action": action}
    for item in params:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="PARAMS")
        request[key] = value
    if payload_file:
        request["payload"] = Path(payload_file).read_bytes()

    config = AgentConfig.from_env()
    setup_logging("rush_local", config.log_level)
    try:
        result = Dispatcher.from_config(config).receive(request)
    except RushError as e:
        click.echo(f"{e.code}: {e.message}", err=True)
        sys.exit(1)
    click.echo(result, nl=False)


@main.command()
def actions():
    """List the supported actions and their parameters."""
    for action in Action:
        click.echo(f"{action.value}({', '.join(parameter_names(action))})")


if __name__ == "__main__":
    main()
