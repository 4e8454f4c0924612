"""storehooks CLI entry point."""

import logging

import click

from storehooks.config import Settings


@click.group()
@click.option("--log-level", default=None, help="Logging level (default: STOREHOOKS_LOG_LEVEL or WARNING).")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """storehooks: entity operation hooks CLI."""
    settings = Settings.from_env()
    if log_level:
        settings.log_level = log_level.upper()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


# Register subcommand groups
from storehooks.cli.metadata_cmd import metadata  # noqa: E402

cli.add_command(metadata)
