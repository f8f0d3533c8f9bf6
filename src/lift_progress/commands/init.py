"""Initialize project command."""

import click

from ..db import init_db
from .base import async_command, echo_info, echo_success, get_config


@click.command()
@click.pass_context
@async_command
async def init(ctx: click.Context):
    """Initialize the lift-progress data directory and database."""
    storage = get_config(ctx).storage

    echo_info(f"Initializing lift-progress in {storage.data_dir}")
    storage.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(storage.db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Log a workout:")
    click.echo('     lift-progress log add "Bench Press" -g Chest -s 3 -r 5 -w 60')
    click.echo()
    click.echo("  2. See your progress:")
    click.echo('     lift-progress progress show "Bench Press" --range 3m')
