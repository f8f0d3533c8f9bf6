"""Default exercise selection commands."""

import click

from ..services.session import ProgressSession
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    get_config,
)


@click.group()
def select():
    """Resolve or record the exercise shown by default."""
    pass


@select.command("default")
@click.option("--user", "user_id", default=None, help="Only use this user's entries")
@click.pass_context
@async_command
async def default(ctx: click.Context, user_id: str | None):
    """Show which exercise the progress view opens with.

    The last selection is used while it still matches the log; otherwise
    the first exercise ever logged.
    """
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.progress.get_performed_exercises(user_id)
        if not result.success:
            echo_error(result.error)
            ctx.exit(1)

        selection = await session.resolver.resolve_default_selection(result.data)
        state = session.resolver.state

    if selection.is_empty:
        echo_info("Nothing logged yet; no default selection.")
        return

    click.echo(f"Muscle group: {selection.muscle_group}")
    click.echo(f"Exercise:     {selection.exercise_name}")
    click.echo(f"Source:       {state.get_status_display()}")


@select.command("set")
@click.argument("muscle_group")
@click.argument("exercise")
@click.pass_context
@async_command
async def set_selection(ctx: click.Context, muscle_group: str, exercise: str):
    """Remember a muscle group and exercise as the default."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        session.resolver.select_muscle_group(muscle_group)
        selection = session.resolver.select_exercise(exercise)

    echo_success(f"Default set to {selection.exercise_name} ({selection.muscle_group})")
