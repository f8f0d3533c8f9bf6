"""Target value commands."""

import click

from ..models.workout import MetricType
from ..services.session import ProgressSession
from .base import (
    METRIC_CHOICE,
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_number,
    format_table,
    get_config,
)


@click.group()
def target():
    """Set and view per-exercise targets."""
    pass


@target.command("set")
@click.argument("exercise")
@click.argument("value", type=float)
@click.option("--metric", "-m", type=METRIC_CHOICE, default="weight", help="Metric the target applies to")
@click.pass_context
@async_command
async def set_target(ctx: click.Context, exercise: str, value: float, metric: str):
    """Set the target of an exercise."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.targets.set(exercise, MetricType(metric), value)

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)
    echo_success(f"Target for {exercise} ({metric}) set to {format_number(value)}")


@target.command("get")
@click.argument("exercise")
@click.option("--metric", "-m", type=METRIC_CHOICE, default="weight", help="Metric the target applies to")
@click.pass_context
@async_command
async def get_target(ctx: click.Context, exercise: str, metric: str):
    """Show the target of an exercise."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        value = await session.targets.get(exercise, MetricType(metric))

    if not value:
        echo_info(f"No {metric} target set for {exercise}.")
        return
    click.echo(format_number(value))


@target.command("list")
@click.pass_context
@async_command
async def list_targets(ctx: click.Context):
    """List every target."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.targets.load_all()

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)
    if not result.data:
        echo_info("No targets set.")
        return

    rows = [
        [key.exercise_name, key.metric_type.value, format_number(value)]
        for key, value in sorted(result.data.items())
    ]
    click.echo(format_table(["Exercise", "Metric", "Target"], rows))
