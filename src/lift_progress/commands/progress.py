"""Progress reporting commands."""

from datetime import datetime

import click

from ..models.progress import ProgressQuery
from ..models.workout import MetricType, TimeRange
from ..services.session import ProgressSession
from ..utils.muscle_groups import MAIN_MUSCLE_GROUPS
from .base import (
    METRIC_CHOICE,
    TIME_RANGE_CHOICE,
    async_command,
    echo_error,
    echo_info,
    ensure_initialized,
    format_number,
    format_table,
    get_config,
)


@click.group()
def progress():
    """View progress charts and statistics.

    Entries are grouped per day: the weight metric takes the heaviest set
    of the day, the volume metric adds up all work of the day.
    """
    pass


@progress.command("show")
@click.argument("exercise")
@click.option("--range", "-t", "time_range", type=TIME_RANGE_CHOICE, default=None,
              help="Time window (default: 1m)")
@click.option("--metric", "-m", type=METRIC_CHOICE, default=None,
              help="weight (daily max) or volume (daily total)")
@click.option("--user", "user_id", default=None, help="Only use this user's entries")
@click.pass_context
@async_command
async def show(
    ctx: click.Context,
    exercise: str,
    time_range: str | None,
    metric: str | None,
    user_id: str | None,
):
    """Show the per-day progress of an exercise."""
    ensure_initialized(ctx)
    config = get_config(ctx)

    query = ProgressQuery(
        exercise_name=exercise,
        now=datetime.now(),
        time_range=TimeRange(time_range) if time_range else config.defaults.time_range,
        metric_type=MetricType(metric) if metric else config.defaults.metric_type,
        user_id=user_id,
    )

    async with ProgressSession.open(config) as session:
        result = await session.progress.query_progress(query)
        target = await session.targets.get(exercise, query.metric_type)

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    data = result.data
    click.echo()
    click.echo(click.style(f"{exercise} ({query.metric_type.value}, {query.time_range.value})", bold=True))
    click.echo("=" * 50)

    if not data.points:
        echo_info("No entries in this time range.")
        return

    headers = ["Date", "Peak weight", "Total volume"]
    rows = [
        [
            p.date.strftime("%Y-%m-%d"),
            format_number(p.peak_weight),
            format_number(p.total_volume),
        ]
        for p in data.points
    ]
    click.echo(format_table(headers, rows))

    stats = data.stats
    click.echo()
    click.echo(f"Sessions:    {stats.sample_count}")
    click.echo(f"Best:        {format_number(stats.peak_value)}")
    click.echo(f"Latest:      {format_number(stats.latest_value)}")
    sign = "+" if stats.improvement_percent > 0 else ""
    click.echo(f"Improvement: {sign}{stats.improvement_percent:.1f}%")
    if target:
        remaining = target - stats.latest_value
        status = "reached" if remaining <= 0 else f"{format_number(remaining)} to go"
        click.echo(f"Target:      {format_number(target)} ({status})")


@progress.command("exercises")
@click.option("--user", "user_id", default=None, help="Only use this user's entries")
@click.pass_context
@async_command
async def exercises(ctx: click.Context, user_id: str | None):
    """List logged exercises grouped by main muscle group."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.progress.get_performed_exercises(user_id)
        if not result.success:
            echo_error(result.error)
            ctx.exit(1)

        performed = result.data
        if not performed:
            echo_info("No exercises logged yet.")
            return

        resolver = session.resolver
        groups = {resolver.map_group(p.muscle_group_raw) for p in performed}
        ordered = [g for g in MAIN_MUSCLE_GROUPS if g in groups]
        ordered += sorted(groups - set(MAIN_MUSCLE_GROUPS))

        for group in ordered:
            click.echo(click.style(group or "(no group)", bold=True))
            for p in resolver.exercises_for_group(performed, group):
                click.echo(f"  - {p.name}")
