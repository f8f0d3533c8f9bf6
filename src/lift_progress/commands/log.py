"""Workout log commands."""

import json
from datetime import datetime
from pathlib import Path

import click

from ..models.workout import WorkoutEntry, parse_timestamp
from ..services.session import ProgressSession
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_number,
    format_table,
    get_config,
)


@click.group()
def log():
    """Record and inspect logged exercises."""
    pass


@log.command("add")
@click.argument("exercise")
@click.option("--muscle-group", "-g", required=True, help="Muscle group, e.g. Chest or Hamstrings")
@click.option("--sets", "-s", type=click.IntRange(min=1), required=True, help="Number of sets")
@click.option("--reps", "-r", type=click.IntRange(min=1), required=True, help="Reps per set")
@click.option(
    "--weight", "-w", type=click.FloatRange(min=0), default=0.0,
    help="Weight per rep (0 for bodyweight)",
)
@click.option("--date", "-d", "when", default=None, help="ISO date/time (default: now)")
@click.option("--user", "user_id", default=None, help="User the entry belongs to")
@click.pass_context
@async_command
async def add(
    ctx: click.Context,
    exercise: str,
    muscle_group: str,
    sets: int,
    reps: int,
    weight: float,
    when: str | None,
    user_id: str | None,
):
    """Log sets of an exercise."""
    ensure_initialized(ctx)

    if when is None:
        when = datetime.now().isoformat(timespec="seconds")
    elif parse_timestamp(when) is None:
        echo_error(f"Invalid date: {when}")
        ctx.exit(1)

    entry = WorkoutEntry(
        id="",
        timestamp=when,
        muscle_group_raw=muscle_group,
        exercise_name=exercise,
        set_count=sets,
        reps_per_set=reps,
        weight_per_rep=weight,
        user_id=user_id,
    )

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.storage.add_entry(entry)

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    load = format_number(weight) if weight > 0 else "bodyweight"
    echo_success(f"Logged {exercise}: {sets} x {reps} @ {load} (ID: {result.data})")


@log.command("list")
@click.option("--exercise", "-e", default=None, help="Only show this exercise")
@click.option("--user", "user_id", default=None, help="Only show this user's entries")
@click.pass_context
@async_command
async def list_entries(ctx: click.Context, exercise: str | None, user_id: str | None):
    """List logged exercises."""
    ensure_initialized(ctx)

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.storage.load_entries(user_id)

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)

    entries = result.data
    if exercise:
        entries = [e for e in entries if e.exercise_name == exercise]

    if not entries:
        echo_info("No entries logged yet.")
        return

    headers = ["ID", "Date", "Exercise", "Group", "Sets", "Reps", "Weight"]
    rows = [
        [
            e.id,
            e.timestamp,
            e.exercise_name,
            e.muscle_group_raw,
            str(e.set_count),
            str(e.reps_per_set),
            format_number(e.weight_per_rep) if e.weight_per_rep > 0 else "BW",
        ]
        for e in entries
    ]
    click.echo(format_table(headers, rows))


@log.command("delete")
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx: click.Context, entry_id: str, yes: bool):
    """Delete a logged exercise by ID."""
    ensure_initialized(ctx)

    if not yes and not click.confirm(f"Delete entry {entry_id}?"):
        echo_info("Cancelled.")
        return

    async with ProgressSession.open(get_config(ctx)) as session:
        result = await session.storage.delete_entry(entry_id)

    if not result.success:
        echo_error(result.error)
        ctx.exit(1)
    if not result.data:
        echo_warning(f"No entry with ID {entry_id}.")
        return
    echo_success(f"Deleted entry {entry_id}")


@log.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@async_command
async def import_entries(ctx: click.Context, path: Path):
    """Import entries from a JSON file.

    The file holds a list of objects with ``date``, ``exercise``,
    ``muscleGroup``, ``sets``, ``reps`` and ``weight`` fields (snake_case
    names are accepted too). Objects that are not valid entries, or that
    cannot be stored (such as a duplicate ID), are skipped and reported.
    """
    ensure_initialized(ctx)

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        echo_error(f"{path} is not valid JSON: {e}")
        ctx.exit(1)

    if not isinstance(records, list):
        echo_warning(f"{path} does not hold a list of entries; nothing imported.")
        return

    imported = 0
    skipped = 0
    async with ProgressSession.open(get_config(ctx)) as session:
        for record in records:
            try:
                entry = WorkoutEntry.from_dict(record)
            except (AttributeError, ValueError):
                skipped += 1
                continue
            result = await session.storage.add_entry(entry)
            if not result.success:
                echo_warning(f"Skipped entry {entry.id or entry.exercise_name}: {result.error}")
                skipped += 1
                continue
            imported += 1

    echo_success(f"Imported {imported} entries")
    if skipped:
        echo_warning(f"Skipped {skipped} records")
