"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..config import AppConfig
from ..models.workout import MetricType, TimeRange


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_config(ctx: click.Context) -> AppConfig:
    """Get the configuration stored on the root context."""
    root = ctx.find_root()
    if not isinstance(root.obj, AppConfig):
        root.obj = AppConfig.from_env()
    return root.obj


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_config(ctx).storage.db_path
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'lift-progress init' first."
        )
        ctx.exit(1)


TIME_RANGE_CHOICE = click.Choice([r.value for r in TimeRange])
METRIC_CHOICE = click.Choice([m.value for m in MetricType])


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_number(value: float) -> str:
    """Format a weight or volume without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
