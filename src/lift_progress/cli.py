"""CLI entry point for lift-progress."""

import logging

import click

from .commands import init, log, progress, select, serve, target


@click.group()
@click.version_option(version="0.1.0", prog_name="lift-progress")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """lift-progress: workout progress analytics.

    Log sets, then chart how the heaviest lift or the total volume of an
    exercise develops over time.

    Example usage:

        # Initialize the project
        lift-progress init

        # Log a workout
        lift-progress log add "Bench Press" -g "Upper Chest" -s 3 -r 10 -w 60

        # Chart the last three months
        lift-progress progress show "Bench Press" --range 3m
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(init)
main.add_command(log)
main.add_command(progress)
main.add_command(target)
main.add_command(select)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
