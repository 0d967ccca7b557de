"""Output helpers for human-facing messages."""

import click


def user_output(message: str = "") -> None:
    """Status and progress messages for humans (stderr)."""
    click.echo(message, err=True)


def error_output(message: str) -> None:
    user_output(click.style("Error: ", fg="red") + message)
