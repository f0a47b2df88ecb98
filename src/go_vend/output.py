# SPDX-License-Identifier: MIT
"""Terminal output helpers."""

from __future__ import annotations

import click


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", bold=True, err=True)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str = "") -> None:
    """Print an info message."""
    click.echo(message)


def echo_bold(message: str) -> None:
    """Print a highlighted message."""
    click.secho(message, fg="cyan", bold=True)


def echo_wrap(text: str, width: int = 72) -> None:
    """Print text wrapped at ``width`` columns without splitting words."""
    click.echo(click.wrap_text(text, width=width, preserve_paragraphs=True))
