"""Shared CLI utilities."""

import asyncio
import logging
from functools import wraps

import click

from ..config import Settings
from ..exceptions import ConfigError


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr at INFO, or DEBUG when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def load_settings(ctx: click.Context) -> Settings:
    """Read settings from the environment, exiting on invalid values."""
    try:
        return Settings.from_env()
    except ConfigError as e:
        echo_error(f"Invalid configuration: {e}")
        ctx.exit(1)


def ensure_initialized(ctx: click.Context, settings: Settings) -> None:
    """Ensure the database is initialized."""
    if not settings.db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Project not initialized. Run 'misogi init' first."
        )
        ctx.exit(1)


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
