"""Initialize project command."""

import click

from ..clients.sqlite import SqliteRemoteLogStore
from ..db import init_db
from .base import async_command, echo_info, echo_success, echo_warning, load_settings


@click.command()
@click.pass_context
@async_command
async def init(ctx: click.Context):
    """Initialize the misogi data directory and database.

    Creates the local SQLite store and, when the shared SQLite remote is
    configured, its daily_logs table.
    """
    settings = load_settings(ctx)

    echo_info(f"Initializing misogi in {settings.data_dir}")

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(settings.db_path)
    echo_success("Local store initialized")

    if settings.remote == "sqlite":
        await SqliteRemoteLogStore(settings.remote_db).init_schema()
        echo_success(f"Remote store initialized at {settings.remote_db}")
    elif settings.remote == "supabase":
        echo_info("Using Supabase; make sure daily_logs has a unique (user_id, date) constraint")
    else:
        echo_warning("No remote configured; logs stay on this device")

    click.echo()
    click.echo("misogi is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  misogi serve                      # open the tracker in your browser")
