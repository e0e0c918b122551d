"""CLI entry point for misogi."""

import click

from . import __version__
from .commands import init, serve


@click.group()
@click.version_option(version=__version__, prog_name="misogi")
def main():
    """misogi: a year of push-ups, squats and pull-ups.

    Log daily reps toward 10,000 of each. Logs are kept on this device and,
    when a remote is configured, mirrored to your account.

    Example usage:

        # Create the local database
        misogi init

        # Open the tracker
        misogi serve
    """
    pass


# Register commands
main.add_command(init)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
