"""Web server command."""

import click

from .base import configure_logging, ensure_initialized, load_settings


@click.command()
@click.option("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
@click.option("--port", "-p", default=8000, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
@click.option("--verbose", "-v", is_flag=True, help="Log debug messages")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int, reload: bool, verbose: bool):
    """Start the tracker web server.

    Examples:

        # Start on default port (8000)
        misogi serve

        # Open to other devices on the network
        misogi serve --host 0.0.0.0
    """
    configure_logging(verbose)
    settings = load_settings(ctx)
    ensure_initialized(ctx, settings)

    import uvicorn

    from ..web import create_app

    click.echo()
    click.echo(click.style("Starting misogi...", fg="green"))
    click.echo()
    click.echo(f"  Local:   http://{host}:{port}")
    if host == "0.0.0.0":
        import socket
        hostname = socket.gethostname()
        try:
            local_ip = socket.gethostbyname(hostname)
            click.echo(f"  Network: http://{local_ip}:{port}")
        except socket.gaierror:
            pass
    click.echo()
    click.echo("Press Ctrl+C to stop the server.")
    click.echo()

    uvicorn.run(
        create_app(settings) if not reload else "misogi.web:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=reload,
        log_level="debug" if verbose else "info",
    )
