"""Server management commands."""

import subprocess
import sys

import click

from social_graph.cli.utils import error, info, success, warning
from social_graph.core.settings import get_app_settings

APP_FACTORY = "social_graph.app.main:create_app"


def _run_uvicorn(args: list[str]) -> None:
    cmd = ["uvicorn", APP_FACTORY, "--factory", *args]
    try:
        success("Starting uvicorn...")
        subprocess.run(cmd, check=False)
    except KeyboardInterrupt:
        info("\nShutting down server...")
    except OSError as e:
        error(f"Failed to start server: {e}")
        sys.exit(1)


@click.group(name="server")
def server() -> None:
    """Server management commands."""


@server.command()
@click.option("--host", default=None, help="Host to bind (default: from settings)")
@click.option("--port", default=None, type=int, help="Port to bind (default: from settings)")
@click.option(
    "--reload/--no-reload",
    default=True,
    help="Enable auto-reload on code changes",
)
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["critical", "error", "warning", "info", "debug", "trace"]),
    help="Log level",
)
def dev(host: str | None, port: int | None, reload: bool, log_level: str) -> None:
    """Run development server with auto-reload."""
    info("Starting development server...")

    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    info(f"Server will run at: http://{host}:{port}")
    info(f"Environment: {settings.environment}")
    info(f"Auto-reload: {'enabled' if reload else 'disabled'}")

    args = ["--host", host, "--port", str(port), "--log-level", log_level]
    if reload:
        args.append("--reload")
    _run_uvicorn(args)


@server.command()
@click.option("--host", default=None, help="Host to bind (default: from settings)")
@click.option("--port", default=None, type=int, help="Port to bind (default: from settings)")
@click.option("--workers", default=4, type=int, help="Number of worker processes")
@click.option(
    "--access-log/--no-access-log",
    default=True,
    help="Enable access logging",
)
def prod(host: str | None, port: int | None, workers: int, access_log: bool) -> None:
    """Run production server with multiple workers."""
    settings = get_app_settings()
    host = host or settings.host
    port = port or settings.port

    if settings.debug:
        warning("APP_DEBUG is enabled in a production server")

    info(f"Starting production server with {workers} workers at http://{host}:{port}")

    args = ["--host", host, "--port", str(port), "--workers", str(workers)]
    if not access_log:
        args.append("--no-access-log")
    _run_uvicorn(args)
