"""CLI interface using typer."""

import asyncio

import typer

from .config import settings
from .core import HttpTransport
from .errors import FormatError, TransportError
from .preload import PreloadRunner

app = typer.Typer(
    name="gem-preload",
    help="Warm a gem mirror by probing every package in its index",
    no_args_is_help=True,
)


async def _preload(
    server: str,
    latest: bool,
    threads: int,
    skip: int,
    limit: int | None,
    progress: bool,
) -> PreloadRunner:
    """Run a preload against the server and return the finished runner."""
    transport = HttpTransport(
        base_url=server,
        timeout=settings.timeout,
        user_agent=settings.user_agent,
        max_connections=settings.max_connections,
        max_keepalive_connections=settings.max_keepalive_connections,
    )
    async with transport:
        runner = (
            PreloadRunner(transport, latest=latest, progress=progress)
            .with_workers(threads)
            .with_skip(skip)
            .with_limit(limit)
        )
        await runner.run()
    return runner


@app.command()
def preload(
    server: str = typer.Option(settings.base_url, "--server", help="Gem server to preload"),
    latest: bool = typer.Option(False, "--latest", help="Only preload the latest version of each gem"),
    threads: int = typer.Option(settings.workers, "--threads", "-t", help="Concurrent requests"),
    skip: int = typer.Option(0, "--skip", help="Number of index entries to skip"),
    limit: int = typer.Option(None, "--limit", help="Maximum number of gems to preload"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show a progress bar"),
):
    """Probe every gem in the server's index so the mirror caches it."""
    typer.echo(f"Preloading gems from {server}")

    try:
        runner = asyncio.run(_preload(
            server=server,
            latest=latest,
            threads=threads,
            skip=skip,
            limit=limit,
            progress=progress,
        ))
    except (TransportError, FormatError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Preloaded {runner.probed} packages ({len(runner.errors)} failed)")


@app.command()
def version():
    """Show version."""
    from . import __version__

    typer.echo(f"gem-preloader {__version__}")


if __name__ == "__main__":
    app()
