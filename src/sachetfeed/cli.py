"""CLI entry point for the SACHET alert cache."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .logging_utils import configure_logging
from .pipeline import fetch_and_cache
from .reporting import RunReporter
from .settings import Settings, get_settings

LOGGER = logging.getLogger(__name__)
CONSOLE = Console()
ERROR_CONSOLE = Console(stderr=True)


def run(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
    level: int = logging.INFO,
) -> int:
    """Execute one cache run and return the process exit code."""
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    configure_logging(
        level,
        log_file=settings.log_path,
        json_console=settings.log_format == "json",
    )

    reporter = RunReporter()
    reporter.start_run()
    LOGGER.info("Starting alert cache run %s", reporter.run_id)
    try:
        result = asyncio.run(fetch_and_cache(settings, reporter, transport=transport))
    except Exception as exc:
        reporter.finish_run(status="failed")
        LOGGER.exception("Error in main execution: %s", exc)
        ERROR_CONSOLE.print(f"[bold red]Error in main execution:[/bold red] {escape(str(exc))}")
        return 1

    reporter.finish_run()
    LOGGER.info("Completed all operations successfully")
    CONSOLE.print(
        f"[bold green]Cached {result.count} alert(s)[/bold green] to [cyan]{result.path}[/cyan]"
    )

    table = Table(title="Run Summary")
    table.add_column("Step")
    table.add_column("Value")
    for key, value in reporter.summary().items():
        if isinstance(value, (dict, list)):
            rendered = json.dumps(value, indent=2)
        else:
            rendered = str(value)
        table.add_row(key, rendered)
    CONSOLE.print(table)
    return 0


@click.command()
@click.option("--latitude", type=float, default=None, help="Latitude of the search centre")
@click.option("--longitude", type=float, default=None, help="Longitude of the search centre")
@click.option("--radius", "radius_km", type=float, default=None, help="Search radius in km")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory for the cache and log files (defaults to <project>/data)",
)
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
def main(
    latitude: float | None,
    longitude: float | None,
    radius_km: float | None,
    data_dir: Path | None,
    verbose: bool,
) -> None:
    """Fetch SACHET alerts and write them to the GeoJSON cache."""
    overrides = {
        key: value
        for key, value in {
            "latitude": latitude,
            "longitude": longitude,
            "radius_km": radius_km,
            "data_dir": data_dir,
        }.items()
        if value is not None
    }
    try:
        settings = Settings(**overrides) if overrides else get_settings()
    except ValueError as exc:
        ERROR_CONSOLE.print(f"[bold red]Invalid configuration:[/bold red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    raise SystemExit(run(settings, level=logging.DEBUG if verbose else logging.INFO))


if __name__ == "__main__":  # pragma: no cover
    main()
