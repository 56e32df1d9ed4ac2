"""
Command-line interface for the News Collector.

Uses Typer to expose the download and render stages. Supports loading
.env files for environment configuration.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from .config import load_config
from .errors import FatalSetupError
from .logging_utils import get_logger
from .runner import run_pipeline

try:
    from dotenv import load_dotenv
except ImportError:
    load_dotenv = None

app = typer.Typer(add_completion=False)
console = Console()


@app.command()
def run(
    config: Path = typer.Option(..., "--config", "-c", help="YAML configuration file."),
    download: bool = typer.Option(False, "--download/--no-download", help="Download the feeds."),
    limit: int = typer.Option(0, "--limit", min=0, help="Stop after this many successful downloads."),
    web: bool = typer.Option(False, "--web/--no-web", help="Generate the web page."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Collect feeds and generate a single reverse-chronological page.

    Args:
        config: Path to YAML config file
        download: Whether to download the configured feeds
        limit: Download success limit (0 = no limit)
        web: Whether to render the HTML page
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    if load_dotenv is not None:
        load_dotenv()

    try:
        cfg = load_config(str(config))
        if log_level:
            cfg.logging.level = log_level
        run_pipeline(cfg, download=download, limit=limit, web=web, console=console)
    except FatalSetupError as exc:
        get_logger().error(str(exc))
        console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
        raise typer.Exit(code=1) from exc


if __name__ == "__main__":
    app()
