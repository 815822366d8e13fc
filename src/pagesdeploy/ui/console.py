"""Rich-powered console output for pagesdeploy."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from pagesdeploy import __version__


def configure_logging(debug: bool = False) -> None:
    """Route the ``pagesdeploy`` loggers through Rich.

    ``debug`` also dumps intermediate API responses.
    """
    logger = logging.getLogger("pagesdeploy")
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(show_path=False, markup=False))
    logger.propagate = False


class Console:
    """Terminal output for pagesdeploy using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]pagesdeploy[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Cloudflare Pages deploys with pull request status[/dim]",
                border_style="cyan",
                padding=(1, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.console.print(f"[red]✗[/red] {message}")

    def warning(self, message: str) -> None:
        self.console.print(f"[yellow]![/yellow] {message}")

    def info(self, message: str) -> None:
        self.console.print(f"[blue]i[/blue] {message}")

    def markdown(self, text: str) -> None:
        """Render markdown text."""
        self.console.print(Markdown(text))

    def show_deployment(self, result) -> None:
        """Display the outputs of a finished deploy."""
        table = Table(title="Cloudflare Pages Deployment", border_style="cyan")
        table.add_column("Output", style="bold")
        table.add_column("Value", style="cyan")

        table.add_row("id", result.deployment_id)
        table.add_row("url", result.url)
        table.add_row("environment", result.environment)
        table.add_row("alias", result.alias)
        table.add_section()
        table.add_row("GitHub environment", result.environment_name)
        if result.comment_id is not None:
            table.add_row("Status comment", str(result.comment_id))

        self.console.print(table)
