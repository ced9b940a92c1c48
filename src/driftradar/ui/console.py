"""Rich-powered console output for Drift Radar."""

from __future__ import annotations

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from driftradar import __version__
from driftradar.baseline.aggregator import BaselineData
from driftradar.scoring.analyze import AnalyzeResult
from driftradar.scoring.classifier import ChangedFile
from driftradar.scoring.engine import Verdict
from driftradar.scoring.paths import path_tags

_VERDICT_COLORS = {
    Verdict.LOW: "green",
    Verdict.MEDIUM: "yellow",
    Verdict.HIGH: "red",
}


def configure_logging(verbose: bool = False) -> None:
    """Send ``driftradar.*`` logs to stderr through Rich."""
    logger = logging.getLogger("driftradar")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=RichConsole(stderr=True),
        show_path=False,
        show_time=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


class Console:
    """Terminal output for Drift Radar using Rich."""

    def __init__(self) -> None:
        self.console = RichConsole()

    def banner(self) -> None:
        """Show the Drift Radar banner."""
        self.console.print(
            Panel(
                f"[bold cyan]Drift Radar[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Structural risk signal for pull requests[/dim]",
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

    def show_result(self, result: AnalyzeResult, trend: str = "n/a") -> None:
        """Display the score panel, drivers and actions."""
        scores = result.scores
        color = _VERDICT_COLORS[scores.verdict]

        self.console.print(
            Panel(
                f"[bold]Score:[/bold] [{color}]{scores.score}/100[/{color}] "
                f"{scores.verdict_emoji} ({scores.verdict.value})\n"
                f"[bold]Trend:[/bold] {trend}\n"
                f"[bold]Review Load:[/bold] ~{scores.review_minutes} min\n"
                f"[bold]Amplification:[/bold] x{scores.amp:.2f} "
                f"[dim](base {scores.base:.1f})[/dim]",
                title="[bold]Structural Risk[/bold]",
                border_style=color,
            )
        )

        table = Table(title="Main risk drivers", border_style="cyan")
        table.add_column("Driver", style="bold")
        table.add_column("Contribution", justify="right", style="cyan")
        for d in result.drivers:
            table.add_row(d.label, f"{d.contribution:.1f}")
        self.console.print(table)

        self.console.print("\n[bold]Suggested actions:[/bold]")
        for action in result.suggested_actions:
            self.console.print(f"  [yellow]→[/yellow] {action}")

    def show_files(self, files: list[ChangedFile], hotspots: frozenset[str]) -> None:
        """Display each changed file with its line count and category tags."""
        table = Table(title="Changed files", border_style="cyan")
        table.add_column("Path")
        table.add_column("+/-", justify="right")
        table.add_column("Tags", style="dim")
        for f in files:
            tags = path_tags(f.path)
            if f.path in hotspots:
                tags.append("hotspot")
            table.add_row(f.path, f"+{f.additions}/-{f.deletions}", ", ".join(tags))
        self.console.print(table)

    def show_baseline(self, branch: str, baseline: BaselineData) -> None:
        median = baseline.baseline_median_score
        self.console.print(
            Panel(
                f"[bold]Branch:[/bold] {branch}\n"
                f"[bold]Computed at:[/bold] {baseline.computed_at}\n"
                f"[bold]History window:[/bold] {baseline.history_n} PRs\n"
                f"[bold]Median score:[/bold] {'n/a' if median is None else f'{median:g}'}\n"
                f"[bold]Hotspots:[/bold] {len(baseline.hotspot_files)}",
                title="[bold]Baseline[/bold]",
                border_style="cyan",
            )
        )
        for path in baseline.hotspot_files:
            self.console.print(f"  [cyan]{path}[/cyan]")
