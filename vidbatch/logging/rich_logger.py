"""Rich-based progress reporter implementation."""
from __future__ import annotations

import sys
from typing import Optional

from rich.console import Console
from rich.progress import (
    Progress,
    ProgressColumn,
    SpinnerColumn,
    TextColumn,
    BarColumn,
    TimeElapsedColumn,
    MofNCompleteColumn,
    TaskID,
    Task,
)
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel
from rich.text import Text

from ..core.models import InputFile, JobResult, BatchSummary, ProgressSnapshot, format_time


class EtaColumn(ProgressColumn):
    """Renders the ETA computed by ProgressTracker (whole-run average)."""

    def render(self, task: Task) -> Text:
        eta = task.fields.get("eta")
        if eta is None:
            return Text("ETA --:--:--", style="magenta")
        return Text(f"ETA {eta}", style="magenta")


class RichProgressReporter:
    """Progress reporter using Rich for terminal output.

    Implements the ProgressReporter protocol with Rich console output.
    """

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        console: Optional[Console] = None,
    ):
        """Initialize the reporter.

        Args:
            verbose: Enable verbose output.
            quiet: Suppress all non-essential output.
            console: Console to write to (default: stderr).
        """
        self._console = console or Console(stderr=True)
        self._verbose = verbose
        self._quiet = quiet
        self._progress: Optional[Progress] = None
        self._current_task_id: Optional[TaskID] = None
        self._phase_name: str = ""

    # --- Phase Management ---

    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase with progress bar."""
        self._phase_name = name

        if self._quiet:
            return

        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            MofNCompleteColumn(),
            TextColumn("[cyan]•"),
            TimeElapsedColumn(),
            TextColumn("[cyan]•"),
            EtaColumn(),
            console=self._console,
            transient=False,
        )
        self._progress.start()
        self._current_task_id = self._progress.add_task(name, total=total, eta=None)

    def show_progress(self, snapshot: ProgressSnapshot) -> None:
        """Update the bar from a tracker snapshot."""
        if self._progress and self._current_task_id is not None:
            self._progress.update(
                self._current_task_id,
                completed=snapshot.current,
                description=escape(snapshot.label or self._phase_name),
                eta=snapshot.eta_text,
            )

    def end_phase(self) -> None:
        """End the current phase."""
        if self._progress:
            self._progress.stop()
            self._progress = None
            self._current_task_id = None

    # --- Logging Methods ---

    def info(self, message: str) -> None:
        """Log an info message."""
        if not self._quiet:
            self._console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Log a success message."""
        if not self._quiet:
            self._console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self._console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Log an error message."""
        self._console.print(f"[red]✗[/red] {escape(message)}", style="red")

    # --- Specialized Output ---

    def print_header(self, title: str) -> None:
        """Print a styled header."""
        if self._quiet:
            return

        text = Text(title, style="bold cyan")
        self._console.print(Panel(text, border_style="cyan"))

    def print_config(self, config_items: dict) -> None:
        """Print configuration as a table."""
        if self._quiet:
            return

        table = Table(title="Configuration", show_header=True, header_style="bold")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")

        for key, value in config_items.items():
            table.add_row(key, escape(str(value)))

        self._console.print(table)

    def print_plan(
        self,
        to_process: list[InputFile],
        to_skip: list[InputFile],
        estimated_seconds: Optional[float],
    ) -> None:
        """Print the files to analyze and the ones already done."""
        if self._quiet:
            return

        if to_process:
            self._console.print("\n[green]Files to analyze:[/green]")
            for i, item in enumerate(to_process, 1):
                self._console.print(f"  {i}. {escape(str(item.relative_path))} [dim]({item.size_mb:.2f} MB)[/dim]")

        if to_skip:
            self._console.print("\n[yellow]Files to skip (already analyzed):[/yellow]")
            for item in to_skip:
                self._console.print(f"  • {escape(str(item.relative_path))} [dim]({item.size_mb:.2f} MB)[/dim]")

        if not to_process:
            self._console.print("\n[yellow]✓ All files already analyzed. Use --force to re-analyze.[/yellow]")
            return

        process_mb = sum(item.size_mb for item in to_process)
        self._console.print(f"\n[yellow]Total size to process: {process_mb:.2f} MB[/yellow]")
        if estimated_seconds is not None:
            self._console.print(f"[yellow]Estimated time: {format_time(estimated_seconds)}[/yellow]")

    def print_summary(self, summary: BatchSummary, errors: list[JobResult]) -> None:
        """Print the end-of-batch summary and error details."""
        if not self._quiet:
            table = Table(title="Analysis Summary", show_header=False)
            table.add_column("Metric", style="cyan")
            table.add_column("Value", style="green", justify="right")

            table.add_row("Successfully analyzed", str(summary.successful))
            table.add_row("Skipped (already analyzed)", str(summary.skipped))
            table.add_row("Errors", str(summary.errors))
            table.add_row("", "")
            table.add_row("Total time", format_time(summary.total_duration))
            if summary.average_duration is not None:
                table.add_row("Average time per video", format_time(summary.average_duration))

            self._console.print(table)

        if errors:
            self._console.print("\n[red]Error details:[/red]")
            for result in errors:
                self._console.print(f"  [red]• {escape(result.file)}: {escape(result.error or '')}[/red]")
                if self._verbose and result.stderr:
                    self._console.print(Text(result.stderr.rstrip(), style="dim"))


class QuietProgressReporter:
    """Minimal progress reporter that only shows warnings and errors."""

    def start_phase(self, name: str, total: int) -> None:
        pass

    def show_progress(self, snapshot: ProgressSnapshot) -> None:
        pass

    def end_phase(self) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        print(f"WARNING: {message}", file=sys.stderr)

    def error(self, message: str) -> None:
        print(f"ERROR: {message}", file=sys.stderr)

    def print_header(self, title: str) -> None:
        pass

    def print_config(self, config_items: dict) -> None:
        pass

    def print_plan(
        self,
        to_process: list[InputFile],
        to_skip: list[InputFile],
        estimated_seconds: Optional[float],
    ) -> None:
        pass

    def print_summary(self, summary: BatchSummary, errors: list[JobResult]) -> None:
        for result in errors:
            print(f"ERROR: {result.file}: {result.error}", file=sys.stderr)
