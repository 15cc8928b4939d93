"""Protocol definitions (interfaces) for dependency injection."""
from __future__ import annotations

from abc import abstractmethod
from pathlib import Path
from typing import Protocol, Optional

from .models import InputFile, JobResult, BatchSummary, ProgressSnapshot


class Analyzer(Protocol):
    """Interface for the external per-file analysis step.

    Implementations:
    - VideoAnalyzer: runs the analyzer program as a subprocess
    """

    @abstractmethod
    def analyze(
        self,
        input_path: Path,
        output_path: Path,
        delay: float,
        frame_skip: int,
    ) -> str:
        """Analyze one file, writing text to ``output_path``.

        Returns:
            Whatever the analyzer printed to stdout.

        Raises:
            AnalyzerInvocationError: The analyzer did not complete normally.
        """
        ...


class ProgressReporter(Protocol):
    """Interface for progress reporting."""

    @abstractmethod
    def start_phase(self, name: str, total: int) -> None:
        """Start a new processing phase."""
        ...

    @abstractmethod
    def show_progress(self, snapshot: ProgressSnapshot) -> None:
        """Render a progress update."""
        ...

    @abstractmethod
    def end_phase(self) -> None:
        """Complete current phase."""
        ...

    @abstractmethod
    def info(self, message: str) -> None:
        """Log an info message."""
        ...

    @abstractmethod
    def success(self, message: str) -> None:
        """Log a success message."""
        ...

    @abstractmethod
    def warning(self, message: str) -> None:
        """Log a warning message."""
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        """Log an error message."""
        ...

    @abstractmethod
    def print_plan(
        self,
        to_process: list[InputFile],
        to_skip: list[InputFile],
        estimated_seconds: Optional[float],
    ) -> None:
        """Show which files will be analyzed and which skipped."""
        ...

    @abstractmethod
    def print_summary(self, summary: BatchSummary, errors: list[JobResult]) -> None:
        """Show the end-of-batch summary."""
        ...
