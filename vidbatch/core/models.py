"""Domain models - immutable data classes."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


SKIP_REASON_ALREADY_ANALYZED = "Already analyzed"


def format_time(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    seconds = max(0.0, seconds)
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


class JobStatus(Enum):
    """Outcome of one file in a batch."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    ERROR = "error"


class GateDecision(Enum):
    """Whether a file needs the analyzer."""
    PROCESS = "process"
    SKIP = "skip"


@dataclass(frozen=True, slots=True)
class InputFile:
    """A discovered candidate file."""
    path: Path
    size: int
    relative_path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size_mb(self) -> float:
        return self.size / (1024 * 1024)


@dataclass(frozen=True, slots=True)
class JobResult:
    """Result of one file in the batch.

    Use the ``succeeded``/``skipped``/``failed`` constructors so that only the
    fields belonging to the status are populated.
    """
    file: str
    status: JobStatus
    output_path: Optional[Path] = None
    duration: Optional[float] = None
    error: Optional[str] = None
    stderr: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def succeeded(cls, item: InputFile, output_path: Path, duration: float) -> "JobResult":
        return cls(
            file=str(item.relative_path),
            status=JobStatus.SUCCESS,
            output_path=output_path,
            duration=duration,
        )

    @classmethod
    def skipped(
        cls,
        item: InputFile,
        output_path: Path,
        reason: str = SKIP_REASON_ALREADY_ANALYZED,
    ) -> "JobResult":
        return cls(
            file=str(item.relative_path),
            status=JobStatus.SKIPPED,
            output_path=output_path,
            reason=reason,
        )

    @classmethod
    def failed(
        cls,
        item: InputFile,
        error: str,
        stderr: Optional[str] = None,
    ) -> "JobResult":
        # No output path: the analyzer did not produce one
        return cls(
            file=str(item.relative_path),
            status=JobStatus.ERROR,
            error=error,
            stderr=stderr,
        )


@dataclass(slots=True)
class ProgressState:
    """Mutable progress counters for a run."""
    total: int
    started_at: float
    current: int = 0
    durations: list[float] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    """One rendered progress update."""
    current: int
    total: int
    label: str
    eta_seconds: Optional[float] = None

    @property
    def fraction(self) -> float:
        if self.total <= 0:
            return 1.0
        return self.current / self.total

    @property
    def percentage(self) -> int:
        return round(self.fraction * 100)

    @property
    def eta_text(self) -> Optional[str]:
        if self.eta_seconds is None:
            return None
        return format_time(self.eta_seconds)

    def render(self, bar_length: int = 40) -> str:
        """Render as a plain text bar."""
        filled = round(bar_length * self.fraction)
        bar = "█" * filled + "░" * (bar_length - filled)
        text = f"[{bar}] {self.percentage}% - {self.label}"
        if self.eta_text is not None:
            text += f" | ETA: {self.eta_text}"
        return text


@dataclass(slots=True)
class BatchSummary:
    """Counts per status for a finished batch."""
    total_files: int = 0
    successful: int = 0
    skipped: int = 0
    errors: int = 0
    total_duration: float = 0.0
    average_duration: Optional[float] = None

    @classmethod
    def from_results(
        cls,
        results: list[JobResult],
        total_duration: float,
        average_duration: Optional[float] = None,
    ) -> "BatchSummary":
        summary = cls(
            total_files=len(results),
            total_duration=total_duration,
            average_duration=average_duration,
        )
        for result in results:
            match result.status:
                case JobStatus.SUCCESS:
                    summary.successful += 1
                case JobStatus.SKIPPED:
                    summary.skipped += 1
                case JobStatus.ERROR:
                    summary.errors += 1
        return summary


@dataclass(slots=True)
class BatchOutcome:
    """Everything a run produced, before it is persisted.

    ``average_duration`` is the mean time of successful analyses as recorded
    by the progress tracker; None when nothing was analyzed.
    """
    files: list[InputFile] = field(default_factory=list)
    results: list[JobResult] = field(default_factory=list)
    total_duration: float = 0.0
    average_duration: Optional[float] = None

    @property
    def nothing_to_do(self) -> bool:
        return not self.files

    @property
    def errors(self) -> list[JobResult]:
        return [r for r in self.results if r.status == JobStatus.ERROR]

    def summary(self) -> BatchSummary:
        return BatchSummary.from_results(
            self.results, self.total_duration, self.average_duration,
        )
