"""Batch report model and writer."""
from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..core.config import BatchConfig
from ..core.errors import ReportWriteError
from ..core.models import BatchSummary, JobResult

logger = logging.getLogger(__name__)

REPORT_PREFIX = "batch-analysis-report-"


class _ReportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ReportResult(_ReportModel):
    """One file's entry in the report."""
    file: str = Field(..., description="Path relative to the scanned directory")
    status: str = Field(..., description="success, skipped or error")
    duration: Optional[float] = Field(default=None, description="Analysis seconds (success only)")
    output_path: Optional[str] = Field(default=None, alias="outputPath")
    error: Optional[str] = Field(default=None, description="Failure message (error only)")

    @classmethod
    def from_result(cls, result: JobResult) -> "ReportResult":
        return cls(
            file=result.file,
            status=result.status.value,
            duration=result.duration,
            output_path=str(result.output_path) if result.output_path else None,
            error=result.error,
        )


class ReportSummary(_ReportModel):
    """Counts per status and total wall-clock time."""
    total_files: int = Field(..., alias="totalFiles")
    successful: int
    skipped: int
    errors: int
    total_duration: float = Field(..., alias="totalDuration")


class BatchReport(_ReportModel):
    """The persisted summary of one batch run."""
    timestamp: str = Field(..., description="ISO-8601 UTC time the report was built")
    directory: str
    options: dict[str, Any] = Field(default_factory=dict)
    summary: ReportSummary
    results: List[ReportResult] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_counts(self) -> "BatchReport":
        s = self.summary
        if s.successful + s.skipped + s.errors != s.total_files:
            raise ValueError("Summary counts do not add up to totalFiles")
        if s.total_files != len(self.results):
            raise ValueError("totalFiles does not match number of results")
        return self


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_report(
    results: list[JobResult],
    config: BatchConfig,
    total_duration: float,
) -> BatchReport:
    """Build a report from the ordered results of a run."""
    summary = BatchSummary.from_results(results, total_duration)
    return BatchReport(
        timestamp=utc_timestamp(),
        directory=str(config.directory),
        options=config.to_report_options(),
        summary=ReportSummary(
            total_files=summary.total_files,
            successful=summary.successful,
            skipped=summary.skipped,
            errors=summary.errors,
            total_duration=summary.total_duration,
        ),
        results=[ReportResult.from_result(r) for r in results],
    )


def load_report(path: Path) -> BatchReport:
    """Read a report written by ReportWriter."""
    return BatchReport.model_validate_json(path.read_text(encoding="utf-8"))


class ReportWriter:
    """Persists batch reports into the scanned directory.

    File names embed a nanosecond timestamp and are created exclusively, so
    a report is never overwritten by a later run.
    """

    def __init__(self, directory: Path):
        self._directory = directory

    def write(
        self,
        results: list[JobResult],
        config: BatchConfig,
        total_duration: float,
    ) -> Path:
        """Build and write the report.

        Returns:
            Path of the written report.

        Raises:
            ReportWriteError: The file could not be written.
        """
        report = build_report(results, config, total_duration)
        payload = report.model_dump_json(by_alias=True, indent=2)

        stamp = time.time_ns()
        path = self._directory / f"{REPORT_PREFIX}{stamp}.json"
        attempt = 0
        while True:
            try:
                with open(path, "x", encoding="utf-8") as f:
                    f.write(payload)
                break
            except FileExistsError:
                attempt += 1
                path = self._directory / f"{REPORT_PREFIX}{stamp}-{attempt}.json"
            except OSError as e:
                raise ReportWriteError(path, e) from e

        logger.debug(f"Wrote batch report {path}")
        return path
