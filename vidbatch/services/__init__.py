"""Service layer components."""
from .scanner import DirectoryScanner
from .gate import IdempotencyGate, output_path_for
from .progress import ProgressTracker, format_time, estimate_batch_seconds
from .runner import JobRunner, RunnerDependencies
from .report import ReportWriter, BatchReport, build_report, load_report

__all__ = [
    "DirectoryScanner",
    "IdempotencyGate",
    "output_path_for",
    "ProgressTracker",
    "format_time",
    "estimate_batch_seconds",
    "JobRunner",
    "RunnerDependencies",
    "ReportWriter",
    "BatchReport",
    "build_report",
    "load_report",
]
