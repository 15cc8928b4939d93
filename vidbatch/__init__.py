"""Batch video analysis orchestration.

Discovers videos, skips the ones already analyzed, runs the external analyzer
on the rest one at a time, and writes a JSON batch report.
"""

__version__ = "2.0.0"

# Core exports
from .core.config import BatchConfig
from .core.models import InputFile, JobStatus, JobResult, BatchOutcome, BatchSummary
from .core.protocols import Analyzer, ProgressReporter
from .core.errors import (
    BatchError,
    StartupFatalError,
    DirectoryReadError,
    AnalyzerInvocationError,
    ReportWriteError,
)

# Engine exports
from .engines.analyzer import VideoAnalyzer

# Service exports
from .services.scanner import DirectoryScanner
from .services.gate import IdempotencyGate
from .services.progress import ProgressTracker
from .services.runner import JobRunner, RunnerDependencies
from .services.report import ReportWriter, BatchReport

# Logging exports
from .logging.rich_logger import RichProgressReporter

__all__ = [
    # Core
    "BatchConfig",
    "InputFile",
    "JobStatus",
    "JobResult",
    "BatchOutcome",
    "BatchSummary",
    "Analyzer",
    "ProgressReporter",
    "BatchError",
    "StartupFatalError",
    "DirectoryReadError",
    "AnalyzerInvocationError",
    "ReportWriteError",
    # Engines
    "VideoAnalyzer",
    # Services
    "DirectoryScanner",
    "IdempotencyGate",
    "ProgressTracker",
    "JobRunner",
    "RunnerDependencies",
    "ReportWriter",
    "BatchReport",
    # Logging
    "RichProgressReporter",
]
