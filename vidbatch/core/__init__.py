"""Core domain models and protocols."""
from .protocols import (
    Analyzer,
    ProgressReporter,
)
from .models import (
    InputFile,
    JobStatus,
    JobResult,
    GateDecision,
    ProgressState,
    ProgressSnapshot,
    BatchSummary,
    BatchOutcome,
    format_time,
)
from .config import BatchConfig
from .errors import (
    BatchError,
    StartupFatalError,
    DirectoryReadError,
    AnalyzerInvocationError,
    ReportWriteError,
)

__all__ = [
    # Protocols
    "Analyzer",
    "ProgressReporter",
    # Models
    "InputFile",
    "JobStatus",
    "JobResult",
    "GateDecision",
    "ProgressState",
    "ProgressSnapshot",
    "BatchSummary",
    "BatchOutcome",
    "format_time",
    # Config
    "BatchConfig",
    # Errors
    "BatchError",
    "StartupFatalError",
    "DirectoryReadError",
    "AnalyzerInvocationError",
    "ReportWriteError",
]
