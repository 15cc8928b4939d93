"""Error taxonomy for batch runs."""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class BatchError(Exception):
    """Base class for all vidbatch errors."""


class StartupFatalError(BatchError, ValueError):
    """Target directory is missing or not a directory.

    Raised before discovery starts; the run must abort without touching files.
    """

    def __init__(self, path: Path, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class DirectoryReadError(BatchError):
    """A directory could not be listed during discovery.

    Never raised out of the scanner - it is logged and the subtree skipped.
    """

    def __init__(self, directory: Path, cause: OSError):
        super().__init__(f"Error reading directory {directory}: {cause.strerror or cause}")
        self.directory = directory
        self.cause = cause


class AnalyzerInvocationError(BatchError):
    """The external analyzer could not produce a result for one file."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.message = message
        self.returncode = returncode
        self.stderr = stderr


class ReportWriteError(BatchError):
    """The batch report could not be persisted."""

    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Failed to write batch report {path}: {cause}")
        self.path = path
        self.cause = cause
