"""Configuration dataclasses with validation."""
from __future__ import annotations

import shlex
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .errors import StartupFatalError


DEFAULT_ANALYZER = ("video-analyzer",)
DEFAULT_EXTENSION = ".mp4"
DEFAULT_FRAME_SKIP = 30
OUTPUT_SUFFIX = ".txt"
MAX_CAPTURE_BYTES = 10 * 1024 * 1024  # 10MB per stream


def parse_analyzer_command(command: str) -> tuple[str, ...]:
    """Split an analyzer command line into argv parts."""
    return tuple(shlex.split(command))


@dataclass(slots=True)
class BatchConfig:
    """Resolved configuration for one batch run.

    Validated on construction. An invalid directory raises StartupFatalError
    so the run aborts before discovery begins.
    """
    directory: Path

    # Forwarded to the analyzer
    delay: float = 0.0
    frame_skip: int = DEFAULT_FRAME_SKIP
    slim: bool = True
    analyzer_command: tuple[str, ...] = DEFAULT_ANALYZER

    # Discovery and gating
    force: bool = False
    recursive: bool = True
    extension: str = DEFAULT_EXTENSION
    sort: bool = False
    follow_symlinks: bool = False

    max_buffer: int = MAX_CAPTURE_BYTES

    def __post_init__(self) -> None:
        """Validate configuration."""
        directory = Path(self.directory).expanduser()
        if not directory.exists():
            raise StartupFatalError(directory, "Directory not found")
        if not directory.is_dir():
            raise StartupFatalError(directory, "Not a valid directory")
        self.directory = directory.resolve()

        if self.delay < 0:
            raise ValueError("Delay must be zero or positive")

        if self.frame_skip < 1:
            raise ValueError("Frame skip must be at least 1")

        if not self.analyzer_command:
            raise ValueError("Analyzer command must not be empty")
        self.analyzer_command = tuple(self.analyzer_command)

        ext = self.extension.strip()
        if not ext or ext == ".":
            raise ValueError("Extension must not be empty")
        if not ext.startswith("."):
            ext = "." + ext
        self.extension = ext.lower()

        if self.max_buffer < 1:
            raise ValueError("Capture buffer must be at least 1 byte")

    def to_report_options(self) -> dict[str, Any]:
        """Options block written into the batch report."""
        return {
            "delay": self.delay,
            "frameSkip": self.frame_skip,
            "force": self.force,
            "recursive": self.recursive,
            "extension": self.extension,
            "analyzer": shlex.join(self.analyzer_command),
            "slim": self.slim,
            "sort": self.sort,
            "directory": str(self.directory),
        }

    def with_overrides(self, **kwargs) -> "BatchConfig":
        """Create a new config with some values overridden."""
        current = {f.name: getattr(self, f.name) for f in fields(self)}
        current.update(kwargs)
        return BatchConfig(**current)
