"""Batch runner - orchestrates discovery, gating and analysis.

Files are analyzed strictly one at a time, in discovery order. A failing file
becomes an ``error`` result and the loop moves on.

Ctrl+C kills the analyzer that is currently running and propagates
KeyboardInterrupt out of ``run``. No report is written for an interrupted
batch; outputs already produced stay on disk and are skipped next time.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from ..core.config import BatchConfig
from ..core.errors import AnalyzerInvocationError
from ..core.models import BatchOutcome, GateDecision, InputFile, JobResult
from ..core.protocols import Analyzer, ProgressReporter
from .gate import IdempotencyGate
from .progress import ProgressTracker, estimate_batch_seconds
from .scanner import DirectoryScanner

logger = logging.getLogger(__name__)


@dataclass
class RunnerDependencies:
    """All dependencies needed by the runner.

    This is explicitly passed in - no globals or singletons.
    """
    analyzer: Analyzer
    scanner: DirectoryScanner
    gate: IdempotencyGate
    progress: ProgressReporter


class JobRunner:
    """Runs the analyzer over every discovered file."""

    def __init__(
        self,
        config: BatchConfig,
        deps: RunnerDependencies,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize runner with config and dependencies.

        Args:
            config: Batch configuration.
            deps: All required dependencies.
            clock: Monotonic time source for durations and ETA.
        """
        self._config = config
        self._deps = deps
        self._clock = clock

    def run(self) -> BatchOutcome:
        """Discover files and analyze them.

        Returns:
            The outcome; ``nothing_to_do`` is set when no files matched.

        Raises:
            KeyboardInterrupt: If interrupted by user.
        """
        files = self.discover()
        if not files:
            self._deps.progress.warning(
                f"No {self._config.extension} files found in {self._config.directory}"
            )
            return BatchOutcome()

        self._deps.progress.success(f"Found {len(files)} {self._config.extension} file(s)")

        to_process, to_skip = self._deps.gate.partition(files)
        estimate = estimate_batch_seconds(
            sum(item.size_mb for item in to_process),
            self._config.frame_skip,
        )
        self._deps.progress.print_plan(to_process, to_skip, estimate)

        start = self._clock()
        tracker = ProgressTracker(len(files), clock=self._clock)
        results = self.execute(files, tracker)
        return BatchOutcome(
            files=files,
            results=results,
            total_duration=self._clock() - start,
            average_duration=tracker.average_duration,
        )

    def discover(self) -> list[InputFile]:
        """Scan the target directory."""
        suffix = " (including subdirectories)" if self._config.recursive else ""
        self._deps.progress.info(f"Scanning for {self._config.extension} files{suffix}...")
        return self._deps.scanner.scan(
            self._config.directory,
            recursive=self._config.recursive,
            sort=self._config.sort,
        )

    def execute(self, files: list[InputFile], tracker: ProgressTracker) -> list[JobResult]:
        """Analyze ``files`` in order, one result per file.

        Successful durations are recorded on ``tracker``.
        """
        progress = self._deps.progress
        results: list[JobResult] = []

        progress.start_phase("Analyzing", len(files))
        try:
            for i, item in enumerate(files):
                progress.show_progress(tracker.update(i, f"Analyzing {item.name}..."))

                result = self._process_one(item, tracker)
                results.append(result)

                progress.show_progress(tracker.advance(f"Analyzing {item.name}..."))

            progress.show_progress(tracker.update(len(files), "Complete!"))
        except KeyboardInterrupt:
            progress.warning(f"Analysis interrupted. Finished {len(results)} of {len(files)} files.")
            raise
        finally:
            progress.end_phase()

        return results

    def _process_one(self, item: InputFile, tracker: ProgressTracker) -> JobResult:
        """Gate, analyze and record a single file."""
        gate = self._deps.gate
        output_path = gate.output_path(item)

        if gate.decide(item) == GateDecision.SKIP:
            logger.debug(f"Skipping {item.relative_path}: {output_path.name} exists")
            return JobResult.skipped(item, output_path)

        start = self._clock()
        try:
            self._deps.analyzer.analyze(
                item.path,
                output_path,
                delay=self._config.delay,
                frame_skip=self._config.frame_skip,
            )
        except AnalyzerInvocationError as e:
            logger.debug(f"Analyzer failed for {item.path}: {e.message}\n{e.stderr}")
            self._deps.progress.error(f"Error processing {item.relative_path}: {e.message}")
            return JobResult.failed(item, e.message, e.stderr or None)

        duration = self._clock() - start
        tracker.record_completion(duration)
        return JobResult.succeeded(item, output_path, duration)
