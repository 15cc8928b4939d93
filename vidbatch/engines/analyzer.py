"""External analyzer invocation."""
from __future__ import annotations

import logging
import shlex
import subprocess
import threading
from pathlib import Path
from typing import IO, Optional

from ..core.config import DEFAULT_ANALYZER, MAX_CAPTURE_BYTES
from ..core.errors import AnalyzerInvocationError

logger = logging.getLogger(__name__)

_READ_CHUNK = 64 * 1024


class _StreamCapture:
    """Drains one pipe into memory, up to a byte limit."""

    def __init__(self, stream: IO[bytes], limit: int, on_overflow):
        self._stream = stream
        self._limit = limit
        self._on_overflow = on_overflow
        self._buffer = bytearray()
        self.overflowed = False
        self._thread = threading.Thread(target=self._drain, daemon=True)
        self._thread.start()

    def _drain(self) -> None:
        try:
            while True:
                chunk = self._stream.read(_READ_CHUNK)
                if not chunk:
                    break
                if self.overflowed:
                    continue
                room = self._limit - len(self._buffer)
                if len(chunk) > room:
                    self._buffer.extend(chunk[:room])
                    self.overflowed = True
                    self._on_overflow()
                    continue
                self._buffer.extend(chunk)
        except (OSError, ValueError):
            # Pipe closed underneath us after the child was killed
            pass

    def join(self) -> None:
        self._thread.join()

    def text(self) -> str:
        return self._buffer.decode("utf-8", errors="replace")


class VideoAnalyzer:
    """Runs the video analyzer program once per file.

    One subprocess per call, never more than one alive at a time. Both output
    streams are captured and capped at ``max_buffer`` bytes each; a child that
    writes more is killed and reported as a failure.

    Usage:
        analyzer = VideoAnalyzer(("video-analyzer",))
        analyzer.analyze(Path("clip.mp4"), Path("clip.txt"), delay=0, frame_skip=30)
    """

    def __init__(
        self,
        command: tuple[str, ...] = DEFAULT_ANALYZER,
        slim: bool = True,
        max_buffer: int = MAX_CAPTURE_BYTES,
    ):
        """Initialize the analyzer.

        Args:
            command: Analyzer program and any leading arguments.
            slim: Pass ``--slim`` to the analyzer.
            max_buffer: Per-stream capture limit in bytes.
        """
        self._command = tuple(command)
        self._slim = slim
        self._max_buffer = max_buffer

    def build_command(
        self,
        input_path: Path,
        output_path: Path,
        delay: float,
        frame_skip: int,
    ) -> list[str]:
        """Build the argv for one invocation."""
        argv = [*self._command, str(input_path)]
        if self._slim:
            argv.append("--slim")
        argv += [
            "--delay-between-frames", str(delay),
            "--frame-skip", str(frame_skip),
            "--output", str(output_path),
        ]
        return argv

    def analyze(
        self,
        input_path: Path,
        output_path: Path,
        delay: float,
        frame_skip: int,
    ) -> str:
        """Analyze one file.

        Returns:
            Captured stdout of the analyzer.

        Raises:
            AnalyzerInvocationError: Spawn failure, non-zero exit, or output
                exceeding the capture buffer.
        """
        argv = self.build_command(input_path, output_path, delay, frame_skip)
        cmdline = shlex.join(argv)
        logger.debug(f"Running: {cmdline}")

        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise AnalyzerInvocationError(f"Failed to start analyzer: {e}") from e

        stdout: Optional[_StreamCapture] = None
        stderr: Optional[_StreamCapture] = None
        try:
            stdout = _StreamCapture(process.stdout, self._max_buffer, process.kill)
            stderr = _StreamCapture(process.stderr, self._max_buffer, process.kill)
            returncode = process.wait()
        finally:
            # Reached on normal exit and on KeyboardInterrupt alike
            if process.poll() is None:
                process.kill()
                process.wait()
            for capture in (stdout, stderr):
                if capture is not None:
                    capture.join()
            process.stdout.close()
            process.stderr.close()

        if stdout.overflowed or stderr.overflowed:
            raise AnalyzerInvocationError(
                f"Analyzer output exceeded capture buffer of {self._max_buffer} bytes: {cmdline}",
                returncode=returncode,
                stderr=stderr.text(),
            )

        if returncode != 0:
            raise AnalyzerInvocationError(
                f"Command failed with exit code {returncode}: {cmdline}",
                returncode=returncode,
                stderr=stderr.text(),
            )

        return stdout.text()
