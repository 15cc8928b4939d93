"""Test fixtures for batch analysis tests.

Provides helpers that lay out video trees on disk and a stand-in analyzer
program that behaves like the real one: it writes its text output to the
``--output`` path, fails for files named ``*broken*`` and floods stdout for
files named ``*noisy*``.
"""
from __future__ import annotations

import sys
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from vidbatch.core.models import InputFile


FAKE_ANALYZER_SOURCE = '''
import sys
from pathlib import Path

args = sys.argv[1:]
source = Path(args[0])
output = Path(args[args.index("--output") + 1])

with open({log!r}, "a", encoding="utf-8") as log:
    log.write("\\t".join(args) + "\\n")

if "broken" in source.name:
    sys.stderr.write("decoder error: corrupt stream in " + source.name + "\\n")
    sys.exit(3)

if "noisy" in source.name:
    sys.stdout.write("x" * 200000)
    sys.stdout.flush()

output.write_text("analysis of " + source.name + "\\n", encoding="utf-8")
print("done")
'''


@dataclass
class FakeAnalyzer:
    """A Python script standing in for the video analyzer program."""
    directory: Path
    script: Path = field(init=False)
    log: Path = field(init=False)

    def __post_init__(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.script = self.directory / "fake_analyzer.py"
        self.log = self.directory / "invocations.log"
        self.script.write_text(
            textwrap.dedent(FAKE_ANALYZER_SOURCE.format(log=str(self.log))),
            encoding="utf-8",
        )

    @property
    def command(self) -> tuple[str, ...]:
        return (sys.executable, str(self.script))

    def invocations(self) -> list[list[str]]:
        """Argument lists of every call so far."""
        if not self.log.exists():
            return []
        lines = self.log.read_text(encoding="utf-8").splitlines()
        return [line.split("\t") for line in lines if line]


class RecordingAnalyzer:
    """In-process analyzer double that records calls.

    Files whose name contains ``broken`` raise AnalyzerInvocationError.
    """

    def __init__(self, write_output: bool = True):
        self.calls: list[tuple[Path, Path, float, int]] = []
        self._write_output = write_output

    def analyze(self, input_path: Path, output_path: Path, delay: float, frame_skip: int) -> str:
        from vidbatch.core.errors import AnalyzerInvocationError

        self.calls.append((input_path, output_path, delay, frame_skip))
        if "broken" in input_path.name:
            raise AnalyzerInvocationError(
                f"Command failed with exit code 3: analyze {input_path.name}",
                returncode=3,
                stderr="decoder error",
            )
        if self._write_output:
            output_path.write_text(f"analysis of {input_path.name}\n")
        return ""


def make_video(root: Path, relative: str, size: int = 16, analyzed: bool = False) -> Path:
    """Create a fake video file, optionally with its ``.txt`` output."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\0" * size)
    if analyzed:
        stem = path.name[: -len(path.suffix)] if path.suffix else path.name
        path.with_name(stem + ".txt").write_text("previous analysis\n")
    return path


def make_input(root: Path, relative: str, size: int = 16) -> InputFile:
    """Create a fake video on disk and return it as an InputFile."""
    path = make_video(root, relative, size)
    return InputFile(path=path, size=size, relative_path=Path(relative))


def report_files(directory: Path) -> list[Path]:
    return sorted(directory.glob("batch-analysis-report-*.json"))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0, step: Optional[float] = None):
        self.now = start
        self._step = step

    def __call__(self) -> float:
        value = self.now
        if self._step is not None:
            self.now += self._step
        return value

    def advance(self, seconds: float) -> None:
        self.now += seconds
