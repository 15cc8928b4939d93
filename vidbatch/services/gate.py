"""Idempotency gate - decides which files still need analysis."""
from __future__ import annotations

from pathlib import Path

from ..core.config import DEFAULT_EXTENSION, OUTPUT_SUFFIX
from ..core.models import InputFile, GateDecision


def output_path_for(
    path: Path,
    extension: str = DEFAULT_EXTENSION,
    suffix: str = OUTPUT_SUFFIX,
) -> Path:
    """Companion output path for an input file.

    Same directory, extension stripped case-insensitively, ``suffix`` appended:
    ``clip.MP4`` and ``clip.mp4`` both map to ``clip.txt``.
    """
    name = path.name
    if name.lower().endswith(extension.lower()):
        name = name[: len(name) - len(extension)]
    return path.with_name(name + suffix)


class IdempotencyGate:
    """Skips files whose companion output already exists."""

    def __init__(
        self,
        force: bool = False,
        extension: str = DEFAULT_EXTENSION,
        suffix: str = OUTPUT_SUFFIX,
    ):
        self._force = force
        self._extension = extension
        self._suffix = suffix

    def output_path(self, item: InputFile) -> Path:
        return output_path_for(item.path, self._extension, self._suffix)

    def decide(self, item: InputFile) -> GateDecision:
        if not self._force and self.output_path(item).exists():
            return GateDecision.SKIP
        return GateDecision.PROCESS

    def partition(self, items: list[InputFile]) -> tuple[list[InputFile], list[InputFile]]:
        """Split files into (to_process, to_skip), preserving order."""
        to_process: list[InputFile] = []
        to_skip: list[InputFile] = []
        for item in items:
            if self.decide(item) == GateDecision.SKIP:
                to_skip.append(item)
            else:
                to_process.append(item)
        return to_process, to_skip
