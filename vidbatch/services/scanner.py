"""Directory scanning service."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from ..core.config import DEFAULT_EXTENSION
from ..core.errors import DirectoryReadError
from ..core.models import InputFile
from ..core.protocols import ProgressReporter

logger = logging.getLogger(__name__)


def matches_extension(name: str, extension: str) -> bool:
    """Case-insensitive extension match on a file name."""
    return name.lower().endswith(extension.lower())


class DirectoryScanner:
    """Scans a directory tree for candidate files.

    Traversal is depth-first in directory listing order. Pending directories
    live on an explicit stack of iterators, so deep trees never grow the
    Python call stack.
    """

    def __init__(
        self,
        extension: str = DEFAULT_EXTENSION,
        follow_symlinks: bool = False,
        progress: Optional[ProgressReporter] = None,
    ):
        """Initialize the scanner.

        Args:
            extension: Target extension, matched case-insensitively.
            follow_symlinks: Whether to descend into symlinked directories.
            progress: Optional reporter for unreadable-directory warnings.
        """
        self._extension = extension
        self._follow_symlinks = follow_symlinks
        self._progress = progress

    def scan(
        self,
        root: Path,
        recursive: bool = True,
        sort: bool = False,
    ) -> list[InputFile]:
        """Scan ``root`` and return matching files.

        Args:
            root: Directory to scan.
            recursive: Whether to descend into subdirectories.
            sort: Sort by relative path instead of keeping listing order.

        Returns:
            Discovered files; empty if nothing matched.
        """
        files = list(self.iter_files(root, recursive))
        if sort:
            files.sort(key=lambda f: f.relative_path.as_posix())
        return files

    def iter_files(self, root: Path, recursive: bool = True) -> Iterator[InputFile]:
        """Yield matching files under ``root`` in traversal order."""
        entries = self._list_directory(root)
        if entries is None:
            return

        stack: list[Iterator[Path]] = [iter(entries)]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            if entry.is_dir():
                if not recursive:
                    continue
                if entry.is_symlink() and not self._follow_symlinks:
                    logger.debug(f"Not following symlinked directory: {entry}")
                    continue
                children = self._list_directory(entry)
                if children is not None:
                    stack.append(iter(children))
                continue

            if not entry.is_file() or not matches_extension(entry.name, self._extension):
                continue

            try:
                size = entry.stat().st_size
            except OSError as e:
                logger.warning(f"Could not stat {entry}: {e}")
                size = 0

            yield InputFile(
                path=entry.absolute(),
                size=size,
                relative_path=entry.relative_to(root),
            )

    def _list_directory(self, directory: Path) -> Optional[list[Path]]:
        """List a directory, or log and return None if it is unreadable."""
        try:
            return list(directory.iterdir())
        except OSError as e:
            err = DirectoryReadError(directory, e)
            if self._progress is not None:
                self._progress.warning(str(err))
            else:
                logger.warning(str(err))
            return None
