"""Directory scanning utilities for sync operations."""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Entry names (files or directories) never enumerated
IGNORED_NAMES = frozenset({".git"})


@dataclass(frozen=True)
class LocalFile:
    """Represents a local file discovered by enumeration."""

    path: Path
    """Absolute path to the file"""

    relative_path: str
    """Relative path (using forward slashes for cross-platform compatibility)"""

    @property
    def size(self) -> int:
        """File size in bytes, read from disk on access."""
        return self.path.stat().st_size

    @classmethod
    def from_path(cls, file_path: Path, base_path: Path) -> "LocalFile":
        """Create LocalFile from a path.

        Args:
            file_path: Absolute path to the file
            base_path: Base path for calculating relative paths

        Returns:
            LocalFile instance
        """
        # Use as_posix() to ensure forward slashes on all platforms
        relative_path = file_path.relative_to(base_path).as_posix()
        return cls(path=file_path, relative_path=relative_path)


class DirectoryScanner:
    """Scans a directory tree and builds the candidate list.

    Entries named ``.git`` (directories or submodule files) are never
    enumerated. Candidates whose relative path matches ``skip_pattern`` are
    removed before any other component sees them.

    Examples:
        >>> scanner = DirectoryScanner(skip_pattern=r"\\.psd$")
        >>> files = scanner.scan_local(Path("/srv/site"))
    """

    def __init__(self, skip_pattern: Optional[Union[str, re.Pattern]] = None):
        """Initialize directory scanner.

        Args:
            skip_pattern: Regular expression for relative paths to exclude
        """
        if isinstance(skip_pattern, str):
            skip_pattern = re.compile(skip_pattern)
        self.skip_pattern = skip_pattern

    def should_skip(self, relative_path: str) -> bool:
        """Check whether a candidate is excluded by the skip pattern."""
        if self.skip_pattern is None:
            return False
        return self.skip_pattern.search(relative_path) is not None

    def scan_local(
        self, directory: Path, base_path: Optional[Path] = None
    ) -> list[LocalFile]:
        """Recursively scan a local directory.

        Entries are visited in sorted order so twin resolution is
        reproducible between runs.

        Args:
            directory: Directory to scan
            base_path: Base path for calculating relative paths (defaults to directory)

        Returns:
            List of LocalFile objects that survived the skip pattern
        """
        if base_path is None:
            base_path = directory

        files: list[LocalFile] = []

        for item in sorted(directory.iterdir()):
            if item.name in IGNORED_NAMES:
                continue
            if item.is_dir():
                files.extend(self.scan_local(item, base_path))
            elif item.is_file():
                local_file = LocalFile.from_path(item, base_path)
                if self.should_skip(local_file.relative_path):
                    logger.debug(f"Skipping (skip_regex): {local_file.relative_path}")
                    continue
                files.append(local_file)

        return files
