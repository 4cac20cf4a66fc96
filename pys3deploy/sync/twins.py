"""Resolution of plain/compressed file twins.

When the ``replace_with_gzip`` extra is enabled, a file ``f`` and its
compressed counterpart ``f.gz`` are deployed as a single object under the
key of ``f``. Whichever variant is smaller on disk is uploaded; the
compressed one is tagged with ``Content-Encoding: gzip`` by the planner.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import S3DeployFileError
from ..utils import format_size, has_gzip_suffix, strip_gzip_suffix
from .scanner import LocalFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedCandidate:
    """What to upload for a candidate, and under which key."""

    source: Path
    """Physical file that is transferred"""

    relative_path: str
    """Logical path relative to the root (never carries the twin suffix)"""

    remote_key: str
    """Logical remote key"""

    compressed: bool = False
    """True when ``source`` carries the compression suffix"""


class TwinResolver:
    """Detects twin pairs and picks the variant to transfer.

    The resolver looks ahead into the complete candidate set, so a pair is
    found whichever member is visited first. Names consumed by a resolved
    pair are remembered for the rest of the pass; visiting the other member
    later yields ``None``.
    """

    def __init__(self, candidates: Iterable[LocalFile], enabled: bool = False):
        """Initialize the resolver for one pass.

        Args:
            candidates: The full, already filtered candidate list
            enabled: Whether ``replace_with_gzip`` is on
        """
        self.enabled = enabled
        self.candidates: dict[str, LocalFile] = {
            f.relative_path: f for f in candidates
        }
        self.resolved_names: set[str] = set()

        # Plain name -> compressed name; the suffix matches in any case
        self._compressed_names: dict[str, str] = {}
        for name in self.candidates:
            if has_gzip_suffix(name):
                self._compressed_names.setdefault(strip_gzip_suffix(name), name)

    def twin_name(self, relative_path: str) -> Optional[str]:
        """Return the other member of a candidate's pair, resolved or not."""
        if has_gzip_suffix(relative_path):
            twin = strip_gzip_suffix(relative_path)
            return twin if twin in self.candidates else None
        return self._compressed_names.get(relative_path)

    def find_twin(self, relative_path: str) -> Optional[str]:
        """Return the relative path of the twin of a candidate, if present.

        Candidates already resolved earlier in the pass do not count, so
        no remote key is produced twice.
        """
        twin = self.twin_name(relative_path)
        if twin is not None and not self.is_resolved(twin):
            return twin
        return None

    def is_resolved(self, relative_path: str) -> bool:
        return relative_path in self.resolved_names

    def resolve(
        self, local_file: LocalFile, remote_key: str
    ) -> Optional[ResolvedCandidate]:
        """Resolve a candidate into the file to transfer.

        Args:
            local_file: Candidate being processed
            remote_key: Remote key derived from the candidate's own path

        Returns:
            ResolvedCandidate, or None if the candidate was consumed by a
            twin resolved earlier in the pass

        Raises:
            S3DeployFileError: If the size of a twin cannot be read
        """
        if self.is_resolved(local_file.relative_path):
            logger.debug(f"Already resolved in this pass: {local_file.relative_path}")
            return None

        twin_name = self.find_twin(local_file.relative_path) if self.enabled else None
        if twin_name is None:
            self.resolved_names.add(local_file.relative_path)
            return ResolvedCandidate(
                source=local_file.path,
                relative_path=local_file.relative_path,
                remote_key=remote_key,
                compressed=has_gzip_suffix(local_file.path.name),
            )

        twin = self.candidates[twin_name]
        if has_gzip_suffix(local_file.relative_path):
            plain, compressed = twin, local_file
        else:
            plain, compressed = local_file, twin

        self.resolved_names.add(plain.relative_path)
        self.resolved_names.add(compressed.relative_path)

        use_compressed = self._is_compressed_smaller(plain, compressed)
        logger.debug(
            f"Twin pair {plain.relative_path} / {compressed.relative_path}: "
            f"using {'compressed' if use_compressed else 'plain'} variant"
        )

        if plain is not local_file:
            remote_key = strip_gzip_suffix(remote_key)

        return ResolvedCandidate(
            source=compressed.path if use_compressed else plain.path,
            relative_path=plain.relative_path,
            remote_key=remote_key,
            compressed=use_compressed,
        )

    def _is_compressed_smaller(self, plain: LocalFile, compressed: LocalFile) -> bool:
        """Compare on-disk sizes; ties keep the plain file."""
        try:
            plain_size = plain.size
        except OSError as e:
            raise S3DeployFileError(str(plain.path), f"{plain.path}: {e}") from e
        try:
            compressed_size = compressed.size
        except OSError as e:
            raise S3DeployFileError(
                str(compressed.path), f"{compressed.path}: {e}"
            ) from e
        logger.debug(
            f"{plain.relative_path}: {format_size(plain_size)}, "
            f"{compressed.relative_path}: {format_size(compressed_size)}"
        )
        return compressed_size < plain_size
