"""File comparison logic for sync operations."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from ..exceptions import S3DeployFileError
from ..models import RemoteObject
from ..utils import calculate_md5, normalize_etag

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken during sync."""

    UPLOAD = "upload"
    """Upload local file to remote"""

    SKIP = "skip"
    """Identical object already present remotely"""

    DELETE = "delete"
    """Delete remote object"""


# Labels used in report lines
ACTION_LABELS = {
    SyncAction.UPLOAD: "Uploaded",
    SyncAction.SKIP: "Skipped",
    SyncAction.DELETE: "Deleted",
}


@dataclass
class SyncDecision:
    """Represents a decision about one remote key."""

    action: SyncAction
    """Action taken"""

    remote_key: str
    """Remote key the decision is about"""

    source: Optional[Path] = None
    """Physical file uploaded (uploads only)"""

    metadata: dict[str, str] = field(default_factory=dict)
    """Object metadata sent with the upload"""

    extra_info: list[str] = field(default_factory=list)
    """Short notes appended to the report line (e.g. ``gzip``)"""

    def format(self) -> str:
        """Render the report line for this decision.

        Examples:
            >>> SyncDecision(SyncAction.UPLOAD, "index.html",
            ...              extra_info=["gzip"]).format()
            'Uploaded\\tindex.html (gzip)'
        """
        line = f"{ACTION_LABELS[self.action]}\t{self.remote_key}"
        if self.extra_info:
            line += f" ({', '.join(self.extra_info)})"
        return line

    def to_dict(self) -> dict:
        return {
            "action": self.action.value,
            "key": self.remote_key,
            "source": str(self.source) if self.source else None,
            "metadata": dict(self.metadata),
            "extra_info": list(self.extra_info),
        }


class RemoteListing:
    """Snapshot of the bucket contents taken once per pass.

    Both the existence check and the reconciler read from the same
    snapshot, so "skip if identical" and "delete if absent" agree with each
    other even if other writers touch the bucket during the pass.
    """

    def __init__(self, objects: Iterable[RemoteObject]):
        self._objects: dict[str, RemoteObject] = {o.key: o for o in objects}

    def __len__(self) -> int:
        return len(self._objects)

    def __iter__(self) -> Iterator[RemoteObject]:
        return iter(self._objects.values())

    def __contains__(self, key: object) -> bool:
        return key in self._objects

    def get(self, key: str) -> Optional[RemoteObject]:
        return self._objects.get(key)

    def keys(self) -> list[str]:
        return list(self._objects)


class FileComparator:
    """Decides whether a file must be uploaded.

    The local file's fingerprint is compared with the fingerprint stored
    for the same key in the listing snapshot. Equality is best-effort change
    detection: stores that compute composite fingerprints (multipart
    uploads) never match, which only causes a redundant upload.
    """

    def __init__(
        self,
        listing: RemoteListing,
        fingerprint: Callable[[Path], str] = calculate_md5,
    ):
        """Initialize file comparator.

        Args:
            listing: Remote snapshot for the current pass
            fingerprint: Function hashing a local file the way the store does
        """
        self.listing = listing
        self.fingerprint = fingerprint

    def is_current(self, source: Path, remote_key: str) -> bool:
        """Check whether an identical object already exists under a key.

        Args:
            source: Physical file that would be uploaded
            remote_key: Logical remote key

        Returns:
            True if the upload can be skipped

        Raises:
            S3DeployFileError: If the local file cannot be read
        """
        try:
            local_fingerprint = self.fingerprint(source)
        except OSError as e:
            raise S3DeployFileError(str(source), f"{source}: {e}") from e

        remote = self.listing.get(remote_key)
        if remote is None:
            logger.debug(f"Not in listing: {remote_key}")
            return False

        matches = normalize_etag(local_fingerprint) == normalize_etag(
            remote.fingerprint
        )
        logger.debug(
            f"Fingerprint {remote_key}: local={local_fingerprint} "
            f"remote={remote.fingerprint} match={matches}"
        )
        return matches
