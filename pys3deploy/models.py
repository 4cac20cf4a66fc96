"""Data models for remote objects."""

from dataclasses import dataclass
from typing import Any

from .utils import normalize_etag


@dataclass(frozen=True)
class RemoteObject:
    """An object in the remote bucket as seen by one listing."""

    key: str
    """Object key, unique within the bucket"""

    fingerprint: str
    """Content fingerprint exposed by the store (ETag without quotes)"""

    size: int = 0
    """Object size in bytes"""

    @classmethod
    def from_listing(cls, item: dict[str, Any]) -> "RemoteObject":
        """Create a RemoteObject from a ``list_objects_v2`` ``Contents`` entry."""
        return cls(
            key=item["Key"],
            fingerprint=normalize_etag(item.get("ETag", "")),
            size=item.get("Size", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "fingerprint": self.fingerprint, "size": self.size}
