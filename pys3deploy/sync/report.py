"""Results of sync and delete passes."""

from dataclasses import dataclass, field
from typing import Optional

from .comparator import SyncAction, SyncDecision


@dataclass
class SyncFailure:
    """A per-item error collected during a pass."""

    remote_key: str
    """Key (or candidate path) the error is about"""

    action: SyncAction
    """What was being attempted"""

    error: str
    """Error message"""

    def to_dict(self) -> dict:
        return {
            "key": self.remote_key,
            "action": self.action.value,
            "error": self.error,
        }


@dataclass
class DeleteReport:
    """Outcome of a reconciliation or an empty-bucket pass."""

    simulate: bool = False
    deleted: list[str] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "simulate": self.simulate,
            "deleted": list(self.deleted),
            "failures": [f.to_dict() for f in self.failures],
        }


@dataclass
class SyncReport:
    """Ordered decisions of one sync pass plus counts."""

    bucket: str
    simulate: bool = False
    decisions: list[SyncDecision] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)
    active_set: set[str] = field(default_factory=set)
    """Keys confirmed current in this pass (uploaded or identical)"""

    reconciliation: Optional[DeleteReport] = None
    """Set when ``delete_old_files`` ran"""

    def add(self, decision: SyncDecision) -> None:
        self.decisions.append(decision)
        if decision.action in (SyncAction.UPLOAD, SyncAction.SKIP):
            self.active_set.add(decision.remote_key)

    def _count(self, action: SyncAction) -> int:
        return sum(1 for d in self.decisions if d.action == action)

    @property
    def uploads(self) -> int:
        return self._count(SyncAction.UPLOAD)

    @property
    def skips(self) -> int:
        return self._count(SyncAction.SKIP)

    @property
    def deletes(self) -> int:
        return self._count(SyncAction.DELETE)

    @property
    def ok(self) -> bool:
        return not self.failures

    def lines(self) -> list[str]:
        """Report lines in decision order."""
        return [d.format() for d in self.decisions]

    def stats(self) -> dict[str, int]:
        return {
            "uploads": self.uploads,
            "skips": self.skips,
            "deletes": self.deletes,
            "failures": len(self.failures),
        }

    def to_dict(self) -> dict:
        return {
            "bucket": self.bucket,
            "simulate": self.simulate,
            "stats": self.stats(),
            "decisions": [d.to_dict() for d in self.decisions],
            "failures": [f.to_dict() for f in self.failures],
        }
