"""Deletion of remote objects with no local counterpart."""

import logging
from typing import Callable, Iterable, Optional

from ..exceptions import S3DeployRemoteError
from ..output import OutputFormatter
from .comparator import RemoteListing, SyncAction, SyncDecision
from .operations import SyncOperations
from .report import DeleteReport, SyncFailure

logger = logging.getLogger(__name__)


class Reconciler:
    """Deletes every listed object whose key is not kept.

    Each key is handled on its own: a failed delete is reported and the
    remaining keys are still attempted.
    """

    def __init__(
        self,
        operations: SyncOperations,
        output: Optional[OutputFormatter] = None,
        fail_fast: bool = False,
    ):
        self.operations = operations
        self.output = output or OutputFormatter()
        self.fail_fast = fail_fast

    def reconcile(
        self,
        listing: RemoteListing,
        active_set: Iterable[str],
        on_decision: Optional[Callable[[SyncDecision], None]] = None,
    ) -> DeleteReport:
        """Delete remote objects that are not in the active set.

        Args:
            listing: Snapshot taken at the start of the pass
            active_set: Keys that must be kept
            on_decision: Called with each successful delete decision

        Returns:
            DeleteReport with deleted keys and failures
        """
        keep = set(active_set)
        report = DeleteReport(simulate=self.operations.simulate)

        for remote in listing:
            if remote.key in keep:
                continue

            try:
                self.operations.delete_remote(remote.key)
            except S3DeployRemoteError as e:
                self.output.error(str(e))
                report.failures.append(
                    SyncFailure(remote.key, SyncAction.DELETE, str(e))
                )
                if self.fail_fast:
                    raise
                continue

            decision = SyncDecision(action=SyncAction.DELETE, remote_key=remote.key)
            self.output.decision(decision.format())
            report.deleted.append(remote.key)
            if on_decision is not None:
                on_decision(decision)

        logger.debug(
            f"Reconciliation: {len(report.deleted)} deleted, "
            f"{len(report.failures)} failed, {len(keep)} kept"
        )
        return report

    def empty(self, listing: RemoteListing) -> DeleteReport:
        """Delete every object in the listing."""
        return self.reconcile(listing, active_set=())
