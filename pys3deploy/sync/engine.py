"""Core sync engine for deploying a directory tree to a bucket."""

import logging
from pathlib import Path
from typing import Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..api import S3Client
from ..config import DeployConfig
from ..exceptions import (
    S3DeployFileError,
    S3DeployPathError,
    S3DeployRemoteError,
)
from ..output import OutputFormatter
from ..utils import build_remote_key, strip_gzip_suffix
from .comparator import FileComparator, RemoteListing, SyncAction, SyncDecision
from .operations import SyncOperations
from .planner import UploadPlanner
from .reconciler import Reconciler
from .report import DeleteReport, SyncFailure, SyncReport
from .scanner import DirectoryScanner, LocalFile
from .twins import TwinResolver

logger = logging.getLogger(__name__)


class SyncEngine:
    """Core sync engine that orchestrates a deployment pass.

    A pass runs sequentially: enumerate, filter, resolve twins, check the
    listing snapshot, plan and upload, then optionally reconcile. Per-file
    errors are reported inline and collected on the report; the pass goes
    on with the remaining candidates unless ``fail_fast`` is set.
    """

    def __init__(
        self,
        client: S3Client,
        output: Optional[OutputFormatter] = None,
        fail_fast: bool = False,
    ):
        """Initialize sync engine.

        Args:
            client: S3 client used for listing, uploads and deletes
            output: Output formatter for decision lines and status
            fail_fast: Re-raise the first per-file error instead of continuing
        """
        self.client = client
        self.output = output or OutputFormatter()
        self.fail_fast = fail_fast

    def sync(self, config: DeployConfig, simulate: bool = False) -> SyncReport:
        """Deploy the configured directory to the configured bucket.

        Args:
            config: Effective configuration
            simulate: If True, compute and report every decision without
                uploading or deleting anything

        Returns:
            SyncReport with decisions in the order they were made

        Raises:
            S3DeployPathError: If the configured root is not a directory
            S3DeployListError: If the bucket cannot be listed

        Examples:
            >>> engine = SyncEngine(S3Client.from_config(config))
            >>> report = engine.sync(config, simulate=True)
            >>> print(f"Would upload {report.uploads} files")
        """
        root = config.root_path.expanduser().resolve()
        if not root.is_dir():
            raise S3DeployPathError(f"{config.root_path} is not a directory.")

        if simulate:
            self.output.info(f"Simulating deployment to {config.bucket}")
        else:
            self.output.info(f"Deploying to {config.bucket}")

        local_files, listing = self._scan(config, root)

        report = SyncReport(bucket=config.bucket, simulate=simulate)
        operations = SyncOperations(self.client, config.bucket, simulate=simulate)
        resolver = TwinResolver(local_files, enabled=config.replace_with_gzip)
        comparator = FileComparator(listing, fingerprint=self.client.fingerprint)
        planner = UploadPlanner(config)

        # Keys whose upload failed keep their previous remote version
        protected: set[str] = set()

        try:
            for local_file in local_files:
                self._process_candidate(
                    local_file=local_file,
                    config=config,
                    resolver=resolver,
                    comparator=comparator,
                    planner=planner,
                    operations=operations,
                    report=report,
                    protected=protected,
                )
        except KeyboardInterrupt:
            self.output.warning("\nDeployment cancelled by user")
            raise

        if config.delete_old_files:
            reconciler = Reconciler(operations, self.output, fail_fast=self.fail_fast)
            deletions = reconciler.reconcile(
                listing,
                active_set=report.active_set | protected,
                on_decision=report.add,
            )
            report.reconciliation = deletions
            report.failures.extend(deletions.failures)

        self._display_summary(report)
        return report

    def empty(self, bucket: str, simulate: bool = False) -> DeleteReport:
        """Delete every object in a bucket.

        Args:
            bucket: Bucket to empty
            simulate: If True, only report what would be deleted

        Returns:
            DeleteReport
        """
        suffix = " (Simulating)" if simulate else ""
        self.output.info(f"Emptying {bucket}{suffix}")

        listing = RemoteListing(self.client.list_objects(bucket))
        operations = SyncOperations(self.client, bucket, simulate=simulate)
        reconciler = Reconciler(operations, self.output, fail_fast=self.fail_fast)

        try:
            report = reconciler.empty(listing)
        except KeyboardInterrupt:
            self.output.warning("\nEmptying cancelled by user")
            raise

        if not self.output.quiet:
            self.output.print("")
            self.output.info(f"Deleted: {len(report.deleted)}")
            if report.failures:
                self.output.warning(f"Failed: {len(report.failures)}")
        return report

    def _scan(
        self, config: DeployConfig, root: Path
    ) -> tuple[list[LocalFile], RemoteListing]:
        """Enumerate candidates and take the listing snapshot.

        Returns:
            Tuple of (filtered local candidates, remote listing)
        """
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet or self.output.json_output,
        ) as progress:
            task = progress.add_task("Scanning local directory...", total=None)
            scanner = DirectoryScanner(skip_pattern=config.skip_regex)
            local_files = scanner.scan_local(root)
            progress.update(
                task, description=f"Found {len(local_files)} local file(s)"
            )

            task = progress.add_task("Listing bucket...", total=None)
            listing = RemoteListing(self.client.list_objects(config.bucket))
            progress.update(
                task, description=f"Found {len(listing)} remote object(s)"
            )

        logger.debug(
            f"Scanned {len(local_files)} candidate(s) and {len(listing)} object(s)"
        )
        return local_files, listing

    def _process_candidate(
        self,
        local_file: LocalFile,
        config: DeployConfig,
        resolver: TwinResolver,
        comparator: FileComparator,
        planner: UploadPlanner,
        operations: SyncOperations,
        report: SyncReport,
        protected: set[str],
    ) -> None:
        """Decide and act on one candidate.

        Args:
            local_file: Candidate being processed
            config: Effective configuration
            resolver: Twin resolver for this pass
            comparator: Existence check over the listing snapshot
            planner: Upload metadata planner
            operations: Upload/delete operations (simulate aware)
            report: Report collecting decisions (modified in place)
            protected: Keys excluded from reconciliation (modified in place)
        """
        remote_key = build_remote_key(config.remote_prefix, local_file.relative_path)
        candidate = None

        try:
            candidate = resolver.resolve(local_file, remote_key)
            if candidate is None:
                return
            remote_key = candidate.remote_key

            if comparator.is_current(candidate.source, candidate.remote_key):
                decision = SyncDecision(
                    action=SyncAction.SKIP, remote_key=candidate.remote_key
                )
            else:
                metadata = planner.plan(candidate)
                request_args = metadata.to_dict()
                operations.upload_file(
                    candidate.source, candidate.remote_key, request_args
                )
                decision = SyncDecision(
                    action=SyncAction.UPLOAD,
                    remote_key=candidate.remote_key,
                    source=candidate.source,
                    metadata=request_args,
                    extra_info=list(metadata.extra_info),
                )
        except (S3DeployFileError, S3DeployRemoteError) as e:
            self.output.error(str(e))
            report.failures.append(SyncFailure(remote_key, SyncAction.UPLOAD, str(e)))
            protected.add(remote_key)
            if (
                candidate is None
                and resolver.enabled
                and resolver.twin_name(local_file.relative_path) is not None
            ):
                protected.add(strip_gzip_suffix(remote_key))
            if self.fail_fast:
                raise
            return

        self.output.decision(decision.format())
        report.add(decision)

    def _display_summary(self, report: SyncReport) -> None:
        """Display pass summary.

        Args:
            report: Report of the finished pass
        """
        if self.output.quiet:
            return

        self.output.print("")
        if report.simulate:
            self.output.success("Simulation complete!")
        else:
            self.output.success("Deployment complete!")

        self.output.info(f"  Uploaded: {report.uploads}")
        self.output.info(f"  Skipped: {report.skips}")
        if report.reconciliation is not None:
            self.output.info(f"  Deleted: {report.deletes}")
        if report.failures:
            self.output.warning(f"  Failed: {len(report.failures)}")
