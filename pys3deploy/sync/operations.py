"""Remote mutations performed during a sync pass."""

import logging
import time
from pathlib import Path

from ..api import S3Client

logger = logging.getLogger(__name__)


class SyncOperations:
    """Put and delete calls against one bucket.

    In simulate mode every call is logged and returns without touching the
    bucket, so the engine and reconciler run the same code path either way.
    """

    def __init__(self, client: S3Client, bucket: str, simulate: bool = False):
        """Initialize sync operations.

        Args:
            client: S3 client
            bucket: Target bucket
            simulate: If True, never mutate the bucket
        """
        self.client = client
        self.bucket = bucket
        self.simulate = simulate

    def upload_file(
        self, source: Path, remote_key: str, metadata: dict[str, str]
    ) -> None:
        """Upload a local file to the bucket.

        Args:
            source: Physical file to send
            remote_key: Object key
            metadata: Request arguments from the upload planner
        """
        if self.simulate:
            logger.debug(f"Simulate: would upload {source} as {remote_key}")
            return

        start = time.time()
        self.client.put_object(self.bucket, remote_key, source, metadata)
        logger.debug(f"Upload of {remote_key} took {time.time() - start:.2f}s")

    def delete_remote(self, remote_key: str) -> None:
        """Delete an object from the bucket."""
        if self.simulate:
            logger.debug(f"Simulate: would delete {remote_key}")
            return

        self.client.delete_object(self.bucket, remote_key)
