"""S3 client used by pys3deploy."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import (
    S3DeployConfigError,
    S3DeployDeleteError,
    S3DeployFileError,
    S3DeployListError,
    S3DeployUploadError,
)
from .models import RemoteObject
from .utils import calculate_md5

if TYPE_CHECKING:
    from .config import DeployConfig

logger = logging.getLogger(__name__)


def _error_message(e: Exception) -> str:
    """Extract a readable message from a botocore exception."""
    if isinstance(e, ClientError):
        error = e.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message") or str(e)
        return f"{code}: {message}"
    return str(e)


class S3Client:
    """Thin wrapper around a boto3 S3 client.

    The client handle is created lazily and passed explicitly to every
    component that talks to the bucket; there is no module level
    connection.
    """

    def __init__(
        self,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any = None,
    ):
        """Initialize the S3 client.

        Args:
            access_key: AWS access key ID
            secret_key: AWS secret access key
            region: AWS region name (None for US Standard)
            endpoint_url: Explicit endpoint, e.g. for a regional host
            client: Pre-built boto3 client (mainly for tests)
        """
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.endpoint_url = endpoint_url
        self._client = client

        if client is None and not (access_key and secret_key):
            raise S3DeployConfigError("No AWS credentials given.")

    @classmethod
    def from_config(cls, config: DeployConfig) -> S3Client:
        """Create a client from the effective configuration."""
        return cls(
            access_key=config.aws_key,
            secret_key=config.aws_secret,
            region=config.region,
            endpoint_url=config.endpoint_url,
        )

    def _get_client(self) -> Any:
        """Get or create the boto3 client."""
        if self._client is None:
            self._client = boto3.client(
                "s3",
                aws_access_key_id=self.access_key,
                aws_secret_access_key=self.secret_key,
                region_name=self.region,
                endpoint_url=self.endpoint_url,
            )
        return self._client

    def list_objects(self, bucket: str, prefix: str = "") -> list[RemoteObject]:
        """List every object in a bucket.

        Args:
            bucket: Bucket name
            prefix: Only list keys starting with this prefix

        Returns:
            List of RemoteObject

        Raises:
            S3DeployListError: If the listing fails
        """
        objects: list[RemoteObject] = []
        params: dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix

        try:
            paginator = self._get_client().get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for item in page.get("Contents", []):
                    objects.append(RemoteObject.from_listing(item))
        except (ClientError, BotoCoreError) as e:
            raise S3DeployListError(
                f"Failed to list bucket {bucket}: {_error_message(e)}"
            ) from e

        logger.debug(f"Listed {len(objects)} object(s) in {bucket}")
        return objects

    def put_object(
        self,
        bucket: str,
        key: str,
        file_path: Path,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Upload a local file as an object.

        The file is sent in a single request so the stored ETag stays the
        MD5 of its bytes.

        Args:
            bucket: Bucket name
            key: Object key
            file_path: File whose bytes are stored
            metadata: Extra request arguments (ACL, CacheControl, ContentType,
                ContentEncoding)

        Raises:
            S3DeployFileError: If the local file cannot be read
            S3DeployUploadError: If the store rejects the upload
        """
        try:
            body = open(file_path, "rb")
        except OSError as e:
            raise S3DeployFileError(str(file_path), f"{file_path}: {e}") from e

        with body:
            try:
                self._get_client().put_object(
                    Bucket=bucket, Key=key, Body=body, **(metadata or {})
                )
            except (ClientError, BotoCoreError) as e:
                raise S3DeployUploadError(
                    f"Failed to upload {key}: {_error_message(e)}"
                ) from e

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object.

        Raises:
            S3DeployDeleteError: If the store rejects the request
        """
        try:
            self._get_client().delete_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise S3DeployDeleteError(
                f"Failed to delete {key}: {_error_message(e)}"
            ) from e

    def fingerprint(self, file_path: Path) -> str:
        """Hash a local file the way S3 computes single-part ETags."""
        return calculate_md5(file_path)
