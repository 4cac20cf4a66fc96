"""Exceptions raised by pys3deploy."""


class S3DeployError(Exception):
    """Base exception for all pys3deploy errors."""


class S3DeployConfigError(S3DeployError):
    """Configuration is incomplete or invalid (credentials, bucket, region)."""


class S3DeployPathError(S3DeployError):
    """The configured local root is not a directory."""


class S3DeployFileError(S3DeployError):
    """A candidate file could not be read."""

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"Unable to read file: {path}")


class S3DeployRemoteError(S3DeployError):
    """The remote object store rejected a request."""


class S3DeployListError(S3DeployRemoteError):
    """Listing the bucket failed."""


class S3DeployUploadError(S3DeployRemoteError):
    """Storing an object failed."""


class S3DeployDeleteError(S3DeployRemoteError):
    """Deleting an object failed."""
