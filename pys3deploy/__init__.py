"""pys3deploy - deploy static sites and assets to Amazon S3."""

from .api import S3Client
from .config import DeployConfig, install_config, load_config
from .exceptions import (
    S3DeployConfigError,
    S3DeployDeleteError,
    S3DeployError,
    S3DeployFileError,
    S3DeployListError,
    S3DeployPathError,
    S3DeployRemoteError,
    S3DeployUploadError,
)
from .models import RemoteObject
from .utils import build_remote_key, calculate_md5

__version__ = "0.1.0"

__all__ = [
    "S3Client",
    "DeployConfig",
    "RemoteObject",
    "load_config",
    "install_config",
    "S3DeployError",
    "S3DeployConfigError",
    "S3DeployPathError",
    "S3DeployFileError",
    "S3DeployRemoteError",
    "S3DeployListError",
    "S3DeployUploadError",
    "S3DeployDeleteError",
    "build_remote_key",
    "calculate_md5",
]
