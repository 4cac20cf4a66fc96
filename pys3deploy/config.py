"""Configuration loading for pys3deploy.

Settings are read from YAML files and merged in a fixed order:

1. Built-in defaults (``path: "."``, ``remote_path: ""``)
2. ``~/.s3deploy/.s3deploy.yml``
3. ``./.s3deploy.yml``
4. Explicit overrides (e.g. CLI options)

Later sources win. The resulting :class:`DeployConfig` is validated once and
treated as read-only by the sync engine.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .exceptions import S3DeployConfigError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".s3deploy.yml"

AWS_REGIONS = (
    "us-west-2",
    "us-west-1",
    "eu-west-1",
    "ap-southeast-1",
    "ap-northeast-1",
    "sa-east-1",
)

EXTRA_REPLACE_WITH_GZIP = "replace_with_gzip"
EXTRA_DELETE_OLD_FILES = "delete_old_files"
KNOWN_EXTRAS = frozenset({EXTRA_REPLACE_WITH_GZIP, EXTRA_DELETE_OLD_FILES})

DEFAULTS: dict[str, Any] = {"path": ".", "remote_path": ""}

CONFIG_TEMPLATE = """\
# pys3deploy configuration
#
# Settings in ./.s3deploy.yml override those in ~/.s3deploy/.s3deploy.yml.

aws_key:
aws_secret:
aws_bucket:

# Leave blank for US Standard. Valid regions: us-west-2, us-west-1,
# eu-west-1, ap-southeast-1, ap-northeast-1, sa-east-1
aws_region:

# Local directory to deploy and the key prefix inside the bucket
path: .
remote_path:

# Files matching this regular expression are never uploaded
skip_regex:

# Files matching this regular expression get a one year Cache-Control header
cache_regex:

# Sets "text/html; charset=<value>" on .html and .htm files
html_charset:

# Optional behaviour:
#   replace_with_gzip - upload the smaller of foo.js / foo.js.gz as foo.js
#   delete_old_files  - delete remote objects with no local counterpart
extras: []
"""


def user_config_path() -> Path:
    """Path of the per-user configuration file."""
    return Path.home() / ".s3deploy" / CONFIG_FILE_NAME


def local_config_path() -> Path:
    """Path of the configuration file in the current directory."""
    return Path.cwd() / CONFIG_FILE_NAME


def config_files_exist() -> bool:
    """Check whether a user or local configuration file exists."""
    return user_config_path().exists() or local_config_path().exists()


def import_settings(file_path: Path) -> dict[str, Any]:
    """Read settings from a YAML file.

    Keys with a null value are dropped so they do not override earlier
    sources, except ``aws_region`` where null means "US Standard".

    Args:
        file_path: YAML file to read

    Returns:
        Settings dictionary (empty if the file is missing or not a mapping)
    """
    if not file_path.is_file():
        return {}

    try:
        with open(file_path, encoding="utf-8") as f:
            settings = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise S3DeployConfigError(f"Invalid configuration file {file_path}: {e}") from e

    if not isinstance(settings, dict):
        logger.debug(f"Ignoring {file_path}: not a mapping")
        return {}

    return {k: v for k, v in settings.items() if k == "aws_region" or v is not None}


def validate_region(region: str) -> str:
    """Validate an AWS region name.

    Returns:
        The lowercased region

    Raises:
        S3DeployConfigError: If the region is not supported
    """
    if region.lower() not in AWS_REGIONS:
        raise S3DeployConfigError(
            f"{region} is not a valid region, please select from "
            f"{', '.join(AWS_REGIONS)} or leave it blank for US Standard."
        )
    return region.lower()


def endpoint_for_region(region: Optional[str]) -> Optional[str]:
    """Return the S3 endpoint URL for a region, or None for the default."""
    if not region:
        return None
    return f"https://s3-{validate_region(region)}.amazonaws.com"


def _compile(pattern: Optional[str], name: str) -> Optional[re.Pattern]:
    if not pattern:
        return None
    try:
        return re.compile(str(pattern))
    except re.error as e:
        raise S3DeployConfigError(f"Invalid {name} '{pattern}': {e}") from e


@dataclass
class DeployConfig:
    """Resolved settings for a deployment."""

    aws_key: str
    """Access key ID"""

    aws_secret: str
    """Secret access key"""

    bucket: str
    """Target bucket name"""

    root_path: Path = Path(".")
    """Local directory to deploy"""

    remote_prefix: str = ""
    """Key prefix inside the bucket"""

    region: Optional[str] = None
    """AWS region (None for US Standard)"""

    skip_pattern: Optional[str] = None
    """Candidates matching this regex are excluded"""

    cache_pattern: Optional[str] = None
    """Keys matching this regex get a long-lived Cache-Control header"""

    html_charset: Optional[str] = None
    """Charset announced on HTML objects"""

    extras: frozenset[str] = field(default_factory=frozenset)
    """Enabled optional behaviours"""

    skip_regex: Optional[re.Pattern] = field(init=False, default=None, repr=False)
    cache_regex: Optional[re.Pattern] = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.aws_key or not self.aws_secret:
            raise S3DeployConfigError("No AWS credentials given.")
        if not self.bucket:
            raise S3DeployConfigError("No bucket selected.")
        if self.region:
            self.region = validate_region(self.region)

        self.root_path = Path(self.root_path)
        self.remote_prefix = self.remote_prefix or ""
        self.extras = frozenset(self.extras or ())

        unknown = self.extras - KNOWN_EXTRAS
        if unknown:
            logger.warning(f"Ignoring unknown extras: {', '.join(sorted(unknown))}")

        self.skip_regex = _compile(self.skip_pattern, "skip_regex")
        self.cache_regex = _compile(self.cache_pattern, "cache_regex")

    @property
    def replace_with_gzip(self) -> bool:
        return EXTRA_REPLACE_WITH_GZIP in self.extras

    @property
    def delete_old_files(self) -> bool:
        return EXTRA_DELETE_OLD_FILES in self.extras

    @property
    def endpoint_url(self) -> Optional[str]:
        return endpoint_for_region(self.region)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeployConfig":
        """Create a DeployConfig from merged settings.

        Args:
            data: Settings using the configuration file key names

        Returns:
            DeployConfig instance
        """
        extras = data.get("extras") or []
        if isinstance(extras, str):
            extras = [extras]

        return cls(
            aws_key=data.get("aws_key") or "",
            aws_secret=data.get("aws_secret") or "",
            bucket=data.get("aws_bucket") or "",
            root_path=Path(str(data.get("path") or ".")).expanduser(),
            remote_prefix=str(data.get("remote_path") or ""),
            region=data.get("aws_region"),
            skip_pattern=data.get("skip_regex"),
            cache_pattern=data.get("cache_regex"),
            html_charset=data.get("html_charset"),
            extras=frozenset(str(e) for e in extras),
        )

    def to_display_dict(self) -> dict[str, Any]:
        """Settings safe to print (the secret is masked)."""
        return {
            "aws_key": self.aws_key,
            "aws_secret": "********",
            "aws_bucket": self.bucket,
            "aws_region": self.region,
            "path": str(self.root_path),
            "remote_path": self.remote_prefix,
            "skip_regex": self.skip_pattern,
            "cache_regex": self.cache_pattern,
            "html_charset": self.html_charset,
            "extras": sorted(self.extras),
        }


def load_config(
    overrides: Optional[dict[str, Any]] = None,
    config_files: Optional[list[Path]] = None,
) -> DeployConfig:
    """Load and validate the effective configuration.

    Args:
        overrides: Settings that take precedence over the defaults
            (None values are ignored)
        config_files: Files to merge in order; defaults to the user file
            followed by the local file

    Returns:
        Validated DeployConfig

    Raises:
        S3DeployConfigError: If credentials or bucket are missing, the
            region is unknown or a pattern does not compile
    """
    settings: dict[str, Any] = dict(DEFAULTS)

    if config_files is None:
        config_files = [user_config_path(), local_config_path()]

    for config_file in config_files:
        loaded = import_settings(config_file)
        if loaded:
            logger.debug(f"Loaded {len(loaded)} setting(s) from {config_file}")
        settings.update(loaded)

    settings.update({k: v for k, v in (overrides or {}).items() if v is not None})

    # Credentials from the environment fill gaps left by the files
    settings.setdefault("aws_key", os.environ.get("AWS_ACCESS_KEY_ID"))
    settings.setdefault("aws_secret", os.environ.get("AWS_SECRET_ACCESS_KEY"))

    return DeployConfig.from_dict(settings)


def install_config(default: bool = False) -> Path:
    """Write the configuration template.

    Args:
        default: Install the per-user file instead of the local one

    Returns:
        Path of the created file

    Raises:
        S3DeployConfigError: If the file already exists
    """
    install_path = user_config_path() if default else local_config_path()

    if install_path.exists():
        raise S3DeployConfigError("Configuration file already exist.")

    install_path.parent.mkdir(parents=True, exist_ok=True)
    install_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    logger.debug(f"Installed configuration template at {install_path}")
    return install_path
