"""Utility functions for pys3deploy."""

import hashlib
import re
from pathlib import Path
from typing import Union

# =============================================================================
# Constants
# =============================================================================

# Compression suffix recognised for plain/compressed twins
GZIP_SUFFIX: str = ".gz"

# Cache directive applied to objects matching the cache pattern (one year)
CACHE_CONTROL_ONE_YEAR: str = "public, max-age=31557600"

# Content encoding attached when the compressed twin is uploaded
GZIP_CONTENT_ENCODING: str = "gzip"

# Block size used when hashing local files
HASH_CHUNK_SIZE: int = 8192

_GZIP_SUFFIX_RE = re.compile(r"\.gz$", re.IGNORECASE)
_DUPLICATE_SEPARATORS_RE = re.compile(r"/{2,}")


# =============================================================================
# Path normalization
# =============================================================================


def collapse_separators(path: str) -> str:
    """Collapse runs of ``/`` into a single separator."""
    return _DUPLICATE_SEPARATORS_RE.sub("/", path)


def build_remote_key(remote_prefix: str, relative_path: str) -> str:
    """Build the remote object key for a file.

    The configured prefix and the file's path relative to the root are
    joined, repeated separators are collapsed and a single leading and
    trailing separator is removed.

    Args:
        remote_prefix: Remote path prefix from the configuration (may be empty)
        relative_path: Path of the file relative to the local root

    Returns:
        Remote key

    Examples:
        >>> build_remote_key("", "index.html")
        'index.html'
        >>> build_remote_key("/site/", "css//main.css")
        'site/css/main.css'
    """
    key = collapse_separators(f"{remote_prefix}/{relative_path}")
    if key.startswith("/"):
        key = key[1:]
    if key.endswith("/"):
        key = key[:-1]
    return key


def has_gzip_suffix(name: str) -> bool:
    """Check whether a name carries the compression suffix (case-insensitive)."""
    return bool(_GZIP_SUFFIX_RE.search(name)) and len(name) > len(GZIP_SUFFIX)


def strip_gzip_suffix(name: str) -> str:
    """Remove a trailing compression suffix, if present.

    Examples:
        >>> strip_gzip_suffix("app.js.gz")
        'app.js'
        >>> strip_gzip_suffix("app.js")
        'app.js'
    """
    return _GZIP_SUFFIX_RE.sub("", name)


# =============================================================================
# Fingerprints
# =============================================================================


def calculate_md5(file_path: Union[str, Path]) -> str:
    """Calculate the hex MD5 digest of a file.

    S3 exposes the same digest as the ETag of objects stored in a single
    part, which makes it usable as a change-detection token.

    Args:
        file_path: File to hash

    Returns:
        Lowercase hex digest

    Raises:
        OSError: If the file cannot be read
    """
    digest = hashlib.md5()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def normalize_etag(etag: str) -> str:
    """Strip the quotes S3 wraps around ETags."""
    return etag.strip('"').lower()


# =============================================================================
# Size formatting utilities
# =============================================================================


def format_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted size string (e.g., "1.5 MB", "256 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.1f} MB"
    else:
        return f"{size_bytes / 1024 / 1024 / 1024:.1f} GB"
