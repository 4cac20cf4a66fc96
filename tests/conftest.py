"""Shared fixtures for pys3deploy tests."""

import io
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from pys3deploy.api import S3Client
from pys3deploy.config import DeployConfig
from pys3deploy.models import RemoteObject
from pys3deploy.output import OutputFormatter
from pys3deploy.utils import calculate_md5


@pytest.fixture
def output():
    """Output formatter writing into in-memory consoles."""
    return OutputFormatter(
        console=Console(file=io.StringIO(), width=200),
        err_console=Console(file=io.StringIO(), width=200),
    )


@pytest.fixture
def bucket():
    """In-memory bucket contents: key -> (fingerprint, size)."""
    return {}


@pytest.fixture
def mock_client(bucket):
    """Create a mock S3 client backed by the ``bucket`` dict."""
    client = Mock(spec=S3Client)

    def list_objects(name, prefix=""):
        return [
            RemoteObject(key=key, fingerprint=fingerprint, size=size)
            for key, (fingerprint, size) in sorted(bucket.items())
            if key.startswith(prefix)
        ]

    def put_object(name, key, file_path, metadata=None):
        data = Path(file_path).read_bytes()
        bucket[key] = (calculate_md5(file_path), len(data))

    def delete_object(name, key):
        bucket.pop(key, None)

    client.list_objects.side_effect = list_objects
    client.put_object.side_effect = put_object
    client.delete_object.side_effect = delete_object
    client.fingerprint.side_effect = calculate_md5
    return client


@pytest.fixture
def make_config(tmp_path):
    """Factory for DeployConfig rooted at ``tmp_path / "site"``."""
    root = tmp_path / "site"
    root.mkdir()

    def _make(**kwargs) -> DeployConfig:
        kwargs.setdefault("aws_key", "AKIAEXAMPLE")
        kwargs.setdefault("aws_secret", "secret")
        kwargs.setdefault("bucket", "example-bucket")
        kwargs.setdefault("root_path", root)
        return DeployConfig(**kwargs)

    return _make


@pytest.fixture
def write_file():
    """Return a helper creating a file with the given size or content."""

    def _write(root: Path, relative_path: str, size: int = 0, content=None) -> Path:
        path = root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if content is None:
            content = b"x" * size
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _write
