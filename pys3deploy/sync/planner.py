"""Upload metadata planning.

Metadata is derived from an ordered list of rules. Each rule matches on
the resolved candidate and contributes headers plus an optional note for
the report line. New behaviour is added by appending a rule rather than by
touching the engine.
"""

import mimetypes
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from ..config import DeployConfig
from ..utils import (
    CACHE_CONTROL_ONE_YEAR,
    GZIP_CONTENT_ENCODING,
    strip_gzip_suffix,
)
from .twins import ResolvedCandidate

HTML_KEY_RE = re.compile(r".+\.(html|htm)(\.gz)?$", re.IGNORECASE)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Canned ACL applied to every object
PUBLIC_READ = "public-read"


@dataclass
class UploadMetadata:
    """Headers sent with one upload."""

    acl: str = PUBLIC_READ
    cache_control: Optional[str] = None
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    extra_info: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, str]:
        """Metadata as S3 ``ExtraArgs``."""
        args = {"ACL": self.acl}
        if self.cache_control:
            args["CacheControl"] = self.cache_control
        if self.content_type:
            args["ContentType"] = self.content_type
        if self.content_encoding:
            args["ContentEncoding"] = self.content_encoding
        return args


@dataclass(frozen=True)
class UploadRule:
    """A pattern-to-effect rule."""

    name: str
    matches: Callable[[ResolvedCandidate], bool]
    apply: Callable[[ResolvedCandidate, UploadMetadata], None]


def guess_content_type(remote_key: str) -> str:
    """Guess a content type from the logical key.

    Examples:
        >>> guess_content_type("css/site.css")
        'text/css'
    """
    mime_type, _ = mimetypes.guess_type(strip_gzip_suffix(remote_key))
    return mime_type or DEFAULT_CONTENT_TYPE


class UploadPlanner:
    """Assigns transfer metadata to resolved candidates."""

    def __init__(self, config: DeployConfig):
        """Initialize the planner.

        Args:
            config: Effective configuration (cache pattern, html charset)
        """
        self.config = config
        self.rules = self.build_rules(config)

    @staticmethod
    def build_rules(config: DeployConfig) -> list[UploadRule]:
        """Build the ordered rule list for a configuration.

        The order fixes the order of the report notes:
        ``cache-headers``, ``gzip``, ``charset=<value>``.
        """
        rules: list[UploadRule] = []

        cache_regex = config.cache_regex
        if cache_regex is not None:

            def _cache(candidate: ResolvedCandidate, meta: UploadMetadata) -> None:
                meta.cache_control = CACHE_CONTROL_ONE_YEAR
                meta.extra_info.append("cache-headers")

            rules.append(
                UploadRule(
                    name="cache",
                    matches=lambda c: cache_regex.search(c.remote_key) is not None,
                    apply=_cache,
                )
            )

        def _gzip(candidate: ResolvedCandidate, meta: UploadMetadata) -> None:
            meta.content_encoding = GZIP_CONTENT_ENCODING
            meta.extra_info.append("gzip")

        rules.append(
            UploadRule(
                name="gzip",
                matches=lambda c: c.compressed,
                apply=_gzip,
            )
        )

        charset = config.html_charset
        if charset:

            def _charset(candidate: ResolvedCandidate, meta: UploadMetadata) -> None:
                meta.content_type = f"text/html; charset={charset}"
                meta.extra_info.append(f"charset={charset}")

            rules.append(
                UploadRule(
                    name="charset",
                    matches=lambda c: HTML_KEY_RE.match(c.remote_key) is not None,
                    apply=_charset,
                )
            )

        return rules

    def plan(self, candidate: ResolvedCandidate) -> UploadMetadata:
        """Compute the metadata for one upload.

        Args:
            candidate: Resolved candidate (physical source and logical key)

        Returns:
            UploadMetadata with every matching rule applied
        """
        meta = UploadMetadata()
        for rule in self.rules:
            if rule.matches(candidate):
                rule.apply(candidate, meta)

        if meta.content_type is None:
            meta.content_type = guess_content_type(candidate.remote_key)

        return meta
