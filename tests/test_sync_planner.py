"""Tests for upload metadata planning."""

from pathlib import Path

from pys3deploy.sync.planner import (
    PUBLIC_READ,
    UploadMetadata,
    UploadPlanner,
    guess_content_type,
)
from pys3deploy.sync.twins import ResolvedCandidate
from pys3deploy.utils import CACHE_CONTROL_ONE_YEAR, has_gzip_suffix


def _candidate(key: str, source: str = None) -> ResolvedCandidate:
    source = source or key
    return ResolvedCandidate(
        source=Path("/site") / source,
        relative_path=key,
        remote_key=key,
        compressed=has_gzip_suffix(source),
    )


class TestUploadPlanner:
    """Tests for UploadPlanner."""

    def test_always_public(self, make_config):
        meta = UploadPlanner(make_config()).plan(_candidate("a.txt"))

        assert meta.acl == PUBLIC_READ
        assert meta.to_dict()["ACL"] == "public-read"

    def test_no_rules_match(self, make_config):
        meta = UploadPlanner(make_config()).plan(_candidate("css/site.css"))

        assert meta.cache_control is None
        assert meta.content_encoding is None
        assert meta.content_type == "text/css"
        assert meta.extra_info == []

    def test_cache_rule(self, make_config):
        planner = UploadPlanner(make_config(cache_pattern=r"^assets/"))

        cached = planner.plan(_candidate("assets/app.js"))
        uncached = planner.plan(_candidate("index.html"))

        assert cached.cache_control == CACHE_CONTROL_ONE_YEAR
        assert cached.extra_info == ["cache-headers"]
        assert uncached.cache_control is None

    def test_charset_rule_for_html(self, make_config):
        planner = UploadPlanner(make_config(html_charset="utf-8"))

        meta = planner.plan(_candidate("blog/post.HTM"))

        assert meta.content_type == "text/html; charset=utf-8"
        assert meta.extra_info == ["charset=utf-8"]

    def test_charset_rule_ignores_gzip_suffix(self, make_config):
        planner = UploadPlanner(make_config(html_charset="utf-8"))

        meta = planner.plan(_candidate("page.html.gz"))

        assert meta.content_type == "text/html; charset=utf-8"

    def test_charset_rule_skips_other_files(self, make_config):
        planner = UploadPlanner(make_config(html_charset="utf-8"))

        meta = planner.plan(_candidate("app.js"))

        assert "charset=utf-8" not in meta.extra_info

    def test_gzip_rule_follows_physical_source(self, make_config):
        planner = UploadPlanner(make_config())

        compressed = planner.plan(_candidate("index.html", source="index.html.gz"))
        plain = planner.plan(_candidate("index.html"))

        assert compressed.content_encoding == "gzip"
        assert compressed.to_dict()["ContentEncoding"] == "gzip"
        assert compressed.content_type == "text/html"
        assert plain.content_encoding is None
        assert "ContentEncoding" not in plain.to_dict()

    def test_extra_info_order(self, make_config):
        planner = UploadPlanner(
            make_config(cache_pattern=".*", html_charset="iso-8859-1")
        )

        meta = planner.plan(_candidate("index.html", source="index.html.gz"))

        assert meta.extra_info == ["cache-headers", "gzip", "charset=iso-8859-1"]

    def test_rules_are_ordered_list(self, make_config):
        planner = UploadPlanner(make_config(cache_pattern="x", html_charset="utf-8"))
        assert [r.name for r in planner.rules] == ["cache", "gzip", "charset"]


class TestUploadMetadata:
    """Tests for UploadMetadata."""

    def test_to_dict_omits_unset_headers(self):
        assert UploadMetadata().to_dict() == {"ACL": "public-read"}

    def test_to_dict_full(self):
        meta = UploadMetadata(
            cache_control="public, max-age=1",
            content_type="text/plain",
            content_encoding="gzip",
        )
        assert meta.to_dict() == {
            "ACL": "public-read",
            "CacheControl": "public, max-age=1",
            "ContentType": "text/plain",
            "ContentEncoding": "gzip",
        }


class TestGuessContentType:
    """Tests for guess_content_type."""

    def test_known_extension(self):
        assert guess_content_type("index.html") == "text/html"

    def test_gzip_suffix_ignored(self):
        assert guess_content_type("style.css.gz") == "text/css"

    def test_unknown_extension(self):
        assert guess_content_type("blob.unknownext") == "application/octet-stream"
