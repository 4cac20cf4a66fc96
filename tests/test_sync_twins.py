"""Tests for twin resolution."""

import pytest

from pys3deploy.exceptions import S3DeployFileError
from pys3deploy.sync.scanner import DirectoryScanner
from pys3deploy.sync.twins import TwinResolver


class TestTwinResolver:
    """Tests for TwinResolver."""

    def _resolver(self, root, enabled=True):
        files = DirectoryScanner().scan_local(root)
        return TwinResolver(files, enabled=enabled), {f.relative_path: f for f in files}

    def test_compressed_smaller_wins(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=100)
        write_file(tmp_path, "app.js.gz", size=40)
        resolver, files = self._resolver(tmp_path)

        candidate = resolver.resolve(files["app.js"], "app.js")

        assert candidate.source == tmp_path / "app.js.gz"
        assert candidate.remote_key == "app.js"
        assert candidate.relative_path == "app.js"
        assert candidate.compressed is True

    def test_plain_wins_when_compression_inflates(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=80)
        write_file(tmp_path, "app.js.gz", size=120)
        resolver, files = self._resolver(tmp_path)

        candidate = resolver.resolve(files["app.js"], "app.js")

        assert candidate.source == tmp_path / "app.js"
        assert candidate.compressed is False

    def test_equal_sizes_keep_plain(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=50)
        write_file(tmp_path, "app.js.gz", size=50)
        resolver, files = self._resolver(tmp_path)

        candidate = resolver.resolve(files["app.js"], "app.js")

        assert candidate.source == tmp_path / "app.js"

    def test_twin_found_from_compressed_member(self, tmp_path, write_file):
        """The pair is found whichever member is visited first."""
        write_file(tmp_path, "app.js", size=100)
        write_file(tmp_path, "app.js.gz", size=40)
        resolver, files = self._resolver(tmp_path)

        candidate = resolver.resolve(files["app.js.gz"], "static/app.js.gz")

        assert candidate.remote_key == "static/app.js"
        assert candidate.source == tmp_path / "app.js.gz"
        assert resolver.resolve(files["app.js"], "static/app.js") is None

    def test_second_member_is_noop(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=100)
        write_file(tmp_path, "app.js.gz", size=40)
        resolver, files = self._resolver(tmp_path)

        assert resolver.resolve(files["app.js"], "app.js") is not None
        assert resolver.resolve(files["app.js.gz"], "app.js.gz") is None
        assert resolver.is_resolved("app.js")
        assert resolver.is_resolved("app.js.gz")

    def test_disabled_treats_files_independently(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=100)
        write_file(tmp_path, "app.js.gz", size=40)
        resolver, files = self._resolver(tmp_path, enabled=False)

        plain = resolver.resolve(files["app.js"], "app.js")
        compressed = resolver.resolve(files["app.js.gz"], "app.js.gz")

        assert plain.source == tmp_path / "app.js"
        assert compressed.source == tmp_path / "app.js.gz"
        assert compressed.remote_key == "app.js.gz"

    def test_lonely_compressed_file_keeps_its_key(self, tmp_path, write_file):
        write_file(tmp_path, "data.json.gz", size=10)
        resolver, files = self._resolver(tmp_path)

        candidate = resolver.resolve(files["data.json.gz"], "data.json.gz")

        assert candidate.remote_key == "data.json.gz"
        assert candidate.compressed is True

    def test_chained_suffixes_never_share_a_key(self, tmp_path, write_file):
        write_file(tmp_path, "a.gz", size=10)
        write_file(tmp_path, "a.gz.gz", size=5)
        resolver, files = self._resolver(tmp_path)

        first = resolver.resolve(files["a.gz"], "a.gz")
        second = resolver.resolve(files["a.gz.gz"], "a.gz.gz")

        assert first.remote_key == "a.gz"
        assert first.source == tmp_path / "a.gz"
        assert second.remote_key == "a.gz.gz"
        assert second.source == tmp_path / "a.gz.gz"

    def test_unreadable_twin(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=100)
        gz = write_file(tmp_path, "app.js.gz", size=40)
        resolver, files = self._resolver(tmp_path)
        gz.unlink()

        with pytest.raises(S3DeployFileError):
            resolver.resolve(files["app.js"], "app.js")

    @pytest.mark.parametrize(
        "order", [["app.js", "app.js.GZ"], ["app.js.GZ", "app.js"]]
    )
    def test_uppercase_suffix_pairs_in_any_order(self, tmp_path, write_file, order):
        write_file(tmp_path, "app.js", size=100)
        write_file(tmp_path, "app.js.GZ", size=40)
        resolver, files = self._resolver(tmp_path)

        results = [resolver.resolve(files[name], name) for name in order]

        assert results[1] is None
        assert results[0].remote_key == "app.js"
        assert results[0].source == tmp_path / "app.js.GZ"
        assert results[0].compressed is True

    def test_plain_candidate_is_not_compressed(self, tmp_path, write_file):
        write_file(tmp_path, "app.js", size=10)
        resolver, files = self._resolver(tmp_path)

        assert resolver.resolve(files["app.js"], "app.js").compressed is False
        assert resolver.twin_name("app.js") is None
