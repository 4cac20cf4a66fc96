"""Tests for local enumeration."""

from pys3deploy.sync.scanner import DirectoryScanner, LocalFile


class TestLocalFile:
    """Tests for LocalFile."""

    def test_from_path(self, tmp_path, write_file):
        path = write_file(tmp_path, "css/site.css", size=12)

        local_file = LocalFile.from_path(path, tmp_path)

        assert local_file.relative_path == "css/site.css"
        assert local_file.path == path
        assert local_file.size == 12

    def test_size_read_lazily(self, tmp_path, write_file):
        path = write_file(tmp_path, "a.txt", size=3)
        local_file = LocalFile.from_path(path, tmp_path)

        path.write_bytes(b"12345")

        assert local_file.size == 5


class TestDirectoryScanner:
    """Tests for DirectoryScanner."""

    def test_scan_recursive(self, tmp_path, write_file):
        write_file(tmp_path, "index.html", size=1)
        write_file(tmp_path, "css/site.css", size=1)
        write_file(tmp_path, "js/vendor/lib.js", size=1)

        files = DirectoryScanner().scan_local(tmp_path)

        assert [f.relative_path for f in files] == [
            "css/site.css",
            "index.html",
            "js/vendor/lib.js",
        ]

    def test_git_directory_excluded(self, tmp_path, write_file):
        write_file(tmp_path, ".git/config", size=1)
        write_file(tmp_path, ".git/objects/ab/cdef", size=1)
        write_file(tmp_path, "index.html", size=1)

        files = DirectoryScanner().scan_local(tmp_path)

        assert [f.relative_path for f in files] == ["index.html"]

    def test_git_file_excluded(self, tmp_path, write_file):
        write_file(tmp_path, ".git", content="gitdir: ../.git/modules/site\n")
        write_file(tmp_path, "vendor/lib/.git", content="gitdir: x\n")
        write_file(tmp_path, "index.html", size=1)

        files = DirectoryScanner().scan_local(tmp_path)

        assert [f.relative_path for f in files] == ["index.html"]

    def test_other_dot_files_kept(self, tmp_path, write_file):
        write_file(tmp_path, ".htaccess", size=1)

        files = DirectoryScanner().scan_local(tmp_path)

        assert [f.relative_path for f in files] == [".htaccess"]

    def test_skip_pattern(self, tmp_path, write_file):
        write_file(tmp_path, "index.html", size=1)
        write_file(tmp_path, "art/logo.psd", size=1)
        write_file(tmp_path, "notes.psd.txt", size=1)

        files = DirectoryScanner(skip_pattern=r"\.psd$").scan_local(tmp_path)

        assert [f.relative_path for f in files] == ["index.html", "notes.psd.txt"]

    def test_skip_pattern_is_unanchored(self, tmp_path, write_file):
        write_file(tmp_path, "drafts/post.html", size=1)
        write_file(tmp_path, "posts/post.html", size=1)

        scanner = DirectoryScanner(skip_pattern="drafts")

        assert scanner.should_skip("drafts/post.html") is True
        assert [f.relative_path for f in scanner.scan_local(tmp_path)] == [
            "posts/post.html"
        ]

    def test_scan_is_stable(self, tmp_path, write_file):
        for name in ["b.txt", "a.txt", "c/d.txt"]:
            write_file(tmp_path, name, size=1)

        scanner = DirectoryScanner()
        first = [f.relative_path for f in scanner.scan_local(tmp_path)]
        second = [f.relative_path for f in scanner.scan_local(tmp_path)]

        assert first == second
