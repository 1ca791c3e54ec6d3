"""Tests for gitexplorer.paths."""

import pytest

from gitexplorer.paths import full_path, is_root_path, join_path, normalize_path, parent_of, strip_root


class TestNormalizePath:
    def test_simple(self):
        assert normalize_path("foo/bar") == "foo/bar"

    def test_strips_slashes(self):
        assert normalize_path("/foo/bar/") == "foo/bar"

    def test_collapses_dot(self):
        assert normalize_path("foo/./bar") == "foo/bar"

    def test_rejects_empty(self):
        with pytest.raises(ValueError):
            normalize_path("")

    def test_rejects_dotdot(self):
        with pytest.raises(ValueError):
            normalize_path("foo/../bar")

    def test_rejects_empty_segment(self):
        with pytest.raises(ValueError):
            normalize_path("foo//bar")


class TestIsRootPath:
    @pytest.mark.parametrize("path", ["", "/", "//"])
    def test_root(self, path):
        assert is_root_path(path)

    def test_not_root(self):
        assert not is_root_path("a")


class TestJoinAndSplit:
    def test_join_under_root(self):
        assert join_path("", "a.txt") == "a.txt"

    def test_join_nested(self):
        assert join_path("a/b", "c.txt") == "a/b/c.txt"

    def test_parent_of_nested(self):
        assert parent_of("a/b/c.txt") == "a/b"

    def test_parent_of_root_entry(self):
        assert parent_of("a") == ""


class TestRootPrefix:
    def test_strip_present(self):
        assert strip_root("docs/a/b.txt", "docs") == "a/b.txt"

    def test_strip_absent_is_noop(self):
        assert strip_root("a/b.txt", "root") == "a/b.txt"

    def test_strip_only_whole_segment(self):
        assert strip_root("docsx/a.txt", "docs") == "docsx/a.txt"

    def test_strip_empty_root(self):
        assert strip_root("a.txt", "") == "a.txt"

    def test_full_path(self):
        assert full_path("root", "a/b.txt") == "root/a/b.txt"

    def test_full_path_empty_root(self):
        assert full_path("", "a/b.txt") == "a/b.txt"
