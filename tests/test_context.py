"""Tests for WorkspaceContext construction and the filesystem helpers it relies on."""

import dataclasses

import pytest

from dep_workspace.context import WorkspaceContext
from dep_workspace.fs import has_filepath_prefix
from dep_workspace.fs import is_case_sensitive_filesystem


class TestWorkspaceContext:
    def test_roots_keep_configuration_order(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, [tmp_path / "b", tmp_path / "a"], case_sensitive=True)
        assert ctx.roots == (tmp_path / "b", tmp_path / "a")
        assert ctx.primary_root == tmp_path / "b"

    def test_duplicate_roots_collapse(self, tmp_path):
        ctx = WorkspaceContext.create(
            tmp_path, [tmp_path / "go", str(tmp_path / "go") + "/", tmp_path / "go" / "." / "x" / ".."]
        )
        assert ctx.roots == (tmp_path / "go",)

    def test_case_variants_collapse_on_case_insensitive_filesystems(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, [tmp_path / "Go", tmp_path / "GO"], case_sensitive=False)
        assert ctx.roots == (tmp_path / "Go",)

    def test_case_variants_kept_on_case_sensitive_filesystems(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, [tmp_path / "Go", tmp_path / "GO"], case_sensitive=True)
        assert len(ctx.roots) == 2

    def test_empty_entries_are_ignored(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, ["", tmp_path / "go"])
        assert ctx.roots == (tmp_path / "go",)

    def test_requires_a_root(self, tmp_path):
        with pytest.raises(ValueError, match="At least one workspace root"):
            WorkspaceContext.create(tmp_path, [])

    def test_rejects_relative_root(self, tmp_path):
        with pytest.raises(ValueError, match="must be absolute"):
            WorkspaceContext.create(tmp_path, ["relative/go"])

    def test_rejects_relative_working_dir(self, tmp_path):
        with pytest.raises(ValueError, match="must be absolute"):
            WorkspaceContext.create("relative", [tmp_path])

    def test_is_immutable(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, [tmp_path])
        with pytest.raises(dataclasses.FrozenInstanceError):
            ctx.working_dir = tmp_path / "other"

    def test_with_working_dir_returns_copy(self, tmp_path):
        ctx = WorkspaceContext.create(tmp_path, [tmp_path / "go"])
        moved = ctx.with_working_dir(tmp_path / "go" / "src")
        assert moved.working_dir == tmp_path / "go" / "src"
        assert ctx.working_dir == tmp_path
        assert moved.roots == ctx.roots

    def test_case_sensitivity_is_probed(self, tmp_path):
        root = tmp_path / "go"
        root.mkdir()
        ctx = WorkspaceContext.create(tmp_path, [root])
        assert ctx.case_sensitive == is_case_sensitive_filesystem(root)


class TestHasFilepathPrefix:
    def test_equal_paths(self, tmp_path):
        assert has_filepath_prefix(tmp_path / "go", tmp_path / "go")

    def test_ancestor(self, tmp_path):
        assert has_filepath_prefix(tmp_path / "go" / "src" / "x", tmp_path / "go" / "src")

    def test_textual_prefix_is_not_an_ancestor(self, tmp_path):
        assert not has_filepath_prefix(tmp_path / "go-two" / "src", tmp_path / "go")

    def test_longer_prefix(self, tmp_path):
        assert not has_filepath_prefix(tmp_path / "go", tmp_path / "go" / "src")

    def test_case(self, tmp_path):
        assert not has_filepath_prefix(tmp_path / "GO" / "src", tmp_path / "go")
        assert has_filepath_prefix(tmp_path / "GO" / "src", tmp_path / "go", case_sensitive=False)


class TestIsCaseSensitiveFilesystem:
    def test_name_without_letters_reports_sensitive(self, tmp_path):
        path = tmp_path / "123"
        path.mkdir()
        assert is_case_sensitive_filesystem(path) is True

    def test_matches_host_behaviour(self, tmp_path):
        path = tmp_path / "probe"
        path.mkdir()
        flipped_exists = (tmp_path / "Probe").exists()
        assert is_case_sensitive_filesystem(path) is (not flipped_exists)
