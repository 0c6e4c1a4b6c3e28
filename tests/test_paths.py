"""Tests for import path <-> absolute path conversion."""

import pytest

from dep_workspace.context import WorkspaceContext
from dep_workspace.errors import PathNotFoundError
from dep_workspace.errors import PathNotInWorkspaceError
from dep_workspace.errors import ProjectRootInvalidError
from dep_workspace.paths import absolute_project_root
from dep_workspace.paths import split_absolute_project_root

from conftest import make_dirs


class TestSplitAbsoluteProjectRoot:
    @pytest.mark.parametrize("import_path", ["github.com/pkg/errors", "my/silly/thing"])
    def test_returns_path_below_src(self, ctx, gopath, import_path):
        full = gopath.joinpath("src", *import_path.split("/"))
        assert split_absolute_project_root(ctx, full) == import_path

    def test_bare_src_is_rejected(self, ctx, gopath):
        with pytest.raises(ProjectRootInvalidError) as exc_info:
            split_absolute_project_root(ctx, gopath / "src")
        assert f"{gopath}/src" in str(exc_info.value)

    def test_trailing_separator_on_src_is_still_bare(self, ctx, gopath):
        with pytest.raises(ProjectRootInvalidError):
            split_absolute_project_root(ctx, str(gopath / "src") + "/")

    def test_relative_path_is_not_in_workspace(self, ctx):
        with pytest.raises(PathNotInWorkspaceError):
            split_absolute_project_root(ctx, "tra/la/la/la")

    def test_path_outside_src_is_not_in_workspace(self, ctx, gopath):
        with pytest.raises(PathNotInWorkspaceError) as exc_info:
            split_absolute_project_root(ctx, gopath / "pkg" / "thing")
        assert exc_info.value.path is not None

    def test_sibling_with_common_prefix_is_not_in_workspace(self, ctx, gopath):
        with pytest.raises(PathNotInWorkspaceError):
            split_absolute_project_root(ctx, gopath.parent / "go-two" / "src" / "thing")

    def test_uses_whichever_root_contains_the_path(self, tmp_path):
        one, two = make_dirs(tmp_path, "one", "two")
        ctx = WorkspaceContext.create(tmp_path, [one, two])
        assert split_absolute_project_root(ctx, two / "src" / "example.com" / "lib") == "example.com/lib"


class TestAbsoluteProjectRoot:
    def test_existing_directory(self, ctx, gopath):
        make_dirs(gopath, "src/github.com/pkg/errors")
        assert absolute_project_root(ctx, "github.com/pkg/errors") == gopath / "src" / "github.com" / "pkg" / "errors"

    def test_missing_directory(self, ctx):
        with pytest.raises(PathNotFoundError):
            absolute_project_root(ctx, "my/silly/thing")

    def test_regular_file(self, ctx, gopath):
        make_dirs(gopath, "src/thing")
        (gopath / "src" / "thing" / "thing.go").write_text("hello world")
        with pytest.raises(ProjectRootInvalidError):
            absolute_project_root(ctx, "thing/thing.go")

    def test_empty_import_path(self, ctx):
        with pytest.raises(ProjectRootInvalidError):
            absolute_project_root(ctx, "")

    def test_uses_primary_root_only(self, tmp_path):
        make_dirs(tmp_path, "one/src", "two/src/example.com/lib")
        ctx = WorkspaceContext.create(tmp_path, [tmp_path / "one", tmp_path / "two"])
        with pytest.raises(PathNotFoundError):
            absolute_project_root(ctx, "example.com/lib")

    @pytest.mark.parametrize("import_path", ["github.com/pkg/errors", "a/b", "single"])
    def test_round_trip(self, ctx, gopath, import_path):
        make_dirs(gopath, f"src/{import_path}")
        assert split_absolute_project_root(ctx, absolute_project_root(ctx, import_path)) == import_path
