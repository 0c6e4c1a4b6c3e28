"""Conversion between absolute paths and import-path style project roots.

A project root is the slash-separated path of a project below a workspace
root's src directory, e.g. ``github.com/pkg/errors``.
"""

import os
from pathlib import Path

from .context import SRC_DIR
from .context import WorkspaceContext
from .errors import PathNotFoundError
from .errors import ProjectRootInvalidError
from .roots import detect_root


def split_absolute_project_root(ctx: WorkspaceContext, abs_path: str | Path) -> str:
    """Return the import path of ``abs_path`` relative to its workspace root's src directory.

    Raises:
        PathNotInWorkspaceError: abs_path is not under any root's src directory
        ProjectRootInvalidError: abs_path is the src directory itself
    """
    normalized = Path(os.path.normpath(abs_path))
    root = detect_root(ctx, normalized)
    src = root / SRC_DIR

    remainder = normalized.parts[len(src.parts) :]
    if not remainder:
        raise ProjectRootInvalidError(
            f"{normalized} is the workspace {SRC_DIR} directory itself ({root}/{SRC_DIR}); "
            "a project must live in a subdirectory of it",
            path=normalized,
        )
    return "/".join(remainder)


def absolute_project_root(ctx: WorkspaceContext, import_path: str) -> Path:
    """Return the directory for ``import_path`` under the primary workspace root.

    Raises:
        PathNotFoundError: The directory does not exist
        ProjectRootInvalidError: The path exists but is not a directory
    """
    segments = [segment for segment in import_path.split("/") if segment]
    if not segments:
        raise ProjectRootInvalidError(f"Empty import path {import_path!r} does not name a project")

    path = ctx.primary_root.joinpath(SRC_DIR, *segments)

    if not path.exists():
        raise PathNotFoundError(f"No directory exists at {path}", path=path)
    if not path.is_dir():
        raise ProjectRootInvalidError(f"{path} exists but is not a directory", path=path)
    return path
