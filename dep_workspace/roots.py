"""Multi-root detection: which configured workspace root holds a path.

When several roots could textually contain a path, the first root in
configuration order wins. Symlinked and resolved views of a project are
reconciled with a strict table; anything undecidable is reported as
ambiguous instead of guessed.
"""

import logging
from pathlib import Path

from .context import SRC_DIR
from .context import WorkspaceContext
from .errors import AmbiguousWorkspaceRootError
from .errors import PathNotInWorkspaceError
from .fs import has_filepath_prefix

logger = logging.getLogger(__name__)


def detect_root(ctx: WorkspaceContext, path: str | Path) -> Path:
    """Return the first workspace root whose src directory contains ``path``.

    Raises:
        PathNotInWorkspaceError: No configured root's src directory is a prefix of path
    """
    for root in ctx.roots:
        if has_filepath_prefix(path, root / SRC_DIR, ctx.case_sensitive):
            return root

    searched = ", ".join(str(root / SRC_DIR) for root in ctx.roots)
    raise PathNotInWorkspaceError(f"{path} is not within any workspace root (searched: {searched})", path=path)


def _try_detect(ctx: WorkspaceContext, path: str | Path) -> Path | None:
    try:
        return detect_root(ctx, path)
    except PathNotInWorkspaceError:
        return None


def detect_project_root(
    ctx: WorkspaceContext,
    abs_root: str | Path | None,
    resolved_abs_root: str | Path | None,
) -> Path:
    """Reconcile a project's possibly-symlinked path with its resolved path.

    Args:
        ctx: Workspace context with the candidate roots
        abs_root: Project directory as found (may go through a symlink)
        resolved_abs_root: Same directory with every symlink dereferenced

    Returns:
        The single workspace root the project belongs to

    Raises:
        AmbiguousWorkspaceRootError: A view is missing, or the views fall under different roots
        PathNotInWorkspaceError: Neither view is under any root
    """
    if not abs_root or not resolved_abs_root:
        raise AmbiguousWorkspaceRootError(
            "Both the project path and its symlink-resolved path are needed to detect the workspace root "
            f"(got {abs_root or '<unset>'} and {resolved_abs_root or '<unset>'})",
            path=abs_root or resolved_abs_root,
        )

    root = _try_detect(ctx, abs_root)
    resolved_root = _try_detect(ctx, resolved_abs_root)

    if root is None and resolved_root is None:
        raise PathNotInWorkspaceError(
            f"Neither {abs_root} nor {resolved_abs_root} is within any workspace root", path=abs_root
        )

    # Exactly one view is inside the workspace, e.g. a symlink from outside into a root
    if root is None:
        logger.debug(f"Project {abs_root} attributed to workspace root {resolved_root} via its resolved path")
        return resolved_root
    if resolved_root is None:
        logger.debug(f"Project {abs_root} attributed to workspace root {root} via its unresolved path")
        return root

    if root != resolved_root:
        raise AmbiguousWorkspaceRootError(
            f"{abs_root} is in workspace root {root} but resolves to {resolved_abs_root} "
            f"in workspace root {resolved_root}",
            path=abs_root,
        )
    return root
