"""Project discovery and loading.

Ascends from the working directory to the nearest directory holding a
manifest, works out which workspace root the project belongs to, and parses
the manifest and (optional) lock found there.
"""

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .context import SRC_DIR
from .context import WorkspaceContext
from .errors import ManifestNotFoundError
from .fs import has_filepath_prefix
from .manifest import LOCK_NAME
from .manifest import MANIFEST_NAME
from .manifest import Lock
from .manifest import Manifest
from .manifest import read_lock
from .manifest import read_manifest
from .paths import split_absolute_project_root
from .roots import detect_project_root

logger = logging.getLogger(__name__)


@dataclass
class Project:
    """A project rooted at the directory holding its manifest."""

    abs_root: Path
    resolved_abs_root: Path
    import_root: str = ""
    manifest: Manifest | None = None
    lock: Lock | None = None

    @property
    def manifest_path(self) -> Path:
        return self.abs_root / MANIFEST_NAME

    @property
    def lock_path(self) -> Path:
        return self.abs_root / LOCK_NAME

    def lock_is_stale(self) -> bool:
        """True when there is no lock or its memo was not generated from the current manifest."""
        if self.manifest is None or self.lock is None:
            return True
        return not self.lock.memo_matches(self.manifest)


def _is_regular_file(path: Path) -> bool:
    return path.is_file()


def find_project_root(start: str | Path, is_file: Callable[[Path], bool] = _is_regular_file) -> Path:
    """Find the nearest directory at or above ``start`` that directly contains a manifest.

    Args:
        start: Absolute directory to start searching from
        is_file: Predicate used to test for the manifest (injectable for tests)

    Returns:
        The directory holding the manifest

    Raises:
        ManifestNotFoundError: No manifest up to the filesystem root
    """
    start = Path(os.path.normpath(start))
    current = start

    while True:
        candidate = current / MANIFEST_NAME
        logger.debug(f"Looking for {candidate}")
        if is_file(candidate):
            return current

        parent = current.parent
        if parent == current:
            break
        current = parent

    raise ManifestNotFoundError(
        f"Could not find project {MANIFEST_NAME} in {start} or any parent directory", path=start
    )


def load_project(ctx: WorkspaceContext) -> Project:
    """Load the project enclosing ``ctx.working_dir``.

    Returns:
        A freshly built Project with manifest, optional lock and import root

    Raises:
        ManifestNotFoundError: No manifest in the working directory or its ancestors
        PathNotInWorkspaceError: The project is not inside any workspace root
        AmbiguousWorkspaceRootError: The project's two views point at different roots
        ProjectRootInvalidError: The project is a workspace src directory itself
        ManifestSyntaxError: The manifest could not be parsed
        LockSyntaxError: The lock exists but could not be parsed
    """
    abs_root = find_project_root(ctx.working_dir)
    resolved_abs_root = abs_root.resolve(strict=True)
    project = Project(abs_root=abs_root, resolved_abs_root=resolved_abs_root)

    root = detect_project_root(ctx, abs_root, resolved_abs_root)
    if has_filepath_prefix(abs_root, root / SRC_DIR, ctx.case_sensitive):
        project.import_root = split_absolute_project_root(ctx, abs_root)
    else:
        project.import_root = split_absolute_project_root(ctx, resolved_abs_root)

    project.manifest = read_manifest(project.manifest_path)

    lock_path = project.lock_path
    if lock_path.is_file():
        project.lock = read_lock(lock_path)
    else:
        logger.debug(f"No {LOCK_NAME} in {abs_root}")

    logger.info(f"Loaded project {project.import_root} from {abs_root}")
    return project
