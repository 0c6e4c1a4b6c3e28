"""Workspace context: the working directory plus the ordered workspace roots.

Built once per invocation by the caller and passed explicitly to every
operation. Nothing in the core reads process environment to find roots.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import replace
from pathlib import Path

from .fs import is_case_sensitive_filesystem

logger = logging.getLogger(__name__)

SRC_DIR = "src"


def _detect_case_sensitivity(candidates: Iterable[Path]) -> bool:
    """Probe the first existing candidate; default to case-sensitive."""
    for candidate in candidates:
        probe = candidate
        while not probe.exists() and probe.parent != probe:
            probe = probe.parent
        if probe.exists() and probe.name:
            return is_case_sensitive_filesystem(probe)
    return True


@dataclass(frozen=True)
class WorkspaceContext:
    """Immutable view of where projects and their dependencies live."""

    working_dir: Path
    roots: tuple[Path, ...]
    case_sensitive: bool = True

    @classmethod
    def create(
        cls,
        working_dir: str | Path,
        roots: Iterable[str | Path],
        case_sensitive: bool | None = None,
    ) -> "WorkspaceContext":
        """Build a context from a working directory and workspace roots.

        Args:
            working_dir: Absolute directory the project search starts from
            roots: Workspace roots in precedence order
            case_sensitive: Override filesystem case probing (probed when None)

        Returns:
            WorkspaceContext with normalized, deduplicated roots

        Raises:
            ValueError: No roots given, or a path is not absolute
        """
        wd = Path(os.path.normpath(working_dir))
        if not wd.is_absolute():
            raise ValueError(f"Working directory must be absolute: {working_dir}")

        normalized: list[Path] = []
        for root in roots:
            if not str(root):
                continue
            path = Path(os.path.normpath(root))
            if not path.is_absolute():
                raise ValueError(f"Workspace root must be absolute: {root}")
            normalized.append(path)

        if not normalized:
            raise ValueError("At least one workspace root is required")

        if case_sensitive is None:
            case_sensitive = _detect_case_sensitivity([*normalized, wd])

        unique: list[Path] = []
        seen: set[str] = set()
        for path in normalized:
            key = str(path) if case_sensitive else str(path).casefold()
            if key in seen:
                logger.debug(f"Dropping duplicate workspace root: {path}")
                continue
            seen.add(key)
            unique.append(path)

        return cls(working_dir=wd, roots=tuple(unique), case_sensitive=case_sensitive)

    @property
    def primary_root(self) -> Path:
        """First configured root; import paths are materialized beneath it."""
        return self.roots[0]

    def src_dirs(self) -> list[Path]:
        return [root / SRC_DIR for root in self.roots]

    def with_working_dir(self, working_dir: str | Path) -> "WorkspaceContext":
        wd = Path(os.path.normpath(working_dir))
        if not wd.is_absolute():
            raise ValueError(f"Working directory must be absolute: {working_dir}")
        return replace(self, working_dir=wd)
