"""Error kinds raised by workspace resolution, project loading and VCS probing.

Every error carries the offending path and, where there is one, the underlying
cause. Callers own retry policy; nothing here is retried or silently downgraded.
"""

from pathlib import Path


class DepWorkspaceError(Exception):
    """Base error for dep-workspace."""

    def __init__(self, message: str, *, path: str | Path | None = None, cause: BaseException | None = None):
        self.message = message
        self.path = path
        self.cause = cause
        super().__init__(message)


class PathNotInWorkspaceError(DepWorkspaceError):
    """Path is not inside the src directory of any configured workspace root."""


class AmbiguousWorkspaceRootError(DepWorkspaceError):
    """Not enough information, or conflicting information, to pick one workspace root."""


class ProjectRootInvalidError(DepWorkspaceError):
    """Path cannot name a project root (bare src directory, or a regular file)."""


class PathNotFoundError(DepWorkspaceError):
    """A path that was expected to exist does not."""


class ManifestNotFoundError(PathNotFoundError):
    """No manifest in the starting directory or any of its ancestors."""


class _FileSyntaxError(DepWorkspaceError):
    """Failure to parse a manifest or lock file."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        cause: BaseException | None = None,
        line: int | None = None,
        column: int | None = None,
        location: str | None = None,
    ):
        self.line = line
        self.column = column
        self.location = location
        super().__init__(message, path=path, cause=cause)


class ManifestSyntaxError(_FileSyntaxError):
    """Manifest file exists but could not be parsed."""


class LockSyntaxError(_FileSyntaxError):
    """Lock file exists but could not be parsed."""


class NotUnderVersionControlError(DepWorkspaceError):
    """Directory has no recognized version-control metadata."""


class VCSProbeFailedError(DepWorkspaceError):
    """The version-control tool was missing, failed, timed out, or printed something unexpected."""

    def __init__(
        self,
        message: str,
        *,
        path: str | Path | None = None,
        cause: BaseException | None = None,
        reason: str = "failed",
        returncode: int | None = None,
        stderr: str | None = None,
    ):
        self.reason = reason  # failed, missing, timeout, cancelled, malformed
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, path=path, cause=cause)
