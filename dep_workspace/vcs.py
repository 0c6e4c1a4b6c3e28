"""Version-control state of dependencies already checked out in the workspace.

Shells out to git in the dependency's directory. Each probe is run lazily for
one dependency, honours an overall timeout and an optional cancellation
event, and always reaps the child process.
"""

import logging
import re
import subprocess
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import assert_never

from .context import WorkspaceContext
from .errors import NotUnderVersionControlError
from .errors import VCSProbeFailedError
from .paths import absolute_project_root

logger = logging.getLogger(__name__)

DEFAULT_PROBE_TIMEOUT = 10.0
_POLL_INTERVAL = 0.1
_COMMIT_PATTERN = re.compile(r"^(?:[0-9a-f]{40}|[0-9a-f]{64})$")


@dataclass(frozen=True)
class PlainRevision:
    """A bare commit with no tag or branch at the checked-out position."""

    revision: str


@dataclass(frozen=True)
class TaggedVersion:
    """A tag that points exactly at the checked-out commit."""

    name: str
    revision: str


@dataclass(frozen=True)
class NamedBranch:
    """The checked-out branch and the commit at its tip."""

    name: str
    revision: str


RevisionDescriptor = PlainRevision | TaggedVersion | NamedBranch


def describe_revision(rev: RevisionDescriptor) -> str:
    """Human-readable one-line rendering of a revision descriptor."""
    if isinstance(rev, PlainRevision):
        return rev.revision
    elif isinstance(rev, TaggedVersion):
        return f"{rev.name} ({rev.revision})"
    elif isinstance(rev, NamedBranch):
        return f"branch {rev.name} ({rev.revision})"
    else:
        assert_never(rev)


class GitProbe:
    """Runs git queries in one directory under a shared deadline."""

    def __init__(
        self,
        repo_path: Path,
        *,
        timeout: float | None = DEFAULT_PROBE_TIMEOUT,
        cancel: threading.Event | None = None,
        git: str = "git",
    ):
        self.repo_path = repo_path
        self.cancel = cancel
        self.git = git
        self.deadline = time.monotonic() + timeout if timeout is not None else None

    def run(self, *args: str) -> tuple[int, str, str]:
        """Run ``git <args>`` and return (returncode, stdout, stderr).

        Raises:
            VCSProbeFailedError: git is missing, the deadline/cancel event fired, or stdout is not UTF-8
        """
        cmd = [self.git, *args]
        logger.debug(f"Running: {' '.join(cmd)} in {self.repo_path}")

        try:
            proc = subprocess.Popen(
                cmd,
                cwd=self.repo_path,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise VCSProbeFailedError(
                f"Version control executable '{self.git}' not found", path=self.repo_path, cause=e, reason="missing"
            ) from e
        except OSError as e:
            raise VCSProbeFailedError(
                f"Could not run '{self.git}' in {self.repo_path}: {e}", path=self.repo_path, cause=e
            ) from e

        while True:
            reason = self._stop_reason()
            if reason is not None:
                proc.kill()
                proc.communicate()
                raise VCSProbeFailedError(
                    f"'{' '.join(cmd)}' in {self.repo_path} was stopped: {reason}",
                    path=self.repo_path,
                    cause=TimeoutError(reason) if reason == "timeout" else None,
                    reason=reason,
                )

            wait = _POLL_INTERVAL
            if self.deadline is not None:
                wait = max(0.0, min(wait, self.deadline - time.monotonic()))
            try:
                stdout, stderr = proc.communicate(timeout=wait)
            except subprocess.TimeoutExpired:
                continue
            break

        stderr_text = stderr.decode("utf-8", errors="replace")
        try:
            stdout_text = stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise VCSProbeFailedError(
                f"'{' '.join(cmd)}' in {self.repo_path} printed output that is not valid UTF-8",
                path=self.repo_path,
                cause=e,
                reason="malformed",
                returncode=proc.returncode,
                stderr=stderr_text,
            ) from e
        return proc.returncode, stdout_text, stderr_text

    def _stop_reason(self) -> str | None:
        if self.cancel is not None and self.cancel.is_set():
            return "cancelled"
        if self.deadline is not None and time.monotonic() >= self.deadline:
            return "timeout"
        return None

    def current_commit(self) -> str:
        returncode, stdout, stderr = self.run("rev-parse", "HEAD")
        if returncode != 0:
            raise VCSProbeFailedError(
                f"Could not read the current commit in {self.repo_path}: {stderr.strip()}",
                path=self.repo_path,
                returncode=returncode,
                stderr=stderr,
            )

        commit = stdout.strip()
        if not _COMMIT_PATTERN.match(commit):
            raise VCSProbeFailedError(
                f"Unexpected commit id {commit!r} from git in {self.repo_path}",
                path=self.repo_path,
                reason="malformed",
                returncode=returncode,
                stderr=stderr,
            )
        return commit

    def current_branch(self) -> str | None:
        """Checked-out branch, or None when HEAD is detached."""
        returncode, stdout, stderr = self.run("symbolic-ref", "-q", "--short", "HEAD")
        if returncode == 1:
            return None
        if returncode != 0:
            raise VCSProbeFailedError(
                f"Could not read the current branch in {self.repo_path}: {stderr.strip()}",
                path=self.repo_path,
                returncode=returncode,
                stderr=stderr,
            )
        return stdout.strip() or None

    def exact_tag(self) -> str | None:
        """Tag pointing exactly at HEAD, if any."""
        returncode, stdout, _ = self.run("describe", "--tags", "--exact-match", "HEAD")
        if returncode != 0:
            return None
        return stdout.strip() or None


def probe_revision(repo_path: Path, probe: GitProbe | None = None) -> RevisionDescriptor:
    """Describe the checked-out state of the git repository at ``repo_path``.

    Raises:
        NotUnderVersionControlError: repo_path has no .git entry
        VCSProbeFailedError: git is missing, fails, times out, or prints garbage
    """
    if not (repo_path / ".git").exists():
        raise NotUnderVersionControlError(f"{repo_path} is not under version control (no .git)", path=repo_path)

    probe = probe or GitProbe(repo_path)
    commit = probe.current_commit()

    branch = probe.current_branch()
    if branch is not None:
        return NamedBranch(branch, commit)

    tag = probe.exact_tag()
    if tag is not None:
        return TaggedVersion(tag, commit)

    return PlainRevision(commit)


def version_in_workspace(
    ctx: WorkspaceContext,
    import_root: str,
    *,
    timeout: float | None = DEFAULT_PROBE_TIMEOUT,
    cancel: threading.Event | None = None,
    git: str = "git",
) -> RevisionDescriptor:
    """Report the version-control state of a dependency checked out under the primary root.

    Args:
        ctx: Workspace context
        import_root: Import path of the dependency's project root
        timeout: Overall seconds allowed for all git calls (None for no limit)
        cancel: Event that aborts the probe when set
        git: git executable to run

    Returns:
        TaggedVersion when HEAD is detached at a tag, NamedBranch when a branch is
        checked out, otherwise PlainRevision

    Raises:
        PathNotFoundError: The dependency directory does not exist
        ProjectRootInvalidError: The import path names a file
        NotUnderVersionControlError: The directory is not a git checkout
        VCSProbeFailedError: git is missing, fails, times out, or is cancelled
    """
    repo_path = absolute_project_root(ctx, import_root)
    probe = GitProbe(repo_path, timeout=timeout, cancel=cancel, git=git)
    rev = probe_revision(repo_path, probe)
    logger.debug(f"{import_root} is at {describe_revision(rev)}")
    return rev
