"""Workspace resolution for Gopkg-style dependency management.

Maps project directories onto configured workspace roots, loads the
manifest and lock of a project, and reports the checked-out version of
dependencies already present in the workspace.
"""

from .context import WorkspaceContext
from .errors import AmbiguousWorkspaceRootError
from .errors import DepWorkspaceError
from .errors import LockSyntaxError
from .errors import ManifestNotFoundError
from .errors import ManifestSyntaxError
from .errors import NotUnderVersionControlError
from .errors import PathNotFoundError
from .errors import PathNotInWorkspaceError
from .errors import ProjectRootInvalidError
from .errors import VCSProbeFailedError
from .manifest import LOCK_NAME
from .manifest import MANIFEST_NAME
from .manifest import Lock
from .manifest import LockedProject
from .manifest import Manifest
from .manifest import ProjectConstraint
from .manifest import read_lock
from .manifest import read_manifest
from .paths import absolute_project_root
from .paths import split_absolute_project_root
from .project import Project
from .project import find_project_root
from .project import load_project
from .roots import detect_project_root
from .roots import detect_root
from .vcs import NamedBranch
from .vcs import PlainRevision
from .vcs import RevisionDescriptor
from .vcs import TaggedVersion
from .vcs import describe_revision
from .vcs import version_in_workspace

__all__ = [
    "WorkspaceContext",
    "Project",
    "Manifest",
    "ProjectConstraint",
    "Lock",
    "LockedProject",
    "MANIFEST_NAME",
    "LOCK_NAME",
    "read_manifest",
    "read_lock",
    "find_project_root",
    "load_project",
    "split_absolute_project_root",
    "absolute_project_root",
    "detect_root",
    "detect_project_root",
    "version_in_workspace",
    "describe_revision",
    "RevisionDescriptor",
    "PlainRevision",
    "TaggedVersion",
    "NamedBranch",
    "DepWorkspaceError",
    "PathNotInWorkspaceError",
    "AmbiguousWorkspaceRootError",
    "ProjectRootInvalidError",
    "PathNotFoundError",
    "ManifestNotFoundError",
    "ManifestSyntaxError",
    "LockSyntaxError",
    "NotUnderVersionControlError",
    "VCSProbeFailedError",
]
