"""Manifest (Gopkg.toml) and lock (Gopkg.lock) parsing.

Both files are TOML. Parsing happens in two steps: tomllib turns text into
tables, then pydantic checks the shape. A failure in either step is reported
as a syntax error carrying the file path and the offending line/column or
field location.
"""

import hashlib
import logging
import re
import string
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator
from pydantic import model_validator

from .errors import DepWorkspaceError
from .errors import LockSyntaxError
from .errors import ManifestNotFoundError
from .errors import ManifestSyntaxError
from .errors import PathNotFoundError

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Gopkg.toml"
LOCK_NAME = "Gopkg.lock"

_KNOWN_MANIFEST_KEYS = {"constraint", "override", "ignored", "required", "prune", "metadata", "noverify"}
_TOML_POSITION = re.compile(r"at line (\d+), column (\d+)")


def manifest_digest(content: bytes) -> str:
    """Digest recorded in a lock's memo for the manifest content it was solved from."""
    return hashlib.sha256(content).hexdigest()


class ProjectConstraint(BaseModel):
    """A constraint or override on one dependency."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, description="Import path of the project root")
    version: str | None = Field(None, description="Semver range or exact tag")
    branch: str | None = Field(None, description="Branch to track")
    revision: str | None = Field(None, description="Exact commit")
    source: str | None = Field(None, description="Alternate location to fetch from")

    @model_validator(mode="after")
    def _single_version_kind(self) -> "ProjectConstraint":
        given = [kind for kind in ("version", "branch", "revision") if getattr(self, kind)]
        if len(given) > 1:
            raise ValueError(f"multiple constraints specified for {self.name} ({', '.join(given)}), can only specify one")
        return self


def _reject_duplicate_names(projects: list[ProjectConstraint], table: str) -> None:
    seen: set[str] = set()
    for project in projects:
        if project.name in seen:
            raise ValueError(f"multiple dependencies specified for {project.name} in [[{table}]], can only specify one")
        seen.add(project.name)


class Manifest(BaseModel):
    """Direct dependency declarations of a project."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    constraints: list[ProjectConstraint] = Field(default_factory=list, alias="constraint")
    overrides: list[ProjectConstraint] = Field(default_factory=list, alias="override")
    ignored: list[str] = Field(default_factory=list)
    required: list[str] = Field(default_factory=list)
    digest: str = Field("", exclude=True, description="sha256 of the raw manifest bytes")

    @model_validator(mode="after")
    def _unique_names(self) -> "Manifest":
        _reject_duplicate_names(self.constraints, "constraint")
        _reject_duplicate_names(self.overrides, "override")
        return self

    def dependency_names(self) -> list[str]:
        """Names of constrained projects plus required packages, sorted."""
        return sorted({c.name for c in self.constraints} | set(self.required))


class LockedProject(BaseModel):
    """A dependency pinned by the solver."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1)
    revision: str = Field(..., min_length=1)
    version: str | None = None
    branch: str | None = None
    source: str | None = None
    packages: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _version_or_branch(self) -> "LockedProject":
        if self.version and self.branch:
            raise ValueError(f"lock entry for {self.name} specifies both a branch and a version")
        return self


class Lock(BaseModel):
    """Solver output: the manifest memo and the ordered pinned projects."""

    model_config = ConfigDict(extra="ignore")

    memo: str = ""
    projects: list[LockedProject] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _memo_from_solve_meta(cls, data: Any) -> Any:
        # Newer lock files keep the digest under [solve-meta]
        if isinstance(data, dict) and "memo" not in data:
            solve_meta = data.get("solve-meta")
            if isinstance(solve_meta, dict) and "inputs-digest" in solve_meta:
                data = {**data, "memo": solve_meta["inputs-digest"]}
        return data

    @field_validator("memo")
    @classmethod
    def _hex_memo(cls, value: str) -> str:
        if value and not all(char in string.hexdigits for char in value):
            raise ValueError(f"invalid hash digest in memo field: {value!r}")
        return value.lower()

    def memo_matches(self, manifest: Manifest) -> bool:
        return bool(self.memo) and self.memo == manifest.digest


def _format_location(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location like ``constraint[0].name``."""
    rendered = ""
    for part in loc:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered


def _decode_position(error: tomllib.TOMLDecodeError) -> tuple[int | None, int | None]:
    line = getattr(error, "lineno", None)
    column = getattr(error, "colno", None)
    if line is None:
        match = _TOML_POSITION.search(str(error))
        if match:
            line, column = int(match.group(1)), int(match.group(2))
    return line, column


def _parse_toml(path: Path, content: bytes, error_cls: type[ManifestSyntaxError | LockSyntaxError], kind: str) -> dict:
    try:
        return tomllib.loads(content.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise error_cls(f"{kind} {path} is not valid UTF-8: {e}", path=path, cause=e) from e
    except tomllib.TOMLDecodeError as e:
        line, column = _decode_position(e)
        where = f" at line {line}, column {column}" if line is not None else ""
        raise error_cls(
            f"Unable to parse {kind} {path}{where}: {e}", path=path, cause=e, line=line, column=column
        ) from e


def _validation_failure(
    path: Path, error: ValidationError, error_cls: type[ManifestSyntaxError | LockSyntaxError], kind: str
) -> ManifestSyntaxError | LockSyntaxError:
    first = error.errors()[0]
    location = _format_location(tuple(first.get("loc", ())))
    where = f" at {location}" if location else ""
    return error_cls(
        f"Invalid {kind} {path}{where}: {first.get('msg', error)}", path=path, cause=error, location=location or None
    )


def _read_file(path: Path, kind: str, not_found_cls: type[PathNotFoundError]) -> bytes:
    try:
        return path.read_bytes()
    except FileNotFoundError as e:
        raise not_found_cls(f"{kind.capitalize()} {path} does not exist", path=path, cause=e) from e
    except OSError as e:
        raise DepWorkspaceError(f"Could not read {kind} {path}: {e.strerror or e}", path=path, cause=e) from e


def read_manifest(path: str | Path) -> Manifest:
    """Parse a manifest file.

    Raises:
        ManifestSyntaxError: TOML is malformed or the tables have the wrong shape
        ManifestNotFoundError: path does not exist
        DepWorkspaceError: path exists but cannot be read
    """
    path = Path(path)
    content = _read_file(path, "manifest", ManifestNotFoundError)
    data = _parse_toml(path, content, ManifestSyntaxError, "manifest")

    unknown = sorted(set(data) - _KNOWN_MANIFEST_KEYS)
    if unknown:
        logger.warning(f"Unknown field(s) in manifest {path}: {', '.join(unknown)}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise _validation_failure(path, e, ManifestSyntaxError, "manifest") from e

    manifest.digest = manifest_digest(content)
    return manifest


def read_lock(path: str | Path) -> Lock:
    """Parse a lock file.

    Raises:
        LockSyntaxError: TOML is malformed or the tables have the wrong shape
        PathNotFoundError: path does not exist
        DepWorkspaceError: path exists but cannot be read
    """
    path = Path(path)
    data = _parse_toml(path, _read_file(path, "lock", PathNotFoundError), LockSyntaxError, "lock")

    try:
        return Lock.model_validate(data)
    except ValidationError as e:
        raise _validation_failure(path, e, LockSyntaxError, "lock") from e
