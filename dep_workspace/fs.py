"""Filesystem helpers: component-wise prefix tests and case-sensitivity probing."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def has_filepath_prefix(path: str | Path, prefix: str | Path, case_sensitive: bool = True) -> bool:
    """Check whether ``prefix`` is an ancestor of (or equal to) ``path``.

    Comparison is per path component, so ``/go-two/src`` does not have the
    prefix ``/go``. Letter case is ignored when ``case_sensitive`` is False.
    """
    path_parts = Path(os.path.normpath(path)).parts
    prefix_parts = Path(os.path.normpath(prefix)).parts

    if len(prefix_parts) > len(path_parts):
        return False

    for ours, theirs in zip(path_parts, prefix_parts):
        if case_sensitive:
            if ours != theirs:
                return False
        elif ours.casefold() != theirs.casefold():
            return False
    return True


def _flip_case(name: str) -> str | None:
    """Flip the case of the first letter in ``name`` that has a case; None if there is none."""
    for i, char in enumerate(name):
        flipped = char.swapcase()
        if flipped != char:
            return name[:i] + flipped + name[i + 1 :]
    return None


def is_case_sensitive_filesystem(path: str | Path) -> bool:
    """Probe whether the filesystem holding ``path`` distinguishes letter case.

    Flips the case of one letter in the final component of ``path`` and checks
    whether the result names the same file. ``path`` must exist. Names without
    any cased letter cannot be probed and are reported as case-sensitive.
    """
    path = Path(path)
    flipped = _flip_case(path.name)
    if flipped is None:
        logger.debug(f"Cannot probe case sensitivity with {path}: no cased letters in name")
        return True

    alt = path.with_name(flipped)
    try:
        return not os.path.samefile(path, alt)
    except FileNotFoundError:
        return True
