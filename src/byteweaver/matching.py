"""Include/exclude pattern matching.

Two pattern forms exist:

- ``*.<ext>``: the base name must end with ``.<ext>`` (a literal, case-sensitive
  suffix test, not a glob, so ``*.min.js`` only matches names ending in ``.min.js``);
- anything else: a literal substring of the base name, of the path relative to
  the working directory, or of the raw path.

The substring form lets ``node_modules`` exclude a whole directory without a
path-aware glob engine.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

SUFFIX_PREFIX = "*."


def relative_to_cwd(path: Path, cwd: Path) -> str:
    """Return `path` relative to `cwd`, or the raw path when no relative form exists.

    Args:
        path (Path): the path to relativise
        cwd (Path): the working directory of the invocation

    Returns:
        str: the relative path string
    """
    try:
        return os.path.relpath(path, cwd)
    except ValueError:
        # different drives on Windows
        return str(path)


def matches(path: Path, pattern: str, *, cwd: Path) -> bool:
    """Check whether a path matches a single pattern.

    Args:
        path (Path): the candidate path
        pattern (str): an ``*.<ext>`` suffix pattern or a literal substring
        cwd (Path): the working directory used to build the relative path

    Returns:
        bool: True if the path matches the pattern
    """
    name = path.name
    if pattern.startswith(SUFFIX_PREFIX):
        return name.endswith(pattern[1:])
    return (
        name == pattern
        or pattern in name
        or pattern in relative_to_cwd(path, cwd)
        or pattern in str(path)
    )


def matches_any(
    path: Path,
    patterns: Sequence[str],
    *,
    exclude_mode: bool,
    cwd: Path,
) -> bool:
    """Check a path against a pattern list.

    An empty list matches nothing in exclude mode and everything in include
    mode, so that "no filter" never removes a file.

    Args:
        path (Path): the candidate path
        patterns (Sequence[str]): the patterns to test
        exclude_mode (bool): whether `patterns` is an exclude list
        cwd (Path): the working directory used to build the relative path

    Returns:
        bool: True if any pattern matches (or the list is an empty include list)
    """
    if not patterns:
        return not exclude_mode
    return any(matches(path, p, cwd=cwd) for p in patterns)


def is_selected(
    path: Path,
    exclude: Sequence[str],
    include: Sequence[str],
    *,
    cwd: Path,
) -> bool:
    """Apply a full filter set: excluded paths are dropped before includes are checked."""
    if matches_any(path, exclude, exclude_mode=True, cwd=cwd):
        return False
    return matches_any(path, include, exclude_mode=False, cwd=cwd)
