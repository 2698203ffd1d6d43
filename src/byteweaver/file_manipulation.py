from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from byteweaver.config import IGNORE_FILE_NAME, CandidateFile
from byteweaver.exceptions import TraversalError
from byteweaver.logging import logger
from byteweaver.matching import is_selected, matches_any

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


def relpath(path: Path, root: Path) -> str:
    """Name a found file the way its block header shows it.

    Block names are relative to the traversal root and always use forward
    slashes, so a bundle reads the same on every platform. A path outside the
    root, such as a symlink target reached during the walk, keeps its full form.

    Args:
        path (Path): a file found during traversal
        root (Path): the directory the traversal started from

    Returns:
        str: the block name
    """
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def list_entries(directory: Path) -> list[str]:
    """List the entry names of a directory, sorted by name.

    Sorting makes the output reproducible whatever order the filesystem
    returns entries in.

    Args:
        directory (Path): the directory to list

    Raises:
        TraversalError: if the directory cannot be listed

    Returns:
        list[str]: the entry names
    """
    try:
        return sorted(os.listdir(directory))
    except OSError as e:
        raise TraversalError(message=f"Cannot list directory {directory}: {e}", directory=directory) from e


def load_ignore_rules(directory: Path) -> list[str]:
    """Read the exclude patterns of a directory's ignore file.

    Only `directory` itself is looked at, never its ancestors. A missing or
    unreadable ignore file yields no rules. Blank lines and lines starting
    with ``#`` are skipped; every other line is one literal pattern.

    Args:
        directory (Path): the directory that may hold an ignore file

    Returns:
        list[str]: the patterns, in file order
    """
    ignore_file = directory / IGNORE_FILE_NAME
    try:
        content = ignore_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("ignore_file_unreadable", path=str(ignore_file), error=str(e))
        return []
    rules: list[str] = []
    for line in content.splitlines():
        s = line.strip()
        if not s or s.startswith("#"):
            continue
        rules.append(s)
    if rules:
        logger.debug("ignore_rules_loaded", directory=str(directory), rules=rules)
    return rules


def make_candidate(path: Path, root: Path) -> CandidateFile:
    """Build the candidate record for a file found under `root`."""
    return CandidateFile(path=path.resolve(), name=path.name, rel=relpath(path, root))


def _merge_rules(exclude: Sequence[str], extra: Sequence[str]) -> list[str]:
    return list(dict.fromkeys([*exclude, *extra]))


def _walk_flat(
    root: Path,
    exclude: Sequence[str],
    include: Sequence[str],
    *,
    cwd: Path,
) -> Iterator[CandidateFile]:
    level_exclude = _merge_rules(exclude, load_ignore_rules(root))
    for name in list_entries(root):
        entry = root / name
        if is_selected(entry, level_exclude, include, cwd=cwd) and entry.is_file():
            yield make_candidate(entry, root)


def _walk_recursive(
    directory: Path,
    root: Path,
    exclude: Sequence[str],
    include: Sequence[str],
    *,
    cwd: Path,
    visited: frozenset[Path],
) -> Iterator[CandidateFile]:
    # rules found here apply to this level and everything below it
    level_exclude = _merge_rules(exclude, load_ignore_rules(directory))
    for name in list_entries(directory):
        entry = directory / name
        # excluded entries are never stat'ed, so excluded trees are never entered
        if matches_any(entry, level_exclude, exclude_mode=True, cwd=cwd):
            logger.debug("candidate_excluded", path=str(entry))
            continue
        if entry.is_dir():
            real = entry.resolve()
            if real in visited:
                logger.debug("directory_cycle_skipped", path=str(entry))
                continue
            yield from _walk_recursive(
                entry,
                root,
                level_exclude,
                include,
                cwd=cwd,
                visited=visited | {real},
            )
        elif entry.is_file() and matches_any(entry, include, exclude_mode=False, cwd=cwd):
            yield make_candidate(entry, root)


def traverse(
    directory: Path,
    exclude: Sequence[str],
    include: Sequence[str],
    *,
    recursive: bool,
    cwd: Path,
) -> list[CandidateFile]:
    """Collect the candidate files of a directory.

    Entries are visited in name order. In recursive mode the walk is depth
    first; the ignore file of each visited directory adds exclude patterns for
    that directory and its subtree only. In flat mode subdirectories are
    skipped and only the root's ignore file is read.

    Args:
        directory (Path): the root directory to traverse
        exclude (Sequence[str]): exclude patterns, checked first
        include (Sequence[str]): include patterns; empty means everything
        recursive (bool): whether to descend into subdirectories
        cwd (Path): the working directory used for relative-path matching

    Raises:
        TraversalError: if a visited directory cannot be listed

    Returns:
        list[CandidateFile]: the candidates, in traversal order
    """
    root = Path(directory)
    logger.info("traversal_started", directory=str(root), recursive=recursive)
    if recursive:
        found = _walk_recursive(root, root, exclude, include, cwd=cwd, visited=frozenset({root.resolve()}))
    else:
        found = _walk_flat(root, exclude, include, cwd=cwd)
    return list(found)


def drop_output_file(candidates: Sequence[CandidateFile], output: Path) -> list[CandidateFile]:
    """Remove the output destination from the candidates, so a run never reads its own output."""
    target = Path(output).resolve()
    return [c for c in candidates if c.path != target]
