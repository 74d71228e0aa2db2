"""
Target files - resolve path/glob patterns and check them before any copy.

Resolution follows the usual globbing-library conventions:

    - ``**`` matches across directories
    - wildcards do not match dotfiles
    - a pattern naming a directory stands for every file under it
    - a pattern starting with ``!`` removes matches from the set

Results keep the pattern order (matches of one pattern sorted), are
de-duplicated, and are reported relative to the working directory.
"""

from __future__ import annotations

import glob
import logging
import os
from pathlib import Path

from diff_verify.core.errors import InvalidTarget, NoFilesMatched, PathEscapesRoot, StaleTempFile

logger = logging.getLogger(__name__)

SHADOW_SUFFIX = ".tmp"


def shadow_path(file: str) -> str:
    """The sibling path holding a target's pre-run content."""
    return f"{file}{SHADOW_SUFFIX}"


def resolve_targets(patterns: list[str], root: Path | None = None) -> list[str]:
    """Expand patterns into the ordered list of target files.

    Raises:
        NoFilesMatched: If nothing is left after expansion and exclusions.
    """
    root = root or Path.cwd()
    includes = [p for p in patterns if not p.startswith("!")]
    excludes = [p[1:] for p in patterns if p.startswith("!") and len(p) > 1]

    excluded: set[str] = set()
    for pattern in excludes:
        excluded.update(_expand(pattern, root))

    files: list[str] = []
    seen: set[str] = set()
    for pattern in includes:
        matches = _expand(pattern, root)
        logger.debug("Pattern %r matched %d file(s)", pattern, len(matches))
        for match in matches:
            if match in seen or match in excluded:
                continue
            seen.add(match)
            files.append(match)

    if not files:
        raise NoFilesMatched(patterns)
    return files


def validate_targets(files: list[str], root: Path | None = None) -> None:
    """Check every target before anything is touched.

    All files are checked up front, so a failure here means no shadow
    copy was created and no command was run.

    Raises:
        InvalidTarget: A target is the working directory itself.
        PathEscapesRoot: A target resolves outside the working directory.
        StaleTempFile: A target's shadow path already exists.
    """
    root = (root or Path.cwd()).resolve()
    for file in files:
        # resolve() follows symlinks, so a link pointing outside the
        # working directory counts as escaping it
        full = (root / file).resolve()
        if full == root:
            raise InvalidTarget(file)
        if root not in full.parents:
            raise PathEscapesRoot(file)
        shadow = shadow_path(file)
        if os.path.lexists(root / shadow):
            raise StaleTempFile(shadow)


def _expand(pattern: str, root: Path) -> list[str]:
    """Files matched by one pattern, relative to *root* where possible."""
    found: list[str] = []
    for match in sorted(glob.glob(pattern, root_dir=root, recursive=True)):
        full = root / match
        if full.is_dir():
            found.extend(_files_under(match, root))
        elif full.is_file():
            found.append(os.path.normpath(match))
    return found


def _files_under(directory: str, root: Path) -> list[str]:
    pattern = os.path.join(glob.escape(directory), "**", "*")
    return [
        os.path.normpath(match)
        for match in sorted(glob.glob(pattern, root_dir=root, recursive=True))
        if (root / match).is_file()
    ]
