"""
Diffing - line-level comparison of a target against its shadow copy.

Rendering follows the usual unified-diff layout, including the
``\\ No newline at end of file`` marker, so a change that only adds or
drops a final newline still shows up as a readable hunk.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass

from diff_verify.core.models.settings import DEFAULT_CONTEXT_LINES

_SEPARATOR = "=" * 67
_NO_NEWLINE = "\\ No newline at end of file"


@dataclass
class FileDiff:
    """Comparison result for one target file."""

    path: str
    shadow: str
    changed: bool = False
    patch: str = ""

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "shadow": self.shadow,
            "changed": self.changed,
            "patch": self.patch,
        }


def split_lines(text: str) -> list[str]:
    """Split on ``\\n`` only, keeping line endings.

    ``str.splitlines`` would also break on form feeds and other
    separators, which are ordinary content in generated files.
    """
    if not text:
        return []
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def render_patch(
    old: str,
    new: str,
    old_label: str,
    new_label: str,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Unified diff of *old* → *new*; empty string when they are equal."""
    if old == new:
        return ""

    body = difflib.unified_diff(
        split_lines(old),
        split_lines(new),
        fromfile=old_label,
        tofile=new_label,
        n=context_lines,
    )
    out = [_SEPARATOR + "\n"]
    for line in body:
        if line.endswith("\n"):
            out.append(line)
        else:
            out.append(line + "\n" + _NO_NEWLINE + "\n")
    return "".join(out)


def compare_contents(
    path: str,
    shadow: str,
    old: str,
    new: str,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> FileDiff:
    """Compare pre-run (*old*, from the shadow) with post-run (*new*) text."""
    patch = render_patch(old, new, shadow, path, context_lines=context_lines)
    return FileDiff(path=path, shadow=shadow, changed=bool(patch), patch=patch)
