"""
Reporter - the tagged progress lines a verify run prints.

    [copy]              "schema.ts" -> "schema.ts.tmp"
    [emit]              npm run codegen
    [diff]              "schema.ts" <> "schema.ts.tmp"
    [move]              "schema.ts.tmp" -> "schema.ts"

Tags are colored when the stream is a terminal; ``[error]`` lines go
to stderr, everything else to stdout.
"""

from __future__ import annotations

import click

TAG_COLORS = {
    "copy": "blue",
    "emit": "yellow",
    "diff": "green",
    "move": "magenta",
    "error": "red",
}

# Column the message starts at, counting the bracketed tag
_MESSAGE_COLUMN = 20


def step(tag: str, message: str) -> None:
    """Print one progress line."""
    color = TAG_COLORS.get(tag)
    label = click.style(tag, fg=color) if color else tag
    padding = " " * max(1, _MESSAGE_COLUMN - len(tag) - 2)
    click.echo(f"[{label}]{padding}{message}", err=tag == "error")


def error(message: str) -> None:
    step("error", message)


def patch(text: str) -> None:
    """Print a rendered unified diff to stdout."""
    click.echo(text, nl=False)
