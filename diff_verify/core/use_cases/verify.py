"""
Verify use case - does the emit command reproduce the files on disk?

The full run, in order:

    1. resolve the target files from path/glob patterns
    2. validate all of them (nothing touched yet)
    3. copy each target to ``<target>.tmp``
    4. run the emit command with inherited stdio
    5. diff each target against its shadow copy
    6. move every shadow copy back over its target

Steps 4-5 run inside ``shadow_copies()``, whose exit always performs
step 6, on success, drift, emit failure, I/O error or interruption.
Every side effect goes through the adapter registry, which turns the
whole run into a logged no-op under dry-run.
"""

from __future__ import annotations

import logging
import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from diff_verify.adapters.registry import AdapterRegistry, default_registry
from diff_verify.core.errors import (
    CompareFailed,
    EmitFailed,
    RestoreFailed,
    SnapshotFailed,
)
from diff_verify.core.models.action import Action
from diff_verify.core.models.settings import DEFAULT_CONTEXT_LINES
from diff_verify.core.services import reporter
from diff_verify.core.services.diffing import FileDiff, compare_contents
from diff_verify.core.services.targets import resolve_targets, shadow_path, validate_targets

logger = logging.getLogger(__name__)

# Signals that should unwind through the restore step like Ctrl-C does
_TERMINATION_SIGNALS = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name)
)


@dataclass
class VerifyResult:
    """Outcome of a verify run that got past validation."""

    targets: list[str] = field(default_factory=list)
    diffs: list[FileDiff] = field(default_factory=list)
    dry_run: bool = False

    @property
    def drift_found(self) -> bool:
        return any(d.changed for d in self.diffs)

    @property
    def changed_files(self) -> list[str]:
        return [d.path for d in self.diffs if d.changed]

    def to_dict(self) -> dict:
        return {
            "targets": self.targets,
            "dry_run": self.dry_run,
            "drift_found": self.drift_found,
            "changed_files": self.changed_files,
            "diffs": [d.to_dict() for d in self.diffs if d.changed],
        }


def run_verify(
    patterns: list[str],
    command: list[str],
    dry_run: bool = False,
    context_lines: int = DEFAULT_CONTEXT_LINES,
    root: Path | None = None,
    registry: AdapterRegistry | None = None,
) -> VerifyResult:
    """Verify that *command* regenerates the files matching *patterns*.

    Args:
        patterns: Path/glob patterns for the expected generated files.
        command: Emit command tokens, passed to the OS verbatim.
        dry_run: Log every step without touching disk or spawning.
        context_lines: Unchanged lines around each diff hunk.
        root: Working directory (default: cwd).
        registry: Adapter registry (default: real filesystem + emit).

    Returns:
        VerifyResult. Drift is reported here, not raised.

    Raises:
        NoFilesMatched, InvalidTarget, PathEscapesRoot, StaleTempFile:
            before anything is touched.
        SnapshotFailed, EmitFailed, CompareFailed, RestoreFailed:
            after restoration has been attempted.
    """
    root = root or Path.cwd()
    registry = registry or default_registry()

    files = resolve_targets(patterns, root)
    validate_targets(files, root)
    logger.info("Verifying %d file(s) against: %s", len(files), " ".join(command))

    result = VerifyResult(targets=files, dry_run=dry_run)
    with _unwind_on_termination(), shadow_copies(files, registry, root, dry_run):
        _emit(command, registry, root, dry_run)
        result.diffs = _compare(files, registry, root, dry_run, context_lines)

    return result


@contextmanager
def shadow_copies(
    files: list[str],
    registry: AdapterRegistry,
    root: Path,
    dry_run: bool = False,
) -> Iterator[list[str]]:
    """Hold ``.tmp`` copies of *files* for the duration of the block.

    On exit every shadow is moved back over its target. Each restore is
    attempted even if an earlier one failed. If the block raised, that
    error wins and restore failures are only reported; otherwise they
    are raised together as RestoreFailed.
    """
    created: list[str] = []
    try:
        for file in files:
            shadow = shadow_path(file)
            reporter.step("copy", f'"{file}" -> "{shadow}"')
            receipt = registry.execute_action(
                _fs_action("copy", file, src=file, dest=shadow), str(root), dry_run
            )
            if receipt.failed:
                raise SnapshotFailed(f'Cannot copy "{file}" to "{shadow}": {receipt.error}')
            created.append(file)
    except BaseException:
        # Interrupted or failed part-way: put back what was copied so far
        _report_restore_failures(_restore(created, registry, root, dry_run))
        raise

    try:
        yield created
    except BaseException:
        _report_restore_failures(_restore(created, registry, root, dry_run))
        raise

    failures = _restore(created, registry, root, dry_run)
    if failures:
        raise RestoreFailed(failures)


def _emit(command: list[str], registry: AdapterRegistry, root: Path, dry_run: bool) -> None:
    reporter.step("emit", " ".join(command))
    action = Action(id="emit", adapter="emit", params={"command": list(command)})
    receipt = registry.execute_action(action, str(root), dry_run)
    if receipt.failed:
        raise EmitFailed(
            command,
            receipt.error or "unknown error",
            return_code=receipt.metadata.get("return_code"),
        )


def _compare(
    files: list[str],
    registry: AdapterRegistry,
    root: Path,
    dry_run: bool,
    context_lines: int,
) -> list[FileDiff]:
    diffs: list[FileDiff] = []
    for file in files:
        shadow = shadow_path(file)
        reporter.step("diff", f'"{file}" <> "{shadow}"')
        if dry_run:
            continue

        new = _read(file, registry, root)
        old = _read(shadow, registry, root)
        diff = compare_contents(file, shadow, old, new, context_lines=context_lines)
        if diff.changed:
            reporter.error(f'Found diff in "{file}".')
            reporter.patch(diff.patch)
        diffs.append(diff)
    return diffs


def _read(path: str, registry: AdapterRegistry, root: Path) -> str:
    receipt = registry.execute_action(_fs_action("read", path, path=path), str(root))
    if receipt.failed:
        raise CompareFailed(f'Cannot read "{path}": {receipt.error}')
    return receipt.output


def _restore(
    files: list[str],
    registry: AdapterRegistry,
    root: Path,
    dry_run: bool,
) -> list[str]:
    """Move each shadow back; return one message per failed move."""
    failures: list[str] = []
    for file in files:
        shadow = shadow_path(file)
        reporter.step("move", f'"{shadow}" -> "{file}"')
        receipt = registry.execute_action(
            _fs_action("move", shadow, src=shadow, dest=file), str(root), dry_run
        )
        if receipt.failed:
            logger.debug("Restore of %s failed: %s", file, receipt.error)
            failures.append(f'"{shadow}" -> "{file}": {receipt.error}')
    return failures


def _report_restore_failures(failures: list[str]) -> None:
    for failure in failures:
        reporter.error(f"Could not restore {failure}")


def _fs_action(operation: str, subject: str, **params: str) -> Action:
    return Action(
        id=f"{operation}:{subject}",
        adapter="filesystem",
        params={"operation": operation, **params},
    )


@contextmanager
def _unwind_on_termination() -> Iterator[None]:
    """Turn SIGTERM/SIGHUP into KeyboardInterrupt while the block runs.

    Ctrl-C already raises KeyboardInterrupt; this gives the other
    termination signals the same path through the restore step.
    Handlers can only be installed from the main thread.
    """
    if threading.current_thread() is not threading.main_thread():
        yield
        return

    def _raise_interrupt(signum: int, _frame: object) -> None:
        logger.warning("Received signal %d, restoring files", signum)
        raise KeyboardInterrupt

    previous = {sig: signal.getsignal(sig) for sig in _TERMINATION_SIGNALS}
    for sig in _TERMINATION_SIGNALS:
        signal.signal(sig, _raise_interrupt)
    try:
        yield
    finally:
        for sig, handler in previous.items():
            # None means the handler was not installed from Python
            signal.signal(sig, handler if handler is not None else signal.SIG_DFL)
