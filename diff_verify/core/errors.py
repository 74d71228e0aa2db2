"""
Verification errors.

Everything here is fatal: the CLI prints the message with an
``[error]`` tag and exits with EXIT_FATAL. Drift is not an error;
it is reported through ``VerifyResult.drift_found``.
"""

from __future__ import annotations


class VerifyError(Exception):
    """Base class for fatal verification failures."""


# ── Preconditions (raised before anything is touched) ───────────


class NoFilesMatched(VerifyError):
    """The path/glob patterns matched no files."""

    def __init__(self, patterns: list[str]):
        self.patterns = list(patterns)
        joined = ", ".join(f'"{p}"' for p in self.patterns)
        super().__init__(f"No files found matching path/glob {joined}.")


class InvalidTarget(VerifyError):
    """A target resolves to the working directory itself."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}": Cannot copy the current working directory.')


class PathEscapesRoot(VerifyError):
    """A target resolves outside the working directory."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f'"{path}": Cannot copy files/directories outside the current working directory.'
        )


class StaleTempFile(VerifyError):
    """A shadow copy from an earlier run is still on disk."""

    def __init__(self, shadow: str):
        self.shadow = shadow
        super().__init__(f'"{shadow}" already exists. It must be deleted to proceed.')


# ── Run-time failures (restoration still happens) ───────────────


class SnapshotFailed(VerifyError):
    """Copying a target to its shadow path failed."""


class EmitFailed(VerifyError):
    """The emit command could not be started or exited non-zero."""

    def __init__(self, command: list[str], reason: str, return_code: int | None = None):
        self.command = list(command)
        self.return_code = return_code
        super().__init__(f"Command failed: {' '.join(self.command)} ({reason})")


class CompareFailed(VerifyError):
    """A target or its shadow could not be read for comparison."""


class RestoreFailed(VerifyError):
    """One or more shadow copies could not be moved back."""

    def __init__(self, failures: list[str]):
        self.failures = list(failures)
        detail = "; ".join(self.failures)
        super().__init__(f"Could not restore {len(self.failures)} file(s): {detail}")
