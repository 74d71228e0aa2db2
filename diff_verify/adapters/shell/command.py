"""
Emit command adapter - run the generator under verification.

The command inherits this process's stdin, stdout and stderr, so
prompts and progress output from the generator reach the user as-is.
Nothing is captured; the receipt only carries the exit status.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from diff_verify.adapters.base import Adapter, ExecutionContext
from diff_verify.core.models.action import Receipt

logger = logging.getLogger(__name__)


class EmitCommandAdapter(Adapter):
    """Spawn an argv-style command and wait for it.

    Action params:
        command (list[str]): Program and arguments, passed verbatim.
        cwd (str): Override working directory (default: context.working_dir).
    """

    @property
    def name(self) -> str:
        return "emit"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        command = context.action.params.get("command")
        if not command:
            return False, "Missing required param: 'command'"
        if not isinstance(command, list) or not all(isinstance(t, str) for t in command):
            return False, "Param 'command' must be a list of strings"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        command: list[str] = context.action.params["command"]
        cwd = context.action.params.get("cwd", context.working_dir)

        # PATH lookup up front so "not found" reads the same on every platform
        program = shutil.which(command[0]) or command[0]

        logger.debug("Executing: %s (cwd=%s)", command, cwd)
        start = time.monotonic()

        try:
            result = subprocess.run([program, *command[1:]], cwd=cwd)
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=f"Cannot start {command[0]}: {e}",
                metadata={"command": command},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                action_id=context.action.id,
                duration_ms=elapsed_ms,
                metadata={"command": command, "return_code": 0},
            )
        return Receipt.failure(
            adapter=self.name,
            action_id=context.action.id,
            error=f"exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={"command": command, "return_code": result.returncode},
        )
