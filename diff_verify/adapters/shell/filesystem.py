"""
Filesystem adapter - the copy, read and move steps of a verify run.

Paths are resolved against the working directory. Errors come back
as failed receipts carrying the OS error text.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from diff_verify.adapters.base import Adapter, ExecutionContext
from diff_verify.core.models.action import Receipt

logger = logging.getLogger(__name__)

_REQUIRED_PARAMS = {
    "copy": ("src", "dest"),
    "move": ("src", "dest"),
    "read": ("path",),
}


class FilesystemAdapter(Adapter):
    """File operations with receipts.

    Action params:
        operation (str): One of 'copy', 'move', 'read'.
        src, dest (str): Source and destination (copy, move).
        path (str): File to read (read).
        encoding (str): Text encoding for read (default: utf-8).
    """

    @property
    def name(self) -> str:
        return "filesystem"

    def is_available(self) -> bool:
        return True

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.action.params.get("operation", "")
        if not operation:
            return False, "Missing required param: 'operation'"

        if operation not in _REQUIRED_PARAMS:
            valid = ", ".join(sorted(_REQUIRED_PARAMS))
            return False, f"Unknown operation '{operation}'. Valid: {valid}"

        for param in _REQUIRED_PARAMS[operation]:
            if not context.action.params.get(param):
                return False, f"Missing required param: '{param}' for {operation} operation"

        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        operation = context.action.params["operation"]

        try:
            if operation == "copy":
                return self._copy(context)
            elif operation == "move":
                return self._move(context)
            elif operation == "read":
                return self._read(context)
            else:
                return Receipt.failure(
                    adapter=self.name,
                    action_id=context.action.id,
                    error=f"Unknown operation: {operation}",
                )
        except (OSError, UnicodeDecodeError) as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=context.action.id,
                error=str(e),
                metadata={"operation": operation},
            )

    def _copy(self, ctx: ExecutionContext) -> Receipt:
        src = ctx.resolve(ctx.action.params["src"])
        dest = ctx.resolve(ctx.action.params["dest"])
        shutil.copyfile(src, dest)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            metadata={"src": str(src), "dest": str(dest)},
        )

    def _move(self, ctx: ExecutionContext) -> Receipt:
        src = ctx.resolve(ctx.action.params["src"])
        dest = ctx.resolve(ctx.action.params["dest"])
        # Shadow and target are siblings, so this is a same-filesystem rename
        Path(src).replace(dest)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            metadata={"src": str(src), "dest": str(dest)},
        )

    def _read(self, ctx: ExecutionContext) -> Receipt:
        target = ctx.resolve(ctx.action.params["path"])
        encoding = ctx.action.params.get("encoding", "utf-8")
        # Decode the raw bytes; read_text would fold \r\n into \n
        content = target.read_bytes().decode(encoding)
        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=content,
            metadata={"path": str(target), "size": len(content)},
        )
