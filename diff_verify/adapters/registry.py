"""
Adapter registry - central dispatch for every side effect.

The registry resolves the adapter for an action, validates it, and
either executes it or, in dry-run, returns a skip receipt. This is
the one place the dry-run contract is enforced, so snapshot, emit,
diff-read and restore all honour it the same way.
"""

from __future__ import annotations

import logging
import time

from diff_verify.adapters.base import Adapter, ExecutionContext
from diff_verify.core.models.action import Action, Receipt, now_iso

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry and dispatcher for adapters."""

    def __init__(self) -> None:
        self._adapters: dict[str, Adapter] = {}

    def register(self, adapter: Adapter) -> None:
        """Register an adapter, replacing any with the same name."""
        name = adapter.name
        if name in self._adapters:
            logger.debug("Replacing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def get(self, name: str) -> Adapter | None:
        """Look up an adapter by name."""
        return self._adapters.get(name)

    def list_adapters(self) -> list[str]:
        """List all registered adapter names."""
        return list(self._adapters.keys())

    def execute_action(
        self,
        action: Action,
        project_root: str = ".",
        dry_run: bool = False,
    ) -> Receipt:
        """Execute an action through the appropriate adapter.

        1. Resolves the adapter and checks it is available
        2. Builds the execution context
        3. Validates the action
        4. Executes it, or returns a skip receipt in dry-run
        5. Returns a Receipt (never raises)
        """
        start_time = time.monotonic()
        started_at = now_iso()

        context = ExecutionContext(
            action=action,
            project_root=project_root,
            dry_run=dry_run,
            params=action.params,
        )

        adapter = self._adapters.get(action.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"No adapter registered for '{action.adapter}'",
            )

        if not adapter.is_available():
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Adapter '{action.adapter}' is not available",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
            if not is_valid:
                return Receipt.failure(
                    adapter=action.adapter,
                    action_id=action.id,
                    error=f"Validation failed: {error_msg}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Validation error: {e}",
            )

        if dry_run:
            return Receipt.skip(
                adapter=action.adapter,
                action_id=action.id,
                reason=f"[dry-run] Would execute {action.id}",
                metadata={"dry_run": True},
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", action.adapter, e)
            receipt = Receipt.failure(
                adapter=action.adapter,
                action_id=action.id,
                error=f"Unexpected error: {e}",
            )

        receipt.started_at = started_at
        receipt.ended_at = now_iso()
        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.debug("%s -> %s (%dms)", action.id, receipt.status, receipt.duration_ms)
        return receipt


def default_registry() -> AdapterRegistry:
    """Registry wired with the real filesystem and emit adapters."""
    from diff_verify.adapters.shell.command import EmitCommandAdapter
    from diff_verify.adapters.shell.filesystem import FilesystemAdapter

    registry = AdapterRegistry()
    registry.register(FilesystemAdapter())
    registry.register(EmitCommandAdapter())
    return registry
