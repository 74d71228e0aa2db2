"""
Adapter base - the contract between the verify use case and side effects.

The use case never copies a file or spawns a process itself: it builds
an Action and hands it to the registry, which picks the adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from diff_verify.core.models.action import Action, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an action."""

    action: Action
    project_root: str = "."
    dry_run: bool = False
    params: dict[str, Any] = Field(default_factory=dict)

    @property
    def working_dir(self) -> str:
        """Directory relative paths and the emit command run in."""
        return self.project_root

    def resolve(self, raw_path: str) -> Path:
        """Resolve *raw_path* against the working directory."""
        target = Path(raw_path)
        if not target.is_absolute():
            target = Path(self.working_dir) / target
        return target


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform side effects and return receipts.
    They NEVER raise exceptions - failures are captured in the Receipt.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'filesystem', 'emit')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this adapter can run at all. Fast, never raises."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the action is well-formed.

        Runs in dry-run too, so it must not depend on files that only
        exist after earlier actions have really executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the action and return a receipt. MUST never raise."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
