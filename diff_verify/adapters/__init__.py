"""Adapters - filesystem and process side effects behind one protocol.

Public re-exports for convenient access.
"""

from diff_verify.adapters.base import Adapter, ExecutionContext
from diff_verify.adapters.mock import MockAdapter
from diff_verify.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
