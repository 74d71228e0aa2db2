"""Domain models for diff-verify."""

from diff_verify.core.models.action import Action, Receipt
from diff_verify.core.models.settings import VerifySettings

__all__ = [
    "Action",
    "Receipt",
    "VerifySettings",
]
