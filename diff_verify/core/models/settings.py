"""
Settings model - the optional diff-verify.yml file.

Everything here can also be given on the command line; CLI values
win. See ``diff_verify.core.config.loader.merge_settings``.
"""

from __future__ import annotations

import shlex

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_CONTEXT_LINES = 4


class VerifySettings(BaseModel):
    """Resolved settings for one verify run."""

    model_config = ConfigDict(extra="forbid")

    paths: list[str] = Field(default_factory=list)
    command: list[str] = Field(default_factory=list)
    dry_run: bool = False
    context_lines: int = Field(default=DEFAULT_CONTEXT_LINES, ge=0)

    @field_validator("paths", mode="before")
    @classmethod
    def _single_path(cls, value: object) -> object:
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("command", mode="before")
    @classmethod
    def _split_command(cls, value: object) -> object:
        # `command: "npm run codegen"` is tokenized like a shell would
        if isinstance(value, str):
            return shlex.split(value)
        return value
