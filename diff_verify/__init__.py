"""diff-verify - check that a generator reproduces committed files."""

__version__ = "0.1.0"
