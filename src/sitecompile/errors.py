# src/sitecompile/errors.py
from pathlib import Path
from typing import Optional


class SiteCompileError(Exception):
    """Base error. Carries an optional remediation hint and the offending path."""

    def __init__(self, message: str, *, hint: Optional[str] = None, path: Optional[Path] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.path = path

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ConfigError(SiteCompileError):
    """The run cannot start, e.g. the source root is missing."""


class ProcessError(SiteCompileError):
    """A single file could not be turned into its output artifact."""


class UnresolvedModuleError(ProcessError):
    """The bundler could not resolve an imported module."""


class TransformError(ProcessError):
    """A minifier or the bundler rejected the input."""


class FileIOError(ProcessError):
    """Reading, writing, copying or removing a file failed."""
