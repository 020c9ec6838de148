# servers/ditaa-renderer/src/mcp_ditaa_renderer/errors.py
"""Error taxonomy for diagram rendering."""

from __future__ import annotations

from typing import Any, Optional


class DitaaError(Exception):
    """Base exception for diagram rendering errors."""
    pass


class MissingDependencyError(DitaaError):
    """The ditaa executable cannot be located. Fatal for the whole build."""

    def __init__(self, executable: str, hint: Optional[str] = None):
        message = f"Missing dependency: {executable}"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)
        self.executable = executable
        self.hint = hint


class ConfigurationError(DitaaError):
    """An option value failed its type coercion."""

    def __init__(self, key: str, value: Any = None, reason: Optional[str] = None):
        message = f"Invalid value for option {key!r}: {value!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.key = key
        self.value = value
        self.reason = reason


class RenderFailure(DitaaError):
    """ditaa exited without producing one or more destination files."""

    def __init__(self, message: str, paths: Optional[list[str]] = None):
        super().__init__(message)
        self.paths = list(paths or [])
