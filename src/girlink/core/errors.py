"""
Error types for girlink document parsing, configuration and conflict resolution.
"""

from pathlib import Path


class GirlinkError(Exception):
    """Base exception for all girlink errors."""

    def __init__(self, message: str, path: Path | None = None):
        self.message = message
        self.path = path
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with the offending file if available."""
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class ParseError(GirlinkError):
    """
    Raised when a GIR document cannot be parsed.

    Examples:
    - Malformed XML
    - Missing <namespace> element
    - Namespace without name or version
    """

    pass


class ConfigError(GirlinkError):
    """
    Raised when the configuration is unusable.

    Examples:
    - Invalid YAML in the config file
    - Unknown or mistyped config fields
    - Interactive resolution requested without a prompter
    """

    pass


class ConflictResolutionError(GirlinkError):
    """
    Raised when a conflict group's answer cannot be mapped to its members.

    This is an internal inconsistency between the presented choices and the
    group membership; the run is aborted.
    """

    pass


class PromptError(GirlinkError):
    """Raised when the prompter returns no answer or an answer outside the choices."""

    pass
