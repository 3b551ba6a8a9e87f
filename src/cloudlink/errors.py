"""Application-level exception types for cloudlink."""

from __future__ import annotations


class CloudlinkError(Exception):
    """Base exception for cloudlink."""


class ConfigurationError(CloudlinkError):
    """Raised when the workspace configuration cannot be read or validated."""


class PromptAbortedError(CloudlinkError):
    """Raised when an interactive prompt is interrupted or yields no valid choice."""


class BootstrapCommandError(CloudlinkError):
    """Raised when the bootstrap setup command exits with a non-zero status."""

    def __init__(self, command_line: str, exit_code: int) -> None:
        super().__init__(f"'{command_line}' exited with status {exit_code}")
        self.command_line = command_line
        self.exit_code = exit_code
