#!/usr/bin/env python3
"""Exception types raised by wpcivi-deploy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .commands import CommandResult


class DeployError(Exception):
    """Base class for every fatal deployment error."""


class PrivilegeError(DeployError):
    """Raised when the process lacks root privileges."""


class ConfigurationError(DeployError):
    """Raised when an unattended value is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class AbortedByUser(DeployError):
    """Raised when the operator declines the review summary."""


class CommandError(DeployError):
    """Raised when a fatal external command exits non-zero."""

    def __init__(self, result: "CommandResult") -> None:
        detail = (result.stderr or result.stdout or "").strip()
        message = f"Command failed with exit code {result.returncode}: {result.command_line}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)
        self.result = result


class StepFailed(DeployError):
    """Raised by the pipeline when a fatal step fails."""

    def __init__(self, step_name: str, cause: Exception) -> None:
        super().__init__(f"Step '{step_name}' failed: {cause}")
        self.step_name = step_name
        self.cause = cause


class RenderError(DeployError):
    """Raised when a configuration template cannot be rendered."""
