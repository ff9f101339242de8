"""
Custom exception hierarchy for Spotless Applier.

All exceptions inherit from SpotlessApplierError to enable consistent error handling
across detection, argument building and task execution. Each exception type
includes context for debugging and logging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SpotlessApplierError(Exception):
    """Base exception for all Spotless Applier errors."""

    message: str
    context: dict[str, Any] = field(default_factory=dict)
    cause: Exception | None = None

    def __str__(self) -> str:
        ctx = f" | context: {self.context}" if self.context else ""
        cause = f" | caused by: {self.cause}" if self.cause else ""
        return f"{self.message}{ctx}{cause}"


@dataclass
class UnresolvedBuildToolError(SpotlessApplierError):
    """Raised when no build tool marker is found at the given root."""

    path: str = ""

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (path: {self.path})" if self.path else base


@dataclass
class UnresolvedVersionError(SpotlessApplierError):
    """Raised when the build tool version cannot be determined.

    Callers treat this as recoverable: the compatibility flag is left off.
    """

    path: str = ""


@dataclass
class ExternalTaskError(SpotlessApplierError):
    """Describes an external task that terminated unsuccessfully."""

    exit_code: int | None = None
    command: str = ""

    def __str__(self) -> str:
        code = "unknown" if self.exit_code is None else str(self.exit_code)
        return f"[exit {code}] {self.command}: {super().__str__()}"


@dataclass
class ToolNotFoundError(SpotlessApplierError):
    """Raised when a required external tool is not available."""

    tool_name: str = ""
    expected_path: str = ""
    install_hint: str = ""

    def __str__(self) -> str:
        hint = f" Install hint: {self.install_hint}" if self.install_hint else ""
        return f"Tool '{self.tool_name}' not found at '{self.expected_path}'.{hint}"


@dataclass
class TaskStateError(SpotlessApplierError):
    """Raised when a task execution is driven out of order."""

    state: str = ""
