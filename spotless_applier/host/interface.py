"""
Host collaborator interfaces.

Defines the capabilities the reformat core consumes from its host (an IDE, the
command line, a test), so every component can run without a host runtime.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum

from ..models.build import ProjectModule, TaskInvocationSpec
from ..models.selection import SelectionResult


class NotificationLevel(str, Enum):
    """Severity of a user-facing notification."""

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class ProjectModel(ABC):
    """Read-only view of a project and its modules."""

    @property
    @abstractmethod
    def base_path(self) -> str | None:
        """Project base directory, or None if the project has none."""
        ...

    @abstractmethod
    def modules(self) -> list[ProjectModule]:
        """Enumerate the project's modules in a stable order."""
        ...

    @abstractmethod
    def list_children(self, path: str) -> list[str] | None:
        """List the names directly inside ``path``; None if it is not a directory."""
        ...


class VersionResolver(ABC):
    """Resolves the build tool version linked to a project directory."""

    @abstractmethod
    async def resolve_version(self, project_path: str) -> str:
        """Return the version string.

        Raises:
            UnresolvedVersionError: If the linked settings cannot be read
        """
        ...


class ProcessLauncher(ABC):
    """Executes a task invocation out of band."""

    @abstractmethod
    async def launch(self, spec: TaskInvocationSpec) -> int:
        """Run the task to completion and return its exit code."""
        ...


class ModuleSelector(ABC):
    """Lets the user pick modules when several are eligible."""

    @abstractmethod
    async def choose(self, candidates: list[str], has_root: bool) -> SelectionResult:
        """Ask for a choice among non-root ``candidates``.

        Args:
            candidates: Names of the non-root modules
            has_root: Whether an "apply on root project" option exists

        Returns:
            The user's answer; ``confirmed`` is False on cancellation
        """
        ...


class NotificationSink(ABC):
    """User-facing messaging surface."""

    @abstractmethod
    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        """Publish a notification."""
        ...
