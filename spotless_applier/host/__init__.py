"""Host collaborators: interfaces plus filesystem and console implementations."""

from .console import ConsoleModuleSelector, ConsoleNotificationSink, StaticModuleSelector
from .interface import (
    ModuleSelector,
    NotificationLevel,
    NotificationSink,
    ProcessLauncher,
    ProjectModel,
    VersionResolver,
)
from .local import FilesystemProject, GradleVersionResolver, SubprocessLauncher, find_project_root

__all__ = [
    "ConsoleModuleSelector",
    "ConsoleNotificationSink",
    "StaticModuleSelector",
    "ModuleSelector",
    "NotificationLevel",
    "NotificationSink",
    "ProcessLauncher",
    "ProjectModel",
    "VersionResolver",
    "FilesystemProject",
    "GradleVersionResolver",
    "SubprocessLauncher",
    "find_project_root",
]
