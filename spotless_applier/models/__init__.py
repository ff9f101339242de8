"""Data models for Spotless Applier."""

from .build import (
    GRADLE_MARKERS,
    MAVEN_MARKERS,
    BuildToolKind,
    ModuleInfo,
    ProjectModule,
    ReformatScope,
    SingleFile,
    TaskInvocationSpec,
    ToolVersion,
    VersionThreshold,
    WholeProject,
)
from .selection import SelectionResult, SelectionState

__all__ = [
    "GRADLE_MARKERS",
    "MAVEN_MARKERS",
    "BuildToolKind",
    "ModuleInfo",
    "ProjectModule",
    "ReformatScope",
    "SingleFile",
    "TaskInvocationSpec",
    "ToolVersion",
    "VersionThreshold",
    "WholeProject",
    "SelectionResult",
    "SelectionState",
]
