"""
Build tool and module data models.

These models describe what the resolver learns about a project: which build
tool owns each module and how a single spotless invocation is parameterised.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

GRADLE_MARKERS = frozenset(
    {"settings.gradle", "settings.gradle.kts", "build.gradle", "build.gradle.kts"}
)
MAVEN_MARKERS = frozenset({"pom.xml"})

_VERSION_PATTERN = re.compile(r"^\s*(\d+)(?:\.(\d+))?(?:\.(\d+))?")


class BuildToolKind(str, Enum):
    """Build tools recognised by the detector."""

    GRADLE = "gradle"
    MAVEN = "maven"
    UNKNOWN = "unknown"

    @property
    def is_known(self) -> bool:
        return self is not BuildToolKind.UNKNOWN


class ProjectModule(BaseModel):
    """A module as enumerated by the host project model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Module name, unique within the project")
    root_path: str = Field(default="", description="Module content root; empty when unresolvable")
    build_tool: BuildToolKind | None = Field(
        default=None, description="Build tool declared by the host, if it knows one"
    )
    external_project_path: str | None = Field(
        default=None,
        description="Directory the build tool reports for this module (Gradle source sets point at their owner)",
    )


class ModuleInfo(BaseModel):
    """A resolved, independently buildable module."""

    model_config = ConfigDict(frozen=True)

    name: str
    root_path: str
    build_tool: BuildToolKind
    is_root_module: bool = False


class WholeProject(BaseModel):
    """Reformat every file the spotless configuration covers."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["project"] = "project"


class SingleFile(BaseModel):
    """Reformat exactly one file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: str = Field(description="Absolute file path with '/' separators")


ReformatScope = Annotated[Union[WholeProject, SingleFile], Field(discriminator="kind")]


class TaskInvocationSpec(BaseModel):
    """Everything needed to launch one spotless task."""

    model_config = ConfigDict(frozen=True)

    working_directory: str
    task_names: tuple[str, ...]
    parameters: str = Field(
        default="", description="Gradle script parameters or Maven VM options"
    )
    build_tool: BuildToolKind
    scope: ReformatScope = Field(default_factory=WholeProject)

    @property
    def is_single_file(self) -> bool:
        return isinstance(self.scope, SingleFile)


class VersionThreshold(BaseModel):
    """Minimum (major, minor) from which a flag becomes necessary."""

    model_config = ConfigDict(frozen=True)

    major: int
    minor: int


class ToolVersion(BaseModel):
    """A build tool version; qualifiers such as ``-rc-1`` are dropped."""

    model_config = ConfigDict(frozen=True)

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> ToolVersion | None:
        """Parse ``"8.4"``, ``"6.5.1"`` or ``"8.4-rc-1"``; None when no number leads."""
        match = _VERSION_PATTERN.match(text or "")
        if not match:
            return None
        major, minor, patch = match.groups()
        return cls(major=int(major), minor=int(minor or 0), patch=int(patch or 0))

    def is_at_least(self, threshold: VersionThreshold) -> bool:
        return (self.major, self.minor) >= (threshold.major, threshold.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
