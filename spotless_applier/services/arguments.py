"""
Task argument construction.

The strings produced here are what the spotless Gradle and Maven plugins
expect from an IDE hook, so they are reproduced character for character.
"""

from __future__ import annotations

from ..core.exceptions import UnresolvedBuildToolError
from ..detection.version import NO_CONFIGURATION_CACHE_FLAG
from ..models.build import (
    BuildToolKind,
    ReformatScope,
    SingleFile,
    TaskInvocationSpec,
)

GRADLE_TASK = "spotlessApply"
MAVEN_GOAL = "spotless:apply"


def gradle_ide_hook_parameter(file_path: str) -> str:
    """Script parameter pointing the Gradle plugin at one file."""
    return f'-PspotlessIdeHook="{file_path}" '


def maven_files_parameter(file_path: str) -> str:
    """VM option restricting the Maven plugin to one file.

    Dots are escaped before separators become dots; the plugin reads the value
    as a regular expression.
    """
    encoded = file_path.replace(".", "\\.").replace("/", ".")
    return f'-DspotlessFiles="{encoded}"'


class TaskArgumentBuilder:
    """Builds the invocation for a scope and build tool."""

    def build(
        self,
        scope: ReformatScope,
        build_tool: BuildToolKind,
        working_directory: str,
        compatibility_flag: bool = False,
    ) -> TaskInvocationSpec:
        """Compose the task names and parameters.

        Args:
            scope: Whole project or a single file
            build_tool: Detected build tool
            working_directory: Directory the task runs in
            compatibility_flag: Append ``--no-configuration-cache`` (Gradle only)

        Returns:
            A fresh, immutable TaskInvocationSpec

        Raises:
            UnresolvedBuildToolError: If ``build_tool`` is UNKNOWN
        """
        if build_tool is BuildToolKind.GRADLE:
            return self._build_gradle(scope, working_directory, compatibility_flag)
        if build_tool is BuildToolKind.MAVEN:
            return self._build_maven(scope, working_directory)
        raise UnresolvedBuildToolError(
            message="Unable to resolve build tool",
            path=working_directory,
        )

    def _build_gradle(
        self, scope: ReformatScope, working_directory: str, compatibility_flag: bool
    ) -> TaskInvocationSpec:
        parameters = ""
        if isinstance(scope, SingleFile):
            parameters = gradle_ide_hook_parameter(scope.path)
        if compatibility_flag:
            parameters += NO_CONFIGURATION_CACHE_FLAG

        return TaskInvocationSpec(
            working_directory=working_directory,
            task_names=(GRADLE_TASK,),
            parameters=parameters,
            build_tool=BuildToolKind.GRADLE,
            scope=scope,
        )

    def _build_maven(self, scope: ReformatScope, working_directory: str) -> TaskInvocationSpec:
        parameters = ""
        if isinstance(scope, SingleFile):
            parameters = maven_files_parameter(scope.path)

        return TaskInvocationSpec(
            working_directory=working_directory,
            task_names=(MAVEN_GOAL,),
            parameters=parameters,
            build_tool=BuildToolKind.MAVEN,
            scope=scope,
        )
