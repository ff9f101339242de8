"""
Local filesystem host.

Implements the host collaborators on top of the filesystem and subprocesses:
module discovery by marker files, Gradle version lookup from the wrapper, and
asynchronous task execution through gradle/maven executables.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import re
import shlex
import shutil
from collections.abc import Iterator
from pathlib import Path

import aiofiles

from ..core.config import Config, DiscoveryConfig, get_config
from ..core.exceptions import ToolNotFoundError, UnresolvedBuildToolError, UnresolvedVersionError
from ..core.logging import get_logger
from ..detection.detector import BuildToolDetector
from ..models.build import BuildToolKind, ProjectModule, TaskInvocationSpec
from .interface import ProcessLauncher, ProjectModel, VersionResolver

logger = get_logger(__name__)

WRAPPER_PROPERTIES = Path("gradle") / "wrapper" / "gradle-wrapper.properties"
_DISTRIBUTION_URL = re.compile(r"gradle-([\w.-]+?)-(?:bin|all)\.zip")
_GRADLE_VERSION_OUTPUT = re.compile(r"^Gradle\s+(\S+)", re.MULTILINE)

_WINDOWS = os.name == "nt"
GRADLE_WRAPPER = "gradlew.bat" if _WINDOWS else "gradlew"
MAVEN_WRAPPER = "mvnw.cmd" if _WINDOWS else "mvnw"


class FilesystemProject(ProjectModel):
    """Project model discovered from a directory tree.

    Every directory holding a build marker is a module. The base directory is
    named after itself and nested modules by their relative path. Gradle
    source sets under ``src/`` are exposed as ``<module>.<set>`` modules that
    report their owning directory, the way an IDE's Gradle import does.
    """

    def __init__(
        self,
        base_dir: Path | str,
        discovery: DiscoveryConfig | None = None,
        detector: BuildToolDetector | None = None,
    ) -> None:
        self._base = Path(base_dir).expanduser().resolve()
        self.discovery = discovery or DiscoveryConfig()
        self.detector = detector or BuildToolDetector()
        self._modules: list[ProjectModule] | None = None

    @property
    def base_path(self) -> str | None:
        return self._base.as_posix()

    def modules(self) -> list[ProjectModule]:
        if self._modules is None:
            self._modules = list(self._walk(self._base, 0))
            logger.debug("Discovered modules", base=self.base_path, count=len(self._modules))
        return list(self._modules)

    def list_children(self, path: str) -> list[str] | None:
        directory = Path(path)
        if not directory.is_dir():
            return None
        try:
            return sorted(child.name for child in directory.iterdir())
        except OSError as e:
            logger.debug("Unable to list directory", path=path, error=str(e))
            return None

    def _walk(self, directory: Path, depth: int) -> Iterator[ProjectModule]:
        build_tool = self.detector.detect_directory(directory)
        if build_tool.is_known:
            name = self._module_name(directory)
            yield ProjectModule(name=name, root_path=directory.as_posix(), build_tool=build_tool)
            if build_tool is BuildToolKind.GRADLE and self.discovery.source_set_modules:
                yield from self._source_sets(directory, name)

        if depth >= self.discovery.max_depth:
            return
        for child in self._subdirectories(directory):
            yield from self._walk(child, depth + 1)

    def _source_sets(self, directory: Path, name: str) -> Iterator[ProjectModule]:
        for source_set in self._subdirectories(directory / "src"):
            yield ProjectModule(
                name=f"{name}.{source_set.name}",
                root_path=source_set.as_posix(),
                build_tool=BuildToolKind.GRADLE,
                external_project_path=directory.as_posix(),
            )

    def _subdirectories(self, directory: Path) -> list[Path]:
        if not directory.is_dir():
            return []
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Skipping unreadable directory", path=str(directory), error=str(e))
            return []
        return [
            child
            for child in children
            if child.is_dir()
            and not child.name.startswith(".")
            and child.name not in self.discovery.excluded_dirs
        ]

    def _module_name(self, directory: Path) -> str:
        if directory == self._base:
            return self._base.name
        return directory.relative_to(self._base).as_posix()


def find_project_root(start: Path | str, detector: BuildToolDetector | None = None) -> Path | None:
    """Outermost directory of the marker chain above ``start``.

    Starts from the nearest ancestor holding a build marker and keeps climbing
    while the parent holds one too.
    """
    detector = detector or BuildToolDetector()
    current = Path(start).expanduser().resolve()
    if not current.is_dir():
        current = current.parent

    root: Path | None = None
    for directory in [current, *current.parents]:
        if detector.detect_directory(directory).is_known:
            root = directory
        elif root is not None:
            break
    return root


class GradleVersionResolver(VersionResolver):
    """Reads the Gradle version from the wrapper, falling back to ``gradle --version``."""

    def __init__(self, gradle_executable: str = "gradle") -> None:
        self.gradle_executable = gradle_executable

    async def resolve_version(self, project_path: str) -> str:
        properties = self._find_wrapper_properties(Path(project_path))
        if properties is not None:
            version = await self._read_distribution_version(properties)
            if version:
                return version

        version = await self._query_executable(project_path)
        if version:
            return version

        raise UnresolvedVersionError(
            message="Unable to read linked Gradle settings",
            path=project_path,
        )

    @staticmethod
    def _find_wrapper_properties(directory: Path) -> Path | None:
        for candidate in [directory, *directory.parents]:
            properties = candidate / WRAPPER_PROPERTIES
            if properties.is_file():
                return properties
        return None

    @staticmethod
    async def _read_distribution_version(properties: Path) -> str | None:
        # .properties files are ISO-8859-1
        try:
            async with aiofiles.open(properties, "r", encoding="latin-1") as f:
                content = await f.read()
        except OSError as e:
            raise UnresolvedVersionError(
                message="Unable to read Gradle wrapper properties",
                path=str(properties),
                cause=e,
            ) from e

        for line in content.splitlines():
            key, _, value = line.partition("=")
            if key.strip() != "distributionUrl":
                continue
            match = _DISTRIBUTION_URL.search(value)
            if match:
                return match.group(1)
        logger.debug("No distributionUrl in wrapper properties", path=str(properties))
        return None

    async def _query_executable(self, project_path: str) -> str | None:
        executable = shutil.which(self.gradle_executable)
        if executable is None:
            return None
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                "--version",
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=project_path,
            )
            stdout, _ = await process.communicate()
        except OSError as e:
            logger.debug("gradle --version failed", error=str(e))
            return None

        match = _GRADLE_VERSION_OUTPUT.search(stdout.decode("utf-8", errors="replace"))
        return match.group(1) if match else None


class SubprocessLauncher(ProcessLauncher):
    """Runs spotless through the gradle or maven command line."""

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or get_config()

    async def launch(self, spec: TaskInvocationSpec) -> int:
        cmd = self.build_command(spec)
        return await self._run_command(cmd, Path(spec.working_directory))

    def build_command(self, spec: TaskInvocationSpec) -> list[str]:
        """Assemble argv for ``spec``.

        Raises:
            UnresolvedBuildToolError: For an UNKNOWN build tool
            ToolNotFoundError: If neither a wrapper nor the executable exists
        """
        working_directory = Path(spec.working_directory)
        extra = shlex.split(spec.parameters) if spec.parameters.strip() else []

        if spec.build_tool is BuildToolKind.GRADLE:
            executable = self._find_executable(
                working_directory,
                GRADLE_WRAPPER,
                self.config.gradle.executable,
                self.config.gradle.prefer_wrapper,
            )
            return [executable, *spec.task_names, *extra]

        if spec.build_tool is BuildToolKind.MAVEN:
            executable = self._find_executable(
                working_directory,
                MAVEN_WRAPPER,
                self.config.maven.executable,
                self.config.maven.prefer_wrapper,
            )
            cmd = [executable, *spec.task_names, *extra]
            if self.config.maven.batch_mode:
                # batch-mode removes download progress spam
                cmd.append("--batch-mode")
            return cmd

        raise UnresolvedBuildToolError(
            message="Unable to resolve build tool",
            path=spec.working_directory,
        )

    @staticmethod
    def _find_executable(
        working_directory: Path, wrapper: str, executable: str, prefer_wrapper: bool
    ) -> str:
        if prefer_wrapper:
            for directory in [working_directory, *working_directory.parents]:
                candidate = directory / wrapper
                if candidate.is_file():
                    return str(candidate)

        found = shutil.which(executable)
        if found:
            return found

        raise ToolNotFoundError(
            message=f"Tool not found: {executable}",
            tool_name=executable,
            expected_path="PATH or project wrapper",
            install_hint=f"Install {executable} and add it to PATH, or add a {wrapper} wrapper",
        )

    async def _run_command(self, cmd: list[str], cwd: Path) -> int:
        """Run a command asynchronously with real-time output logging."""
        logger.info("Running command", command=" ".join(cmd), cwd=str(cwd))

        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=cwd,
        )

        async def read_stream(stream: asyncio.StreamReader, stream_name: str) -> int:
            count = 0
            while True:
                line = await stream.readline()
                if not line:
                    return count
                count += 1
                logger.info(f"[{stream_name}] {line.decode('utf-8', errors='replace').rstrip()}")

        try:
            # Read stdout and stderr concurrently for real-time output
            stdout_lines, stderr_lines = await asyncio.gather(
                read_stream(process.stdout, "stdout"),  # type: ignore
                read_stream(process.stderr, "stderr"),  # type: ignore
            )
            returncode = await process.wait()
        finally:
            if process.returncode is None:
                logger.warning("Killing build process", pid=process.pid, command=" ".join(cmd))
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        logger.info(
            "Command completed",
            returncode=returncode,
            stdout_lines=stdout_lines,
            stderr_lines=stderr_lines,
        )
        return returncode
