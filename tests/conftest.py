"""Test configuration for Spotless Applier."""

import asyncio
import tempfile
from pathlib import Path

import pytest

from spotless_applier.core.exceptions import UnresolvedVersionError
from spotless_applier.host.interface import (
    ModuleSelector,
    NotificationLevel,
    NotificationSink,
    ProcessLauncher,
    ProjectModel,
    VersionResolver,
)
from spotless_applier.models import ProjectModule, SelectionResult, TaskInvocationSpec


class FakeProject(ProjectModel):
    """In-memory project: modules plus a directory listing per path."""

    def __init__(self, base_path, modules=None, listings=None):
        self._base_path = base_path
        self._modules = list(modules or [])
        self.listings = dict(listings or {})

    @property
    def base_path(self):
        return self._base_path

    def modules(self):
        return list(self._modules)

    def list_children(self, path):
        return self.listings.get(path)


class FakeLauncher(ProcessLauncher):
    """Records launched specs and answers with scripted exit codes."""

    def __init__(self, exit_codes=None, default_exit_code=0, error=None):
        self.exit_codes = dict(exit_codes or {})
        self.default_exit_code = default_exit_code
        self.error = error
        self.launched = []
        self.gate = None

    async def launch(self, spec: TaskInvocationSpec) -> int:
        self.launched.append(spec)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.exit_codes.get(spec.working_directory, self.default_exit_code)


class RecordingNotifier(NotificationSink):
    """Collects notifications."""

    def __init__(self):
        self.messages = []

    def notify(self, message, level=NotificationLevel.INFO):
        self.messages.append((level, message))

    def levels(self):
        return [level for level, _ in self.messages]


class ScriptedSelector(ModuleSelector):
    """Returns a fixed answer and records what it was asked."""

    def __init__(self, result=None):
        self.result = result or SelectionResult.cancelled()
        self.calls = []

    async def choose(self, candidates, has_root):
        self.calls.append((list(candidates), has_root))
        return self.result


class StaticVersionResolver(VersionResolver):
    """Answers with a fixed version, or fails like unreadable settings."""

    def __init__(self, version=None):
        self.version = version
        self.calls = []

    async def resolve_version(self, project_path):
        self.calls.append(project_path)
        if self.version is None:
            raise UnresolvedVersionError(message="No linked settings", path=project_path)
        return self.version


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests.

    Yields:
        Path: A resolved Path to the temporary directory, removed afterwards.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def make_project():
    """Factory for in-memory projects."""
    return FakeProject


@pytest.fixture
def module():
    """Factory for ProjectModule records."""
    def _module(name, root_path, build_tool=None, external_project_path=None):
        return ProjectModule(
            name=name,
            root_path=root_path,
            build_tool=build_tool,
            external_project_path=external_project_path,
        )
    return _module


@pytest.fixture
def launcher():
    return FakeLauncher()


@pytest.fixture
def make_launcher():
    return FakeLauncher


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_selector():
    return ScriptedSelector


@pytest.fixture
def make_version_resolver():
    return StaticVersionResolver


@pytest.fixture
def gradle_project(temp_dir):
    """Multi-module Gradle build on disk.

    Layout::

        <root>/settings.gradle, build.gradle
        <root>/app/build.gradle.kts, src/main, src/test
        <root>/lib/pom.xml
    """
    (temp_dir / "settings.gradle").write_text("include 'app'\n")
    (temp_dir / "build.gradle").write_text("plugins { id 'com.diffplug.spotless' }\n")
    app = temp_dir / "app"
    (app / "src" / "main" / "java").mkdir(parents=True)
    (app / "src" / "test" / "java").mkdir(parents=True)
    (app / "build.gradle.kts").write_text("")
    lib = temp_dir / "lib"
    lib.mkdir()
    (lib / "pom.xml").write_text("<project/>")
    return temp_dir


async def drain(executions):
    """Await every execution's result."""
    return await asyncio.gather(*(execution.result for execution in executions))


@pytest.fixture
def wait_all():
    return drain
