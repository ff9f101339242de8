"""Unit tests for the filesystem and console hosts."""

import asyncio
import io
import os
import threading
from pathlib import Path

import pytest
from rich.console import Console
from rich.prompt import Confirm, Prompt

from spotless_applier.core.config import Config, DiscoveryConfig, GradleConfig, MavenConfig
from spotless_applier.core.exceptions import ToolNotFoundError, UnresolvedBuildToolError
from spotless_applier.detection import BuildToolDetector
from spotless_applier.host import (
    ConsoleModuleSelector,
    ConsoleNotificationSink,
    FilesystemProject,
    NotificationLevel,
    StaticModuleSelector,
    SubprocessLauncher,
    find_project_root,
)
from spotless_applier.models import BuildToolKind, SelectionState, SingleFile, TaskInvocationSpec, WholeProject
from spotless_applier.services import TaskArgumentBuilder, TaskRunner
from spotless_applier.storage import LocalSelectionStore


def quiet_console():
    return Console(file=io.StringIO(), width=120)


class TestFilesystemProject:
    """Tests for module discovery on disk."""

    def test_discovers_modules(self, gradle_project):
        project = FilesystemProject(gradle_project)
        modules = {module.name: module for module in project.modules()}
        root = gradle_project.name

        assert list(modules) == [root, "app", "app.main", "app.test", "lib"]
        assert modules[root].root_path == gradle_project.as_posix()
        assert modules["app"].build_tool is BuildToolKind.GRADLE
        assert modules["lib"].build_tool is BuildToolKind.MAVEN
        assert modules["app.main"].external_project_path == (gradle_project / "app").as_posix()

    def test_source_sets_can_be_disabled(self, gradle_project):
        project = FilesystemProject(gradle_project, DiscoveryConfig(source_set_modules=False))
        assert [module.name for module in project.modules()] == [gradle_project.name, "app", "lib"]

    def test_skips_excluded_and_hidden_dirs(self, temp_dir):
        (temp_dir / "pom.xml").write_text("<project/>")
        for name in ("target/generated", ".idea/module", "core"):
            (temp_dir / name).mkdir(parents=True)
            (temp_dir / name / "pom.xml").write_text("<project/>")

        names = [module.name for module in FilesystemProject(temp_dir).modules()]
        assert names == [temp_dir.name, "core"]

    def test_depth_limit(self, temp_dir):
        deep = temp_dir / "a" / "b" / "c"
        deep.mkdir(parents=True)
        (deep / "pom.xml").write_text("<project/>")

        assert FilesystemProject(temp_dir, DiscoveryConfig(max_depth=2)).modules() == []
        assert [m.name for m in FilesystemProject(temp_dir, DiscoveryConfig(max_depth=3)).modules()] == ["a/b/c"]

    def test_unreadable_directory_is_skipped(self, gradle_project, monkeypatch):
        locked = gradle_project / "locked"
        locked.mkdir()
        iterdir = Path.iterdir

        def guarded_iterdir(self):
            if self.name == "locked":
                raise PermissionError(13, "Permission denied", str(self))
            return iterdir(self)

        monkeypatch.setattr(Path, "iterdir", guarded_iterdir)
        project = FilesystemProject(gradle_project)

        names = [module.name for module in project.modules()]
        assert "app" in names and "lib" in names
        assert project.list_children(locked.as_posix()) is None
        assert BuildToolDetector().detect_directory(locked) is BuildToolKind.UNKNOWN

    def test_list_children(self, gradle_project):
        project = FilesystemProject(gradle_project)
        assert project.list_children((gradle_project / "lib").as_posix()) == ["pom.xml"]
        assert project.list_children((gradle_project / "missing").as_posix()) is None
        assert project.list_children((gradle_project / "build.gradle").as_posix()) is None


class TestFindProjectRoot:
    """Tests for locating the project around a file."""

    def test_climbs_to_outermost_marker(self, gradle_project):
        source = gradle_project / "app" / "src" / "main" / "java" / "Foo.java"
        source.write_text("")
        assert find_project_root(source) == gradle_project

    def test_from_directory(self, gradle_project):
        assert find_project_root(gradle_project / "lib") == gradle_project

    def test_no_markers(self, temp_dir):
        loose = temp_dir / "Loose.java"
        loose.write_text("")
        assert find_project_root(loose) is None


class TestSubprocessLauncher:
    """Tests for command assembly."""

    def test_gradle_wrapper_in_parent(self, temp_dir):
        (temp_dir / "gradlew").write_text("#!/bin/sh\n")
        module = temp_dir / "app"
        module.mkdir()
        spec = TaskArgumentBuilder().build(
            SingleFile(path="/src/My File.java"), BuildToolKind.GRADLE, module.as_posix(), True
        )

        cmd = SubprocessLauncher(Config()).build_command(spec)

        assert cmd == [
            str(temp_dir / "gradlew"),
            "spotlessApply",
            "-PspotlessIdeHook=/src/My File.java",
            "--no-configuration-cache",
        ]

    def test_maven_wrapper_with_batch_mode(self, temp_dir):
        (temp_dir / "mvnw").write_text("#!/bin/sh\n")
        spec = TaskArgumentBuilder().build(WholeProject(), BuildToolKind.MAVEN, temp_dir.as_posix())

        cmd = SubprocessLauncher(Config()).build_command(spec)
        assert cmd == [str(temp_dir / "mvnw"), "spotless:apply", "--batch-mode"]

    def test_missing_tool(self, temp_dir):
        (temp_dir / "gradlew").write_text("#!/bin/sh\n")
        config = Config(gradle=GradleConfig(executable="no-such-gradle-binary", prefer_wrapper=False))
        spec = TaskArgumentBuilder().build(WholeProject(), BuildToolKind.GRADLE, temp_dir.as_posix())

        with pytest.raises(ToolNotFoundError) as exc_info:
            SubprocessLauncher(config).build_command(spec)
        assert exc_info.value.tool_name == "no-such-gradle-binary"

    def test_missing_maven(self, temp_dir):
        config = Config(maven=MavenConfig(executable="no-such-mvn-binary"))
        spec = TaskArgumentBuilder().build(WholeProject(), BuildToolKind.MAVEN, temp_dir.as_posix())
        with pytest.raises(ToolNotFoundError):
            SubprocessLauncher(config).build_command(spec)

    def test_unknown_build_tool(self, temp_dir):
        spec = TaskInvocationSpec(
            working_directory=temp_dir.as_posix(),
            task_names=("spotlessApply",),
            build_tool=BuildToolKind.UNKNOWN,
        )
        with pytest.raises(UnresolvedBuildToolError):
            SubprocessLauncher(Config()).build_command(spec)


class TestConsoleNotificationSink:
    def test_prints_message(self):
        console = quiet_console()
        ConsoleNotificationSink(console).notify("Spotless applied to [app]", NotificationLevel.INFO)
        assert "Spotless applied to [app]" in console.file.getvalue()


@pytest.mark.asyncio
class TestStaticModuleSelector:
    """Tests for flag-driven selection."""

    async def test_named_modules(self):
        result = await StaticModuleSelector(modules=["lib"]).choose(["app", "lib"], False)
        assert result.confirmed
        assert result.chosen == ["lib"]

    async def test_select_all(self):
        result = await StaticModuleSelector(select_all=True).choose(["app", "lib"], True)
        assert result.chosen == ["app", "lib"]
        assert not result.apply_to_root

    async def test_root_only_when_offered(self):
        result = await StaticModuleSelector(apply_to_root=True).choose(["app"], True)
        assert result.apply_to_root

        result = await StaticModuleSelector(apply_to_root=True).choose(["app"], False)
        assert not result.confirmed

    async def test_nothing_requested_cancels(self):
        result = await StaticModuleSelector().choose(["app"], False)
        assert not result.confirmed


class TestParseAnswer:
    """Tests for interpreting typed module choices."""

    def test_numbers_and_names(self):
        selector = ConsoleModuleSelector("/p", console=quiet_console())
        assert selector.parse_answer("2, app", ["app", "lib"]) == ["lib", "app"]

    def test_duplicates_and_blanks(self):
        selector = ConsoleModuleSelector("/p", console=quiet_console())
        assert selector.parse_answer("1,,app, 1", ["app", "lib"]) == ["app"]

    def test_unknown_tokens_warn(self):
        console = quiet_console()
        selector = ConsoleModuleSelector("/p", console=console)
        assert selector.parse_answer("web, 9", ["app", "lib"]) == []
        assert "Unknown module: web" in console.file.getvalue()


@pytest.mark.asyncio
class TestConsoleModuleSelector:
    """Tests for the interactive prompt with a remembered selection."""

    async def test_choice_is_remembered(self, temp_dir, monkeypatch):
        store = LocalSelectionStore(temp_dir)
        defaults = []

        def fake_prompt(*args, **kwargs):
            defaults.append(kwargs.get("default"))
            return "lib"

        monkeypatch.setattr(Confirm, "ask", lambda *args, **kwargs: False)
        monkeypatch.setattr(Prompt, "ask", fake_prompt)
        selector = ConsoleModuleSelector("/p", store=store, console=quiet_console())

        result = await selector.choose(["app", "lib"], True)
        assert result.chosen == ["lib"]
        assert (await store.load("/p")).selected_modules == ["lib"]

        await selector.choose(["app", "lib"], True)
        assert defaults == [None, "lib"]

    async def test_apply_to_root(self, temp_dir, monkeypatch):
        store = LocalSelectionStore(temp_dir)
        monkeypatch.setattr(Confirm, "ask", lambda *args, **kwargs: True)
        selector = ConsoleModuleSelector("/p", store=store, console=quiet_console())

        result = await selector.choose(["app"], True)
        assert result.apply_to_root
        assert (await store.load("/p")).apply_to_root

    async def test_empty_answer_cancels(self, temp_dir, monkeypatch):
        store = LocalSelectionStore(temp_dir)
        await store.save(SelectionState(project_path="/p", selected_modules=["app"]))
        monkeypatch.setattr(Prompt, "ask", lambda *args, **kwargs: "")
        selector = ConsoleModuleSelector("/p", store=store, console=quiet_console())

        result = await selector.choose(["app", "lib"], False)
        assert not result.confirmed
        assert (await store.load("/p")).selected_modules == ["app"]

    async def test_prompts_do_not_block_event_loop(self, monkeypatch):
        loop_thread = threading.get_ident()
        prompt_threads = []

        def fake_confirm(*args, **kwargs):
            prompt_threads.append(threading.get_ident())
            return False

        def fake_prompt(*args, **kwargs):
            prompt_threads.append(threading.get_ident())
            return "app"

        monkeypatch.setattr(Confirm, "ask", fake_confirm)
        monkeypatch.setattr(Prompt, "ask", fake_prompt)
        selector = ConsoleModuleSelector("/p", console=quiet_console())

        result = await selector.choose(["app", "lib"], True)
        assert result.chosen == ["app"]
        assert len(prompt_threads) == 2
        assert loop_thread not in prompt_threads


@pytest.mark.asyncio
@pytest.mark.skipif(os.name == "nt", reason="uses a POSIX shell wrapper")
class TestSubprocessLauncherRun:
    """Tests running a real wrapper script."""

    def write_wrapper(self, directory, body):
        wrapper = directory / "mvnw"
        wrapper.write_text("#!/bin/sh\n" + body)
        wrapper.chmod(0o755)

    async def test_returns_exit_code(self, temp_dir):
        self.write_wrapper(temp_dir, "echo formatting\nexit 3\n")
        spec = TaskArgumentBuilder().build(WholeProject(), BuildToolKind.MAVEN, temp_dir.as_posix())

        assert await SubprocessLauncher(Config()).launch(spec) == 3

    async def test_cancel_kills_build_process(self, temp_dir, notifier):
        """A cancelled execution must not leave the build rewriting files."""
        marker = temp_dir / "formatted"
        self.write_wrapper(temp_dir, f"sleep 1.5 </dev/null >/dev/null 2>&1\ntouch '{marker}'\n")
        spec = TaskArgumentBuilder().build(WholeProject(), BuildToolKind.MAVEN, temp_dir.as_posix())

        execution = TaskRunner(SubprocessLauncher(Config()), notifier).run(spec)
        await asyncio.sleep(0.3)
        execution.cancel()

        assert await execution.wait() is False
        await asyncio.sleep(2)
        assert not marker.exists()
