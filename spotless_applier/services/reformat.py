"""
Reformat Service.

Entry point tying detection, module resolution, selection, argument
building and task execution together.
"""

from __future__ import annotations

from pathlib import Path, PurePath

from ..core.exceptions import UnresolvedBuildToolError
from ..core.logging import bind_context, get_logger
from ..core.types import ServiceResult
from ..detection.detector import BuildToolDetector
from ..detection.version import VersionGate
from ..host.interface import (
    ModuleSelector,
    NotificationLevel,
    NotificationSink,
    ProjectModel,
    VersionResolver,
)
from ..models.build import BuildToolKind, ModuleInfo, ReformatScope, SingleFile, WholeProject
from .arguments import TaskArgumentBuilder
from .resolver import ModuleResolver
from .runner import CompletionCallback, TaskExecution, TaskRunner
from .selection import SelectionCoordinator

logger = get_logger(__name__)


class ReformatService:
    """Runs spotless on a whole project, selected modules, or a single file.

    Failures never escape ``run``: an undetectable build tool is reported
    through the notification sink and a failed ServiceResult, and task
    failures arrive through each execution's result.
    """

    def __init__(
        self,
        project: ProjectModel,
        runner: TaskRunner,
        version_resolver: VersionResolver,
        notifier: NotificationSink,
        selector: ModuleSelector,
        detector: BuildToolDetector | None = None,
        argument_builder: TaskArgumentBuilder | None = None,
        version_gate: VersionGate | None = None,
    ) -> None:
        self.project = project
        self.runner = runner
        self.version_resolver = version_resolver
        self.notifier = notifier
        self.detector = detector or BuildToolDetector()
        self.resolver = ModuleResolver(project, self.detector)
        self.coordinator = SelectionCoordinator(selector)
        self.argument_builder = argument_builder or TaskArgumentBuilder()
        self.version_gate = version_gate or VersionGate()

    async def run(
        self,
        file: Path | str | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> ServiceResult[list[TaskExecution]]:
        """Reformat ``file`` if given, otherwise the project or chosen modules.

        Args:
            file: Optional single file to reformat
            on_complete: Called once per launched task with its success

        Returns:
            ServiceResult with the started executions (possibly none)
        """
        base_path = self.project.base_path
        if base_path is None:
            logger.warning("Project has no base path, nothing to reformat")
            return ServiceResult.fail("Project has no base path")

        bind_context(project=base_path)
        if file is None:
            return await self.reformat_project(on_complete)
        return await self.reformat_file(file, on_complete)

    async def reformat_project(
        self, on_complete: CompletionCallback | None = None
    ) -> ServiceResult[list[TaskExecution]]:
        """Reformat the modules chosen among the resolved ones."""
        resolved = self.resolver.resolve()
        targets = await self.coordinator.select(resolved)
        if not targets:
            logger.info("No modules to reformat")
            return ServiceResult.ok([])

        executions: list[TaskExecution] = []
        errors: list[str] = []
        for module in targets:
            execution = await self._launch_or_report(module.root_path, WholeProject(), module.name, on_complete)
            if execution is None:
                errors.append(f"Unable to resolve build tool for {module.name}")
            else:
                executions.append(execution)

        return self._collect(executions, errors)

    async def reformat_file(
        self, file: Path | str, on_complete: CompletionCallback | None = None
    ) -> ServiceResult[list[TaskExecution]]:
        """Reformat one file through the module that owns it."""
        file_path = Path(file).expanduser().resolve().as_posix()
        owner = self.find_owning_module(file_path, self.resolver.resolve())
        if owner is not None:
            root, label = owner.root_path, owner.name
        else:
            root = self.project.base_path or ""
            label = PurePath(root).name or root

        execution = await self._launch_or_report(root, SingleFile(path=file_path), label, on_complete)
        if execution is None:
            return ServiceResult.fail(f"Unable to resolve build tool for {label}", file=file_path)
        return ServiceResult.ok([execution], file=file_path)

    async def launch(
        self,
        root_path: str,
        scope: ReformatScope,
        label: str | None = None,
        on_complete: CompletionCallback | None = None,
    ) -> TaskExecution:
        """Detect the build tool at ``root_path`` and start spotless there.

        Raises:
            UnresolvedBuildToolError: If no build marker sits at ``root_path``
        """
        build_tool = self.detector.detect_listing(self.project.list_children(root_path))
        compatibility_flag = False
        if build_tool is BuildToolKind.GRADLE:
            compatibility_flag = await self.version_gate.resolve_compatibility_flag(
                self.version_resolver, root_path
            )

        spec = self.argument_builder.build(scope, build_tool, root_path, compatibility_flag)
        return self.runner.run(spec, on_complete=on_complete, label=label)

    @staticmethod
    def find_owning_module(file_path: str, resolved: dict[str, ModuleInfo]) -> ModuleInfo | None:
        """Deepest resolved module whose root contains ``file_path``."""
        target = PurePath(file_path)
        owner: ModuleInfo | None = None
        for info in resolved.values():
            root = PurePath(info.root_path)
            if not target.is_relative_to(root):
                continue
            if owner is None or len(root.parts) > len(PurePath(owner.root_path).parts):
                owner = info
        return owner

    async def _launch_or_report(
        self,
        root_path: str,
        scope: ReformatScope,
        label: str,
        on_complete: CompletionCallback | None,
    ) -> TaskExecution | None:
        try:
            return await self.launch(root_path, scope, label, on_complete)
        except UnresolvedBuildToolError as e:
            logger.error("Unable to resolve build tool", module=label, path=root_path, error=str(e))
            self.notifier.notify("Unable to resolve build tool", NotificationLevel.ERROR)
            return None
        except Exception:
            logger.exception("Unable to launch spotless", module=label, path=root_path)
            self.notifier.notify(f"Unable to launch spotless for {label}", NotificationLevel.ERROR)
            return None

    @staticmethod
    def _collect(executions: list[TaskExecution], errors: list[str]) -> ServiceResult[list[TaskExecution]]:
        if errors and not executions:
            return ServiceResult.fail("; ".join(errors))
        if errors:
            return ServiceResult.with_warnings(executions, errors)
        return ServiceResult.ok(executions)
