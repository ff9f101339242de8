"""
Module resolution.

Turns the host's module enumeration into the set of independently buildable
modules, keyed by name.
"""

from __future__ import annotations

from pathlib import PurePath

from ..core.logging import get_logger
from ..detection.detector import BuildToolDetector
from ..host.interface import ProjectModel
from ..models.build import BuildToolKind, ModuleInfo, ProjectModule

logger = get_logger(__name__)


class ModuleResolver:
    """Resolves project modules to ModuleInfo records.

    Gradle imports expose every source set (``app.main``, ``app.test``) as a
    module of its own. Those are folded into the module that owns the
    directory Gradle reports for them.
    """

    def __init__(self, project: ProjectModel, detector: BuildToolDetector | None = None) -> None:
        self.project = project
        self.detector = detector or BuildToolDetector()

    def resolve(
        self,
        modules: list[ProjectModule] | None = None,
        project_base_path: str | None = None,
    ) -> dict[str, ModuleInfo]:
        """Resolve modules, first occurrence of a name wins.

        Args:
            modules: Modules to resolve; defaults to the project's enumeration
            project_base_path: Base path deciding the root module; defaults to
                the project's base path

        Returns:
            Mapping of canonical module name to ModuleInfo, in encounter order
        """
        if modules is None:
            modules = self.project.modules()
        if project_base_path is None:
            project_base_path = self.project.base_path

        owners = self._index_by_root(modules)
        resolved: dict[str, ModuleInfo] = {}
        root_name: str | None = None

        for module in modules:
            info = self._build_module_info(module, project_base_path, owners)
            if info is None:
                continue
            if info.name in resolved:
                logger.debug("Dropping duplicate module", module=module.name, canonical=info.name)
                continue
            if info.is_root_module:
                if root_name is None:
                    root_name = info.name
                else:
                    # only the first module at the base path is the root
                    logger.debug("Demoting second root module", module=info.name, root=root_name)
                    info = info.model_copy(update={"is_root_module": False})
            resolved[info.name] = info

        logger.debug("Resolved modules", count=len(resolved), modules=list(resolved))
        return resolved

    def resolve_build_tool(self, module: ProjectModule) -> BuildToolKind:
        """Declared build tool if the host knows one, otherwise detect from the root."""
        if module.build_tool is not None and module.build_tool.is_known:
            return module.build_tool
        if not module.root_path:
            return BuildToolKind.UNKNOWN
        return self.detector.detect_listing(self.project.list_children(module.root_path))

    def _build_module_info(
        self,
        module: ProjectModule,
        project_base_path: str | None,
        owners: dict[str, ProjectModule],
    ) -> ModuleInfo | None:
        build_tool = self.resolve_build_tool(module)
        if build_tool is BuildToolKind.UNKNOWN:
            logger.debug("Skipping module without build tool", module=module.name)
            return None

        module_path = self._module_path(module, build_tool)
        if not module_path:
            logger.debug("Skipping module without root path", module=module.name)
            return None

        if build_tool is BuildToolKind.MAVEN:
            owner = module
        else:
            owner = self._find_owner(module_path, owners)
            if owner is None:
                logger.debug("No module owns Gradle path", module=module.name, path=module_path)
                return None

        return ModuleInfo(
            name=owner.name,
            root_path=module_path,
            build_tool=build_tool,
            is_root_module=module_path == project_base_path,
        )

    @staticmethod
    def _module_path(module: ProjectModule, build_tool: BuildToolKind) -> str:
        if build_tool is BuildToolKind.GRADLE and module.external_project_path:
            return module.external_project_path
        return module.root_path

    @staticmethod
    def _index_by_root(modules: list[ProjectModule]) -> dict[str, ProjectModule]:
        owners: dict[str, ProjectModule] = {}
        for module in modules:
            if module.root_path:
                owners.setdefault(module.root_path, module)
        return owners

    @staticmethod
    def _find_owner(path: str, owners: dict[str, ProjectModule]) -> ProjectModule | None:
        """Walk up from ``path`` to the deepest module rooted at or above it."""
        if path in owners:
            return owners[path]
        current = PurePath(path)
        while True:
            owner = owners.get(str(current))
            if owner is not None:
                return owner
            if current.parent == current:
                return None
            current = current.parent
