"""
Module selection.

Reduces the resolved modules to the ones a reformat should run on.
"""

from __future__ import annotations

from ..core.logging import get_logger
from ..host.interface import ModuleSelector
from ..models.build import ModuleInfo

logger = get_logger(__name__)


class SelectionCoordinator:
    """Chooses target modules, prompting only when there is a real choice."""

    def __init__(self, selector: ModuleSelector) -> None:
        self.selector = selector

    async def select(self, resolved: dict[str, ModuleInfo]) -> list[ModuleInfo]:
        """Pick the modules to reformat.

        No modules yields nothing and a single module is taken without asking.
        Otherwise the selector is asked with the non-root module names. The
        project may be a plain folder of modules or a module itself, and in
        the latter case choosing the root excludes everything else.

        Args:
            resolved: Resolved modules keyed by name

        Returns:
            Modules to reformat, empty when the user cancels
        """
        if not resolved:
            return []
        if len(resolved) == 1:
            return list(resolved.values())

        root = next((info for info in resolved.values() if info.is_root_module), None)
        candidates = [name for name, info in resolved.items() if not info.is_root_module]

        answer = await self.selector.choose(candidates, root is not None)
        if not answer.confirmed:
            logger.info("Module selection cancelled")
            return []

        if root is not None and answer.apply_to_root:
            return [root]

        selected: list[ModuleInfo] = []
        for name in answer.chosen:
            info = resolved.get(name)
            if info is None or info.is_root_module:
                logger.warning("Ignoring unknown module from selection", module=name)
                continue
            selected.append(info)
        return selected
