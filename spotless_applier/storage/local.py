"""
Local filesystem selection store.

Keeps one JSON document per project under a base directory.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..core.logging import get_logger
from ..models.selection import SelectionState
from .interface import SelectionStore

logger = get_logger(__name__)


class LocalSelectionStore(SelectionStore):
    """Filesystem-backed selection store."""

    def __init__(self, base_path: Path) -> None:
        """Initialize local storage.

        Args:
            base_path: Directory holding the selection documents
        """
        self.base_path = base_path.expanduser().resolve()

    def _get_full_path(self, project_path: str) -> Path:
        return self.base_path / "selections" / f"{self.project_key(project_path)}.json"

    async def load(self, project_path: str) -> SelectionState | None:
        """Load a remembered selection; unreadable documents count as absent."""
        full_path = self._get_full_path(project_path)
        if not full_path.exists():
            return None

        async with aiofiles.open(full_path, "r", encoding="utf-8") as f:
            content = await f.read()

        try:
            state = SelectionState.model_validate_json(content)
        except ValidationError as e:
            logger.warning("Discarding unreadable selection", path=str(full_path), error=str(e))
            return None
        if state.project_path != project_path:
            return None
        return state

    async def save(self, state: SelectionState) -> None:
        """Write the selection document."""
        full_path = self._get_full_path(state.project_path)
        full_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(full_path, "w", encoding="utf-8") as f:
            await f.write(state.model_dump_json(indent=2))
        logger.debug("Saved module selection", project=state.project_path, modules=state.selected_modules)

    async def clear(self, project_path: str) -> bool:
        """Delete the selection document."""
        full_path = self._get_full_path(project_path)
        if not full_path.exists():
            return False
        await aiofiles.os.remove(full_path)
        return True
