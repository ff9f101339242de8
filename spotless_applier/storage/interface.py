"""
Selection store interface.

Defines where the last confirmed module selection of a project is kept, so
the next prompt can offer it as the default.
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod

from ..models.selection import SelectionState


class SelectionStore(ABC):
    """Abstract store for remembered module selections."""

    @abstractmethod
    async def load(self, project_path: str) -> SelectionState | None:
        """Load the selection remembered for a project, if any."""
        ...

    @abstractmethod
    async def save(self, state: SelectionState) -> None:
        """Replace the selection remembered for ``state.project_path``."""
        ...

    @abstractmethod
    async def clear(self, project_path: str) -> bool:
        """Forget a project's selection. Returns True if one existed."""
        ...

    @staticmethod
    def project_key(project_path: str) -> str:
        """Stable storage key for a project path."""
        return hashlib.sha256(project_path.encode("utf-8")).hexdigest()[:16]
