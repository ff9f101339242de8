"""Selection persistence for Spotless Applier."""

from .interface import SelectionStore
from .local import LocalSelectionStore

__all__ = ["SelectionStore", "LocalSelectionStore"]
