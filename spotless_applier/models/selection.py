"""Module selection models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SelectionResult(BaseModel):
    """Answer returned by a module selector."""

    confirmed: bool = Field(description="False when the user cancelled")
    chosen: list[str] = Field(default_factory=list, description="Chosen module names, in order")
    apply_to_root: bool = Field(default=False, description="Apply on the root project only")

    @classmethod
    def cancelled(cls) -> SelectionResult:
        return cls(confirmed=False)


class SelectionState(BaseModel):
    """The last confirmed selection for a project, remembered between runs."""

    project_path: str
    selected_modules: list[str] = Field(default_factory=list)
    apply_to_root: bool = False
    saved_at: datetime = Field(default_factory=datetime.utcnow)
