"""Reformat services."""

from .arguments import GRADLE_TASK, MAVEN_GOAL, TaskArgumentBuilder
from .reformat import ReformatService
from .resolver import ModuleResolver
from .runner import TaskExecution, TaskRunner
from .selection import SelectionCoordinator

__all__ = [
    "GRADLE_TASK",
    "MAVEN_GOAL",
    "TaskArgumentBuilder",
    "ReformatService",
    "ModuleResolver",
    "TaskExecution",
    "TaskRunner",
    "SelectionCoordinator",
]
