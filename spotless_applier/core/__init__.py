"""Core infrastructure components for Spotless Applier."""

from .config import Config, get_config
from .exceptions import (
    ExternalTaskError,
    SpotlessApplierError,
    TaskStateError,
    ToolNotFoundError,
    UnresolvedBuildToolError,
    UnresolvedVersionError,
)
from .logging import get_logger, setup_logging
from .types import ServiceResult, TaskStatus

__all__ = [
    "Config",
    "get_config",
    "ExternalTaskError",
    "SpotlessApplierError",
    "TaskStateError",
    "ToolNotFoundError",
    "UnresolvedBuildToolError",
    "UnresolvedVersionError",
    "get_logger",
    "setup_logging",
    "ServiceResult",
    "TaskStatus",
]
