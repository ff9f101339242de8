"""Build tool and version detection."""

from .detector import BuildToolDetector
from .version import (
    NO_CONFIGURATION_CACHE_FLAG,
    NO_CONFIGURATION_CACHE_MIN_VERSION,
    VersionGate,
)

__all__ = [
    "BuildToolDetector",
    "NO_CONFIGURATION_CACHE_FLAG",
    "NO_CONFIGURATION_CACHE_MIN_VERSION",
    "VersionGate",
]
