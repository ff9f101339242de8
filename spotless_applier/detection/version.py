"""
Version gating for the Gradle configuration cache flag.

Gradle 6.6 introduced the configuration cache; spotless' IDE hook does not
work with it, so from that version on the task runs with
``--no-configuration-cache``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..core.exceptions import UnresolvedVersionError
from ..core.logging import get_logger
from ..models.build import ToolVersion, VersionThreshold

if TYPE_CHECKING:
    from ..host.interface import VersionResolver

logger = get_logger(__name__)

NO_CONFIGURATION_CACHE_MIN_VERSION = VersionThreshold(major=6, minor=6)
NO_CONFIGURATION_CACHE_FLAG = "--no-configuration-cache"


class VersionGate:
    """Decides whether the compatibility flag must be passed."""

    def __init__(self, threshold: VersionThreshold = NO_CONFIGURATION_CACHE_MIN_VERSION) -> None:
        self.threshold = threshold

    def requires_compatibility_flag(self, version: ToolVersion | str) -> bool:
        """Return True iff ``version`` is at or above the threshold.

        Only major and minor are compared.

        Raises:
            UnresolvedVersionError: If a version string cannot be parsed
        """
        if isinstance(version, str):
            parsed = ToolVersion.parse(version)
            if parsed is None:
                raise UnresolvedVersionError(
                    message=f"Unparseable version: {version!r}",
                    context={"version": version},
                )
            version = parsed
        return version.is_at_least(self.threshold)

    async def resolve_compatibility_flag(self, resolver: VersionResolver, project_path: str) -> bool:
        """Look the version up and decide; fails closed to False.

        A missing or unreadable version, or any resolver failure, is logged
        as a warning and never aborts the reformat.
        """
        try:
            version = await resolver.resolve_version(project_path)
            required = self.requires_compatibility_flag(version)
        except UnresolvedVersionError as e:
            logger.warning(
                f"Unable to resolve Gradle version, leaving off `{NO_CONFIGURATION_CACHE_FLAG}` argument",
                path=project_path,
                error=str(e),
            )
            return False
        except Exception as e:
            logger.warning(
                f"Gradle version lookup failed, leaving off `{NO_CONFIGURATION_CACHE_FLAG}` argument",
                path=project_path,
                error=repr(e),
            )
            return False

        logger.debug("Resolved Gradle version", path=project_path, version=version, flag=required)
        return required
