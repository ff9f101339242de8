"""
Build tool detection.

Classifies a directory by the marker files among its direct children. Gradle
markers win over ``pom.xml`` when both are present, so the answer never depends
on the order in which the filesystem lists the children.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ..core.logging import get_logger
from ..models.build import GRADLE_MARKERS, MAVEN_MARKERS, BuildToolKind

logger = get_logger(__name__)


class BuildToolDetector:
    """Detects the build tool governing a directory."""

    def detect(self, children: Iterable[str]) -> BuildToolKind:
        """Classify a directory from the names of its direct children.

        Args:
            children: File names directly inside the directory (not recursive)

        Returns:
            GRADLE if any Gradle marker is present, MAVEN if ``pom.xml`` is,
            UNKNOWN otherwise
        """
        has_maven_marker = False
        for name in children:
            if name in GRADLE_MARKERS:
                return BuildToolKind.GRADLE
            if name in MAVEN_MARKERS:
                has_maven_marker = True
        return BuildToolKind.MAVEN if has_maven_marker else BuildToolKind.UNKNOWN

    def detect_listing(self, children: Iterable[str] | None) -> BuildToolKind:
        """Classify a host listing, where None means "not a directory"."""
        if children is None:
            return BuildToolKind.UNKNOWN
        return self.detect(children)

    def detect_directory(self, path: Path | str) -> BuildToolKind:
        """Classify a filesystem directory."""
        directory = Path(path)
        if not directory.is_dir():
            logger.debug("Not a directory, build tool unknown", path=str(directory))
            return BuildToolKind.UNKNOWN
        try:
            children = [child.name for child in directory.iterdir()]
        except OSError as e:
            logger.debug("Unable to list directory, build tool unknown", path=str(directory), error=str(e))
            return BuildToolKind.UNKNOWN
        return self.detect(children)
