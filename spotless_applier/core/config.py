"""
Configuration management for Spotless Applier.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for module discovery and task execution.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()

DEFAULT_EXCLUDED_DIRS = ["build", "target", "out", "node_modules", "bin"]


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


class GradleConfig(BaseModel):
    """Gradle invocation configuration."""

    executable: str = Field(default="gradle", description="Gradle binary used when no wrapper exists")
    prefer_wrapper: bool = Field(default=True, description="Use ./gradlew when one is found")


class MavenConfig(BaseModel):
    """Maven invocation configuration."""

    executable: str = Field(default="mvn", description="Maven binary used when no wrapper exists")
    prefer_wrapper: bool = Field(default=True, description="Use ./mvnw when one is found")
    batch_mode: bool = Field(default=True, description="Pass --batch-mode to Maven")


class DiscoveryConfig(BaseModel):
    """Module discovery configuration for filesystem projects."""

    max_depth: int = Field(default=4, ge=0, description="Directory depth scanned for modules")
    excluded_dirs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_DIRS),
        description="Directory names never scanned (hidden dirs are always skipped)",
    )
    source_set_modules: bool = Field(
        default=True, description="Expose Gradle source sets as synthetic modules"
    )


class StateConfig(BaseModel):
    """Persistent state configuration."""

    path: Path = Field(
        default_factory=lambda: Path("~/.spotless-applier").expanduser(),
        description="Directory holding remembered module selections",
    )


class Config(BaseModel):
    """Root configuration for Spotless Applier."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    log_format: Literal["auto", "console", "json"] = Field(
        default="auto", description="Log renderer; auto picks console on a TTY, JSON otherwise"
    )
    gradle: GradleConfig = Field(default_factory=GradleConfig)
    maven: MavenConfig = Field(default_factory=MavenConfig)
    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    state: StateConfig = Field(default_factory=StateConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        return cls(
            log_level=os.environ.get("SPOTLESS_LOG_LEVEL", "INFO").upper(),  # type: ignore
            log_format=os.environ.get("SPOTLESS_LOG_FORMAT", "auto").lower(),  # type: ignore
            gradle=GradleConfig(
                executable=os.environ.get("SPOTLESS_GRADLE_EXECUTABLE", "gradle"),
                prefer_wrapper=_env_flag("SPOTLESS_GRADLE_PREFER_WRAPPER", "true"),
            ),
            maven=MavenConfig(
                executable=os.environ.get("SPOTLESS_MAVEN_EXECUTABLE", "mvn"),
                prefer_wrapper=_env_flag("SPOTLESS_MAVEN_PREFER_WRAPPER", "true"),
                batch_mode=_env_flag("SPOTLESS_MAVEN_BATCH_MODE", "true"),
            ),
            discovery=DiscoveryConfig(
                max_depth=int(os.environ.get("SPOTLESS_DISCOVERY_MAX_DEPTH", "4")),
                source_set_modules=_env_flag("SPOTLESS_DISCOVERY_SOURCE_SETS", "true"),
            ),
            state=StateConfig(
                path=Path(os.environ.get("SPOTLESS_STATE_PATH", "~/.spotless-applier")).expanduser(),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
