"""
Spotless Applier: run spotless formatting through Gradle or Maven.

Detects the build tool governing a project, resolves its independently
buildable modules and launches ``spotlessApply`` / ``spotless:apply`` for the
whole project, selected modules, or a single file.
"""

__version__ = "1.0.0"
__author__ = "Spotless Applier Team"
