"""Utility modules for logging and the resolution manifest."""

from txt2tex.utils.logging import logger, setup_logging
from txt2tex.utils.manifest import ResolutionManifest

__all__ = [
    "logger",
    "setup_logging",
    "ResolutionManifest",
]
