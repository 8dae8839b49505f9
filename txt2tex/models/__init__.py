"""Data models for attachment resolution."""

from txt2tex.models.attachment import (
    AttachmentReference,
    Candidate,
    ConversionResult,
    ManifestEntry,
    PoolStatistics,
    ResolutionResult,
)

__all__ = [
    "Candidate",
    "AttachmentReference",
    "ResolutionResult",
    "ConversionResult",
    "ManifestEntry",
    "PoolStatistics",
]
