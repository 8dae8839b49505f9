"""Data models for attachment resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

IMAGE_EXTENSIONS = frozenset({"png", "jpg", "jpeg", "gif", "bmp", "tif", "tiff"})


def has_image_extension(name: str) -> bool:
    """Check if a file name carries a recognized image extension.

    A leading dot (".png") does not count as an extension.
    """
    dot = name.rfind(".")
    if dot <= 0:
        return False
    return name[dot + 1 :].lower() in IMAGE_EXTENSIONS


def format_size(size: int) -> str:
    """Format a byte count in human-readable form."""
    if size < 1024:
        return f"{size} B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    elif size < 1024 * 1024 * 1024:
        return f"{size / (1024 * 1024):.1f} MB"
    else:
        return f"{size / (1024 * 1024 * 1024):.2f} GB"


@dataclass
class Candidate:
    """A real file on disk that may satisfy an attachment reference."""

    name: str
    size: int
    path: Path
    consumed: bool = False

    @property
    def relative_path(self) -> str:
        """Path used to reference the file from the output document."""
        return self.path.as_posix()

    @property
    def is_image(self) -> bool:
        """Check if the file name has an image extension."""
        return has_image_extension(self.name)

    @property
    def size_human(self) -> str:
        """Human-readable size string."""
        return format_size(self.size)

    def __str__(self) -> str:
        """Human-readable representation."""
        return f"{self.name} ({self.size_human})"


@dataclass
class AttachmentReference:
    """Parsed intent of one attachment line in the export."""

    line: str
    declared_name: str | None = None
    mime_type: str | None = None
    declared_size: int | None = None

    @property
    def is_resolvable(self) -> bool:
        """Check if the reference carries a name or a size to match on."""
        return self.declared_name is not None or self.declared_size is not None

    def __str__(self) -> str:
        """Human-readable representation."""
        name = self.declared_name or "(no filename)"
        mime = self.mime_type or "?"
        size = "?" if self.declared_size is None else format_size(self.declared_size)
        return f"{name} ({mime}, {size})"


@dataclass
class ResolutionResult:
    """Outcome of resolving one reference against the candidate pool."""

    reference: AttachmentReference
    candidate: Candidate | None = None
    method: str | None = None  # name, size-image, size

    @property
    def matched(self) -> bool:
        """Check if a candidate was selected."""
        return self.candidate is not None


@dataclass
class ManifestEntry:
    """Single manifest record for one attachment line."""

    line_number: int
    line: str
    declared_name: str | None
    mime_type: str | None
    declared_size: int | None
    status: str  # matched, unmatched
    matched_file: str | None = None
    matched_size: int | None = None
    method: str | None = None
    recorded_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def from_resolution(cls, line_number: int, result: ResolutionResult) -> "ManifestEntry":
        """Create from a resolution result."""
        reference = result.reference
        candidate = result.candidate
        return cls(
            line_number=line_number,
            line=reference.line,
            declared_name=reference.declared_name,
            mime_type=reference.mime_type,
            declared_size=reference.declared_size,
            status="matched" if candidate else "unmatched",
            matched_file=candidate.relative_path if candidate else None,
            matched_size=candidate.size if candidate else None,
            method=result.method,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storage."""
        return {
            "line_number": self.line_number,
            "line": self.line,
            "declared_name": self.declared_name,
            "mime_type": self.mime_type,
            "declared_size": self.declared_size,
            "status": self.status,
            "matched_file": self.matched_file,
            "matched_size": self.matched_size,
            "method": self.method,
            "recorded_at": self.recorded_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ManifestEntry":
        """Create from dictionary."""
        return cls(
            line_number=data["line_number"],
            line=data["line"],
            declared_name=data.get("declared_name"),
            mime_type=data.get("mime_type"),
            declared_size=data.get("declared_size"),
            status=data["status"],
            matched_file=data.get("matched_file"),
            matched_size=data.get("matched_size"),
            method=data.get("method"),
            recorded_at=datetime.fromisoformat(data["recorded_at"]),
        )


@dataclass
class ConversionResult:
    """Result of converting one export file."""

    output_path: Path
    lines_read: int = 0
    lines_suppressed: int = 0
    senders_redacted: int = 0
    attachments_matched: int = 0
    attachments_unmatched: int = 0
    images_embedded: int = 0
    resolutions: list[ResolutionResult] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def attachments_total(self) -> int:
        """Number of attachment lines seen."""
        return self.attachments_matched + self.attachments_unmatched

    @property
    def match_rate(self) -> float:
        """Percentage of attachment lines that were matched."""
        if self.attachments_total == 0:
            return 0.0
        return (self.attachments_matched / self.attachments_total) * 100

    @property
    def unmatched(self) -> list[ResolutionResult]:
        """Resolutions that found no candidate."""
        return [r for r in self.resolutions if not r.matched]


@dataclass
class PoolStatistics:
    """Aggregate statistics for a candidate pool."""

    total_candidates: int
    image_candidates: int
    total_size: int
    consumed: int = 0
    by_extension: dict[str, int] = field(default_factory=dict)

    @property
    def unconsumed(self) -> int:
        """Candidates still available for matching."""
        return self.total_candidates - self.consumed

    @property
    def total_size_human(self) -> str:
        """Human-readable total size."""
        return format_size(self.total_size)
