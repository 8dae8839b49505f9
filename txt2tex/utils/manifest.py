"""Resolution manifest using TinyDB for auditing attachment matches."""

import os
from pathlib import Path
from typing import Any, TextIO

from tinydb import Query, TinyDB

from txt2tex.models.attachment import ManifestEntry, ResolutionResult

EXPORT_FORMATS = ("json", "csv")


class ResolutionManifest:
    """Records how each attachment line of a run was resolved.

    The manifest is a write-only audit trail: it is cleared at the start
    of every conversion and never consulted when matching.
    """

    def __init__(self, manifest_path: Path) -> None:
        """Initialize with path to manifest database.

        Args:
            manifest_path: Path to manifest JSON file.
        """
        self.manifest_path = Path(manifest_path)
        self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = TinyDB(self.manifest_path, encoding="utf-8")
        self._resolutions = self._db.table("resolutions")

    def reset(self) -> None:
        """Clear entries left by a previous run."""
        self._resolutions.truncate()

    def record(self, line_number: int, result: ResolutionResult) -> ManifestEntry:
        """Record one resolution.

        Args:
            line_number: 1-based line number of the attachment line.
            result: Resolution outcome.

        Returns:
            Created ManifestEntry.
        """
        entry = ManifestEntry.from_resolution(line_number, result)

        Resolution = Query()
        self._resolutions.upsert(entry.to_dict(), Resolution.line_number == line_number)

        return entry

    def get_entry(self, line_number: int) -> ManifestEntry | None:
        """Retrieve the entry for an input line.

        Args:
            line_number: 1-based line number.

        Returns:
            ManifestEntry if found, None otherwise.
        """
        Resolution = Query()
        results = self._resolutions.search(Resolution.line_number == line_number)

        if results:
            return ManifestEntry.from_dict(results[0])
        return None

    def get_by_status(self, status: str) -> list[ManifestEntry]:
        """Query entries by status ("matched" or "unmatched")."""
        Resolution = Query()
        results = self._resolutions.search(Resolution.status == status)
        return self._sorted([ManifestEntry.from_dict(r) for r in results])

    def get_unmatched(self) -> list[ManifestEntry]:
        """Entries whose attachment line matched no file."""
        return self.get_by_status("unmatched")

    def all_entries(self) -> list[ManifestEntry]:
        """All entries in input order."""
        return self._sorted([ManifestEntry.from_dict(r) for r in self._resolutions.all()])

    def get_summary(self) -> dict[str, Any]:
        """Get summary statistics from the manifest.

        Returns:
            Dictionary with counts by status and by method.
        """
        stats: dict[str, Any] = {
            "total": 0,
            "by_status": {},
            "by_method": {},
            "matched_bytes": 0,
        }

        for entry in self._resolutions.all():
            stats["total"] += 1

            status = entry.get("status", "unknown")
            stats["by_status"][status] = stats["by_status"].get(status, 0) + 1

            method = entry.get("method")
            if method:
                stats["by_method"][method] = stats["by_method"].get(method, 0) + 1

            stats["matched_bytes"] += entry.get("matched_size") or 0

        return stats

    def export_manifest(self, path: Path, format: str = "json") -> None:
        """Export manifest to JSON or CSV.

        The export is written to a temporary file beside the destination
        and renamed into place, so a failed export leaves no partial file.
        Undecodable input bytes are written back unchanged.

        Args:
            path: Output file path.
            format: Export format ("json" or "csv").

        Raises:
            ValueError: If the format is not supported.
        """
        if format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {format}")

        import tempfile

        path = Path(path)
        entries = self.all_entries()

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with open(fd, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                if format == "json":
                    self._write_json(f, entries)
                else:
                    self._write_csv(f, entries)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _write_json(f: TextIO, entries: list[ManifestEntry]) -> None:
        import json

        json.dump([e.to_dict() for e in entries], f, indent=2, ensure_ascii=False)

    @staticmethod
    def _write_csv(f: TextIO, entries: list[ManifestEntry]) -> None:
        import csv

        writer = csv.writer(f)
        writer.writerow(
            [
                "line_number",
                "status",
                "declared_name",
                "mime_type",
                "declared_size",
                "matched_file",
                "method",
            ]
        )
        for entry in entries:
            writer.writerow(
                [
                    entry.line_number,
                    entry.status,
                    entry.declared_name or "",
                    entry.mime_type or "",
                    "" if entry.declared_size is None else entry.declared_size,
                    entry.matched_file or "",
                    entry.method or "",
                ]
            )

    @staticmethod
    def _sorted(entries: list[ManifestEntry]) -> list[ManifestEntry]:
        return sorted(entries, key=lambda e: e.line_number)

    def close(self) -> None:
        """Close database connection."""
        self._db.close()

    def __enter__(self) -> "ResolutionManifest":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()
