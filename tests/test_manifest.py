"""Tests for the resolution manifest."""

import csv
import json

import pytest
from pathlib import Path

from txt2tex.models.attachment import AttachmentReference, Candidate, ResolutionResult
from txt2tex.utils.manifest import ResolutionManifest


@pytest.fixture
def matched_result(sample_reference: AttachmentReference, sample_candidate: Candidate) -> ResolutionResult:
    return ResolutionResult(sample_reference, sample_candidate, "size-image")


@pytest.fixture
def unmatched_result() -> ResolutionResult:
    return ResolutionResult(
        AttachmentReference(
            line="Attachment: gone.mov (video/quicktime, 5 bytes)",
            declared_name="gone.mov",
            mime_type="video/quicktime",
            declared_size=5,
        )
    )


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "resolutions.json"


class TestResolutionManifest:
    """Tests for ResolutionManifest class."""

    def test_record(self, manifest_path: Path, matched_result: ResolutionResult):
        """Test recording a resolution."""
        with ResolutionManifest(manifest_path) as manifest:
            entry = manifest.record(4, matched_result)

            assert entry.status == "matched"
            assert entry.matched_file == "attachments/photo.jpg"

        assert manifest_path.exists()

    def test_get_entry(self, manifest_path: Path, matched_result: ResolutionResult):
        """Test retrieving an entry by line number."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(4, matched_result)

            assert manifest.get_entry(4).method == "size-image"
            assert manifest.get_entry(99) is None

    def test_record_same_line_replaces(
        self,
        manifest_path: Path,
        matched_result: ResolutionResult,
        unmatched_result: ResolutionResult,
    ):
        """Test one entry per line number."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(4, matched_result)
            manifest.record(4, unmatched_result)

            assert len(manifest.all_entries()) == 1
            assert manifest.get_entry(4).status == "unmatched"

    def test_get_unmatched(
        self,
        manifest_path: Path,
        matched_result: ResolutionResult,
        unmatched_result: ResolutionResult,
    ):
        """Test filtering unmatched entries."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(9, unmatched_result)
            manifest.record(2, matched_result)
            manifest.record(5, unmatched_result)

            assert [e.line_number for e in manifest.get_unmatched()] == [5, 9]
            assert [e.line_number for e in manifest.all_entries()] == [2, 5, 9]

    def test_reset(self, manifest_path: Path, matched_result: ResolutionResult):
        """Test reset clears previous entries."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, matched_result)
            manifest.reset()

            assert manifest.all_entries() == []

    def test_summary(
        self,
        manifest_path: Path,
        matched_result: ResolutionResult,
        unmatched_result: ResolutionResult,
    ):
        """Test summary counts."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, matched_result)
            manifest.record(2, unmatched_result)
            summary = manifest.get_summary()

        assert summary["total"] == 2
        assert summary["by_status"] == {"matched": 1, "unmatched": 1}
        assert summary["by_method"] == {"size-image": 1}
        assert summary["matched_bytes"] == 439593

    def test_persists_across_instances(self, manifest_path: Path, matched_result: ResolutionResult):
        """Test entries can be read back by the report command."""
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(3, matched_result)

        with ResolutionManifest(manifest_path) as manifest:
            assert manifest.get_entry(3) is not None


class TestExportManifest:
    """Tests for manifest export."""

    def test_export_json(self, manifest_path: Path, tmp_path: Path, matched_result: ResolutionResult):
        out = tmp_path / "export.json"
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, matched_result)
            manifest.export_manifest(out, "json")

        data = json.loads(out.read_text(encoding="utf-8"))
        assert data[0]["matched_file"] == "attachments/photo.jpg"

    def test_export_csv(self, manifest_path: Path, tmp_path: Path, unmatched_result: ResolutionResult):
        out = tmp_path / "export.csv"
        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, unmatched_result)
            manifest.export_manifest(out, "csv")

        with open(out, newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))

        assert rows[0]["status"] == "unmatched"
        assert rows[0]["declared_name"] == "gone.mov"
        assert rows[0]["matched_file"] == ""

    def test_export_unknown_format(self, manifest_path: Path, tmp_path: Path):
        with ResolutionManifest(manifest_path) as manifest:
            with pytest.raises(ValueError):
                manifest.export_manifest(tmp_path / "x.xml", "xml")

    def test_export_undecodable_bytes(self, manifest_path: Path, tmp_path: Path):
        """Test names holding invalid UTF-8 are exported byte for byte."""
        raw = b"Attachment: caf\xe9.png (image/png, 5 bytes)"
        reference = AttachmentReference(
            line=raw.decode("utf-8", errors="surrogateescape"),
            declared_name=b"caf\xe9.png".decode("utf-8", errors="surrogateescape"),
            mime_type="image/png",
            declared_size=5,
        )
        json_out = tmp_path / "export.json"
        csv_out = tmp_path / "export.csv"

        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, ResolutionResult(reference))
            manifest.export_manifest(json_out, "json")
            manifest.export_manifest(csv_out, "csv")

        assert b'"declared_name": "caf\xe9.png"' in json_out.read_bytes()
        assert b"caf\xe9.png" in csv_out.read_bytes()

    def test_failed_export_leaves_no_file(
        self,
        manifest_path: Path,
        tmp_path: Path,
        matched_result: ResolutionResult,
        monkeypatch: pytest.MonkeyPatch,
    ):
        out = tmp_path / "export.json"

        def fail(f, entries):
            f.write("[")
            raise UnicodeEncodeError("utf-8", "x", 0, 1, "surrogates not allowed")

        monkeypatch.setattr(ResolutionManifest, "_write_json", staticmethod(fail))

        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, matched_result)
            with pytest.raises(UnicodeEncodeError):
                manifest.export_manifest(out, "json")

        assert sorted(p.name for p in tmp_path.iterdir()) == ["logs"]

    def test_failed_export_keeps_previous_file(
        self,
        manifest_path: Path,
        tmp_path: Path,
        matched_result: ResolutionResult,
        monkeypatch: pytest.MonkeyPatch,
    ):
        out = tmp_path / "export.csv"
        out.write_text("previous", encoding="utf-8")

        def fail(f, entries):
            raise OSError("disk full")

        monkeypatch.setattr(ResolutionManifest, "_write_csv", staticmethod(fail))

        with ResolutionManifest(manifest_path) as manifest:
            manifest.record(1, matched_result)
            with pytest.raises(OSError):
                manifest.export_manifest(out, "csv")

        assert out.read_text(encoding="utf-8") == "previous"
