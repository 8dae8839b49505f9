"""Pytest configuration and shared fixtures."""

import logging

import pytest
from pathlib import Path

from txt2tex.models.attachment import AttachmentReference, Candidate
from txt2tex.processor.pool import CandidatePool, DirectoryEntry


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers bound to streams of a previous test."""
    yield
    logger = logging.getLogger("txt2tex")
    logger.handlers.clear()
    logger.filters.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sample_candidate() -> Candidate:
    """Create a sample image candidate for testing."""
    return Candidate(name="photo.jpg", size=439593, path=Path("attachments/photo.jpg"))


@pytest.fixture
def sample_reference() -> AttachmentReference:
    """Create a sample unnamed image reference for testing."""
    return AttachmentReference(
        line="Attachment: no filename (image/jpeg, 439593 bytes)",
        declared_name=None,
        mime_type="image/jpeg",
        declared_size=439593,
    )


@pytest.fixture
def sample_listing() -> list[DirectoryEntry]:
    """Directory listing with images, documents and a subdirectory."""
    return [
        DirectoryEntry("notes.txt", 1024, True),
        DirectoryEntry("x.png", 1024, True),
        DirectoryEntry("report.pdf", 2048, True),
        DirectoryEntry("nested", 4096, False),
        DirectoryEntry("IMG_0001.JPG", 311164, True),
    ]


@pytest.fixture
def sample_pool(sample_listing: list[DirectoryEntry]) -> CandidatePool:
    """Create a populated pool for testing."""
    pool = CandidatePool(Path("attachments"))
    pool.populate(sample_listing)
    return pool


@pytest.fixture
def attachments_dir(tmp_path: Path) -> Path:
    """Create a temporary attachments directory with real files."""
    directory = tmp_path / "attachments"
    directory.mkdir()
    (directory / "x.png").write_bytes(b"\x89PNG" + b"\x00" * 1020)
    (directory / "contract.pdf").write_bytes(b"%PDF" + b"\x00" * 2044)
    (directory / "voice.m4a").write_bytes(b"\x00" * 777)
    (directory / "subdir").mkdir()
    return directory


@pytest.fixture
def sample_export() -> str:
    """Create a sample Signal export for testing."""
    return (
        "From: Bob (555-0100)\n"
        "Type: incoming\n"
        "Received: 2024-01-15 10:30\n"
        "Sent: 2024-01-15 10:29\n"
        "Attachment: no filename (image/png, 1024 bytes)\n"
        "\n"
        "Hello & welcome to 50% off_sale\n"
        "From: Alice (+15551234567)\n"
        "Attachment: contract.pdf (application/pdf, 2048 bytes)\n"
        "Attachment: lost.mov (video/quicktime, 99999 bytes)\n"
        "Nice \U0001F600\n"
    )


@pytest.fixture
def export_file(tmp_path: Path, sample_export: str) -> Path:
    """Write the sample export to disk."""
    path = tmp_path / "messages.txt"
    path.write_text(sample_export, encoding="utf-8")
    return path
