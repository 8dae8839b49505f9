"""Pool of on-disk attachment candidates."""

import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import NamedTuple

from txt2tex.models.attachment import Candidate, PoolStatistics, has_image_extension
from txt2tex.processor.errors import DirectoryUnavailable
from txt2tex.utils.logging import logger

__all__ = [
    "CandidatePool",
    "DirectoryEntry",
    "DirectoryUnavailable",
    "has_image_extension",
    "list_directory",
]


class DirectoryEntry(NamedTuple):
    """One entry of a directory listing."""

    name: str
    size: int
    is_file: bool


def list_directory(directory: Path) -> list[DirectoryEntry]:
    """List a directory in enumeration order.

    Entries whose metadata cannot be read are skipped.

    Args:
        directory: Directory to list.

    Returns:
        Entries with their size and whether they are regular files.

    Raises:
        DirectoryUnavailable: If the directory cannot be opened.
    """
    entries: list[DirectoryEntry] = []

    try:
        with os.scandir(directory) as it:
            for entry in it:
                try:
                    # Follow symlinks like stat(2) does
                    st = entry.stat()
                    is_file = entry.is_file()
                except OSError as e:
                    logger.debug(f"Skipping {entry.name}: {e}")
                    continue
                entries.append(DirectoryEntry(entry.name, st.st_size, is_file))
    except OSError as e:
        raise DirectoryUnavailable(Path(directory), e.strerror or str(e)) from e

    return entries


class CandidatePool:
    """In-memory collection of attachment candidates.

    Candidates are scanned in insertion order, so results are reproducible
    for the same listing. A candidate, once consumed, is never matched again.
    """

    def __init__(self, directory: Path = Path("attachments")) -> None:
        """Initialize an empty pool.

        Args:
            directory: Directory the candidates live in. Candidate paths
                are built relative to it.
        """
        self.directory = Path(directory)
        self._candidates: list[Candidate] = []

    @classmethod
    def from_directory(
        cls,
        directory: Path,
        sort_by_name: bool = True,
    ) -> "CandidatePool":
        """Build a pool from the regular files of a directory.

        Args:
            directory: Attachments directory.
            sort_by_name: If True, order candidates by name instead of
                filesystem enumeration order.

        Returns:
            Populated pool.

        Raises:
            DirectoryUnavailable: If the directory cannot be listed.
        """
        listing = list_directory(directory)
        if sort_by_name:
            listing.sort(key=lambda e: e.name)

        pool = cls(directory)
        pool.populate(listing)
        logger.debug(f"Loaded {len(pool)} candidates from {directory}")
        return pool

    def populate(self, listing: Iterable[DirectoryEntry]) -> None:
        """Append one candidate per regular file in the listing.

        Args:
            listing: (name, size, is_file) entries.
        """
        for name, size, is_file in listing:
            if not is_file:
                continue
            self._candidates.append(
                Candidate(name=name, size=size, path=self.directory / name)
            )

    def find_unconsumed_by_name(self, name: str) -> Candidate | None:
        """Find the first unconsumed candidate with exactly this name."""
        for candidate in self._candidates:
            if not candidate.consumed and candidate.name == name:
                return candidate
        return None

    def find_unconsumed_by_size(
        self,
        size: int,
        prefer_image_extension: bool = False,
    ) -> Candidate | None:
        """Find the first unconsumed candidate with exactly this size.

        Args:
            size: Byte size to match.
            prefer_image_extension: If True, candidates with an image
                extension win over earlier non-image candidates.

        Returns:
            Matching candidate or None.
        """
        if prefer_image_extension:
            for candidate in self._candidates:
                if not candidate.consumed and candidate.size == size and candidate.is_image:
                    return candidate

        for candidate in self._candidates:
            if not candidate.consumed and candidate.size == size:
                return candidate

        return None

    def mark_consumed(self, candidate: Candidate) -> None:
        """Mark a candidate as used.

        Raises:
            ValueError: If the candidate was already consumed.
        """
        if candidate.consumed:
            raise ValueError(f"Candidate already consumed: {candidate.name}")
        candidate.consumed = True

    def unconsumed(self) -> list[Candidate]:
        """Candidates not yet matched."""
        return [c for c in self._candidates if not c.consumed]

    def statistics(self) -> PoolStatistics:
        """Compute pool statistics."""
        by_extension: dict[str, int] = {}
        for candidate in self._candidates:
            ext = Path(candidate.name).suffix.lower() or "(none)"
            by_extension[ext] = by_extension.get(ext, 0) + 1

        return PoolStatistics(
            total_candidates=len(self._candidates),
            image_candidates=sum(1 for c in self._candidates if c.is_image),
            total_size=sum(c.size for c in self._candidates),
            consumed=sum(1 for c in self._candidates if c.consumed),
            by_extension=by_extension,
        )

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self) -> Iterator[Candidate]:
        return iter(self._candidates)
