"""Resolution of attachment references to candidate files."""

from txt2tex.models.attachment import AttachmentReference, ResolutionResult
from txt2tex.processor.pool import CandidatePool
from txt2tex.utils.logging import logger

IMAGE_MIME_PREFIX = "image/"


def is_image_mime_type(mime_type: str | None) -> bool:
    """Check if a MIME type names an image (case-sensitive)."""
    return mime_type is not None and mime_type.startswith(IMAGE_MIME_PREFIX)


class AttachmentResolver:
    """Matches attachment references against a shared candidate pool.

    The declared filename is tried first. When it is missing or no unused
    file carries it, the declared byte size is used, preferring files with
    an image extension when the reference has an image MIME type. Each
    matched candidate is consumed and never matched again.
    """

    def __init__(self, pool: CandidatePool) -> None:
        """Initialize resolver.

        Args:
            pool: Candidate pool, mutated as references are matched.
        """
        self.pool = pool

    def resolve(self, reference: AttachmentReference) -> ResolutionResult:
        """Select at most one unconsumed candidate for a reference.

        Args:
            reference: Parsed attachment reference.

        Returns:
            ResolutionResult, unmatched if no candidate fits.
        """
        if reference.declared_name is not None:
            candidate = self.pool.find_unconsumed_by_name(reference.declared_name)
            if candidate is not None:
                self.pool.mark_consumed(candidate)
                logger.debug(f"Matched {reference.declared_name} by name")
                return ResolutionResult(reference, candidate, "name")

        if reference.declared_size is not None:
            prefer_image = is_image_mime_type(reference.mime_type)
            candidate = self.pool.find_unconsumed_by_size(
                reference.declared_size, prefer_image_extension=prefer_image
            )
            if candidate is not None:
                self.pool.mark_consumed(candidate)
                method = "size-image" if prefer_image and candidate.is_image else "size"
                logger.debug(f"Matched {reference} -> {candidate.name} by {method}")
                return ResolutionResult(reference, candidate, method)

        return ResolutionResult(reference)
