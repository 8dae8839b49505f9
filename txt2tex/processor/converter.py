"""Conversion of a chat export into a LaTeX document."""

import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TYPE_CHECKING, Callable, TextIO

from txt2tex.models.attachment import ConversionResult, ResolutionResult
from txt2tex.processor.classifier import LineClassifier, LineKind
from txt2tex.processor.document import DocumentStyle, LatexDocument
from txt2tex.processor.errors import InputUnavailable, OutputUnavailable
from txt2tex.processor.parser import ReferenceParser
from txt2tex.processor.pool import CandidatePool
from txt2tex.processor.resolver import AttachmentResolver, is_image_mime_type
from txt2tex.utils.logging import logger

if TYPE_CHECKING:
    from txt2tex.utils.manifest import ResolutionManifest

OUTPUT_SUFFIX = ".tex"


def output_path_for(input_path: Path) -> Path:
    """Derive the output path from the input path.

    "messages.txt" becomes "messages.tex" and "chat." becomes "chat.tex";
    a name without a suffix gets ".tex" appended.
    """
    input_path = Path(input_path)
    if input_path.suffix:
        return input_path.with_suffix(OUTPUT_SUFFIX)
    name = input_path.name
    if len(name) > 1 and name.endswith("."):
        name = name[:-1]
    return input_path.with_name(name + OUTPUT_SUFFIX)


def decode_lines(raw_lines: Iterable[bytes]) -> Iterator[str]:
    """Decode raw lines, keeping invalid UTF-8 bytes as surrogates."""
    for raw in raw_lines:
        yield raw.decode("utf-8", errors="surrogateescape")


class Converter:
    """Converts an exported conversation to LaTeX.

    Orchestrates the per-line workflow: classify -> parse -> resolve -> emit.
    The candidate pool is shared across the whole run.
    """

    def __init__(
        self,
        pool: CandidatePool,
        parser: ReferenceParser | None = None,
        classifier: LineClassifier | None = None,
        style: DocumentStyle | None = None,
        manifest: "ResolutionManifest | None" = None,
    ) -> None:
        """Initialize converter.

        Args:
            pool: Populated candidate pool.
            parser: Attachment line parser.
            classifier: Line classifier.
            style: Document preamble settings.
            manifest: Optional manifest recording each resolution.
        """
        self.pool = pool
        self.parser = parser or ReferenceParser()
        self.classifier = classifier or LineClassifier()
        self.style = style or DocumentStyle()
        self.manifest = manifest
        self.resolver = AttachmentResolver(pool)

    def convert_file(
        self,
        input_path: Path,
        output_path: Path | None = None,
        progress_callback: Callable[[int, int], None] | None = None,
    ) -> ConversionResult:
        """Convert an export file and write the document.

        Args:
            input_path: Exported conversation text.
            output_path: Destination; derived from input_path if omitted.
            progress_callback: Optional callback(bytes_read, total_bytes).

        Returns:
            ConversionResult with run statistics.

        Raises:
            InputUnavailable: If the input cannot be read.
            OutputUnavailable: If the output cannot be written.
        """
        input_path = Path(input_path)
        output_path = Path(output_path) if output_path else output_path_for(input_path)

        if output_path.resolve() == input_path.resolve():
            raise OutputUnavailable(output_path, "output would overwrite the input")

        try:
            total_bytes = input_path.stat().st_size
            infile = open(input_path, "rb")
        except OSError as e:
            raise InputUnavailable(input_path, e.strerror or str(e)) from e

        with infile:
            try:
                outfile = open(
                    output_path, "w", encoding="utf-8", errors="surrogateescape", newline=""
                )
            except OSError as e:
                raise OutputUnavailable(output_path, e.strerror or str(e)) from e

            with outfile:
                lines = self._track_progress(infile, total_bytes, progress_callback)
                try:
                    result = self.convert(decode_lines(lines), outfile, output_path)
                except OSError as e:
                    raise OutputUnavailable(output_path, e.strerror or str(e)) from e

        logger.info(f"Wrote {output_path}")
        return result

    def convert(
        self,
        lines: Iterable[str],
        stream: TextIO,
        output_path: Path = Path("-"),
    ) -> ConversionResult:
        """Convert lines of an export into a LaTeX document.

        Args:
            lines: Input lines, with or without terminators.
            stream: Text stream to write the document to.
            output_path: Path reported in the result.

        Returns:
            ConversionResult with run statistics.
        """
        start_time = time.time()
        result = ConversionResult(output_path=output_path)
        document = LatexDocument(stream, self.style)

        if self.manifest is not None:
            self.manifest.reset()

        document.begin()

        for line_number, raw_line in enumerate(lines, start=1):
            result.lines_read += 1
            classified = self.classifier.classify(raw_line)

            if classified.kind is LineKind.SUPPRESS:
                result.lines_suppressed += 1
                continue

            if classified.kind is LineKind.SENDER:
                result.senders_redacted += 1
                document.write_text(classified.text)
            elif classified.kind is LineKind.ATTACHMENT:
                resolution = self._resolve_line(classified.text, line_number)
                self._write_resolution(document, resolution, result)
            elif classified.kind is LineKind.BLANK:
                document.write_paragraph_break()
            else:
                document.write_text(classified.text)

        document.end()

        result.duration_seconds = time.time() - start_time
        logger.info(
            f"Converted {result.lines_read} lines: "
            f"{result.attachments_matched}/{result.attachments_total} attachments matched, "
            f"{result.lines_suppressed} metadata lines suppressed"
        )
        return result

    def _resolve_line(self, line: str, line_number: int) -> ResolutionResult:
        """Parse and resolve one attachment line.

        Args:
            line: Attachment line.
            line_number: 1-based line number, for logging.

        Returns:
            ResolutionResult for the line.
        """
        reference = self.parser.parse(line)
        resolution = self.resolver.resolve(reference)

        if not resolution.matched:
            if reference.is_resolvable:
                logger.warning(
                    f"Line {line_number}: no attachment found for {reference}",
                    extra={"line_number": line_number},
                )
            else:
                logger.warning(
                    f"Line {line_number}: unparseable attachment line: {line}",
                    extra={"line_number": line_number},
                )

        if self.manifest is not None:
            self.manifest.record(line_number, resolution)

        return resolution

    def _write_resolution(
        self,
        document: LatexDocument,
        resolution: ResolutionResult,
        result: ConversionResult,
    ) -> None:
        """Emit the fragment for a resolved or unmatched attachment."""
        result.resolutions.append(resolution)
        candidate = resolution.candidate

        if candidate is None:
            result.attachments_unmatched += 1
            document.write_unmatched(resolution.reference.line)
            return

        result.attachments_matched += 1
        if is_image_mime_type(resolution.reference.mime_type) or candidate.is_image:
            result.images_embedded += 1
            document.write_image(candidate.relative_path)
        else:
            document.write_attachment(candidate.relative_path)

    @staticmethod
    def _track_progress(
        lines: Iterable[bytes],
        total_bytes: int,
        progress_callback: Callable[[int, int], None] | None,
    ) -> Iterator[bytes]:
        """Yield raw lines, reporting bytes consumed so far."""
        bytes_read = 0
        for raw in lines:
            bytes_read += len(raw)
            if progress_callback:
                progress_callback(bytes_read, total_bytes)
            yield raw
