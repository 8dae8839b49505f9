"""Conversion pipeline: candidate pool, parsing, resolution, and emission."""

from txt2tex.processor.classifier import LineClassifier, LineKind
from txt2tex.processor.converter import Converter, output_path_for
from txt2tex.processor.document import DocumentStyle, LatexDocument
from txt2tex.processor.errors import (
    ConversionError,
    DirectoryUnavailable,
    InputUnavailable,
    OutputUnavailable,
)
from txt2tex.processor.escaping import escape_latex
from txt2tex.processor.parser import ReferenceParser
from txt2tex.processor.pool import CandidatePool
from txt2tex.processor.resolver import AttachmentResolver

__all__ = [
    "CandidatePool",
    "ReferenceParser",
    "AttachmentResolver",
    "LineClassifier",
    "LineKind",
    "LatexDocument",
    "DocumentStyle",
    "Converter",
    "output_path_for",
    "escape_latex",
    "ConversionError",
    "DirectoryUnavailable",
    "InputUnavailable",
    "OutputUnavailable",
]
