"""Parsing of attachment reference lines.

Signal exports record each attachment on its own line::

    Attachment: myImage.png (image/png, 311164 bytes)
    Attachment: no filename (image/jpeg, 439593 bytes)

Lines are untrusted export text, so parsing never fails: fields that
cannot be read are left as None.
"""

import re

from txt2tex.models.attachment import AttachmentReference

ATTACHMENT_PREFIX = "Attachment:"

# Wording Signal uses when an attachment was exported without a name
NO_FILENAME_SENTINEL = "no filename"

# Best-effort bounds on field length; longer values are truncated
MAX_FIELD_LENGTH = 4095
MAX_MIME_LENGTH = 127

# Trailing whitespace as the export tool writes it (ASCII only)
ASCII_WHITESPACE = " \t\n\r\x0b\x0c"

LEADING_INTEGER = re.compile(r"[+-]?[0-9]+")


class ReferenceParser:
    """Extracts name, MIME type and size from attachment lines."""

    def __init__(self, sentinels: tuple[str, ...] = (NO_FILENAME_SENTINEL,)) -> None:
        """Initialize parser.

        Args:
            sentinels: Name texts meaning "no filename was recorded".
        """
        self.sentinels = tuple(sentinels)

    @staticmethod
    def is_attachment_line(line: str) -> bool:
        """Check if a line starts with the attachment marker."""
        return line.startswith(ATTACHMENT_PREFIX)

    def parse(self, line: str) -> AttachmentReference | None:
        """Parse an attachment reference line.

        Args:
            line: Input line with trailing whitespace removed.

        Returns:
            Parsed reference, or None if the line is not an attachment line.
        """
        if not self.is_attachment_line(line):
            return None

        reference = AttachmentReference(line=line)
        body = line[len(ATTACHMENT_PREFIX) :].lstrip(ASCII_WHITESPACE)

        open_paren = body.find("(")
        if open_paren < 0:
            return reference

        name_part = body[:open_paren][:MAX_FIELD_LENGTH].rstrip(ASCII_WHITESPACE)
        if name_part and name_part not in self.sentinels:
            reference.declared_name = name_part

        close_paren = body.find(")", open_paren + 1)
        if close_paren < 0:
            return reference

        inner = body[open_paren + 1 : close_paren][:MAX_FIELD_LENGTH]
        mime, comma, rest = inner.partition(",")
        if not comma:
            return reference

        reference.mime_type = mime.strip(ASCII_WHITESPACE)[:MAX_MIME_LENGTH]
        reference.declared_size = self._parse_size(rest)

        return reference

    @staticmethod
    def _parse_size(text: str) -> int | None:
        """Read the leading integer of "<bytes> bytes".

        Negative values are treated as absent.
        """
        match = LEADING_INTEGER.match(text.strip(ASCII_WHITESPACE))
        if not match:
            return None

        value = int(match.group())
        return value if value >= 0 else None
