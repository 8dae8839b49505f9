"""Classification of export lines."""

from dataclasses import dataclass
from enum import Enum

from txt2tex.processor.parser import ASCII_WHITESPACE, ATTACHMENT_PREFIX

SUPPRESS_PREFIXES = ("Type:", "Received:")
SENDER_PREFIX = "From:"


class LineKind(Enum):
    """What an input line turns into."""

    SUPPRESS = "suppress"
    SENDER = "sender"
    ATTACHMENT = "attachment"
    BLANK = "blank"
    TEXT = "text"


@dataclass
class ClassifiedLine:
    """A trimmed input line and its kind."""

    kind: LineKind
    text: str


def trim_line(line: str) -> str:
    """Remove the line terminator and trailing ASCII whitespace."""
    return line.rstrip(ASCII_WHITESPACE)


def starts_with_ignore_case(line: str, prefix: str) -> bool:
    """Case-insensitive (ASCII) prefix check."""
    return line[: len(prefix)].lower() == prefix.lower()


def redact_sender(line: str) -> str:
    """Drop the parenthesised part of a sender line.

    "From: Jane Doe (+15551234567)" becomes "From: Jane Doe".
    """
    colon = line.find(":")
    if colon < 0:
        return line

    open_paren = line.find("(", colon)
    if open_paren < 0:
        return line

    return trim_line(line[:open_paren])


class LineClassifier:
    """Decides how each line of an export is rendered.

    Suppression and sender checks run before the attachment, blank and
    text checks. The first matching rule wins.
    """

    def __init__(
        self,
        suppress_prefixes: tuple[str, ...] = SUPPRESS_PREFIXES,
        redact_senders: bool = True,
    ) -> None:
        """Initialize classifier.

        Args:
            suppress_prefixes: Metadata prefixes whose lines are dropped.
            redact_senders: If True, strip parenthesised data from sender lines.
        """
        self.suppress_prefixes = tuple(suppress_prefixes)
        self.redact_senders = redact_senders

    def classify(self, line: str) -> ClassifiedLine:
        """Classify one raw input line.

        Args:
            line: Line as read, terminator included or not.

        Returns:
            ClassifiedLine with the text to render.
        """
        line = trim_line(line)

        if any(starts_with_ignore_case(line, p) for p in self.suppress_prefixes):
            return ClassifiedLine(LineKind.SUPPRESS, line)

        if self.redact_senders and starts_with_ignore_case(line, SENDER_PREFIX):
            return ClassifiedLine(LineKind.SENDER, redact_sender(line))

        if line.startswith(ATTACHMENT_PREFIX):
            return ClassifiedLine(LineKind.ATTACHMENT, line)

        if not line:
            return ClassifiedLine(LineKind.BLANK, line)

        return ClassifiedLine(LineKind.TEXT, line)
