"""Fatal conversion errors."""

from pathlib import Path


class ConversionError(Exception):
    """Base class for errors that abort a conversion run."""

    action = "could not process"

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{self.action} '{path}': {reason}")


class DirectoryUnavailable(ConversionError):
    """Attachments directory cannot be opened or listed."""

    action = "could not open attachments directory"


class InputUnavailable(ConversionError):
    """Input export file cannot be read."""

    action = "could not open"


class OutputUnavailable(ConversionError):
    """Output document cannot be created or written."""

    action = "could not open for writing"
