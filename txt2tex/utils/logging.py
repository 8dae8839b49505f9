"""Logging configuration and utilities."""

import logging
import sys
from pathlib import Path

# Create module logger
logger = logging.getLogger("txt2tex")

CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s line %(line_number)s: %(message)s"


def printable(text: str) -> str:
    """Replace bytes that were not valid UTF-8 with U+FFFD for display."""
    return text.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")


class InputLineFilter(logging.Filter):
    """Give every record a line_number attribute.

    Records about a specific input line pass it with
    ``extra={"line_number": n}``; all others show "-".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "line_number"):
            record.line_number = "-"
        return True


class ConsoleFormatter(logging.Formatter):
    """Formatter whose output can be written to a strict UTF-8 terminal."""

    def format(self, record: logging.LogRecord) -> str:
        return printable(super().format(record))


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    verbose: bool = False,
) -> None:
    """Configure application logging.

    The console shows plain messages at the requested level. The log
    file, when given, records everything at DEBUG with the input line
    number each message refers to.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_file: Optional path to log file.
        verbose: If True, log every resolution to the console.
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(logging.DEBUG if log_file else log_level)

    logger.handlers.clear()
    logger.filters.clear()
    logger.addFilter(InputLineFilter())

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    if verbose:
        console_handler.setFormatter(ConsoleFormatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
    else:
        console_handler.setFormatter(ConsoleFormatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        # Undecodable input bytes are logged as \x escapes
        file_handler = logging.FileHandler(log_file, encoding="utf-8", errors="backslashreplace")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
