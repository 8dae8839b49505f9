"""Configuration loading and validation."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from txt2tex.processor.classifier import SUPPRESS_PREFIXES
from txt2tex.processor.document import DocumentStyle
from txt2tex.processor.parser import NO_FILENAME_SENTINEL

DEFAULT_CONFIG_PATHS = ["txt2tex.yaml", "txt2tex.yml", "config.yaml"]


@dataclass
class AttachmentsConfig:
    """Candidate pool configuration."""

    directory: Path = Path("attachments")
    sort_order: str = "name"  # name (default), filesystem


@dataclass
class ParserConfig:
    """Attachment line parsing options."""

    no_filename_sentinels: list[str] = field(default_factory=lambda: [NO_FILENAME_SENTINEL])


@dataclass
class FiltersConfig:
    """Line filtering options."""

    suppress_prefixes: list[str] = field(default_factory=lambda: list(SUPPRESS_PREFIXES))
    redact_sender: bool = True


@dataclass
class LoggingConfig:
    """Logging options."""

    level: str = "INFO"
    file: Path | None = None


@dataclass
class ReportConfig:
    """Resolution manifest options."""

    manifest: Path | None = None


@dataclass
class Config:
    """Complete application configuration."""

    attachments: AttachmentsConfig = field(default_factory=AttachmentsConfig)
    parser: ParserConfig = field(default_factory=ParserConfig)
    filters: FiltersConfig = field(default_factory=FiltersConfig)
    document: DocumentStyle = field(default_factory=DocumentStyle)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    report: ReportConfig = field(default_factory=ReportConfig)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file.

    Args:
        config_path: Path to YAML config file. Defaults to txt2tex.yaml.

    Returns:
        Loaded Config object.
    """
    config = Config()

    # Try default paths if not specified
    if config_path is None:
        for default_path in DEFAULT_CONFIG_PATHS:
            if Path(default_path).exists():
                config_path = Path(default_path)
                break

    if config_path and config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
            config = _parse_config(data)

    return config


def _optional_path(value: Any) -> Path | None:
    return Path(value) if value else None


def _string_list(value: Any) -> list[str]:
    """Read a YAML list of strings, accepting a single string as one item."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value]


def _parse_config(data: dict[str, Any]) -> Config:
    """Parse configuration dictionary into Config object.

    Args:
        data: Raw configuration dictionary.

    Returns:
        Config object.
    """
    config = Config()

    # Attachments section
    if "attachments" in data:
        att_data = data["attachments"] or {}
        config.attachments = AttachmentsConfig(
            directory=Path(att_data.get("directory", "attachments")),
            sort_order=att_data.get("sort_order", "name"),
        )

    # Parser section
    if "parser" in data:
        parser_data = data["parser"] or {}
        config.parser = ParserConfig(
            no_filename_sentinels=_string_list(
                parser_data.get("no_filename_sentinels", [NO_FILENAME_SENTINEL])
            ),
        )

    # Filters section
    if "filters" in data:
        filter_data = data["filters"] or {}
        config.filters = FiltersConfig(
            suppress_prefixes=_string_list(filter_data.get("suppress_prefixes", SUPPRESS_PREFIXES)),
            redact_sender=filter_data.get("redact_sender", True),
        )

    # Document section
    if "document" in data:
        doc_data = data["document"] or {}
        defaults = DocumentStyle()
        config.document = DocumentStyle(
            paper=doc_data.get("paper", defaults.paper),
            font_size=str(doc_data.get("font_size", defaults.font_size)),
            margin=str(doc_data.get("margin", defaults.margin)),
            main_font=doc_data.get("main_font", defaults.main_font),
            emoji_font=doc_data.get("emoji_font", defaults.emoji_font),
        )

    # Logging section
    if "logging" in data:
        log_data = data["logging"] or {}
        config.logging = LoggingConfig(
            level=log_data.get("level", "INFO"),
            file=_optional_path(log_data.get("file")),
        )

    # Report section
    if "report" in data:
        report_data = data["report"] or {}
        config.report = ReportConfig(
            manifest=_optional_path(report_data.get("manifest")),
        )

    return config


def validate_config(config: Config) -> list[str]:
    """Validate configuration, return list of issues.

    Args:
        config: Configuration to validate.

    Returns:
        List of validation issue messages.
    """
    issues = []

    valid_sort_orders = {"name", "filesystem"}
    if config.attachments.sort_order not in valid_sort_orders:
        issues.append(f"Invalid sort_order value: {config.attachments.sort_order}")

    if not config.parser.no_filename_sentinels:
        issues.append("no_filename_sentinels is empty; unnamed attachments will match by name")

    if any(not prefix for prefix in config.filters.suppress_prefixes):
        issues.append("suppress_prefixes contains an empty prefix; every line would be dropped")

    valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if config.logging.level.upper() not in valid_levels:
        issues.append(f"Invalid logging level: {config.logging.level}")

    if config.document.font_size not in {"10pt", "11pt", "12pt"}:
        issues.append(f"Unsupported article font size: {config.document.font_size}")

    return issues


def create_default_config(path: Path) -> None:
    """Create default configuration file.

    Args:
        path: Path to write config file.
    """
    default_config = """# txt2tex Configuration

attachments:
  directory: "attachments"
  # Order in which candidates are scanned when several files share a size:
  #   name       - lexicographic file name order (default, reproducible)
  #   filesystem - directory enumeration order (platform dependent)
  sort_order: "name"

parser:
  # Name text an export writes when an attachment has no filename
  no_filename_sentinels:
    - "no filename"

filters:
  suppress_prefixes:
    - "Type:"
    - "Received:"
  redact_sender: true

document:
  paper: "a4paper"
  font_size: "11pt"
  margin: "25mm"
  main_font: "Latin Modern Roman"
  # Windows: "Segoe UI Emoji", Linux: "Noto Color Emoji"
  emoji_font: "Segoe UI Emoji"

logging:
  level: "INFO"
  # file: "./logs/txt2tex.log"

report:
  # manifest: "./logs/resolutions.json"
"""
    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)
