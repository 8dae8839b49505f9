"""CLI commands using Typer."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from txt2tex.cli.config import Config, create_default_config, load_config, validate_config
from txt2tex.cli.output import RichOutput

app = typer.Typer(
    name="txt2tex",
    help="Convert Signal text exports into LaTeX documents, embedding exported attachments.",
    add_completion=False,
)
console = Console()
output = RichOutput(console)


def get_config(config_path: Optional[Path]) -> Config:
    """Load and validate configuration.

    Args:
        config_path: Optional path to config file.

    Returns:
        Config object. Validation issues are printed as warnings.
    """
    config = load_config(config_path)
    issues = validate_config(config)

    if issues:
        for issue in issues:
            output.print_warning(issue)

    return config


@app.command()
def convert(
    input_path: Path = typer.Argument(
        ...,
        help="Exported conversation text file",
    ),
    attachments: Optional[Path] = typer.Option(
        None,
        "--attachments",
        "-a",
        help="Directory holding the exported attachments (default: ./attachments)",
    ),
    output_path: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output .tex path (default: input path with .tex extension)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to config file",
    ),
    manifest_path: Optional[Path] = typer.Option(
        None,
        "--manifest",
        "-m",
        help="Record how each attachment line was resolved in this JSON file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every resolution",
    ),
) -> None:
    """Convert an exported conversation into a LaTeX document.

    Attachment lines are matched against the files in the attachments
    directory by name, then by size. Compile the result with lualatex.
    """
    from txt2tex.processor.classifier import LineClassifier
    from txt2tex.processor.converter import Converter
    from txt2tex.processor.errors import ConversionError
    from txt2tex.processor.parser import ReferenceParser
    from txt2tex.processor.pool import CandidatePool
    from txt2tex.utils.logging import setup_logging
    from txt2tex.utils.manifest import ResolutionManifest

    config = get_config(config_path)
    setup_logging(config.logging.level, config.logging.file, verbose=verbose)

    attachments_dir = attachments or config.attachments.directory
    manifest_path = manifest_path or config.report.manifest

    manifest = None
    try:
        pool = CandidatePool.from_directory(
            attachments_dir,
            sort_by_name=config.attachments.sort_order != "filesystem",
        )
        output.console.print(
            f"Loaded [cyan]{len(pool)}[/cyan] attachment files from {attachments_dir}"
        )

        if manifest_path:
            manifest = ResolutionManifest(manifest_path)

        converter = Converter(
            pool,
            parser=ReferenceParser(tuple(config.parser.no_filename_sentinels)),
            classifier=LineClassifier(
                tuple(config.filters.suppress_prefixes),
                redact_senders=config.filters.redact_sender,
            ),
            style=config.document,
            manifest=manifest,
        )

        with output.create_progress_bar() as progress:
            task = progress.add_task("Converting...", total=None)

            def progress_callback(current: int, total: int) -> None:
                progress.update(task, completed=current, total=total)

            result = converter.convert_file(
                input_path, output_path, progress_callback=progress_callback
            )

    except ConversionError as e:
        output.print_error(str(e))
        raise typer.Exit(1)
    finally:
        if manifest is not None:
            manifest.close()

    output.console.print()
    output.print_conversion_result(result)
    output.print_success(f"Wrote {result.output_path}")


@app.command()
def scan(
    attachments: Optional[Path] = typer.Option(
        None,
        "--attachments",
        "-a",
        help="Directory holding the exported attachments (default: ./attachments)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        help="Path to config file",
    ),
    limit: int = typer.Option(
        50,
        "--limit",
        "-l",
        help="Maximum files to list",
    ),
) -> None:
    """List the attachment files available for matching."""
    from txt2tex.processor.errors import DirectoryUnavailable
    from txt2tex.processor.pool import CandidatePool

    config = get_config(config_path)
    attachments_dir = attachments or config.attachments.directory

    try:
        pool = CandidatePool.from_directory(
            attachments_dir,
            sort_by_name=config.attachments.sort_order != "filesystem",
        )
    except DirectoryUnavailable as e:
        output.print_error(str(e))
        raise typer.Exit(1)

    if not len(pool):
        output.console.print(f"[yellow]No files found in {attachments_dir}.[/yellow]")
        raise typer.Exit(0)

    output.print_pool_statistics(pool.statistics())
    output.console.print()
    output.print_pool(list(pool), limit=limit)


@app.command()
def report(
    manifest_path: Path = typer.Argument(
        ...,
        help="Manifest written by 'convert --manifest'",
    ),
    export: Optional[Path] = typer.Option(
        None,
        "--export",
        help="Export the manifest to this file",
    ),
    format: str = typer.Option(
        "json",
        "--format",
        "-f",
        help="Export format: json or csv",
    ),
    unmatched_only: bool = typer.Option(
        False,
        "--unmatched",
        "-u",
        help="Show only attachment lines that matched no file",
    ),
) -> None:
    """Show how attachment lines were resolved in the last conversion."""
    from txt2tex.utils.manifest import ResolutionManifest

    if not manifest_path.exists():
        output.print_error(f"No manifest found at {manifest_path}")
        raise typer.Exit(1)

    with ResolutionManifest(manifest_path) as manifest:
        entries = manifest.get_unmatched() if unmatched_only else manifest.all_entries()
        output.print_manifest(entries, manifest.get_summary())

        if export:
            try:
                manifest.export_manifest(export, format)
            except (ValueError, OSError) as e:
                output.print_error(str(e))
                raise typer.Exit(1)
            output.print_success(f"Manifest exported to {export}")


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(
        Path("txt2tex.yaml"),
        help="Where to write the configuration file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file",
    ),
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        output.print_error(f"{path} already exists", "Use --force to overwrite it.")
        raise typer.Exit(1)

    create_default_config(path)
    output.print_success(f"Configuration written to {path}")


if __name__ == "__main__":
    app()
