"""Rich console output formatting."""

from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from txt2tex.models.attachment import (
    Candidate,
    ConversionResult,
    ManifestEntry,
    PoolStatistics,
    format_size,
)
from txt2tex.utils.logging import printable


def _markup(text: str) -> str:
    return escape(printable(text))


class RichOutput:
    """Rich console output formatting."""

    def __init__(self, console: Console | None = None) -> None:
        """Initialize with Rich console.

        Args:
            console: Rich Console instance.
        """
        self.console = console or Console()

    def print_pool(
        self,
        candidates: list[Candidate],
        limit: int = 50,
    ) -> None:
        """Display candidate pool as formatted table.

        Args:
            candidates: Candidates to display.
            limit: Maximum rows to show.
        """
        table = Table(title="Attachment Candidates")

        table.add_column("#", justify="right", style="dim")
        table.add_column("Name", style="cyan", max_width=60)
        table.add_column("Size", justify="right", style="yellow")
        table.add_column("Bytes", justify="right")
        table.add_column("Image", justify="center", style="green")

        for index, candidate in enumerate(candidates[:limit], start=1):
            table.add_row(
                str(index),
                _markup(candidate.name),
                candidate.size_human,
                str(candidate.size),
                "yes" if candidate.is_image else "",
            )

        self.console.print(table)

        if len(candidates) > limit:
            self.console.print(
                f"\n[dim]... and {len(candidates) - limit} more files[/dim]"
            )

    def print_pool_statistics(self, stats: PoolStatistics) -> None:
        """Display pool statistics.

        Args:
            stats: Pool statistics.
        """
        panel_content = f"""
[bold]Files:[/bold] {stats.total_candidates}
[bold]Images:[/bold] {stats.image_candidates}
[bold]Total Size:[/bold] {stats.total_size_human}
"""
        self.console.print(Panel(panel_content, title="Attachment Pool"))

        if stats.by_extension:
            self.console.print("\n[bold]Files by Extension:[/bold]")
            sorted_exts = sorted(stats.by_extension.items(), key=lambda x: -x[1])[:10]
            for ext, count in sorted_exts:
                self.console.print(f"  {ext}: {count}")

    def print_conversion_result(self, result: ConversionResult) -> None:
        """Display conversion summary.

        Args:
            result: Conversion result.
        """
        status_color = "green" if result.attachments_unmatched == 0 else "yellow"

        panel_content = f"""
[bold]Output:[/bold] {_markup(str(result.output_path))}
[bold]Lines Read:[/bold] {result.lines_read}
[bold]Metadata Suppressed:[/bold] {result.lines_suppressed}
[bold]Senders Redacted:[/bold] {result.senders_redacted}

[bold]Attachments Matched:[/bold] [{status_color}]{result.attachments_matched}/{result.attachments_total}[/{status_color}]
[bold]Images Embedded:[/bold] {result.images_embedded}
[bold]Unmatched:[/bold] [red]{result.attachments_unmatched}[/red]
[bold]Duration:[/bold] {result.duration_seconds:.2f} seconds
"""
        self.console.print(Panel(panel_content, title="Conversion Complete"))

        if result.unmatched:
            self.console.print("\n[bold yellow]Unmatched attachments:[/bold yellow]")
            for resolution in result.unmatched[:10]:
                self.console.print(f"  - {_markup(str(resolution.reference))}")

    def print_manifest(self, entries: list[ManifestEntry], summary: dict[str, Any]) -> None:
        """Display resolutions recorded in a manifest.

        Args:
            entries: Manifest entries in line order.
            summary: Summary from ResolutionManifest.get_summary().
        """
        table = Table(title="Attachment Resolutions", show_lines=False)

        table.add_column("Line", justify="right", style="dim")
        table.add_column("Declared", max_width=40)
        table.add_column("Size", justify="right", style="yellow")
        table.add_column("Matched File", style="cyan", max_width=50)
        table.add_column("Method", style="magenta")

        for entry in entries:
            declared = _markup(entry.declared_name) if entry.declared_name else "[dim]no filename[/dim]"
            size = "" if entry.declared_size is None else format_size(entry.declared_size)
            matched = _markup(entry.matched_file) if entry.matched_file else "[red]unmatched[/red]"
            table.add_row(
                str(entry.line_number),
                declared,
                size,
                matched,
                entry.method or "",
            )

        self.console.print(table)

        by_status = summary.get("by_status", {})
        self.console.print(
            f"\n[bold]Total:[/bold] {summary.get('total', 0)}  "
            f"[green]matched {by_status.get('matched', 0)}[/green]  "
            f"[red]unmatched {by_status.get('unmatched', 0)}[/red]"
        )
        for method, count in sorted(summary.get("by_method", {}).items()):
            self.console.print(f"  by {method}: {count}")

    def print_error(self, message: str, details: str | None = None) -> None:
        """Display error message.

        Args:
            message: Error message.
            details: Optional additional details.
        """
        self.console.print(f"[bold red]Error:[/bold red] {_markup(message)}")
        if details:
            self.console.print(f"[dim]{_markup(details)}[/dim]")

    def print_success(self, message: str) -> None:
        """Display success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[bold green]Success:[/bold green] {_markup(message)}")

    def print_warning(self, message: str) -> None:
        """Display warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[bold yellow]Warning:[/bold yellow] {_markup(message)}")

    def create_progress_bar(self) -> Progress:
        """Create a Rich progress bar.

        Returns:
            Progress instance.
        """
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
        )
