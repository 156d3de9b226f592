"""Rich console output helpers for the CLI.

This module provides user-friendly console output using Rich library
with progress bars, tables, and formatted messages.
"""

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.table import Table
from rich.text import Text

console = Console()

# Unicode symbols for consistent visual language
SYM_STEP = "▸"  # Step indicator
SYM_OK = "✓"  # Success
SYM_ERR = "✗"  # Error
SYM_DOT = "·"  # Separator/secondary info


def create_progress() -> Progress:
    """Create a rich progress bar for glyph building.

    Returns:
        Configured Progress instance with bar and time elapsed.
    """
    return Progress(
        TextColumn("  "),
        BarColumn(bar_width=40, complete_style="green", finished_style="green"),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=False,
    )


def print_header(version: str) -> None:
    """Print application header.

    Args:
        version: Application version string
    """
    console.print(f"\n[bold]meshtext[/bold] v{version}")
    console.print("─" * 44)


def print_step(message: str) -> None:
    """Print a processing step indicator.

    Args:
        message: Step description message
    """
    console.print(f"\n{SYM_STEP} {message}")


def print_font_info(font_path: str, font_type: str, glyph_count: int, upm: int) -> None:
    """Print font information.

    Args:
        font_path: Path to the font file
        font_type: Font format type (e.g., "TrueType", "OpenType")
        glyph_count: Total number of glyphs in font
        upm: Units per em value
    """
    # Use Text to safely handle paths with special characters
    line1 = Text("  ")
    line1.append(font_path)
    line1.append(f" ({font_type})")
    console.print(line1)
    console.print(f"  {glyph_count:,} glyphs {SYM_DOT} {upm:,} UPM")


def _format_time(seconds: float) -> str:
    """Format seconds into human-readable time string."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.1f}s"


def print_success(
    output_path: str,
    file_size: str,
    total_time_s: float,
    characters: int,
    vertices: int,
    triangles: int,
    errors: int,
) -> None:
    """Print success message with summary.

    Args:
        output_path: Path to output file
        file_size: Human-readable file size string
        total_time_s: Total processing time in seconds
        characters: Number of characters laid out
        vertices: Number of vertices written
        triangles: Number of triangles written
        errors: Number of characters whose glyph failed
    """
    time_str = _format_time(total_time_s)

    console.print(f"\n[bold green]{SYM_OK} Complete[/bold green] in {time_str}")

    line = Text("  ")
    line.append(output_path, style="bold")
    line.append(f" ({file_size})")
    console.print(line)

    error_style = "red" if errors > 0 else "green"
    console.print(
        f"  {characters} characters {SYM_DOT} {vertices:,} vertices {SYM_DOT} "
        f"{triangles:,} triangles {SYM_DOT} [{error_style}]{errors} errors[/{error_style}]"
    )


def print_failures(failures: list[tuple[str, str]]) -> None:
    """Print the characters whose glyph could not be built.

    Args:
        failures: (character, reason) pairs
    """
    for char, reason in failures:
        console.print(f"  [red]{SYM_ERR}[/red] {char!r}: {reason}")


def print_glyph_table(rows: list[dict[str, object]]) -> None:
    """Print per-character glyph statistics.

    Args:
        rows: One dict per character with the keys char, glyph_id, contours,
            holes, triangles, advance and error
    """
    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
    table.add_column("Char")
    table.add_column("Glyph", justify="right")
    table.add_column("Contours", justify="right")
    table.add_column("Holes", justify="right")
    table.add_column("Triangles", justify="right")
    table.add_column("Advance", justify="right")
    table.add_column("Status")

    for row in rows:
        error = row.get("error")
        status = f"[red]{SYM_ERR} {error}[/red]" if error else f"[green]{SYM_OK}[/green]"
        table.add_row(
            repr(row["char"]),
            str(row["glyph_id"]),
            str(row["contours"]),
            str(row["holes"]),
            str(row["triangles"]),
            f"{row['advance']:.4g}",
            status,
        )

    console.print(table)


def print_error(message: str, details: str | None = None) -> None:
    """Print error message.

    Args:
        message: Main error message
        details: Optional detailed error information
    """
    console.print(f"\n[bold red]{SYM_ERR} Error:[/bold red] {message}")
    if details:
        console.print(f"  {details}")
