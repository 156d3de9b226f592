"""CLI application entry point for meshtext.

This module provides the main CLI interface using Typer.
"""

import time
from pathlib import Path
from typing import Annotated

import typer

from meshtext import __version__
from meshtext.cli.output import (
    SYM_DOT,
    console,
    create_progress,
    print_error,
    print_failures,
    print_font_info,
    print_glyph_table,
    print_header,
    print_step,
    print_success,
)
from meshtext.config import LoggingConfig, MeshConfig, MeshTextSettings, make_mesh_config
from meshtext.core import MeshGenerator, flatten
from meshtext.exceptions import ConfigurationError, FontLoadError, GlyphError, MeshTextError
from meshtext.io import FontReader, MeshWriter
from meshtext.utils import configure_logging

# Create the Typer app
app = typer.Typer(
    name="meshtext",
    help="Turn text set in a TrueType/OpenType font into triangle meshes.",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]meshtext[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    _version: Annotated[  # noqa: ARG001
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Turn text set in a TrueType/OpenType font into triangle meshes."""


def _load_reader(font_path: Path, normalize: bool = True) -> FontReader:
    """Validate the font path and load the font.

    Raises:
        typer.Exit: If the path is not a readable font file
    """
    if not font_path.exists():
        print_error(
            f"Input file not found: {font_path}",
            details=f"The file '{font_path}' does not exist or is not accessible.",
        )
        raise typer.Exit(code=1)

    if not font_path.is_file():
        print_error(
            f"Input path is not a file: {font_path}",
            details="Please provide a path to a TTF or OTF font file.",
        )
        raise typer.Exit(code=1)

    reader = FontReader(font_path, normalize=normalize)
    try:
        reader.load()
    except FontLoadError as e:
        print_error(f"Could not load font: {e.reason}")
        raise typer.Exit(code=1) from None
    return reader


def _make_config(
    tolerance: float, extrude: bool, depth: float, indexed: bool
) -> MeshConfig:
    """Build mesh settings from CLI options, exiting on invalid values."""
    try:
        return make_mesh_config(
            tolerance=tolerance,
            mode="extruded" if extrude else "flat",
            depth=depth if extrude else 0.0,
            indexed=indexed,
        )
    except ConfigurationError as e:
        print_error("Invalid mesh options", details=e.reason)
        raise typer.Exit(code=1) from None


@app.command()
def render(
    font: Annotated[
        Path,
        typer.Argument(
            help="Path to TTF/OTF font file",
            show_default=False,
        ),
    ],
    text: Annotated[
        str,
        typer.Argument(
            help="Text to render",
            show_default=False,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output path (default: {font name}-mesh.obj)",
        ),
    ] = None,
    extrude: Annotated[
        bool,
        typer.Option(
            "--extrude/--flat",
            help="Extrude glyphs into 3D solids instead of flat faces",
        ),
    ] = False,
    depth: Annotated[
        float,
        typer.Option(
            "--depth",
            "-d",
            help="Extrusion depth in font heights",
        ),
    ] = 0.1,
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Curve flattening tolerance in font heights",
        ),
    ] = 0.002,
    indexed: Annotated[
        bool,
        typer.Option(
            "--indexed/--no-indexed",
            help="Share vertices between triangles",
        ),
    ] = True,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Fail on the first glyph that cannot be built",
        ),
    ] = False,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            help="Write detailed logs to file",
        ),
    ] = None,
    log_level: Annotated[
        str,
        typer.Option(
            "--log-level",
            help="Logging level (DEBUG|INFO|WARNING|ERROR)",
        ),
    ] = "WARNING",
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbose console output",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Minimal console output",
        ),
    ] = False,
) -> None:
    """Lay out TEXT in FONT and write the mesh as a Wavefront OBJ file.

    Example:
        meshtext render FiraMono-Regular.ttf "Hello" --extrude --depth 0.2

    This will create FiraMono-Regular-mesh.obj with one extruded solid per
    glyph, placed along the baseline.
    """
    # Validate mutually exclusive options
    if verbose and quiet:
        print_error("Cannot use --verbose and --quiet together")
        raise typer.Exit(code=1)

    config = _make_config(tolerance, extrude, depth, indexed)
    settings = MeshTextSettings(
        mesh=config,
        logging=LoggingConfig(
            log_file=log_file,
            log_level=log_level if not quiet else "WARNING",
        ),
    )
    configure_logging(
        log_file=settings.logging.log_file,
        console_level=settings.logging.log_level,
        file_level=settings.logging.file_log_level,
        quiet=quiet,
    )

    if not quiet:
        print_header(__version__)
        print_step("Loading font")

    start_time = time.perf_counter()
    reader = _load_reader(font, normalize=settings.font.normalize)

    try:
        if not quiet:
            print_font_info(
                font_path=str(font),
                font_type=reader.format,
                glyph_count=reader.glyph_count,
                upm=reader.units_per_em,
            )

        generator = MeshGenerator(reader.face(), settings)

        # Build every distinct glyph first so progress is visible
        unique_chars = list(dict.fromkeys(text))
        if not quiet:
            print_step("Building glyphs")
            with create_progress() as progress:
                task_id = progress.add_task("Building", total=len(unique_chars))
                for char in unique_chars:
                    generator.precache_glyphs(char, config)
                    progress.advance(task_id)
        else:
            generator.precache_glyphs(text, config)

        if not quiet:
            print_step("Laying out")
        section = generator.generate_section(text, config, strict=strict)

        actual_output_path = output if output is not None else MeshWriter.get_output_path(font)
        MeshWriter(actual_output_path).save(section, name=font.stem)

    except OSError as e:
        print_error(f"Could not write mesh: {e}")
        raise typer.Exit(code=1) from None
    except MeshTextError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    finally:
        reader.close()

    if not quiet:
        print_success(
            output_path=str(actual_output_path),
            file_size=_format_file_size(actual_output_path),
            total_time_s=time.perf_counter() - start_time,
            characters=len(text),
            vertices=section.vertex_count,
            triangles=section.triangle_count,
            errors=len(section.failures),
        )
        if section.failures:
            print_failures([(f.char, str(f.error)) for f in section.failures])
        if verbose:
            stats = generator.stats
            console.print(
                f"  {stats.built_count} built {SYM_DOT} {stats.cache_hits} cache hits "
                f"{SYM_DOT} {stats.total_build_ms:.1f}ms building"
            )


@app.command()
def inspect(
    font: Annotated[
        Path,
        typer.Argument(
            help="Path to TTF/OTF font file",
            show_default=False,
        ),
    ],
    text: Annotated[
        str,
        typer.Argument(
            help="Characters to inspect",
            show_default=False,
        ),
    ],
    tolerance: Annotated[
        float,
        typer.Option(
            "--tolerance",
            "-t",
            help="Curve flattening tolerance in font heights",
        ),
    ] = 0.002,
) -> None:
    """Show contour, hole and triangle counts of the glyphs of TEXT.

    Example:
        meshtext inspect FiraMono-Regular.ttf "AB8"
    """
    config = _make_config(tolerance, extrude=False, depth=0.0, indexed=True)
    reader = _load_reader(font)

    try:
        print_font_info(
            font_path=str(font),
            font_type=reader.format,
            glyph_count=reader.glyph_count,
            upm=reader.units_per_em,
        )
        generator = MeshGenerator(reader.face(), MeshTextSettings(mesh=config))
        rows = [_inspect_char(generator, char, config) for char in dict.fromkeys(text)]
    finally:
        reader.close()

    console.print()
    print_glyph_table(rows)


def _inspect_char(generator: MeshGenerator, char: str, config: MeshConfig) -> dict[str, object]:
    """Collect the statistics of one character's glyph.

    Args:
        generator: Generator of the inspected font
        char: The character
        config: Mesh settings

    Returns:
        Row for print_glyph_table
    """
    glyph_id = generator.face.glyph_id(ord(char))
    row: dict[str, object] = {
        "char": char,
        "glyph_id": glyph_id,
        "contours": 0,
        "holes": 0,
        "triangles": 0,
        "advance": generator.face.advance_width(glyph_id),
        "error": None,
    }
    try:
        contours = flatten(
            generator.face.outline(glyph_id),
            config.tolerance,
            max_depth=generator.settings.flatten.max_subdivision_depth,
            area_epsilon=generator.settings.flatten.area_epsilon,
        )
        polygons = generator.classifier.classify(contours)
        row["contours"] = len(contours)
        row["holes"] = sum(len(polygon.holes) for polygon in polygons)
        row["triangles"] = generator.generate_glyph(char, config).triangle_count
    except GlyphError as e:
        row["error"] = e.reason
    return row


def _format_file_size(path: Path) -> str:
    """Format file size in human-readable form.

    Args:
        path: Path to file

    Returns:
        Human-readable file size (e.g., "428 KB")
    """
    try:
        size_bytes = path.stat().st_size
    except OSError:
        return "unknown"
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.0f} KB"
    else:
        return f"{size_bytes / (1024 * 1024):.1f} MB"


def cli() -> None:
    """Entry point for the CLI application."""
    app()


def main() -> None:
    """Entry point for the CLI application (alias for cli)."""
    cli()


if __name__ == "__main__":
    cli()
