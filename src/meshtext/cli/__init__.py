"""Command-line interface for meshtext.

This module provides the CLI using Typer with rich output for
user-friendly feedback and progress reporting.

Key features:
- render: lay out text and export an OBJ mesh
- inspect: per-glyph contour, hole and triangle counts
- Verbose/quiet output modes
- Detailed error reporting
"""

from meshtext.cli.app import cli, main

__all__ = ["cli", "main"]
