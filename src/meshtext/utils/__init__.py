"""Utility functions for meshtext.

This module provides utility functions including:

- Logging setup and configuration
- Glyph build statistics
"""

from meshtext.utils.logging import (
    BuildLogger,
    BuildStats,
    configure_logging,
)

__all__ = [
    "BuildLogger",
    "BuildStats",
    "configure_logging",
]
