"""Configuration management for meshtext.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments, keyword arguments or
defaults.

Key classes:
- MeshConfig: Per-call mesh settings (tolerance, mode, depth, indexed)
- FlattenConfig: Curve flattening limits
- ClassifierConfig: Contour nesting rule
- CacheConfig: Glyph cache settings
- FontConfig: Font layer settings
- LoggingConfig: Logging settings
- MeshTextSettings: Main application settings
"""

from meshtext.config.settings import (
    CacheConfig,
    ClassifierConfig,
    FlattenConfig,
    FontConfig,
    LoggingConfig,
    MeshConfig,
    MeshModeName,
    MeshTextSettings,
    NestingRule,
    get_default_settings,
    make_mesh_config,
)

__all__ = [
    "CacheConfig",
    "ClassifierConfig",
    "FlattenConfig",
    "FontConfig",
    "LoggingConfig",
    "MeshConfig",
    "MeshModeName",
    "MeshTextSettings",
    "NestingRule",
    "get_default_settings",
    "make_mesh_config",
]
