"""Configuration settings for meshtext."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from meshtext.domain import Extruded3D, Flat2D, MeshMode
from meshtext.exceptions import ConfigurationError


class MeshModeName(str, Enum):
    """Mesh mode as spelled in configuration."""

    FLAT = "flat"
    EXTRUDED = "extruded"


class NestingRule(str, Enum):
    """How contours nested inside a contour of the same winding are treated.

    WINDING: a same-sign fill contour is a separate island polygon; a
        same-sign hole inside a hole is an error.
    EVEN_ODD: winding is ignored, nesting depth parity decides (even depth
        is a fill contour, odd depth is a hole).
    STRICT: any same-sign nesting is an error.
    """

    WINDING = "winding"
    EVEN_ODD = "even_odd"
    STRICT = "strict"


class MeshConfig(BaseModel):
    """Per-call mesh settings (the options a text section is built with)."""

    model_config = ConfigDict(frozen=True)

    tolerance: float = Field(
        default=0.002,
        gt=0.0,
        description="Maximum deviation between a curve and its flattened polyline",
    )
    mode: MeshModeName = Field(
        default=MeshModeName.FLAT,
        description="Flat glyphs or extruded glyphs",
    )
    depth: float = Field(
        default=0.0,
        ge=0.0,
        description="Extrusion depth (ignored for flat meshes)",
    )
    indexed: bool = Field(
        default=True,
        description="Share vertices through an index buffer",
    )

    @model_validator(mode="after")
    def _check_depth(self) -> "MeshConfig":
        if self.mode == MeshModeName.EXTRUDED and self.depth <= 0:
            raise ValueError("depth must be greater than 0 for extruded meshes")
        return self

    def mesh_mode(self) -> MeshMode:
        """Get the mesh mode variant for this configuration."""
        if self.mode == MeshModeName.EXTRUDED:
            return Extruded3D(depth=self.depth)
        return Flat2D()


class FlattenConfig(BaseModel):
    """Configuration for curve flattening."""

    max_subdivision_depth: int = Field(
        default=16,
        ge=1,
        le=32,
        description="Recursion limit for Bezier subdivision",
    )
    area_epsilon: float = Field(
        default=1e-12,
        ge=0.0,
        description="Contours with an absolute area at or below this are dropped",
    )


class ClassifierConfig(BaseModel):
    """Configuration for contour classification."""

    nesting_rule: NestingRule = Field(
        default=NestingRule.WINDING,
        description="Treatment of same-sign nested contours",
    )


class CacheConfig(BaseModel):
    """Configuration for the glyph cache."""

    enabled: bool = Field(
        default=True,
        description="Cache built glyph meshes",
    )
    preload_charset: str = Field(
        default="",
        description="Characters to build eagerly when a generator is created",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Worker threads used for preloading (None = sequential)",
    )


class FontConfig(BaseModel):
    """Configuration for the font layer."""

    normalize: bool = Field(
        default=True,
        description="Scale outlines and metrics by 1 / font height",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class MeshTextSettings(BaseModel):
    """Main application settings."""

    mesh: MeshConfig = Field(default_factory=MeshConfig)
    flatten: FlattenConfig = Field(default_factory=FlattenConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    font: FontConfig = Field(default_factory=FontConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> MeshTextSettings:
    """Get default application settings."""
    return MeshTextSettings()


def make_mesh_config(**options: Any) -> MeshConfig:
    """Build a MeshConfig, reporting invalid options as ConfigurationError.

    Args:
        **options: MeshConfig fields (tolerance, mode, depth, indexed)

    Returns:
        Validated mesh configuration

    Raises:
        ConfigurationError: If any option is invalid
    """
    try:
        return MeshConfig(**options)
    except ValidationError as e:
        reasons = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc']) or 'config'}: {err['msg']}"
            for err in e.errors()
        )
        raise ConfigurationError(reasons) from e
