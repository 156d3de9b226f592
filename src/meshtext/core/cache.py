"""Glyph mesh cache.

Built glyph meshes are memoised per (font, glyph, mesh settings). The cache
has no eviction policy: it grows with every distinct key until `clear()` is
called, which is fine for the bounded character sets of UI text but not for
arbitrary user input over a long-running process.
"""

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Literal

import structlog

from meshtext.config import MeshConfig
from meshtext.domain import GlyphMesh
from meshtext.exceptions import GlyphError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class GlyphCacheKey:
    """Identity of a cached glyph mesh.

    Attributes:
        font_id: Identifier of the font the glyph belongs to
        glyph_id: Glyph id within the font
        tolerance: Flattening tolerance
        dimensionality: "2d" for flat meshes, "3d" for extruded meshes
        depth: Extrusion depth (0.0 for flat meshes)
        indexed: Whether the mesh carries an index buffer
    """

    font_id: str
    glyph_id: int
    tolerance: float
    dimensionality: Literal["2d", "3d"]
    depth: float
    indexed: bool

    @classmethod
    def for_config(cls, font_id: str, glyph_id: int, config: MeshConfig) -> "GlyphCacheKey":
        """Build the key of a glyph rendered with `config`."""
        mode = config.mesh_mode()
        return cls(
            font_id=font_id,
            glyph_id=glyph_id,
            tolerance=config.tolerance,
            dimensionality=mode.dimensionality,
            depth=mode.depth,
            indexed=config.indexed,
        )


class GlyphCache:
    """Thread-safe memo of built glyph meshes.

    A registry lock guards the entries; a lock per missing key makes
    concurrent requests for the same glyph wait for a single build. Callers
    always receive copies, so cached meshes cannot be altered through them.
    """

    def __init__(self, enabled: bool = True) -> None:
        """Initialize the cache.

        Args:
            enabled: If False, every lookup builds and nothing is stored
        """
        self.enabled = enabled
        self._entries: dict[GlyphCacheKey, GlyphMesh] = {}
        self._build_locks: dict[GlyphCacheKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def get_or_build(
        self, key: GlyphCacheKey, builder: Callable[[], GlyphMesh]
    ) -> GlyphMesh:
        """Return the cached mesh for `key`, building and storing it on a miss.

        Args:
            key: Cache key
            builder: Builds the mesh; exceptions propagate and nothing is stored

        Returns:
            A copy of the cached mesh
        """
        if not self.enabled:
            return builder()

        with self._lock:
            mesh = self._entries.get(key)
            if mesh is not None:
                return mesh.copy()
            build_lock = self._build_locks.setdefault(key, threading.Lock())

        with build_lock:
            # Another thread may have finished the build while we waited
            with self._lock:
                mesh = self._entries.get(key)
            if mesh is None:
                try:
                    mesh = builder()
                    with self._lock:
                        self._entries[key] = mesh
                finally:
                    with self._lock:
                        self._build_locks.pop(key, None)
                logger.debug("Glyph cached", glyph_id=key.glyph_id, font_id=key.font_id)

        return mesh.copy()

    def insert(self, key: GlyphCacheKey, mesh: GlyphMesh) -> None:
        """Store a mesh under `key`, replacing any existing entry."""
        if not self.enabled:
            logger.debug("Cache disabled, mesh not stored", glyph_id=key.glyph_id)
            return
        with self._lock:
            self._entries[key] = mesh.copy()

    def preload(
        self,
        keys: Iterable[GlyphCacheKey],
        builder: Callable[[GlyphCacheKey], GlyphMesh],
        max_workers: int | None = None,
    ) -> dict[GlyphCacheKey, GlyphError]:
        """Build and store the meshes of several keys.

        Glyph errors do not stop the preload; they are returned per key.

        Args:
            keys: Keys to populate (duplicates and cached keys are skipped)
            builder: Builds the mesh of one key
            max_workers: Build on a thread pool of this size (None = sequential)

        Returns:
            Dict mapping each failed key to its error
        """
        if not self.enabled:
            return {}

        pending = [key for key in dict.fromkeys(keys) if key not in self]
        failures: dict[GlyphCacheKey, GlyphError] = {}

        def build(key: GlyphCacheKey) -> None:
            try:
                self.get_or_build(key, lambda: builder(key))
            except GlyphError as e:
                failures[key] = e

        if max_workers is None or len(pending) <= 1:
            for key in pending:
                build(key)
        else:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                # list() propagates unexpected exceptions from the workers
                list(executor.map(build, pending))

        logger.debug("Preload complete", requested=len(pending), failed=len(failures))
        return failures

    def clear(self) -> None:
        """Remove every cached mesh."""
        with self._lock:
            self._entries.clear()
            self._build_locks.clear()
