"""Logging utilities for meshtext."""

import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from meshtext.exceptions import GlyphError


@dataclass
class BuildStats:
    """Statistics of the glyph builds done by one generator."""

    built_count: int = 0
    empty_count: int = 0
    cache_hits: int = 0
    error_count: int = 0
    errors: list[tuple[int, str]] = field(default_factory=list)
    glyph_timings_ms: dict[int, float] = field(default_factory=dict)

    @property
    def total_build_ms(self) -> float:
        """Total time spent building glyphs."""
        return sum(self.glyph_timings_ms.values())

    @property
    def lookups(self) -> int:
        """Number of glyph requests answered, built or cached."""
        return self.built_count + self.empty_count + self.cache_hits


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("meshtext")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class BuildLogger:
    """Logger for tracking glyph builds and statistics.

    Safe to share between the threads of a glyph preload: every update of
    the statistics happens under one lock.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("meshtext")
        self._stats = BuildStats()
        self._lock = threading.Lock()

    @contextmanager
    def glyph_build(self, glyph_id: int) -> Iterator[None]:
        """Time a glyph build, logging its completion or failure.

        Glyph errors are recorded and re-raised.
        """
        self._logger.debug("Building glyph", glyph_id=glyph_id)
        start = time.perf_counter()
        try:
            yield
        except GlyphError as e:
            self.log_glyph_error(glyph_id, e)
            raise
        duration_ms = (time.perf_counter() - start) * 1000
        with self._lock:
            self._stats.glyph_timings_ms[glyph_id] = duration_ms
        self._logger.debug(
            "Glyph built", glyph_id=glyph_id, duration_ms=round(duration_ms, 2)
        )

    def log_glyph_built(self, glyph_id: int, triangles: int) -> None:
        """Log a successfully built glyph."""
        with self._lock:
            if triangles:
                self._stats.built_count += 1
                self._logger.debug("Glyph mesh", glyph_id=glyph_id, triangles=triangles)
            else:
                self._stats.empty_count += 1
                self._logger.debug("Glyph has no geometry", glyph_id=glyph_id)

    def log_cache_hit(self, glyph_id: int) -> None:
        """Log a glyph answered from the cache."""
        with self._lock:
            self._stats.cache_hits += 1

    def log_glyph_error(self, glyph_id: int, error: Exception) -> None:
        """Log glyph build error."""
        self._logger.warning(
            "Glyph build failed",
            glyph_id=glyph_id,
            error=str(error),
            error_type=type(error).__name__,
        )
        with self._lock:
            self._stats.error_count += 1
            self._stats.errors.append((glyph_id, str(error)))

    @property
    def stats(self) -> BuildStats:
        """Get current build statistics."""
        return self._stats
