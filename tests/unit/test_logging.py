"""Tests for build logging and statistics."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from meshtext.exceptions import TriangulationError
from meshtext.utils.logging import BuildLogger


class TestBuildLogger:
    """Tests for BuildLogger statistics."""

    def test_built_and_empty(self):
        build_logger = BuildLogger()

        build_logger.log_glyph_built(1, triangles=4)
        build_logger.log_glyph_built(2, triangles=0)
        build_logger.log_cache_hit(1)

        stats = build_logger.stats
        assert stats.built_count == 1
        assert stats.empty_count == 1
        assert stats.cache_hits == 1
        assert stats.lookups == 3

    def test_glyph_build_records_timing(self):
        build_logger = BuildLogger()

        with build_logger.glyph_build(5):
            pass

        assert 5 in build_logger.stats.glyph_timings_ms
        assert build_logger.stats.total_build_ms >= 0.0

    def test_glyph_build_records_errors(self):
        build_logger = BuildLogger()

        with pytest.raises(TriangulationError):
            with build_logger.glyph_build(9):
                raise TriangulationError(9, "no triangles")

        stats = build_logger.stats
        assert stats.error_count == 1
        assert stats.errors[0][0] == 9
        assert "no triangles" in stats.errors[0][1]
        assert 9 not in stats.glyph_timings_ms

    def test_counts_from_worker_threads(self):
        """Updates from a thread pool are not lost."""
        build_logger = BuildLogger()
        rounds = 500

        def work(glyph_id: int) -> None:
            for _ in range(rounds):
                build_logger.log_cache_hit(glyph_id)
                build_logger.log_glyph_built(glyph_id, triangles=2)
            build_logger.log_glyph_error(glyph_id, TriangulationError(glyph_id, "bad"))

        with ThreadPoolExecutor(max_workers=8) as executor:
            list(executor.map(work, range(8)))

        stats = build_logger.stats
        assert stats.cache_hits == 8 * rounds
        assert stats.built_count == 8 * rounds
        assert stats.error_count == 8
        assert sorted(glyph_id for glyph_id, _ in stats.errors) == list(range(8))
