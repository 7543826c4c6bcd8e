"""
Tests for the stage Timer.
"""

import pytest

from pylstsq.core.compute.timing import Timer, timed


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('factorization'):
            pass
        with timer.section('factorization'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'factorization'}
        assert result['total_seconds'] >= result['factorization'] >= 0.0

    def test_section_recorded_on_error(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            with timer.section('solve'):
                raise RuntimeError("boom")
        timer.stop()
        assert 'solve' in timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()

    def test_timed_context(self):
        with timed() as timer:
            pass
        assert timer.result()['total_seconds'] >= 0.0
