"""Tests for find_inflection_points (inflection module)."""

import numpy as np
import pytest

from motionseg.errors import NonFiniteSignal
from motionseg.inflection import find_inflection_points


class TestFindInflectionPoints:

    def test_positive_then_negative(self):
        # Window opens at 0, last positive is 1, closes at 2 -> (1 + 2) // 2
        assert find_inflection_points([1, 2, -1, -2, 1, 2]) == [1]

    def test_negative_then_positive(self):
        assert find_inflection_points([-1, -1, -1, 2]) == [2]

    def test_zeros_are_inert(self):
        assert find_inflection_points([1, 0, 0, -1]) == [1]
        assert find_inflection_points([0, 0, 3, 0, 0, 0, -3, 0]) == [4]

    def test_sample_after_emission_is_consumed(self):
        # Index 2 closes nothing and opens nothing: it is eaten by the reset
        assert find_inflection_points([1, -1, -1, 1]) == [0]
        assert find_inflection_points([1, -1, 0, 1, -1]) == [0, 3]

    def test_incomplete_window_emits_nothing(self):
        assert find_inflection_points([1.0, 2.0, 3.0]) == []
        assert find_inflection_points([-0.5] * 10) == []

    def test_all_zero_and_empty(self):
        assert find_inflection_points(np.zeros(20)) == []
        assert find_inflection_points([]) == []

    def test_alternating_signal(self):
        values = [1, -1] * 6
        # Windows close at 1, 4, 7, 10; the sample after each is consumed
        assert find_inflection_points(values) == [0, 3, 6, 9]

    def test_step_second_derivative(self):
        # Second derivative of a clean 0 -> 1 -> 0 pulse between frames 10 and 30
        signal = np.zeros(40)
        signal[10:30] = 1.0
        d2 = np.diff(signal, n=2)
        assert find_inflection_points(d2) == [8, 28]

    def test_tolerance_ignores_residue(self):
        values = [1e-12, -1e-12, 1.0, -1.0]
        assert find_inflection_points(values) == [0]
        assert find_inflection_points(values, tolerance=1e-9) == [2]

    def test_returns_python_ints(self):
        points = find_inflection_points(np.array([0.5, -0.5, 0.0, -1.0, 1.0]))
        assert points == [0, 3]
        assert all(type(p) is int for p in points)

    def test_negative_tolerance_raises(self):
        with pytest.raises(ValueError, match="tolerance"):
            find_inflection_points([1.0, -1.0], tolerance=-1.0)

    def test_nan_raises(self):
        with pytest.raises(NonFiniteSignal):
            find_inflection_points([1.0, np.nan, -1.0])
