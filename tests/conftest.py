"""Shared test fixtures for the motionseg test suite.

Provides synthetic channel generators used across test modules.
"""

import numpy as np
import pytest


def make_step_signal(n=256, steps=(50, 180), levels=(0.0, 1.0, 0.0)):
    """Piecewise-constant signal that jumps to ``levels[k + 1]`` at ``steps[k]``."""
    signal = np.full(n, levels[0], dtype=float)
    for start, level in zip(steps, levels[1:]):
        signal[start:] = level
    return signal


def make_motion_channels(n=200):
    """Two joint channels with nearby transitions plus a constant one.

    hip_L moves 0 -> 1 -> 0 at frames 40 and 120, knee_L moves
    0 -> 2 -> 1 at frames 44 and 124, trunk never moves.
    """
    return {
        "hip_L": make_step_signal(n, steps=(40, 120), levels=(0.0, 1.0, 0.0)),
        "knee_L": make_step_signal(n, steps=(44, 124), levels=(0.0, 2.0, 1.0)),
        "trunk": np.full(n, 3.5),
    }


def make_smooth_motion(n=300, fps=30.0, seed=0):
    """Smooth joint-angle-like signal with mild measurement noise."""
    rng = np.random.default_rng(seed)
    t = np.arange(n) / fps
    return 30.0 * np.sin(2 * np.pi * 0.5 * t) + 0.5 * rng.standard_normal(n)


@pytest.fixture
def step_signal():
    return make_step_signal()


@pytest.fixture
def motion_channels():
    return make_motion_channels()
