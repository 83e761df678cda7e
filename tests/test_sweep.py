"""Tests for threshold / separation parameter sweeps (sweep module)."""

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

# Ensure the tests directory is on sys.path for conftest imports
sys.path.insert(0, str(Path(__file__).resolve().parent))

from conftest import make_motion_channels, make_step_signal

from motionseg.segment import SegmentationConfig, segment_motion
from motionseg.sweep import (
    SWEEP_COLUMNS,
    separation_grid,
    sweep_from_config,
    sweep_parameters,
    threshold_grid,
)


# ── Grids ────────────────────────────────────────────────────────────


def test_threshold_grid_default():
    grid = threshold_grid()
    assert len(grid) == 11
    assert grid[0] == 0.1
    assert grid[-1] == 0.0
    assert 0.07 in grid
    assert all(a > b for a, b in zip(grid, grid[1:]))


def test_threshold_grid_single_value():
    assert threshold_grid(0.5, 0.5, 0.1) == [0.5]


@pytest.mark.parametrize("step, expected", [
    (0.06, [0.1, 0.04]),
    (0.03, [0.1, 0.07, 0.04, 0.01]),
    (0.2, [0.1]),
])
def test_threshold_grid_uneven_step_stays_above_stop(step, expected):
    grid = threshold_grid(0.1, 0.0, step)
    assert grid == expected
    assert min(grid) >= 0.0


@pytest.mark.parametrize("kwargs", [
    {"step": 0.0},
    {"start": 0.1, "stop": 0.2},
    {"start": 1.5},
])
def test_threshold_grid_invalid(kwargs):
    with pytest.raises(ValueError):
        threshold_grid(**kwargs)


def test_separation_grid():
    assert separation_grid() == [0, 30, 60, 90, 120, 150]
    assert separation_grid(2, fps=25.0) == [0, 25, 50]
    with pytest.raises(ValueError):
        separation_grid(-1)


# ── sweep_parameters ─────────────────────────────────────────────────


class TestSweepParameters:

    def test_shape_and_order(self):
        channels = {"step": make_step_signal()}
        df = sweep_parameters(channels, thresholds=[1.0, 0.9], separations=[0, 30],
                              max_workers=1)
        assert list(df.columns) == SWEEP_COLUMNS
        assert len(df) == 4
        assert list(df["compress_threshold"]) == [1.0, 1.0, 0.9, 0.9]
        assert list(df["min_separation"]) == [0, 30, 0, 30]
        assert (df["n_points"] == df["points"].map(len)).all()

    def test_cells_match_direct_runs(self):
        channels = make_motion_channels()
        df = sweep_parameters(channels, thresholds=[0.5, 0.1], separations=[10, 60],
                              max_workers=1)
        for row in df.itertuples(index=False):
            direct = segment_motion(channels, compress_threshold=row.compress_threshold,
                                    min_separation=row.min_separation)
            assert row.points == direct.points

    def test_parallel_matches_sequential(self):
        channels = make_motion_channels()
        kwargs = dict(thresholds=threshold_grid(0.2, 0.0, 0.05), separations=[0, 15, 30])
        seq = sweep_parameters(channels, max_workers=1, **kwargs)
        par = sweep_parameters(channels, max_workers=4, **kwargs)
        pd.testing.assert_frame_equal(seq, par)

    def test_base_config_carried_into_cells(self):
        channels = {"step": make_step_signal()}
        base = SegmentationConfig(keep_last=True)
        df = sweep_parameters(channels, thresholds=[0.9], separations=[30], base_config=base)
        assert df.loc[0, "n_points"] == 2

    def test_more_separation_never_adds_points(self):
        rng = np.random.default_rng(21)
        channels = {
            "a": np.cumsum(rng.standard_normal(300)),
            "b": np.cumsum(rng.standard_normal(300)),
        }
        df = sweep_parameters(channels, thresholds=[0.05], separations=[0, 30, 60, 90])
        counts = list(df["n_points"])
        assert all(a >= b for a, b in zip(counts, counts[1:]))

    def test_empty_grid(self):
        df = sweep_parameters({"step": make_step_signal()}, thresholds=[], separations=[0])
        assert df.empty
        assert list(df.columns) == SWEEP_COLUMNS


# ── sweep_from_config ────────────────────────────────────────────────


def test_sweep_from_config():
    config = {
        "sweep": {
            "threshold_start": 0.02,
            "threshold_step": 0.01,
            "max_separation_seconds": 1,
            "max_workers": 1,
        },
        "segmentation": {"keep_last": True},
    }
    df = sweep_from_config(make_motion_channels(), config)
    assert list(df["compress_threshold"]) == [0.02, 0.02, 0.01, 0.01, 0.0, 0.0]
    assert list(df["min_separation"]) == [0, 30, 0, 30, 0, 30]


def test_sweep_from_config_defaults():
    df = sweep_from_config({"step": make_step_signal(64, steps=(16, 48))})
    assert len(df) == 11 * 6


def test_sweep_from_config_uneven_step():
    config = {"sweep": {"threshold_step": 0.06, "max_separation_seconds": 0, "max_workers": 1}}
    df = sweep_from_config({"step": make_step_signal()}, config)
    assert list(df["compress_threshold"]) == [0.1, 0.04]
    assert list(df["min_separation"]) == [0, 0]


@pytest.mark.parametrize("config, match", [
    ({"sweep": {"threshold_stride": 0.01}}, "Unknown sweep options"),
    ({"segmentation": {"threshold": 0.5}}, "Unknown segmentation options"),
    ({"sweep": {"fps": "30"}}, "sweep.fps"),
])
def test_sweep_from_config_rejects_bad_settings(config, match):
    with pytest.raises(ValueError, match=match):
        sweep_from_config({"step": make_step_signal()}, config)
