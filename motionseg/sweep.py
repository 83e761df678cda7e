"""Parameter sweeps over compression threshold and separation.

Choosing ``compress_threshold`` and ``min_separation`` for a recording
is exploratory: the usual approach is to run the pipeline over a grid
and look at how the number of detected boundaries reacts. Every grid
cell is an independent :func:`~motionseg.segment.segment_motion` call,
so cells run in parallel and are reassembled in grid order.

Functions
---------
threshold_grid
    Descending list of kept fractions.
separation_grid
    Separations in frames for whole-second steps.
sweep_parameters
    Run the pipeline for every (threshold, separation) pair.
sweep_from_config
    Run a sweep described by a config dict.
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from itertools import product
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, _deep_merge, validate_config
from .segment import SegmentationConfig, filter_flat_channels, seconds_to_frames, segment_motion

logger = logging.getLogger(__name__)

SWEEP_COLUMNS = ["compress_threshold", "min_separation", "n_points", "points"]


def threshold_grid(start: float = 0.10, stop: float = 0.0, step: float = 0.01) -> List[float]:
    """Return thresholds from *start* down to *stop* (inclusive).

    Values are rounded to 10 decimals so repeated subtraction does not
    drift (``0.1 - 0.01 * 3`` is not exactly ``0.07``). When *step* does
    not divide the range, the grid stops at the last value above *stop*.
    """
    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}")
    if not 0.0 <= stop <= start <= 1.0:
        raise ValueError(f"Expected 0 <= stop <= start <= 1, got start={start}, stop={stop}")
    # 1e-9 absorbs quotients like 2.9999999999999996
    n_steps = int(math.floor((start - stop) / step + 1e-9))
    return [round(start - i * step, 10) for i in range(n_steps + 1)]


def separation_grid(max_seconds: int = 5, fps: float = 30.0) -> List[int]:
    """Return ``[0, fps, 2*fps, ..., max_seconds*fps]`` in frames."""
    if max_seconds < 0:
        raise ValueError(f"max_seconds must be >= 0, got {max_seconds}")
    return [seconds_to_frames(s, fps) for s in range(int(max_seconds) + 1)]


def sweep_parameters(
    channels,
    thresholds: Optional[Sequence[float]] = None,
    separations: Optional[Sequence[int]] = None,
    base_config: Optional[SegmentationConfig] = None,
    max_workers: Optional[int] = None,
) -> pd.DataFrame:
    """Run :func:`segment_motion` over a threshold x separation grid.

    Parameters
    ----------
    channels : mapping or pd.DataFrame
        Input channels, shared read-only by every cell.
    thresholds : sequence of float, optional
        Kept fractions (default :func:`threshold_grid`).
    separations : sequence of int, optional
        Summarizer gaps in frames (default :func:`separation_grid`).
    base_config : SegmentationConfig, optional
        Remaining parameters (tolerance, keep_last) for every cell.
    max_workers : int, optional
        Thread pool size for grid cells; 1 runs sequentially.

    Returns
    -------
    pd.DataFrame
        Columns ``compress_threshold``, ``min_separation``, ``n_points``
        and ``points`` (tuple of frames), one row per cell, ordered by
        threshold as given then separation as given.
    """
    thresholds = threshold_grid() if thresholds is None else list(thresholds)
    separations = separation_grid() if separations is None else list(separations)
    base_config = base_config or SegmentationConfig()

    # Flat channels are dropped once here instead of once per cell
    kept, _ = filter_flat_channels(channels)

    cells = list(product(thresholds, separations))
    if not cells:
        return pd.DataFrame(columns=SWEEP_COLUMNS)

    def _run(cell):
        threshold, separation = cell
        result = segment_motion(
            kept,
            base_config,
            compress_threshold=float(threshold),
            min_separation=int(separation),
            max_workers=1,
        )
        return {
            "compress_threshold": float(threshold),
            "min_separation": int(separation),
            "n_points": len(result.points),
            "points": result.points,
        }

    if max_workers == 1:
        rows = [_run(cell) for cell in cells]
    else:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            rows = list(pool.map(_run, cells))

    df = pd.DataFrame(rows, columns=SWEEP_COLUMNS)
    logger.info(
        f"Swept {len(thresholds)} thresholds x {len(separations)} separations "
        f"over {len(kept)} channel(s); n_points range "
        f"{int(np.min(df['n_points']))}-{int(np.max(df['n_points']))}"
    )
    return df


def sweep_from_config(channels, config: Optional[dict] = None) -> pd.DataFrame:
    """Run a sweep using the ``sweep`` and ``segmentation`` config sections.

    *config* is a full configuration dict as returned by
    :func:`~motionseg.config.load_config`; missing sections fall back to
    ``DEFAULT_CONFIG``.
    """
    cfg = validate_config(_deep_merge(DEFAULT_CONFIG, config or {}))
    sweep_cfg = cfg["sweep"]
    thresholds = threshold_grid(
        sweep_cfg["threshold_start"],
        sweep_cfg["threshold_stop"],
        sweep_cfg["threshold_step"],
    )
    separations = separation_grid(sweep_cfg["max_separation_seconds"], sweep_cfg["fps"])
    return sweep_parameters(
        channels,
        thresholds=thresholds,
        separations=separations,
        base_config=SegmentationConfig.from_dict(cfg["segmentation"]),
        max_workers=sweep_cfg["max_workers"],
    )
