"""Inflection-point detection on a twice-differentiated signal.

A detection window opens at the first non-zero sample and closes at
the first sample of the opposite sign. The emitted index is the
midpoint between the last sample of the opening sign and the closing
sample, i.e. where the curvature flips.
"""

import logging
from typing import List

import numpy as np

from .arrays import as_signal

logger = logging.getLogger(__name__)


def find_inflection_points(second_derivative, tolerance: float = 0.0) -> List[int]:
    """Find sign-change midpoints in a second-derivative signal.

    Scanning left to right, a positive (negative) sample marks the
    positive (negative) side as seen and becomes the pending index.
    The sample that completes the pair emits
    ``(pending + index) // 2`` and resets the window; the sample right
    after it is consumed by the reset and does not open a new window.
    Zero samples advance the scan without touching the window.

    Parameters
    ----------
    second_derivative : array-like
        Twice-differentiated signal.
    tolerance : float, optional
        Samples with ``abs(value) <= tolerance`` count as zero
        (default 0.0, only exact zeros are inert). Use a small positive
        value to ignore floating-point residue.

    Returns
    -------
    list of int
        Ascending inflection indices, possibly empty.

    Examples
    --------
    >>> find_inflection_points([1, 2, -1, -2, 1, 2])
    [1]
    """
    if tolerance < 0:
        raise ValueError(f"tolerance must be >= 0, got {tolerance}")
    values = as_signal(second_derivative, min_length=0)
    signs = np.zeros(len(values), dtype=np.int8)
    signs[values > tolerance] = 1
    signs[values < -tolerance] = -1

    points = []
    opening = 0
    pending = 0
    skip = False

    for i, sign in enumerate(signs.tolist()):
        if skip:
            skip = False
            continue
        if sign == 0:
            continue
        if opening and sign != opening:
            points.append((pending + i) // 2)
            opening = 0
            skip = True
            continue
        opening = sign
        pending = i

    logger.debug(f"Found {len(points)} inflection points in {len(values)} samples")
    return points
