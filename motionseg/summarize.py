"""Collapse clusters of nearby inflection indices into boundaries.

Indices pooled from several channels tend to bunch around the same
motion boundary. The summarizer keeps the first index, then keeps an
index only when the next one lies more than ``min_separation`` frames
away, so each cluster is represented by its last member before a gap.
"""

import logging
from typing import List, Sequence

import numpy as np

from .errors import EmptyInput

logger = logging.getLogger(__name__)


def summarize_points(
    points: Sequence[int],
    min_separation: int,
    keep_last: bool = False,
) -> List[int]:
    """Deduplicate an ascending list of frame indices.

    The first index is always kept. Each following index up to the
    second-to-last is kept when the gap to its successor exceeds
    *min_separation*. The last index is never evaluated on its own.

    Parameters
    ----------
    points : sequence of int
        Indices sorted in ascending order (duplicates allowed).
    min_separation : int
        Gap in frames that separates two clusters.
    keep_last : bool, optional
        Also keep the final index (default False).

    Returns
    -------
    list of int
        Retained indices, ascending.

    Raises
    ------
    EmptyInput
        If *points* is empty.
    ValueError
        If *points* is not ascending or *min_separation* is negative.

    Examples
    --------
    >>> summarize_points([0, 5, 6, 50, 51, 52], 10)
    [0, 6]
    """
    if len(points) == 0:
        raise EmptyInput("Cannot summarize an empty point list")
    if min_separation < 0:
        raise ValueError(f"min_separation must be >= 0, got {min_separation}")

    arr = np.asarray(points, dtype=np.int64)
    gaps = np.diff(arr)
    if np.any(gaps < 0):
        raise ValueError("points must be sorted in ascending order")

    # gaps[i] is the distance from arr[i] to arr[i + 1]
    kept = [int(arr[0])]
    kept.extend(int(arr[i]) for i in range(1, len(arr) - 1) if gaps[i] > min_separation)
    if keep_last and len(arr) > 1:
        kept.append(int(arr[-1]))

    logger.debug(
        f"Summarized {len(arr)} points to {len(kept)} "
        f"(min_separation={min_separation})"
    )
    return kept
