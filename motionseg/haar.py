"""Orthonormal Haar wavelet transform and hard-threshold compression.

The transform works in place on a zero-padded power-of-two buffer using
the fast pyramidal scheme: each pass pairs ``result[i]`` with
``result[i + step // 2]`` for every band start ``i`` and replaces them
with their scaled sum and difference. Coefficient positions therefore
encode (scale, offset) implicitly; there is no separate band list.

Composing ``transform -> compress -> inverse_transform`` gives a
step-function approximation of the input whose detail shrinks as the
kept fraction decreases.

Ref: Stollnitz EJ, DeRose TD, Salesin DH. Wavelets for computer
graphics: a primer, part 1. IEEE Comput Graph Appl. 1995;15(3):76-84.
doi:10.1109/38.376616

Functions
---------
next_power_of_two
    Smallest power of two >= n.
pad
    Zero-fill a signal up to the next power of two.
transform
    Forward Haar transform.
inverse_transform
    Inverse Haar transform.
compress
    Zero all but the largest-magnitude fraction of coefficients.
approximate
    Step-function approximation of a signal.
count_nonzero
    Number of non-zero coefficients.
"""

import logging
import math
from typing import Tuple

import numpy as np

from .arrays import as_signal

logger = logging.getLogger(__name__)

_SQRT2 = math.sqrt(2.0)


def next_power_of_two(n: int) -> int:
    """Return the smallest power of two that is >= *n* (``n >= 1``)."""
    n = int(n)
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return 1 << (n - 1).bit_length()


def _is_power_of_two(n: int) -> bool:
    return n >= 1 and (n & (n - 1)) == 0


def pad(signal) -> Tuple[np.ndarray, int]:
    """Zero-pad *signal* to the next power-of-two length.

    The tail is filled with zeros (no reflection or wrapping). A signal
    whose length is already a power of two is returned as a copy with
    no padding.

    Returns
    -------
    tuple
        ``(padded, original_length)``.
    """
    arr = as_signal(signal)
    n = len(arr)
    padded = np.zeros(next_power_of_two(n), dtype=np.float64)
    padded[:n] = arr
    return padded, n


def transform(signal) -> np.ndarray:
    """Forward orthonormal Haar transform.

    Parameters
    ----------
    signal : array-like
        Input samples, any length >= 1.

    Returns
    -------
    np.ndarray
        Coefficients, length ``2 ** ceil(log2(len(signal)))``.
    """
    result, _ = pad(signal)
    size = len(result)
    levels = size.bit_length() - 1

    for m in range(levels - 1, -1, -1):
        step = size >> m
        half = step // 2
        left = result[0::step].copy()
        right = result[half::step].copy()
        result[0::step] = (left + right) / _SQRT2
        result[half::step] = (left - right) / _SQRT2

    return result


def inverse_transform(coefficients) -> np.ndarray:
    """Inverse of :func:`transform`.

    Runs the same butterflies in the opposite pass order. The output
    has the padded length; slice it to recover the original signal.

    Raises
    ------
    ValueError
        If the coefficient count is not a power of two.
    """
    result = as_signal(coefficients)
    size = len(result)
    if not _is_power_of_two(size):
        raise ValueError(
            f"Coefficient length must be a power of two, got {size}"
        )
    levels = size.bit_length() - 1

    for m in range(levels):
        step = size >> m
        half = step // 2
        avg = result[0::step].copy()
        diff = result[half::step].copy()
        result[0::step] = (avg + diff) / _SQRT2
        result[half::step] = (avg - diff) / _SQRT2

    return result


def compress(coefficients, threshold: float) -> np.ndarray:
    """Hard-threshold coefficients, keeping the largest magnitudes.

    The cutoff is the magnitude at rank ``floor(len * (1 - threshold))``
    when magnitudes are ordered from smallest to largest (a rank past
    the end selects the largest magnitude). Coefficients strictly below
    the cutoff are zeroed; ties are kept.

    Parameters
    ----------
    coefficients : array-like
        Transform coefficients.
    threshold : float
        Fraction of coefficients to keep, in [0, 1]. 1.0 keeps all of
        them, 0.0 keeps only the largest.

    Returns
    -------
    np.ndarray
        A new array; *coefficients* is not modified.
    """
    threshold = float(threshold)
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1], got {threshold}")

    result = as_signal(coefficients)
    magnitudes = np.sort(np.abs(result))
    rank = min(int(len(result) * (1.0 - threshold)), len(result) - 1)
    cutoff = magnitudes[rank]

    result[np.abs(result) < cutoff] = 0.0
    return result


def approximate(signal, threshold: float) -> np.ndarray:
    """Step-function approximation of *signal*.

    Transforms, compresses with *threshold* and inverts, then drops the
    padded tail so the result has the input length.
    """
    arr = as_signal(signal)
    coefficients = transform(arr)
    compressed = compress(coefficients, threshold)
    logger.debug(
        f"Haar compression kept {count_nonzero(compressed)}/"
        f"{len(compressed)} coefficients (threshold={threshold})"
    )
    return inverse_transform(compressed)[: len(arr)]


def count_nonzero(coefficients) -> int:
    """Return the number of non-zero entries in *coefficients*."""
    return int(np.count_nonzero(np.asarray(coefficients)))
