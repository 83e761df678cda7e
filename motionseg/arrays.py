"""Stateless numeric transforms on 1-D channel signals.

Functions
---------
as_signal
    Validate and convert samples to a 1-D float64 array.
value_range
    Peak-to-peak range of a signal.
is_flat
    True when a signal has zero dynamic range.
normalize
    Min-max normalization to [0, 1].
differentiate
    First-order forward difference.
"""

import numpy as np

from .errors import DegenerateSignal, InsufficientLength, NonFiniteSignal


def as_signal(values, min_length: int = 1) -> np.ndarray:
    """Convert *values* to a 1-D float64 array and check it.

    Parameters
    ----------
    values : array-like
        Samples, one per frame (list, tuple, ndarray or Series).
    min_length : int, optional
        Minimum number of samples required (default 1).

    Returns
    -------
    np.ndarray
        A new float64 array; the input is never modified.

    Raises
    ------
    ValueError
        If *values* is not one-dimensional.
    InsufficientLength
        If fewer than *min_length* samples are given.
    NonFiniteSignal
        If any sample is NaN or infinite.
    """
    arr = np.array(values, dtype=np.float64)
    if arr.ndim != 1:
        raise ValueError(f"Signal must be 1-D, got shape {arr.shape}")
    if len(arr) < min_length:
        raise InsufficientLength(
            f"Signal needs at least {min_length} samples, got {len(arr)}"
        )
    if not np.all(np.isfinite(arr)):
        n_bad = int(np.count_nonzero(~np.isfinite(arr)))
        raise NonFiniteSignal(f"Signal contains {n_bad} non-finite samples")
    return arr


def value_range(signal) -> float:
    """Return ``max - min`` of *signal*."""
    arr = as_signal(signal)
    return float(np.max(arr) - np.min(arr))


def is_flat(signal) -> bool:
    """Return True when *signal* has no variation at all."""
    return value_range(signal) <= 0.0


def normalize(signal) -> np.ndarray:
    """Min-max normalize *signal* so its minimum is 0 and maximum is 1.

    Callers are expected to drop constant signals beforehand; a constant
    signal is reported as an error instead of producing NaN.

    Raises
    ------
    DegenerateSignal
        If the signal has zero dynamic range.
    """
    arr = as_signal(signal)
    lo = np.min(arr)
    hi = np.max(arr)
    if not hi > lo:
        raise DegenerateSignal(
            f"Cannot normalize a signal with zero range (value={lo!r})"
        )
    return (arr - lo) / (hi - lo)


def differentiate(signal) -> np.ndarray:
    """Forward difference: ``result[i] = signal[i + 1] - signal[i]``.

    The result is one sample shorter than the input.

    Raises
    ------
    InsufficientLength
        If the signal has fewer than 2 samples.
    """
    arr = as_signal(signal, min_length=2)
    return np.diff(arr)
