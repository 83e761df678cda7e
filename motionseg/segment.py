"""Motion segmentation: per-channel pipeline and cross-channel merge.

Each channel goes through the same stages:

    normalize -> Haar approximation -> differentiate -> differentiate
    -> inflection detection

Channels are independent, so they are processed as a parallel map. The
per-channel inflection indices are then pooled, sorted and summarized
into a single list of motion-segment boundaries.

Usage::

    from motionseg import segment_motion
    result = segment_motion({"hip_L": hip, "knee_L": knee},
                            compress_threshold=0.05, min_separation=60)
    result.points            # summarized boundary frames
    result.to_dataframe("second_derivative")

Functions
---------
segment_motion
    Run the full pipeline over a set of channels.
process_channel
    Run the per-channel stages on one signal.
filter_flat_channels
    Split channels into usable and constant ones.
seconds_to_frames
    Convert a time span to a frame count.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass, fields
from typing import Dict, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .arrays import as_signal, differentiate, is_flat, normalize
from .haar import approximate
from .inflection import find_inflection_points
from .summarize import summarize_points

logger = logging.getLogger(__name__)

# Frames consumed by the two differentiation stages
_MIN_CHANNEL_LENGTH = 3

_DIAGNOSTIC_KINDS = ("compressed", "first_derivative", "second_derivative")


@dataclass(frozen=True)
class SegmentationConfig:
    """Parameters of one segmentation run.

    compress_threshold is the fraction of Haar coefficients kept (1.0
    keeps the signal intact, small values give a coarse staircase).
    min_separation is the summarizer gap in frames. zero_tolerance sets
    the magnitude under which second-derivative samples are treated as
    zero. keep_last also retains the final pooled index. max_workers
    bounds the channel thread pool; 1 runs sequentially.
    """
    compress_threshold: float = 0.01
    min_separation: int = 60
    zero_tolerance: float = 1e-9
    keep_last: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self):
        if not 0.0 <= self.compress_threshold <= 1.0:
            raise ValueError(
                f"compress_threshold must be in [0, 1], got {self.compress_threshold}"
            )
        if self.min_separation < 0:
            raise ValueError(f"min_separation must be >= 0, got {self.min_separation}")
        if self.zero_tolerance < 0:
            raise ValueError(f"zero_tolerance must be >= 0, got {self.zero_tolerance}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    @classmethod
    def from_dict(cls, cfg: Optional[dict]) -> "SegmentationConfig":
        """Build a config from a ``segmentation`` section dict.

        Raises
        ------
        ValueError
            If *cfg* contains unknown keys.
        """
        cfg = dict(cfg or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ValueError(f"Unknown segmentation options: {', '.join(unknown)}")
        return cls(**cfg)

    def replace(self, **overrides) -> "SegmentationConfig":
        """Return a copy with *overrides* applied."""
        merged = asdict(self)
        merged.update(overrides)
        return self.from_dict(merged)


@dataclass(frozen=True, eq=False)
class ChannelResult:
    """Diagnostic sequences and detected indices for one channel."""
    name: str
    compressed: np.ndarray
    first_derivative: np.ndarray
    second_derivative: np.ndarray
    inflection_points: Tuple[int, ...]


@dataclass(frozen=True, eq=False)
class SegmentationResult:
    """Outcome of :func:`segment_motion`."""
    config: SegmentationConfig
    channels: Tuple[ChannelResult, ...]
    skipped_channels: Tuple[str, ...]
    pooled_points: Tuple[int, ...]
    points: Tuple[int, ...]

    def channel(self, name: str) -> ChannelResult:
        """Return the result for channel *name*.

        Raises
        ------
        KeyError
            If the channel was skipped or never given.
        """
        for ch in self.channels:
            if ch.name == name:
                return ch
        raise KeyError(f"No result for channel {name!r}")

    def to_dataframe(self, kind: str = "compressed") -> pd.DataFrame:
        """Tabulate one diagnostic sequence for every channel.

        Parameters
        ----------
        kind : str
            ``"compressed"``, ``"first_derivative"`` or
            ``"second_derivative"``.

        Returns
        -------
        pd.DataFrame
            One column per processed channel, indexed by frame. Shorter
            channels are padded with NaN.
        """
        if kind not in _DIAGNOSTIC_KINDS:
            raise ValueError(
                f"Unknown kind: {kind}. Available: {', '.join(_DIAGNOSTIC_KINDS)}"
            )
        columns = {ch.name: pd.Series(getattr(ch, kind)) for ch in self.channels}
        df = pd.DataFrame(columns)
        df.index.name = "frame_idx"
        return df


def seconds_to_frames(seconds: float, fps: float = 30.0) -> int:
    """Convert a duration in seconds to a whole number of frames.

    The product ``seconds * fps`` is truncated, so fractional seconds
    count (1.5 s at 30 fps is 45 frames). Whole-second inputs give the
    same frames as truncating the seconds first.
    """
    if fps <= 0:
        raise ValueError(f"fps must be > 0, got {fps}")
    if seconds < 0:
        raise ValueError(f"seconds must be >= 0, got {seconds}")
    return int(seconds * fps)


def _iter_channels(channels) -> List[Tuple[str, np.ndarray]]:
    """Return ``(name, signal)`` pairs from a mapping or DataFrame.

    Raises ValueError when two channels share a name once converted to
    str (e.g. ``1`` and ``"1"``).
    """
    if isinstance(channels, pd.DataFrame):
        items = [(str(col), channels.iloc[:, i].to_numpy())
                 for i, col in enumerate(channels.columns)]
    elif isinstance(channels, Mapping):
        items = [(str(name), values) for name, values in channels.items()]
    else:
        raise TypeError("channels must be a mapping or a pandas DataFrame")

    seen = set()
    for name, _ in items:
        if name in seen:
            raise ValueError(f"Duplicate channel name: {name!r}")
        seen.add(name)
    return [(name, as_signal(values)) for name, values in items]


def filter_flat_channels(channels) -> Tuple[Dict[str, np.ndarray], List[str]]:
    """Split *channels* into varying and constant signals.

    Constant channels cannot be normalized, so they are dropped before
    the pipeline runs.

    Returns
    -------
    tuple
        ``(kept, flat_names)`` where *kept* preserves input order.
    """
    kept = {}
    flat = []
    for name, signal in _iter_channels(channels):
        if is_flat(signal):
            flat.append(name)
        else:
            kept[name] = signal
    if flat:
        logger.warning(f"Skipping {len(flat)} flat channel(s): {', '.join(flat)}")
    return kept, flat


def process_channel(
    name: str,
    values,
    compress_threshold: float = 0.01,
    zero_tolerance: float = 1e-9,
) -> ChannelResult:
    """Run the per-channel stages on one signal.

    Raises
    ------
    InsufficientLength
        If the signal has fewer than 3 samples.
    DegenerateSignal
        If the signal is constant.
    """
    signal = as_signal(values, min_length=_MIN_CHANNEL_LENGTH)
    norm = normalize(signal)
    compressed = approximate(norm, compress_threshold)
    first = differentiate(compressed)
    second = differentiate(first)
    points = find_inflection_points(second, tolerance=zero_tolerance)
    logger.debug(f"Channel {name}: {len(points)} inflection points")
    return ChannelResult(
        name=name,
        compressed=compressed,
        first_derivative=first,
        second_derivative=second,
        inflection_points=tuple(points),
    )


def segment_motion(
    channels,
    config: Optional[SegmentationConfig] = None,
    **overrides,
) -> SegmentationResult:
    """Detect motion-segment boundaries across a set of channels.

    Parameters
    ----------
    channels : mapping or pd.DataFrame
        Channel name -> samples, or a DataFrame with one column per
        channel. Lengths may differ between channels.
    config : SegmentationConfig, optional
        Run parameters (default ``SegmentationConfig()``).
    **overrides
        Individual :class:`SegmentationConfig` fields overriding
        *config*, e.g. ``compress_threshold=0.9``.

    Returns
    -------
    SegmentationResult
        Per-channel diagnostics and the summarized boundary frames.
        When no channel yields an inflection point, ``points`` is empty.

    Raises
    ------
    TypeError
        If *channels* is neither a mapping nor a DataFrame.
    InsufficientLength
        If a non-flat channel has fewer than 3 samples.
    NonFiniteSignal
        If a channel contains NaN or infinite samples.
    """
    config = config or SegmentationConfig()
    if overrides:
        config = config.replace(**overrides)

    kept, flat = filter_flat_channels(channels)

    def _run(item):
        name, signal = item
        return process_channel(
            name, signal,
            compress_threshold=config.compress_threshold,
            zero_tolerance=config.zero_tolerance,
        )

    items = list(kept.items())
    if config.max_workers == 1 or len(items) <= 1:
        results = [_run(item) for item in items]
    else:
        with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
            # map() yields in submission order, independent of completion
            results = list(pool.map(_run, items))

    pooled = sorted(p for r in results for p in r.inflection_points)
    if pooled:
        points = summarize_points(pooled, config.min_separation, keep_last=config.keep_last)
    else:
        logger.warning("No inflection points found in any channel")
        points = []

    logger.info(
        f"Segmented {len(results)} channel(s) "
        f"(threshold={config.compress_threshold}, "
        f"min_separation={config.min_separation}): "
        f"{len(pooled)} inflection points -> {len(points)} boundaries"
    )

    return SegmentationResult(
        config=config,
        channels=tuple(results),
        skipped_channels=tuple(flat),
        pooled_points=tuple(pooled),
        points=tuple(points),
    )
