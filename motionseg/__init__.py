"""motionseg -- Motion-segment detection for motion-capture channels.

Quick start::

    from motionseg import segment_motion
    result = segment_motion({"hip_L": hip, "knee_L": knee},
                            compress_threshold=0.05, min_separation=60)
    print(result.points)

Individual stages::

    from motionseg import normalize, approximate, differentiate
    from motionseg import find_inflection_points, summarize_points
    norm = normalize(signal)
    steps = approximate(norm, threshold=0.05)
    acc = differentiate(differentiate(steps))
    points = summarize_points(find_inflection_points(acc), 60)

Haar wavelet engine::

    from motionseg import transform, compress, inverse_transform
    coeffs = transform(signal)
    rebuilt = inverse_transform(compress(coeffs, 0.1))[:len(signal)]

Parameter sweep::

    from motionseg import sweep_parameters
    df = sweep_parameters(channels)
    df.pivot(index="compress_threshold", columns="min_separation",
             values="n_points")
"""

__version__ = "0.1.0"

from .errors import (
    SegmentationError,
    DegenerateSignal,
    InsufficientLength,
    EmptyInput,
    NonFiniteSignal,
)
from .arrays import as_signal, value_range, is_flat, normalize, differentiate
from .haar import (
    next_power_of_two,
    pad,
    transform,
    inverse_transform,
    compress,
    approximate,
    count_nonzero,
)
from .inflection import find_inflection_points
from .summarize import summarize_points
from .segment import (
    SegmentationConfig,
    ChannelResult,
    SegmentationResult,
    seconds_to_frames,
    filter_flat_channels,
    process_channel,
    segment_motion,
)
from .sweep import threshold_grid, separation_grid, sweep_parameters, sweep_from_config
from .config import load_config, save_config, validate_config, DEFAULT_CONFIG

__all__ = [
    # Pipeline
    "segment_motion",
    "process_channel",
    "filter_flat_channels",
    "seconds_to_frames",
    "SegmentationConfig",
    "ChannelResult",
    "SegmentationResult",
    # Array math
    "as_signal",
    "value_range",
    "is_flat",
    "normalize",
    "differentiate",
    # Haar wavelet
    "next_power_of_two",
    "pad",
    "transform",
    "inverse_transform",
    "compress",
    "approximate",
    "count_nonzero",
    # Points
    "find_inflection_points",
    "summarize_points",
    # Sweep
    "threshold_grid",
    "separation_grid",
    "sweep_parameters",
    "sweep_from_config",
    # Errors
    "SegmentationError",
    "DegenerateSignal",
    "InsufficientLength",
    "EmptyInput",
    "NonFiniteSignal",
    # Config
    "load_config",
    "save_config",
    "validate_config",
    "DEFAULT_CONFIG",
    # Meta
    "__version__",
]
