"""Exception taxonomy for the segmentation pipeline.

Every error is a precondition violation detected before any arithmetic
runs. They all derive from ``ValueError`` so callers that already guard
pipeline calls with ``except ValueError`` keep working.
"""


class SegmentationError(ValueError):
    """Base class for all motionseg input errors."""


class DegenerateSignal(SegmentationError):
    """A signal with zero dynamic range reached ``normalize``."""


class InsufficientLength(SegmentationError):
    """A signal is too short for the requested operation."""


class EmptyInput(SegmentationError):
    """An empty point list was passed to the summarizer."""


class NonFiniteSignal(SegmentationError):
    """A signal contains NaN or infinite samples."""
