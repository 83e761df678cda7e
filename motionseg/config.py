"""Segmentation and sweep settings stored as JSON or YAML.

A config file holds two sections, ``segmentation`` (the fields of
:class:`~motionseg.segment.SegmentationConfig`) and ``sweep`` (the grid
of a parameter sweep). Files may list only the values they change; the
rest come from ``DEFAULT_CONFIG``. Loaded settings are validated so a
misspelled key or a wrong-typed value fails at load time.

Example file (YAML)::

    segmentation:
      compress_threshold: 0.05
      keep_last: true
    sweep:
      max_separation_seconds: 3

Functions
---------
load_config
    Read, merge and validate a config file.
save_config
    Write a config dict to JSON or YAML.
validate_config
    Check a merged config dict.

Attributes
----------
DEFAULT_CONFIG : dict
    Default values for both sections.
"""

import copy
import json
import logging
from numbers import Real
from pathlib import Path
from typing import Union

from .segment import SegmentationConfig

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "segmentation": {
        "compress_threshold": 0.01,
        "min_separation": 60,
        "zero_tolerance": 1e-9,
        "keep_last": False,
        "max_workers": None,
    },
    "sweep": {
        "threshold_start": 0.10,
        "threshold_stop": 0.0,
        "threshold_step": 0.01,
        "max_separation_seconds": 5,
        "fps": 30.0,
        "max_workers": None,
    },
}

_YAML_SUFFIXES = (".yaml", ".yml")
_SWEEP_FLOAT_KEYS = ("threshold_start", "threshold_stop", "threshold_step", "fps")


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _require_yaml():
    try:
        import yaml
    except ImportError:
        raise ImportError("YAML config files need PyYAML: pip install pyyaml")
    return yaml


def validate_config(cfg: dict) -> dict:
    """Check a merged config dict and return it unchanged.

    The ``segmentation`` section must build a valid
    :class:`SegmentationConfig`. The ``sweep`` section may only contain
    the keys of ``DEFAULT_CONFIG["sweep"]``, with numeric grid bounds,
    a whole ``max_separation_seconds`` >= 0, ``fps`` > 0 and
    ``max_workers`` either null or >= 1.

    Raises
    ------
    ValueError
        Naming the first offending section or key.
    """
    unknown = sorted(set(cfg) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config sections: {', '.join(unknown)}")

    for section in DEFAULT_CONFIG:
        if not isinstance(cfg[section], dict):
            raise ValueError(f"Config section '{section}' must be a dict")

    try:
        SegmentationConfig.from_dict(cfg["segmentation"])
    except TypeError as exc:
        raise ValueError(f"Invalid segmentation options: {exc}") from exc

    sweep = cfg["sweep"]
    unknown = sorted(set(sweep) - set(DEFAULT_CONFIG["sweep"]))
    if unknown:
        raise ValueError(f"Unknown sweep options: {', '.join(unknown)}")
    for key in _SWEEP_FLOAT_KEYS:
        if not _is_number(sweep[key]):
            raise ValueError(f"sweep.{key} must be a number, got {sweep[key]!r}")
    if sweep["fps"] <= 0:
        raise ValueError(f"sweep.fps must be > 0, got {sweep['fps']}")
    seconds = sweep["max_separation_seconds"]
    if not _is_number(seconds) or seconds < 0 or int(seconds) != seconds:
        raise ValueError(
            f"sweep.max_separation_seconds must be a whole number >= 0, got {seconds!r}"
        )
    workers = sweep["max_workers"]
    if workers is not None and (not isinstance(workers, int) or isinstance(workers, bool)
                                or workers < 1):
        raise ValueError(f"sweep.max_workers must be null or >= 1, got {workers!r}")
    return cfg


def load_config(path: Union[str, Path]) -> dict:
    """Read a JSON or YAML config file.

    Parameters
    ----------
    path : str or Path
        ``.yaml``/``.yml`` files are read as YAML, anything else as JSON.

    Returns
    -------
    dict
        ``DEFAULT_CONFIG`` updated with the file's values.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ImportError
        If a YAML file is given and PyYAML is missing.
    ValueError
        If the file does not hold a mapping, or holds unknown keys or
        invalid values.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in _YAML_SUFFIXES:
        data = _require_yaml().safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a dict, got {type(data).__name__}")

    cfg = validate_config(_deep_merge(DEFAULT_CONFIG, data))
    logger.info(f"Loaded config from {path}")
    return cfg


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Write *config* as JSON, or as YAML for ``.yaml``/``.yml`` paths.

    Parent directories are created as needed. Returns the path written.
    """
    path = Path(path)
    if path.suffix.lower() in _YAML_SUFFIXES:
        text = _require_yaml().safe_dump(config, default_flow_style=False, sort_keys=False)
    else:
        text = json.dumps(config, indent=2) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    logger.info(f"Saved config to {path}")
    return str(path)


def _deep_merge(base: dict, override: dict) -> dict:
    """Return a deep copy of *base* with *override* merged in, section by section."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
