from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from io_ports import OUTPUT_MODES
from tape import DEFAULT_PAGE_SIZE

"""Config loader and validator.

Provides `load_config` which accepts either a path to a YAML file,
a dictionary or None and returns a normalized configuration dict
using DEFAULTS for missing values.
"""


DEFAULTS: dict[str, Any] = {
    "page_size": DEFAULT_PAGE_SIZE,
    "output_mode": "codepoint",
    "step_limit": None,
    "trace": False,
}


class ConfigError(ValueError):
    """Raised when configuration is invalid or cannot be loaded."""

    pass


_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0", ""}


def _to_bool(v: Any) -> bool:
    """Coerce bools, ints and the usual string spellings; reject anything else."""
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    if isinstance(v, str):
        word = v.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    msg = f"expected a boolean, got {v!r}"
    raise ValueError(msg)


def _convert_types(cfg: dict[str, Any]) -> None:
    """Normalize types for configuration values in-place.

    Raises ConfigError on conversion failure.
    """
    try:
        cfg["page_size"] = int(cfg.get("page_size", DEFAULTS["page_size"]))

        mode = cfg.get("output_mode")
        cfg["output_mode"] = DEFAULTS["output_mode"] if mode is None else str(mode).lower()

        # step_limit: None means run until the program ends
        v = cfg.get("step_limit")
        cfg["step_limit"] = None if v is None else int(v)

        cfg["trace"] = _to_bool(cfg.get("trace", DEFAULTS["trace"]))
    except Exception as e:
        msg = f"Bad types in config: {e}"
        raise ConfigError(msg) from e


def _validate_cfg(cfg: dict[str, Any]) -> None:
    """Perform semantic validation on normalized config dict.

    Raises ConfigError on invalid values.
    """
    if cfg["page_size"] <= 0:
        msg = "page_size must be positive"
        raise ConfigError(msg)

    if cfg["output_mode"] not in OUTPUT_MODES:
        msg = f"output_mode must be one of {', '.join(OUTPUT_MODES)}, got {cfg['output_mode']!r}"
        raise ConfigError(msg)

    if cfg["step_limit"] is not None and cfg["step_limit"] < 0:
        msg = "step_limit must be non-negative or null"
        raise ConfigError(msg)

    unknown = sorted(set(cfg) - set(DEFAULTS))
    if unknown:
        msg = f"Unknown config keys: {', '.join(unknown)}"
        raise ConfigError(msg)


def load_config(path_or_dict: str | Path | dict[str, Any] | None = None) -> dict[str, Any]:
    """Load and normalize configuration.

    Accepts:
      - None -> returns DEFAULTS copy
      - dict -> overlay DEFAULTS with provided dict
      - str or Path -> load YAML and overlay DEFAULTS

    Returns a normalized dict or raises ConfigError.
    """
    if path_or_dict is None:
        cfg: dict[str, Any] = dict(DEFAULTS)
    elif isinstance(path_or_dict, dict):
        cfg = dict(DEFAULTS)
        cfg.update(path_or_dict)
    elif isinstance(path_or_dict, (str, Path)):
        p = Path(path_or_dict)
        if not p.exists():
            msg = f"Config file not found: {path_or_dict}"
            raise ConfigError(msg)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            msg = f"Failed to load config file {path_or_dict}: {e}"
            raise ConfigError(msg) from e
        if not isinstance(data, dict):
            msg = f"Config file {path_or_dict} does not contain a mapping"
            raise ConfigError(msg)
        cfg = dict(DEFAULTS)
        cfg.update(data)
    else:
        msg = "Unsupported config input"
        raise ConfigError(msg)

    # convert types and validate semantics
    _convert_types(cfg)
    _validate_cfg(cfg)

    return cfg
