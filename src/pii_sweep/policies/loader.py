"""Scan policy loader.

Scan settings live in a YAML file so the rule set and limits used for a run
can be reviewed and versioned alongside other compliance configuration.

Missing keys fall back to DEFAULTS; CLI flags override both.
"""

from __future__ import annotations
import copy
from typing import Any, Dict, Optional
import yaml

from ..errors import ConfigError
from ..pipeline.context import DEFAULT_MAX_SAMPLES, MODE_STRUCTURED, SCAN_MODES, ScanOptions, default_workers

DEFAULTS: Dict[str, Any] = {
    "run": {
        "run_id": None,
        "run_id_auto": {"enabled": True, "prefix_digits": 8, "suffix_digits": 6, "include_input_name": True},
        "log_dir": None,
    },
    "scan": {
        "mode": MODE_STRUCTURED,
        "workers": None,
        "max_samples": DEFAULT_MAX_SAMPLES,
        "sql_sample_cap": None,
        "flat_threshold": 3,
        "progress": False,
    },
    "rules": {"disabled": [], "extra": {}},
    "output": {"findings": {"path": None, "format": "jsonl"}},
}


def load_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return data


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_scan_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Return DEFAULTS merged with the YAML at `path` (if given)."""
    if path is None:
        return copy.deepcopy(DEFAULTS)
    return _merge(DEFAULTS, load_yaml(path))


def _opt_int(value: Any, key: str, minimum: int) -> Optional[int]:
    if value is None:
        return None
    try:
        n = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"scan.{key} must be an integer, got {value!r}") from e
    if n < minimum:
        raise ConfigError(f"scan.{key} must be >= {minimum}, got {n}")
    return n


def scan_options(cfg: Dict[str, Any]) -> ScanOptions:
    scan = cfg.get("scan") or {}
    mode = str(scan.get("mode", MODE_STRUCTURED)).lower()
    if mode not in SCAN_MODES:
        raise ConfigError(f"Unknown scan mode: {mode}. Available: {list(SCAN_MODES)}")
    workers = _opt_int(scan.get("workers"), "workers", 1)
    max_samples = _opt_int(scan.get("max_samples", DEFAULT_MAX_SAMPLES), "max_samples", 1)
    flat_threshold = _opt_int(scan.get("flat_threshold", 3), "flat_threshold", 0)
    return ScanOptions(
        mode=mode,
        workers=workers or default_workers(),
        max_samples=DEFAULT_MAX_SAMPLES if max_samples is None else max_samples,
        sql_sample_cap=_opt_int(scan.get("sql_sample_cap"), "sql_sample_cap", 1),
        flat_threshold=3 if flat_threshold is None else flat_threshold,
        progress=bool(scan.get("progress", False)),
    )
