"""Run ID resolution: explicit or auto-generated from config.

Auto-generation uses:
- prefix_digits / suffix_digits: first/last N digits of a compact timestamp
- include_input_name: name derived from the scan root directory
"""

from __future__ import annotations
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _timestamp_digits(prefix: int = 8, suffix: int = 6, now: Optional[datetime] = None) -> tuple[str, str]:
    """Compact timestamp YYYYMMDDHHMMSS; return (first prefix digits, last suffix digits)."""
    ts = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")  # 14 digits
    a = ts[: min(prefix, len(ts))]
    b = ts[-min(suffix, len(ts)):] if suffix else ""
    return (a, b)


def _input_name_from_root(root: str) -> str:
    """Short, id-safe name for the scan root ("/srv/exports/" -> "exports")."""
    name = os.path.basename(os.path.normpath(os.path.abspath(root)))
    name = re.sub(r"[^\w\-]", "_", name)
    return name or "root"


def generate_run_id(root: str, auto_cfg: Dict[str, Any], now: Optional[datetime] = None) -> str:
    """Build run_id from run_id_auto config and the scan root.

    auto_cfg may contain:
    - prefix_digits: first N digits of timestamp (default 8 -> date)
    - suffix_digits: last N digits of timestamp (default 6 -> time)
    - include_input_name: bool, include the scan root's name (default True)
    - separator: string between parts (default "_")
    """
    prefix_digits = int(auto_cfg.get("prefix_digits", 8))
    suffix_digits = int(auto_cfg.get("suffix_digits", 6))
    include_input_name = auto_cfg.get("include_input_name", True)
    separator = str(auto_cfg.get("separator", "_"))

    parts: list[str] = []
    if include_input_name:
        parts.append(_input_name_from_root(root))
    pre, suf = _timestamp_digits(prefix_digits, suffix_digits, now)
    if pre:
        parts.append(pre)
    if suf:
        parts.append(suf)
    return separator.join(parts) if parts else "run"


def resolve_run_id(cfg: Dict[str, Any], root: str, now: Optional[datetime] = None) -> str:
    """Return run_id: explicit run.run_id, or auto-generated from run.run_id_auto, or 'run'."""
    run = cfg.get("run") or {}
    explicit = run.get("run_id")
    if explicit is not None and str(explicit).strip():
        return str(explicit).strip()
    auto_cfg = run.get("run_id_auto")
    if isinstance(auto_cfg, dict) and auto_cfg.get("enabled", True):
        return generate_run_id(root, auto_cfg, now)
    return "run"
