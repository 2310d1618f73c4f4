"""Sensitive-pattern rules.

Rules are grouped by theme under `pii_sweep.pii.detectors` and assembled into
an immutable RuleRegistry by `build_registry()`.
"""

from .base import PatternRule
from .registry import SENSITIVE_LABEL, RuleRegistry, build_registry

__all__ = ["PatternRule", "RuleRegistry", "SENSITIVE_LABEL", "build_registry"]
