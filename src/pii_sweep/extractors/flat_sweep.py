"""Flat scan profile.

Read the file, try every rule, and keep only rules that hit more than
`threshold` times. No per-format handling; used when a quick noisy-file
triage is wanted instead of format-aware extraction.
"""

from __future__ import annotations
from ..pii.registry import RuleRegistry
from ..sources.base import ScanTarget
from ..pipeline.context import DEFAULT_MAX_SAMPLES
from .base import Extraction, Extractor


class FlatSweep(Extractor):
    name = "flat"

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES, threshold: int = 3):
        super().__init__(max_samples)
        self.threshold = threshold

    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        out = Extraction()
        text = target.text()
        for rule in self._all_rules(registry, target, out):
            matches = rule.find_all(text)
            if len(matches) > self.threshold:
                out.findings.append(self._finding(rule.name, target.path, matches))
        return out
