"""Whole-content regex sweep for plain text files."""

from __future__ import annotations
from ..pii.registry import RuleRegistry
from ..sources.base import ScanTarget
from .base import Extraction, Extractor


class TextSweep(Extractor):
    name = "text"

    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        out = Extraction()
        text = target.text()
        for rule in self._all_rules(registry, target, out):
            matches = rule.find_all(text)
            if matches:
                out.findings.append(self._finding(rule.name, target.path, matches))
        return out
