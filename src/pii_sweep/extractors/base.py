"""Extractor plugin interface.

Extractors must:
- accept a ScanTarget (path + raw bytes) and the shared RuleRegistry
- return an Extraction (findings + per-file error notes)
- never mutate the registry or the file

A rule that is missing from the registry is a configuration error: it is
logged and recorded, and only that rule's checks are skipped.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional
from ..errors import MissingRuleError
from ..pii.base import PatternRule
from ..pii.registry import RuleRegistry
from ..pipeline.context import DEFAULT_MAX_SAMPLES, Finding, MatchRecord
from ..sources.base import ScanTarget

log = logging.getLogger("pii_sweep.extractors")


@dataclass
class Extraction:
    findings: List[Finding] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


class Extractor(ABC):
    name: str = "extractor"

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES):
        self.max_samples = max_samples

    @abstractmethod
    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        ...

    def _lookup(self, registry: RuleRegistry, name: str, target: ScanTarget, out: Extraction) -> Optional[PatternRule]:
        try:
            return registry.get_rule(name)
        except MissingRuleError as e:
            msg = f"{self.name}: {e}; skipping that check for {target.path}"
            log.error(msg)
            out.errors.append(msg)
            return None

    def _all_rules(self, registry: RuleRegistry, target: ScanTarget, out: Extraction) -> List[PatternRule]:
        rules = registry.rules()
        if not rules:
            msg = f"{self.name}: pattern registry is empty; nothing checked for {target.path}"
            log.error(msg)
            out.errors.append(msg)
        return rules

    def sample_cap(self) -> Optional[int]:
        """Samples kept per finding; None keeps all of them."""
        return self.max_samples

    def _finding(self, rule_name: str, path: str, matches: List[str], line_no: Optional[int] = None) -> Finding:
        cap = self.sample_cap()
        kept = matches if cap is None else matches[:cap]
        return Finding(
            rule_name=rule_name,
            origin_file=path,
            match_count=len(matches),
            samples=[MatchRecord(rule_name, m, path, line_no) for m in kept],
            line_no=line_no,
            extractor=self.name,
        )
