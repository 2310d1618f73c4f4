"""Per-line sweep for MySQL dump files.

Dumps interleave schema with bulk INSERT rows that can run to megabytes on a
single line. Matching line by line keeps findings tied to the row that holds
them, and the per-line sample cap keeps one huge row from burying the rest.
Multi-line patterns (PEM keys) cannot match here.
"""

from __future__ import annotations
from ..pii.registry import RuleRegistry
from ..sources.base import ScanTarget
from .base import Extraction, Extractor


class MySQLDumpSweep(Extractor):
    name = "mysql-dump"

    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        out = Extraction()
        rules = self._all_rules(registry, target, out)
        for line_no, line in enumerate(target.text().split("\n"), start=1):
            for rule in rules:
                matches = rule.find_all(line)
                if matches:
                    out.findings.append(self._finding(rule.name, target.path, matches, line_no=line_no))
        return out
