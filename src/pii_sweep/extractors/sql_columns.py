"""Sensitive column value extraction for SQL scripts.

For each sensitive label on a line (a column name such as `SSN` inside an
INSERT, UPDATE or comment), the value is the text that follows it up to the
first comma or closing parenthesis outside single quotes. A quote toggles
the "inside literal" state, so `'111-22,-3333'` stays whole. Without a
terminator (or with an unterminated literal) the value runs to end of line.
"""

from __future__ import annotations
from typing import List, Optional
from ..pii.registry import SENSITIVE_LABEL, RuleRegistry
from ..pipeline.context import DEFAULT_MAX_SAMPLES, Finding, MatchRecord
from ..sources.base import ScanTarget
from .base import Extraction, Extractor


def find_value_end(line: str, start: int) -> int:
    in_quotes = False
    for i in range(start, len(line)):
        ch = line[i]
        if ch == "'":
            in_quotes = not in_quotes
        elif ch in ",)" and not in_quotes:
            return i
    return len(line)


class SQLColumnValues(Extractor):
    name = "sql"

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES, sql_sample_cap: Optional[int] = None):
        super().__init__(max_samples)
        self.sql_sample_cap = sql_sample_cap

    def sample_cap(self) -> Optional[int]:
        return self.sql_sample_cap

    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        out = Extraction()
        label = self._lookup(registry, SENSITIVE_LABEL, target, out)
        if label is None:
            return out

        records: List[MatchRecord] = []
        for line_no, line in enumerate(target.text().split("\n"), start=1):
            for m in label.finditer(line):
                start = m.end()
                value = line[start:find_value_end(line, start)].strip()
                if value:
                    records.append(MatchRecord(label.name, value, target.path, line_no))

        if records:
            cap = self.sample_cap()
            out.findings.append(Finding(
                rule_name=label.name,
                origin_file=target.path,
                match_count=len(records),
                samples=records if cap is None else records[:cap],
                extractor=self.name,
            ))
        return out
