"""Core scan data model.

MatchRecord is the smallest reported unit: one sample of one rule in one file.
Findings group the records of a rule (per file, or per line for dumps) and
keep the full match count even when samples are capped.
FileReport is what a single scan task hands back to the report sinks.

Design goal:
- Keep these stable so report sinks and structured writers don't churn.
"""

from __future__ import annotations
import os
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_MAX_SAMPLES = 5

MODE_STRUCTURED = "structured"
MODE_FLAT = "flat"
SCAN_MODES = (MODE_STRUCTURED, MODE_FLAT)


def default_workers() -> int:
    return min(32, (os.cpu_count() or 1) + 4)


@dataclass(frozen=True)
class MatchRecord:
    rule_name: str
    sample_text: str
    origin_file: str
    line_no: Optional[int] = None   # 1-based, set by line-oriented extractors


@dataclass
class Finding:
    rule_name: str
    origin_file: str
    match_count: int
    samples: List[MatchRecord] = field(default_factory=list)
    line_no: Optional[int] = None
    extractor: str = ""


@dataclass
class FileReport:
    path: str
    kind: str = "unrecognized"
    findings: List[Finding] = field(default_factory=list)
    marker_found: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return bool(self.findings) or self.marker_found

    def records(self) -> List[MatchRecord]:
        return [r for f in self.findings for r in f.samples]


@dataclass
class ScanOptions:
    mode: str = MODE_STRUCTURED
    workers: int = field(default_factory=default_workers)
    max_samples: int = DEFAULT_MAX_SAMPLES
    sql_sample_cap: Optional[int] = None   # None: report every extracted SQL value
    flat_threshold: int = 3
    progress: bool = False


@dataclass
class ScanSummary:
    run_id: str
    root: str
    mode: str = MODE_STRUCTURED
    files_seen: int = 0
    files_by_kind: Counter = field(default_factory=Counter)
    files_with_findings: int = 0
    marker_hits: int = 0
    error_count: int = 0
    matches_by_rule: Counter = field(default_factory=Counter)
    duration_s: float = 0.0

    def add(self, report: FileReport) -> None:
        self.files_seen += 1
        self.files_by_kind[report.kind] += 1
        if report.has_findings:
            self.files_with_findings += 1
        if report.marker_found:
            self.marker_hits += 1
        self.error_count += len(report.errors)
        for f in report.findings:
            self.matches_by_rule[f.rule_name] += f.match_count

    def as_dict(self) -> Dict[str, object]:
        return {
            "run_id": self.run_id,
            "root": self.root,
            "mode": self.mode,
            "files_seen": self.files_seen,
            "files_by_kind": dict(self.files_by_kind),
            "files_with_findings": self.files_with_findings,
            "marker_hits": self.marker_hits,
            "error_count": self.error_count,
            "matches_by_rule": dict(self.matches_by_rule),
            "duration_s": round(self.duration_s, 3),
        }
