"""Structured findings writers.

The console report is for people; these writers emit one row per sampled
match for downstream tooling. Rows go to the output file as reports arrive
(Parquet buffers them into row groups), so memory stays flat on large trees.

Row schema:
    run_id, path, kind, rule_name, line_no, match_count, sample
"""

from __future__ import annotations
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List
from ..pipeline.context import FileReport


def report_rows(file_report: FileReport, run_id: str) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    for f in file_report.findings:
        for rec in f.samples:
            rows.append({
                "run_id": run_id,
                "path": file_report.path,
                "kind": file_report.kind,
                "rule_name": rec.rule_name,
                "line_no": rec.line_no,
                "match_count": f.match_count,
                "sample": rec.sample_text,
            })
    if file_report.marker_found:
        rows.append({
            "run_id": run_id,
            "path": file_report.path,
            "kind": file_report.kind,
            "rule_name": "obfuscation tag",
            "line_no": None,
            "match_count": 1,
            "sample": None,
        })
    return rows


class FindingsWriter(ABC):
    """Writes per-file rows to `path` as reports arrive; close() finishes the file."""
    name: str

    def __init__(self, path: str, run_id: str):
        self.path = path
        self.run_id = run_id
        self.rows_written = 0

    def report(self, file_report: FileReport) -> None:
        rows = report_rows(file_report, self.run_id)
        if rows:
            self.write_rows(rows)
            self.rows_written += len(rows)

    def _ensure_parent(self) -> None:
        parent = os.path.dirname(self.path)
        if parent:
            os.makedirs(parent, exist_ok=True)

    @abstractmethod
    def write_rows(self, rows: List[Dict[str, Any]]) -> None:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> str:
        """Flush anything pending and return the output path."""
        raise NotImplementedError
