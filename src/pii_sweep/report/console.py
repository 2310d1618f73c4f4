"""Human-readable console report.

Each FileReport is rendered to a list of lines and written in one call, so
the report for a file is a contiguous block. The end-of-run summary is a
rich table.
"""

from __future__ import annotations
import sys
import threading
from typing import List, Optional, TextIO
from rich import box
from rich.console import Console
from rich.table import Table

from ..pipeline.context import FileReport, ScanSummary
from ..pipeline.marker import OBFUSCATION_MARKER


def render_file_report(file_report: FileReport) -> List[str]:
    lines: List[str] = []
    for f in file_report.findings:
        where = f"line {f.line_no} of {file_report.path}" if f.line_no else file_report.path
        lines.append(
            f"[{file_report.kind}] In {where}, found {f.match_count} instance(s) of {f.rule_name}. Sample matches:"
        )
        for i, rec in enumerate(f.samples, start=1):
            at = f" (line {rec.line_no})" if rec.line_no and not f.line_no else ""
            lines.append(f"  Match {i}{at}: {rec.sample_text}")
    if file_report.marker_found:
        lines.append(f"OBFUSCATION TAG FOUND {OBFUSCATION_MARKER} in {file_report.path}")
    return lines


class ConsoleReporter:
    def __init__(self, stream: Optional[TextIO] = None, *, show_clean: bool = False):
        self.stream = stream or sys.stdout
        self.show_clean = show_clean
        self._lock = threading.Lock()

    def report(self, file_report: FileReport) -> None:
        lines = render_file_report(file_report)
        if not lines and self.show_clean:
            lines = [f"[{file_report.kind}] {file_report.path}: no findings"]
        if not lines:
            return
        with self._lock:
            self.stream.write("\n".join(lines) + "\n")
            self.stream.flush()

    def summary(self, summary: ScanSummary) -> None:
        console = Console(file=self.stream, highlight=False)

        table = Table(title=f"[bold]Scan Summary[/bold] ({summary.run_id})", box=box.ROUNDED, border_style="cyan")
        table.add_column("Metric", style="cyan", no_wrap=True)
        table.add_column("Value", justify="right", style="magenta")
        table.add_row("Root", summary.root)
        table.add_row("Mode", summary.mode)
        table.add_row("Files scanned", f"{summary.files_seen:,}")
        for kind, n in sorted(summary.files_by_kind.items()):
            table.add_row(f"  {kind}", f"{n:,}")
        table.add_row("Files with findings", f"{summary.files_with_findings:,}")
        table.add_row("Obfuscation tags", f"{summary.marker_hits:,}")
        table.add_row("Errors", f"{summary.error_count:,}", style="red" if summary.error_count else None)
        table.add_row("Duration", f"{summary.duration_s:.2f}s")
        console.print(table)

        if summary.matches_by_rule:
            rules = Table(title="[bold]Matches by Rule[/bold]", box=box.ROUNDED, border_style="green")
            rules.add_column("Rule", style="cyan")
            rules.add_column("Matches", justify="right", style="yellow")
            for name, n in summary.matches_by_rule.most_common():
                rules.add_row(name, f"{n:,}")
            console.print(rules)
