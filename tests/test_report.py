import io
import json

import pyarrow.parquet as pq
import pytest

from pii_sweep.errors import ConfigError
from pii_sweep.pipeline.context import FileReport, Finding, MatchRecord, ScanSummary
from pii_sweep.report.console import ConsoleReporter, render_file_report
from pii_sweep.writers.base import report_rows
from pii_sweep.writers.parquet import ParquetFindingsWriter
from pii_sweep.writers.registry import list_findings_writers, make_findings_writer


def _report():
    recs = [MatchRecord("email address", f"u{i}@example.com", "/x/a.txt") for i in range(2)]
    dump_rec = MatchRecord("national/ssn id", "123-45-6789", "/x/a.txt", 7)
    return FileReport(
        path="/x/a.txt",
        kind="text",
        findings=[
            Finding("email address", "/x/a.txt", 9, recs, extractor="text"),
            Finding("national/ssn id", "/x/a.txt", 1, [dump_rec], line_no=7, extractor="mysql-dump"),
        ],
        marker_found=True,
    )


def test_render_file_report_lines():
    lines = render_file_report(_report())

    assert lines[0] == "[text] In /x/a.txt, found 9 instance(s) of email address. Sample matches:"
    assert lines[1:3] == ["  Match 1: u0@example.com", "  Match 2: u1@example.com"]
    assert lines[3].startswith("[text] In line 7 of /x/a.txt, found 1 instance(s) of national/ssn id")
    assert lines[-1].startswith("OBFUSCATION TAG FOUND")


def test_reporter_writes_nothing_for_clean_files():
    stream = io.StringIO()
    ConsoleReporter(stream).report(FileReport(path="/x/clean.txt", kind="text"))
    assert stream.getvalue() == ""

    ConsoleReporter(stream, show_clean=True).report(FileReport(path="/x/clean.txt", kind="text"))
    assert stream.getvalue() == "[text] /x/clean.txt: no findings\n"


def test_reporter_summary_table():
    summary = ScanSummary(run_id="r1", root="/x")
    summary.add(_report())
    summary.add(FileReport(path="/x/b.bin"))
    stream = io.StringIO()

    ConsoleReporter(stream).summary(summary)

    out = stream.getvalue()
    assert "Scan Summary" in out
    assert "email address" in out
    assert summary.as_dict()["files_by_kind"] == {"text": 1, "unrecognized": 1}
    assert summary.matches_by_rule["email address"] == 9


def test_report_rows_one_per_sample_plus_marker():
    rows = report_rows(_report(), "r1")

    assert [r["rule_name"] for r in rows] == ["email address", "email address", "national/ssn id", "obfuscation tag"]
    assert rows[0]["match_count"] == 9
    assert rows[2]["line_no"] == 7


def test_unknown_findings_format():
    assert set(list_findings_writers()) >= {"jsonl", "parquet"}
    with pytest.raises(ConfigError, match="Unknown findings format"):
        make_findings_writer("csv", "out.csv", "r1")


def test_jsonl_writer_writes_rows_as_reports_arrive(tmp_path):
    path = tmp_path / "out" / "findings.jsonl"
    writer = make_findings_writer("jsonl", str(path), "r1")

    writer.report(_report())
    on_disk = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    writer.report(FileReport(path="/x/clean.txt", kind="text"))

    assert len(on_disk) == 4
    assert on_disk[-1]["rule_name"] == "obfuscation tag"
    assert writer.close() == str(path)
    assert writer.rows_written == 4


def test_jsonl_writer_empty_run_leaves_empty_file(tmp_path):
    path = tmp_path / "findings.jsonl"
    make_findings_writer("jsonl", str(path), "r1").close()
    assert path.read_text(encoding="utf-8") == ""


def test_parquet_writer_flushes_row_groups_in_batches(tmp_path):
    path = tmp_path / "findings.parquet"
    writer = ParquetFindingsWriter(str(path), "r1", batch_rows=4)

    writer.report(_report())
    writer.report(FileReport(path="/x/b.txt", kind="text", marker_found=True))
    writer.close()

    meta = pq.ParquetFile(str(path)).metadata
    assert meta.num_row_groups == 2
    assert meta.num_rows == 5
    assert writer.rows_written == 5
    assert pq.read_table(str(path)).column("path").to_pylist()[-1] == "/x/b.txt"


def test_parquet_writer_empty_run_has_schema(tmp_path):
    path = tmp_path / "findings.parquet"
    make_findings_writer("parquet", str(path), "r1").close()

    table = pq.read_table(str(path))
    assert table.num_rows == 0
    assert "rule_name" in table.column_names
