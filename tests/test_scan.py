import json
import os
import random

import pytest

from pii_sweep.errors import ScanRootError
from pii_sweep.extractors.base import Extractor
from pii_sweep.extractors.json_labels import JSONLabelWalk
from pii_sweep.pipeline.context import MODE_FLAT, ScanOptions
from pii_sweep.pipeline.marker import OBFUSCATION_MARKER, contains_marker
from pii_sweep.pipeline.scan import Scanner, run_scan, scan_file
from pii_sweep.report.console import render_file_report
from pii_sweep.sources.classify import ContentKind

DUMP = (
    "-- MySQL dump 10.13  Distrib 8.0.36\n"
    "-- Server version\t8.0.36\n"
    "INSERT INTO people VALUES (1,'a@example.com','123-45-6789');\n"
)


class CollectingSink:
    def __init__(self):
        self.reports = []

    def report(self, file_report):
        self.reports.append(file_report)


def rule_names(report):
    return {f.rule_name for f in report.findings}


def test_scan_file_dispatches_by_kind(write, registry):
    text = scan_file(write("notes.txt", "reach me at jane@example.com\n"), registry)
    data = scan_file(write("people.json", '{"user": {"nationalID": "123-45-6789"}}'), registry)
    sql = scan_file(write("seed.sql", "UPDATE p SET SSN = '111-22-3333';\n"), registry)
    dump = scan_file(write("dump.sql", DUMP), registry)

    assert (text.kind, rule_names(text)) == ("text", {"email address"})
    assert (data.kind, rule_names(data)) == ("json", {"sensitive label"})
    assert (sql.kind, rule_names(sql)) == ("sql", {"sensitive label"})
    assert dump.kind == "mysql-dump"
    assert {"email address", "national/ssn id"} <= rule_names(dump)
    assert all(f.line_no == 3 for f in dump.findings)


def test_json_file_is_not_swept_as_text(write, registry):
    report = scan_file(write("people.json", '{"email": "jane@example.com"}'), registry)
    assert report.findings == []


def test_unrecognized_file_runs_no_extractor(write, registry):
    blob = bytes(range(256)) + b" jane@example.com " + bytes(range(256))
    report = scan_file(write("blob.bin", blob), registry)

    assert report.kind == "unrecognized"
    assert report.findings == []
    assert not report.has_findings


def test_marker_found_once_however_often_it_repeats(write, registry):
    path = write("tagged.txt", f"{OBFUSCATION_MARKER}\nnothing else\n{OBFUSCATION_MARKER}{OBFUSCATION_MARKER}\n")
    report = scan_file(path, registry)

    assert report.marker_found
    lines = render_file_report(report)
    assert sum("OBFUSCATION TAG FOUND" in line for line in lines) == 1


def test_marker_checked_for_unrecognized_files(write, registry):
    blob = bytes(range(256)) + OBFUSCATION_MARKER.encode() + bytes(range(256))
    report = scan_file(write("blob.bin", blob), registry)

    assert report.kind == "unrecognized"
    assert report.marker_found


def test_no_marker_without_token(write, registry):
    report = scan_file(write("plain.txt", "ec4919e3-1fe2-4808-ab5b-4b323d6ce23b is close but not it\n"), registry)
    assert not report.marker_found
    assert not contains_marker(OBFUSCATION_MARKER[:-1].encode())


def test_unreadable_file_is_recorded_not_raised(tmp_path, registry):
    report = scan_file(str(tmp_path / "gone.txt"), registry)

    assert report.findings == []
    assert len(report.errors) == 1
    assert "gone.txt" in report.errors[0]


def test_missing_label_rule_only_skips_that_check(write):
    from datetime import date
    from pii_sweep.pii.registry import build_registry

    reg = build_registry(date(2024, 1, 1), disabled=["sensitive label"])
    json_report = scan_file(write("p.json", '{"SSN": "1"}'), reg)
    text_report = scan_file(write("t.txt", "jane@example.com\n"), reg)

    assert json_report.errors and json_report.findings == []
    assert rule_names(text_report) == {"email address"}


def test_flat_mode_sweeps_every_readable_file(write, registry):
    options = ScanOptions(mode=MODE_FLAT, flat_threshold=3)
    emails = " ".join(f"u{i}@example.com" for i in range(4))

    json_report = scan_file(write("p.json", json.dumps({"contacts": emails})), registry, options)
    few = scan_file(write("few.txt", "a@example.com b@example.com"), registry, options)

    assert json_report.kind == "flat"
    assert rule_names(json_report) == {"email address"}
    assert few.findings == []


def test_unknown_mode_is_config_error(registry):
    from pii_sweep.errors import ConfigError

    with pytest.raises(ConfigError):
        Scanner(registry, ScanOptions(mode="fuzzy"))


def test_run_scan_missing_root_is_fatal(tmp_path, registry):
    with pytest.raises(ScanRootError):
        run_scan(str(tmp_path / "nope"), registry, ScanOptions(workers=2))


def test_run_scan_reports_each_file_once(write, tmp_path, registry):
    write("a/notes.txt", "jane@example.com\n")
    write("a/b/people.json", '{"SSN": "1"}')
    write("a/b/c/dump.sql", DUMP)
    write("blob.bin", bytes(range(256)))
    sink = CollectingSink()

    summary = run_scan(str(tmp_path), registry, ScanOptions(workers=3), [sink], run_id="t1")

    paths = sorted(r.path for r in sink.reports)
    assert len(paths) == 4 == len(set(paths))
    assert summary.files_seen == 4
    assert summary.files_by_kind == {"text": 1, "json": 1, "mysql-dump": 1, "unrecognized": 1}
    assert summary.files_with_findings == 3
    assert summary.run_id == "t1"


def test_run_scan_single_file_root(write, registry):
    path = write("only.txt", "jane@example.com\n")
    sink = CollectingSink()

    summary = run_scan(path, registry, ScanOptions(workers=1), [sink])

    assert summary.files_seen == 1
    assert sink.reports[0].path == path


FRAGMENTS = [
    "jane.doe@example.com", "Austin TX 78701", "+442071838750", "415-555-2671",
    "06-15-1990", "123-45-6789", "5555555555554444", "4111 1111 1111 1111",
    "378282246310005", "nationalID", "lorem", "ipsum", "dolor", "\n", OBFUSCATION_MARKER,
]


def _random_tree(tmp_path, n_files, seed=1234):
    rng = random.Random(seed)
    for i in range(n_files):
        sub = tmp_path / f"d{i % 7}"
        sub.mkdir(exist_ok=True)
        words = [rng.choice(FRAGMENTS) for _ in range(rng.randint(0, 40))]
        choice = i % 4
        if choice == 0:
            (sub / f"f{i}.txt").write_text(" ".join(words) + "\n", encoding="utf-8")
        elif choice == 1:
            doc = {"id": i, "nationalID": rng.choice(FRAGMENTS), "nested": [{"SSN": w} for w in words[:3]]}
            (sub / f"f{i}.json").write_text(json.dumps(doc), encoding="utf-8")
        elif choice == 2:
            rows = "\n".join(f"UPDATE p SET SSN = '{w}', n = {j};" for j, w in enumerate(words))
            (sub / f"f{i}.sql").write_text(rows, encoding="utf-8")
        else:
            (sub / f"f{i}.bin").write_bytes(bytes(rng.randrange(256) for _ in range(300)))


def test_concurrent_scan_matches_sequential_per_file(tmp_path, registry):
    _random_tree(tmp_path, 400)
    options = ScanOptions(workers=8)
    sink = CollectingSink()

    run_scan(str(tmp_path), registry, options, [sink])

    assert len(sink.reports) == 400
    for report in sink.reports:
        alone = scan_file(report.path, registry, options)
        assert report.kind == alone.kind
        assert report.findings == alone.findings
        assert report.marker_found == alone.marker_found


def test_deeply_nested_json_does_not_stop_the_scan(write, tmp_path, registry):
    write("a.txt", "jane@example.com\n")
    write("deep.json", "[" * 200000 + "]" * 200000)
    sink = CollectingSink()

    summary = run_scan(str(tmp_path), registry, ScanOptions(workers=2), [sink])

    by_name = {os.path.basename(r.path): r for r in sink.reports}
    assert set(by_name) == {"a.txt", "deep.json"}
    assert rule_names(by_name["a.txt"]) == {"email address"}
    assert by_name["deep.json"].kind == "json"
    assert by_name["deep.json"].findings == []
    assert by_name["deep.json"].errors == []
    assert summary.files_seen == 2


class FailingExtractor(Extractor):
    name = "text"

    def extract(self, target, registry):
        raise RuntimeError("extractor blew up")


def test_extractor_failure_is_recorded_and_scan_continues(write, tmp_path, registry, monkeypatch):
    write("a.txt", f"jane@example.com {OBFUSCATION_MARKER}\n")
    write("people.json", '{"SSN": "1"}')
    monkeypatch.setattr(
        "pii_sweep.pipeline.scan.make_extractors",
        lambda options: {ContentKind.TEXT: FailingExtractor(), ContentKind.JSON: JSONLabelWalk()},
    )
    sink = CollectingSink()

    summary = run_scan(str(tmp_path), registry, ScanOptions(workers=2), [sink])

    by_name = {os.path.basename(r.path): r for r in sink.reports}
    failed = by_name["a.txt"]
    assert failed.findings == []
    assert failed.marker_found
    assert len(failed.errors) == 1
    assert "RuntimeError('extractor blew up')" in failed.errors[0]
    assert rule_names(by_name["people.json"]) == {"sensitive label"}
    assert summary.error_count == 1


def test_scanner_classifies_the_bytes_it_extracts(write, registry, monkeypatch):
    path = write("dump.sql", DUMP)
    opened = []
    real_open = open

    def counting_open(file, *args, **kwargs):
        opened.append(file)
        return real_open(file, *args, **kwargs)

    monkeypatch.setattr("builtins.open", counting_open)
    report = scan_file(path, registry)

    assert report.kind == "mysql-dump"
    assert opened.count(path) == 1
