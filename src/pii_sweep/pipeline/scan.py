"""Scan runner.

Per file:
- read the bytes once; classification and extraction both use those bytes
- structured profile: classify, then dispatch to the extractor for that kind
  (unrecognized files run no extractor)
- flat profile: one threshold-filtered sweep over every readable file
- always: check the raw bytes for the obfuscation marker
- an extractor that fails unexpectedly is logged and recorded on the file's
  report; the scan goes on

Files are independent units of work on a bounded thread pool. Reports are
handed to the sinks from the calling thread as each file completes, so a
file's lines are written as one block and never interleave with another's.

No per-file timeout. Ordering across files is completion order.
"""

from __future__ import annotations
import logging
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Dict, Iterable, Optional, Protocol, Set
from tqdm import tqdm

from ..extractors.base import Extractor
from ..extractors.registry import check_mode, extractor_for, make_extractors, make_flat_extractor
from ..pii.registry import RuleRegistry
from ..sources.base import read_target
from ..sources.classify import ContentKind, classify
from ..sources.local_fs import LocalFileSource
from .context import MODE_FLAT, FileReport, ScanOptions, ScanSummary
from .marker import contains_marker

log = logging.getLogger("pii_sweep.scan")


class ReportSink(Protocol):
    def report(self, file_report: FileReport) -> None:
        ...


class Scanner:
    """Scans single files against a shared registry. Safe to call from many threads."""

    def __init__(self, registry: RuleRegistry, options: ScanOptions):
        self.registry = registry
        self.options = options
        self.mode = check_mode(options.mode)
        self.extractors: Dict[ContentKind, Extractor] = make_extractors(options)
        self.flat = make_flat_extractor(options)

    def scan_file(self, path: str) -> FileReport:
        report = FileReport(path=path)
        try:
            target = read_target(path)
        except OSError as e:
            msg = f"Error reading file {path}: {e}"
            log.warning(msg)
            report.errors.append(msg)
            return report

        if self.mode == MODE_FLAT:
            report.kind = "flat"
            extractor: Optional[Extractor] = self.flat
        else:
            kind = classify(path, content=target.content)
            report.kind = kind.value
            extractor = extractor_for(kind, self.extractors)

        if extractor is not None:
            try:
                result = extractor.extract(target, self.registry)
            except Exception as e:
                # Hard error handling: record on the report and continue with the next file.
                log.exception(f"Unhandled error in {extractor.name} extractor for {path}: {e}")
                report.errors.append(f"{extractor.name}: unhandled error for {path}: {e!r}")
            else:
                report.findings.extend(result.findings)
                report.errors.extend(result.errors)
        else:
            log.debug(f"Skipping {path}: unrecognized content")

        report.marker_found = contains_marker(target.content)
        return report


def scan_file(path: str, registry: RuleRegistry, options: Optional[ScanOptions] = None) -> FileReport:
    """Scan one file on the calling thread."""
    return Scanner(registry, options or ScanOptions()).scan_file(path)


def _drain(done: Iterable[Future], summary: ScanSummary, sinks: Iterable[ReportSink], bar: tqdm) -> None:
    for fut in done:
        file_report = fut.result()
        summary.add(file_report)
        for sink in sinks:
            sink.report(file_report)
        bar.update(1)


def run_scan(
    root: str,
    registry: RuleRegistry,
    options: ScanOptions,
    sinks: Iterable[ReportSink] = (),
    *,
    run_id: str = "run",
) -> ScanSummary:
    """Scan every file under `root`.

    Raises:
        ScanRootError: the root does not exist or cannot be read (the only fatal case)
    """
    sinks = list(sinks)
    scanner = Scanner(registry, options)
    source = LocalFileSource(root)
    source.check_root()

    summary = ScanSummary(run_id=run_id, root=root, mode=scanner.mode)
    started = time.time()
    workers = max(1, int(options.workers))
    # keep the submitted-but-unfinished set bounded so huge trees don't queue every path
    max_pending = workers * 4

    log.info(f"Starting scan root={root} mode={scanner.mode} workers={workers} rules={len(registry)}")

    pending: Set[Future] = set()
    bar = tqdm(desc="files", unit="file", disable=not options.progress)
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="pii-sweep")
    try:
        for path in source.stream():
            pending.add(executor.submit(scanner.scan_file, path))
            if len(pending) >= max_pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                _drain(done, summary, sinks, bar)
        while pending:
            done, pending = wait(pending, return_when=FIRST_COMPLETED)
            _drain(done, summary, sinks, bar)
    except KeyboardInterrupt:
        log.warning(f"Interrupted; cancelling {len(pending)} pending file(s)")
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    finally:
        executor.shutdown(wait=True)
        bar.close()

    summary.error_count += source.walk_errors
    summary.duration_s = time.time() - started
    log.info(
        f"Finished scan root={root} files={summary.files_seen} "
        f"with_findings={summary.files_with_findings} marker_hits={summary.marker_hits} "
        f"errors={summary.error_count} duration_s={summary.duration_s:.2f}"
    )
    return summary
