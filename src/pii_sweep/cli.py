"""CLI entrypoint.

Commands:
- `pii-sweep scan --filesystem /srv/exports [--config configs/scan.yaml]`
- `pii-sweep rules [--config configs/scan.yaml]`

Scan profiles (config: scan.mode, or --mode):
- structured: classify each file and use the format-aware extractor (default)
- flat: one regex sweep per file, reporting rules with more than scan.flat_threshold hits

Exit codes: 0 scan completed, 1 scan root unusable, 2 bad configuration.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

from .errors import ConfigError, ScanRootError
from .logging_ import setup_logging
from .pii.registry import build_registry
from .pipeline.context import SCAN_MODES
from .pipeline.scan import run_scan
from .policies.loader import load_scan_config, scan_options
from .report.console import ConsoleReporter
from .run_id import resolve_run_id
from .writers.registry import list_findings_writers, make_findings_writer

log = logging.getLogger("pii_sweep.cli")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="pii-sweep")
    sub = p.add_subparsers(dest="cmd", required=True)

    ps = sub.add_parser("scan", help="Scan a directory tree for sensitive-data patterns")
    ps.add_argument("--filesystem", required=True, help="The root of the filesystem to scan")
    ps.add_argument("--config", default=None, help="Scan policy YAML")
    ps.add_argument("--mode", choices=SCAN_MODES, default=None, help="Scan profile (default: structured)")
    ps.add_argument("--workers", type=int, default=None, help="Files scanned concurrently")
    ps.add_argument("--findings-out", default=None, metavar="PATH", help="Also write structured findings here")
    ps.add_argument("--findings-format", choices=list_findings_writers(), default=None)
    ps.add_argument("--progress", action="store_true", help="Show a progress bar on stderr")
    ps.add_argument("--log-dir", default=None, help="Also write logs to <log-dir>/<run_id>.log")
    ps.add_argument("--debug", action="store_true", help="Enable debug logging")

    pr = sub.add_parser("rules", help="List the pattern rules that a scan would use")
    pr.add_argument("--config", default=None, help="Scan policy YAML")
    return p


def _apply_overrides(cfg: dict, args: argparse.Namespace) -> dict:
    scan = cfg.setdefault("scan", {})
    if args.mode:
        scan["mode"] = args.mode
    if args.workers is not None:
        scan["workers"] = args.workers
    if args.progress:
        scan["progress"] = True
    findings = cfg.setdefault("output", {}).setdefault("findings", {})
    if args.findings_out:
        findings["path"] = args.findings_out
    if args.findings_format:
        findings["format"] = args.findings_format
    if args.log_dir:
        cfg.setdefault("run", {})["log_dir"] = args.log_dir
    return cfg


def _registry_from(cfg: dict):
    rules = cfg.get("rules") or {}
    return build_registry(disabled=rules.get("disabled") or (), extra=rules.get("extra") or {})


def cmd_rules(args: argparse.Namespace) -> int:
    registry = _registry_from(load_scan_config(args.config))
    for name, pattern in registry.describe():
        print(f"{name}\t{pattern}")
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    cfg = _apply_overrides(load_scan_config(args.config), args)
    run_id = resolve_run_id(cfg, args.filesystem)
    setup_logging(run_id, log_dir=cfg["run"].get("log_dir"), level=logging.DEBUG if args.debug else logging.INFO)

    options = scan_options(cfg)
    registry = _registry_from(cfg)

    reporter = ConsoleReporter()
    sinks = [reporter]
    findings_cfg = cfg["output"]["findings"]
    writer = None
    if findings_cfg.get("path"):
        writer = make_findings_writer(findings_cfg.get("format") or "jsonl", findings_cfg["path"], run_id)
        sinks.append(writer)

    summary = run_scan(args.filesystem, registry, options, sinks, run_id=run_id)

    if writer is not None:
        out = writer.close()
        log.info(f"Wrote {writer.rows_written} finding row(s) to {out}")
    reporter.summary(summary)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        if args.cmd == "rules":
            return cmd_rules(args)
        return cmd_scan(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ScanRootError as e:
        print(f"Error walking the path {args.filesystem}: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
