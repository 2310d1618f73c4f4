"""pii_sweep

Filesystem sweep for sensitive-data patterns (DLP-style, regex heuristics).

Public API surface:
- pii_sweep.cli.main : CLI entrypoint
- pii_sweep.pii.build_registry : construct the pattern rule registry
- pii_sweep.sources.classify.classify : content kind sniffing
- pii_sweep.extractors : per-format extraction strategies
- pii_sweep.pipeline.scan.run_scan / scan_file : run a scan

Findings are heuristics; false positives and negatives are expected.
"""
__all__ = ["__version__"]
__version__ = "0.3.0"
