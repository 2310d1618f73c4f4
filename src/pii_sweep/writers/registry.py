"""Findings writer registry.

Add new output formats without changing the scan runner by registering a
FindingsWriter subclass here or via register_findings_writer().
"""

from __future__ import annotations
from typing import Dict, Type
from ..errors import ConfigError
from .base import FindingsWriter
from .jsonl import JSONLFindingsWriter
from .parquet import ParquetFindingsWriter

_WRITERS: Dict[str, Type[FindingsWriter]] = {
    "jsonl": JSONLFindingsWriter,
    "parquet": ParquetFindingsWriter,
}


def register_findings_writer(name: str, writer_cls: Type[FindingsWriter]) -> None:
    if name in _WRITERS:
        raise ValueError(f"Findings writer '{name}' already registered")
    _WRITERS[name] = writer_cls


def list_findings_writers() -> list[str]:
    return list(_WRITERS.keys())


def make_findings_writer(fmt: str, path: str, run_id: str) -> FindingsWriter:
    if fmt not in _WRITERS:
        raise ConfigError(
            f"Unknown findings format: {fmt}. "
            f"Available: {list(_WRITERS)}. "
            f"Register with register_findings_writer()"
        )
    return _WRITERS[fmt](path, run_id)
