"""Extractor registry.

Maps a content kind to the extractor that handles it for the structured
profile, and provides the single sweep used by the flat profile.

Adding a format:
1) implement an Extractor subclass in `pii_sweep.extractors.*`
2) add a ContentKind in `pii_sweep.sources.classify` and map it here
"""

from __future__ import annotations
from typing import Dict, Optional
from ..errors import ConfigError
from ..pipeline.context import MODE_FLAT, MODE_STRUCTURED, ScanOptions
from ..sources.classify import ContentKind
from .base import Extractor
from .flat_sweep import FlatSweep
from .json_labels import JSONLabelWalk
from .mysql_dump import MySQLDumpSweep
from .sql_columns import SQLColumnValues
from .text_sweep import TextSweep


def make_extractors(options: ScanOptions) -> Dict[ContentKind, Extractor]:
    """Extractors per content kind for the structured profile."""
    return {
        ContentKind.TEXT: TextSweep(options.max_samples),
        ContentKind.JSON: JSONLabelWalk(options.max_samples),
        ContentKind.SQL: SQLColumnValues(options.max_samples, sql_sample_cap=options.sql_sample_cap),
        ContentKind.MYSQL_DUMP: MySQLDumpSweep(options.max_samples),
    }


def make_flat_extractor(options: ScanOptions) -> Extractor:
    return FlatSweep(options.max_samples, threshold=options.flat_threshold)


def extractor_for(kind: ContentKind, extractors: Dict[ContentKind, Extractor]) -> Optional[Extractor]:
    """Return the extractor for `kind`, or None for kinds that are skipped."""
    return extractors.get(kind)


def check_mode(mode: str) -> str:
    mode = str(mode).lower()
    if mode not in (MODE_STRUCTURED, MODE_FLAT):
        raise ConfigError(f"Unknown scan mode: {mode}. Available: {[MODE_STRUCTURED, MODE_FLAT]}")
    return mode
