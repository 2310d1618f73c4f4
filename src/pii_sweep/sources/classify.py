"""Content kind classification.

Precedence (first match wins):
1. mysql-dump   .sql suffix AND a dump header in the first 10 lines
2. json         .json / .jsonl / .ndjson suffix (validity checked at extraction)
3. sql          .sql suffix without a dump header
4. text         libmagic sniff of the first 512 bytes reports text: a text/*
                type, a text-based application/* type (JSON, XML, scripts),
                or any other type whose detected charset is not binary
5. unrecognized anything else; no extractor runs

Pass `content` when the bytes are already in memory (the scanner does) and
the file is not opened again. Without it the needed prefix is read from disk.

Classification never raises for file access problems: an unreadable file is
`unrecognized`, and the caller moves on.
"""

from __future__ import annotations
import io
import logging
import os
from enum import Enum
from functools import lru_cache
from typing import BinaryIO, Iterable, List, Optional
import magic

log = logging.getLogger("pii_sweep.sources.classify")

SNIFF_BYTES = 512
DUMP_HEADER_LINES = 10
DUMP_HEADER_MARKERS = ("-- MySQL dump", "-- MariaDB dump", "Server version")

SQL_SUFFIXES = (".sql",)
JSON_SUFFIXES = (".json", ".jsonl", ".ndjson")

# application/* types libmagic reports for plain UTF-8/ASCII text
TEXT_APPLICATION_MIMES = frozenset({
    "application/json",
    "application/x-ndjson",
    "application/xml",
    "application/javascript",
    "application/x-javascript",
    "application/ecmascript",
    "application/sql",
    "application/x-sh",
    "application/x-shellscript",
    "application/x-yaml",
    "application/csv",
})
EMPTY_MIME = "application/x-empty"
BINARY_CHARSET = "binary"


class ContentKind(str, Enum):
    TEXT = "text"
    JSON = "json"
    SQL = "sql"
    MYSQL_DUMP = "mysql-dump"
    UNRECOGNIZED = "unrecognized"


def read_prefix(path: str, limit: int = SNIFF_BYTES) -> bytes:
    with open(path, "rb") as f:
        return f.read(limit)


def _readlines(f: BinaryIO, max_lines: int) -> List[bytes]:
    lines: List[bytes] = []
    for _ in range(max_lines):
        raw = f.readline()
        if not raw:
            break
        lines.append(raw)
    return lines


def header_lines(path: str, content: Optional[bytes] = None, max_lines: int = DUMP_HEADER_LINES) -> List[bytes]:
    """First `max_lines` lines of `content`, or of the file when no content is given."""
    if content is not None:
        return _readlines(io.BytesIO(content), max_lines)
    with open(path, "rb") as f:
        return _readlines(f, max_lines)


def has_dump_header(lines: Iterable[bytes]) -> bool:
    for raw in lines:
        line = raw.decode("utf-8", errors="replace")
        if any(m in line for m in DUMP_HEADER_MARKERS):
            return True
    return False


@lru_cache(maxsize=None)
def _charset_sniffer() -> magic.Magic:
    return magic.Magic(mime_encoding=True)


def is_text_content(head: bytes) -> bool:
    mime = magic.from_buffer(head, mime=True)
    if mime.startswith("text/") or mime in TEXT_APPLICATION_MIMES:
        return True
    if mime == EMPTY_MIME:
        return False
    return _charset_sniffer().from_buffer(head) != BINARY_CHARSET


def classify(path: str, content: Optional[bytes] = None) -> ContentKind:
    name = os.path.basename(path).lower()
    try:
        head = content[:SNIFF_BYTES] if content is not None else read_prefix(path)
        if name.endswith(SQL_SUFFIXES):
            if has_dump_header(header_lines(path, content)):
                return ContentKind.MYSQL_DUMP
            return ContentKind.SQL
        if name.endswith(JSON_SUFFIXES):
            return ContentKind.JSON
    except OSError as e:
        log.warning(f"Cannot read {path} for classification: {e}")
        return ContentKind.UNRECOGNIZED

    try:
        if is_text_content(head):
            return ContentKind.TEXT
    except magic.MagicException as e:
        log.warning(f"Content sniffing failed for {path}: {e}")
    return ContentKind.UNRECOGNIZED
