"""Recursive sensitive-label walk for JSON and JSON Lines files.

Content holding a line break and not starting with `[` is treated as JSON
Lines, unless the whole content also parses as a single document (pretty
printed objects). JSON Lines are parsed one line at a time; lines that do not
parse (including documents nested too deeply to parse) are ordinary
non-matches, not errors.

Every object key matching the sensitive-label rule is reported together with
its value, whatever the value's type. Strings are shown decoded; everything
else is shown as the literal source text of the value, exactly as written in
the file. The walk descends into nested objects and into the object elements
of arrays.
"""

from __future__ import annotations
import json
import logging
import re
from typing import Iterable, List
from ..pii.base import PatternRule
from ..pii.registry import SENSITIVE_LABEL, RuleRegistry
from ..sources.base import ScanTarget
from .base import Extraction, Extractor

log = logging.getLogger("pii_sweep.extractors.json")

_decoder = json.JSONDecoder()
_WS = re.compile(r"[ \t\n\r]*")


def _parses(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def looks_like_jsonl(text: str) -> bool:
    return "\n" in text and not text.startswith("[")


def iter_documents(text: str) -> Iterable[str]:
    """Yield the source text of every parseable JSON document in the content."""
    if looks_like_jsonl(text) and not _parses(text):
        for line in text.split("\n"):
            if line.strip() and _parses(line):
                yield line
        return

    if _parses(text):
        yield text


def _skip_ws(text: str, idx: int) -> int:
    return _WS.match(text, idx).end()


def _skip_value(text: str, idx: int) -> int:
    _, end = _decoder.raw_decode(text, idx)
    return end


def literal_value(span: str) -> str:
    """Strings decoded, anything else verbatim from the source."""
    if span.startswith('"'):
        return json.loads(span)
    return span


def _walk_value(text: str, idx: int, label: PatternRule, out: List[str]) -> int:
    ch = text[idx]
    if ch == "{":
        return _walk_object(text, idx, label, out)
    if ch == "[":
        return _walk_array(text, idx, label, out)
    return _skip_value(text, idx)


def _walk_array(text: str, idx: int, label: PatternRule, out: List[str]) -> int:
    # only object elements are searched; nested arrays and scalars are skipped whole
    idx = _skip_ws(text, idx + 1)
    if text[idx] == "]":
        return idx + 1
    while True:
        if text[idx] == "{":
            idx = _walk_object(text, idx, label, out)
        else:
            idx = _skip_value(text, idx)
        idx = _skip_ws(text, idx)
        if text[idx] == "]":
            return idx + 1
        idx = _skip_ws(text, idx + 1)


def _walk_object(text: str, idx: int, label: PatternRule, out: List[str]) -> int:
    idx = _skip_ws(text, idx + 1)
    if text[idx] == "}":
        return idx + 1
    while True:
        key, idx = _decoder.raw_decode(text, idx)
        start = _skip_ws(text, _skip_ws(text, idx) + 1)
        if label.matcher.search(key):
            slot = len(out)
            out.append("")  # parent record precedes the records nested in its value
            end = _walk_value(text, start, label, out)
            out[slot] = f"{key}: {literal_value(text[start:end])}"
        else:
            end = _walk_value(text, start, label, out)
        idx = _skip_ws(text, end)
        if text[idx] == "}":
            return idx + 1
        idx = _skip_ws(text, idx + 1)


def walk_labels(document: str, label: PatternRule, out: List[str]) -> None:
    """Append "key: value" for each sensitive key in a parsed-valid document, in document order."""
    _walk_value(document, _skip_ws(document, 0), label, out)


class JSONLabelWalk(Extractor):
    name = "json"

    def extract(self, target: ScanTarget, registry: RuleRegistry) -> Extraction:
        out = Extraction()
        label = self._lookup(registry, SENSITIVE_LABEL, target, out)
        if label is None:
            return out

        matches: List[str] = []
        for doc in iter_documents(target.text()):
            found: List[str] = []
            try:
                walk_labels(doc, label, found)
            except RecursionError:
                log.debug(f"Skipping a JSON document nested too deeply to walk in {target.path}")
                continue
            matches.extend(found)
        if matches:
            out.findings.append(self._finding(label.name, target.path, matches))
        return out
