"""Obfuscation marker check.

The marker is a fixed sentinel written by an upstream obfuscation pipeline.
It is independent of content kind, so the check runs on raw bytes, binary
files included.
"""

from __future__ import annotations

OBFUSCATION_MARKER = "ec4919e3-1fe2-4808-ab5b-4b323d6ce23a"
_MARKER_BYTES = OBFUSCATION_MARKER.encode("ascii")


def contains_marker(content: bytes) -> bool:
    return _MARKER_BYTES in content
