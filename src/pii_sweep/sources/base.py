"""File source interface.

A source enumerates the plain files to scan under some root. The local
filesystem walker is the only built-in, but the orchestrator only relies on
`stream()` yielding paths, so other enumerations (a manifest of paths, a
mounted snapshot) can be swapped in.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable


@dataclass(frozen=True)
class ScanTarget:
    path: str
    content: bytes

    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def read_target(path: str) -> ScanTarget:
    """Read a file once for scanning. OSError propagates to the caller."""
    with open(path, "rb") as f:
        return ScanTarget(path=path, content=f.read())


class FileSource:
    """Base interface for all file sources."""
    name: str

    def metadata(self) -> Dict[str, Any]:
        return {}

    def stream(self) -> Iterable[str]:
        raise NotImplementedError
