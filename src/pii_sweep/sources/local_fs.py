"""Local filesystem source.

Walks a directory tree and yields one path per plain file. Directories are
not yielded; a root that is itself a file yields just that file.
Symlinked directories are not followed.

Errors on individual entries (permission denied, vanished directory) are
logged and skipped. Only a root that cannot be walked at all is fatal.
"""

from __future__ import annotations
import logging
import os
from typing import Any, Dict, Iterable
from ..errors import ScanRootError
from .base import FileSource

log = logging.getLogger("pii_sweep.sources.local_fs")


class LocalFileSource(FileSource):
    name = "local_fs"

    def __init__(self, root: str, *, follow_links: bool = False):
        self.root = root
        self.follow_links = follow_links
        self.walk_errors = 0

    def metadata(self) -> Dict[str, Any]:
        return {
            "kind": self.name,
            "root": os.path.abspath(self.root),
            "follow_links": self.follow_links,
        }

    def check_root(self) -> None:
        if not os.path.exists(self.root):
            raise ScanRootError(f"Scan root does not exist: {self.root}")
        if not os.access(self.root, os.R_OK):
            raise ScanRootError(f"Scan root is not readable: {self.root}")

    def _on_walk_error(self, err: OSError) -> None:
        self.walk_errors += 1
        log.warning(f"Error accessing path {err.filename}: {err.strerror or err}")

    def stream(self) -> Iterable[str]:
        self.check_root()
        if os.path.isfile(self.root):
            yield self.root
            return

        for dirpath, dirnames, filenames in os.walk(
            self.root, onerror=self._on_walk_error, followlinks=self.follow_links
        ):
            dirnames.sort()
            for name in sorted(filenames):
                path = os.path.join(dirpath, name)
                # sockets, fifos, dangling links
                if not os.path.isfile(path):
                    log.debug(f"Skipping non-regular entry: {path}")
                    continue
                yield path
