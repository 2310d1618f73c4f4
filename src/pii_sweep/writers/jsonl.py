from __future__ import annotations
import json
from typing import IO, Any, Dict, List, Optional
from .base import FindingsWriter


class JSONLFindingsWriter(FindingsWriter):
    name = "jsonl"

    def __init__(self, path: str, run_id: str):
        super().__init__(path, run_id)
        self._fh: Optional[IO[str]] = None

    def _open(self) -> IO[str]:
        if self._fh is None:
            self._ensure_parent()
            self._fh = open(self.path, "w", encoding="utf-8")
        return self._fh

    def write_rows(self, rows: List[Dict[str, Any]]) -> None:
        f = self._open()
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")
        f.flush()

    def close(self) -> str:
        # an empty run still leaves an (empty) findings file behind
        self._open().close()
        return self.path
