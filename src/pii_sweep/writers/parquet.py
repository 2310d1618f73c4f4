from __future__ import annotations
from typing import Any, Dict, List, Optional
import pyarrow as pa
import pyarrow.parquet as pq
from .base import FindingsWriter

DEFAULT_BATCH_ROWS = 10_000


def findings_schema() -> pa.Schema:
    return pa.schema([
        ("run_id", pa.string()),
        ("path", pa.string()),
        ("kind", pa.string()),
        ("rule_name", pa.string()),
        ("line_no", pa.int64()),
        ("match_count", pa.int64()),
        ("sample", pa.string()),
    ], metadata={"schema_version": "v1"})


class ParquetFindingsWriter(FindingsWriter):
    """Buffers rows and writes one row group per `batch_rows` rows."""
    name = "parquet"

    def __init__(self, path: str, run_id: str, batch_rows: int = DEFAULT_BATCH_ROWS):
        super().__init__(path, run_id)
        self.batch_rows = batch_rows
        self._schema = findings_schema()
        self._buffer: List[Dict[str, Any]] = []
        self._writer: Optional[pq.ParquetWriter] = None

    def _flush(self) -> None:
        if self._writer is None:
            self._ensure_parent()
            self._writer = pq.ParquetWriter(self.path, self._schema, compression="zstd")
        if self._buffer:
            self._writer.write_table(pa.Table.from_pylist(self._buffer, schema=self._schema))
            self._buffer = []

    def write_rows(self, rows: List[Dict[str, Any]]) -> None:
        self._buffer.extend(rows)
        if len(self._buffer) >= self.batch_rows:
            self._flush()

    def close(self) -> str:
        self._flush()
        self._writer.close()
        return self.path
