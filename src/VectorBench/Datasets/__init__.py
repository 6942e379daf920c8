"""
VectorBench Datasets

Range scans over horizontally sharded Parquet vector datasets. A dataset is an
ordered list of shard files; queries address rows by their global position in
the concatenation of all shards.

Key modules:
- `shards.py`: Ordered shard handles with footer-only row counts
- `scanner.py`: Streaming range scanner producing ``(global_id, vector)`` entries
- `errors.py`: Read and schema failures raised by the scanner
- `msmarco.py`: MS MARCO v2 corpus descriptor over a local shard directory

Usage:
    from VectorBench.Datasets import ShardSet, scan

    shards = ShardSet.from_paths(sorted(Path("corpus").glob("*.parquet")))
    entries = scan(shards, offset=1_000, limit=500)
"""

from __future__ import annotations

from .errors import ShardReadError, ShardScanError, ShardSchemaError, format_scan_error
from .interfaces import VectorDataset
from .scanner import DEFAULT_BATCH_SIZE, EmbeddingEntry, RangeScanner, ScanStats, scan
from .shards import ShardHandle, ShardSet

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "EmbeddingEntry",
    "RangeScanner",
    "ScanStats",
    "ShardHandle",
    "ShardReadError",
    "ShardScanError",
    "ShardSchemaError",
    "ShardSet",
    "VectorDataset",
    "format_scan_error",
    "scan",
]
