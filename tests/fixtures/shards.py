"""Helpers that write small Parquet vector shards for dataset tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pyarrow as pa
import pyarrow.parquet as pq

from VectorBench.Datasets.shards import ShardSet

Row = Optional[Sequence[float]]


def vector_for(global_id: int, dim: int = 3) -> List[float]:
    """Deterministic vector whose values are exactly representable in float32."""
    base = [float(global_id), global_id + 0.5, -float(global_id), 0.25]
    return base[:dim]


def dense_rows(start: int, count: int, dim: int = 3) -> List[Row]:
    return [vector_for(start + i, dim) for i in range(count)]


def write_shard(
    path: Path,
    rows: Sequence[Row],
    *,
    column: str = "emb",
    value_type: pa.DataType = pa.float32(),
    list_factory: Callable[[pa.DataType], pa.DataType] = pa.list_,
    row_group_size: Optional[int] = None,
) -> Path:
    """Write ``rows`` as a single vector column next to a passage id column."""
    vectors = pa.array(list(rows), type=list_factory(value_type))
    table = pa.table(
        {
            "_id": pa.array([f"doc-{i}" for i in range(len(rows))], type=pa.string()),
            column: vectors,
        }
    )
    path.parent.mkdir(parents=True, exist_ok=True)
    pq.write_table(table, path, row_group_size=row_group_size)
    return path


def build_shards(
    root: Path,
    shard_rows: Sequence[Sequence[Row]],
    *,
    data_len: Optional[int] = None,
    dimension: Optional[int] = None,
    **write_kwargs: object,
) -> ShardSet:
    """Write one shard per entry of ``shard_rows`` and return them as a ShardSet."""
    paths = [
        write_shard(root / f"{i:04d}.parquet", rows, **write_kwargs)  # type: ignore[arg-type]
        for i, rows in enumerate(shard_rows)
    ]
    return ShardSet.from_paths(paths, data_len=data_len, dimension=dimension)
