# === NAVMAP v1 ===
# {
#   "module": "VectorBench.Datasets.shards",
#   "purpose": "Ordered shard handles for horizontally sharded Parquet datasets.",
#   "sections": [
#     {
#       "id": "shardhandle",
#       "name": "ShardHandle",
#       "anchor": "class-shardhandle",
#       "kind": "class"
#     },
#     {
#       "id": "shardset",
#       "name": "ShardSet",
#       "anchor": "class-shardset",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Ordered Shard Handles

A sharded dataset is the concatenation of its shard files in a fixed order.
The global index of a row is the sum of the row counts of every earlier shard
plus the row's position inside its own shard, so the order recorded here must
never change once the set is built.

Row counts come from the Parquet footer (``FileMetaData.num_rows``); reading
them never decodes row data. Nothing is cached between calls: every probe and
every open goes back to the file.

Key Classes:
- `ShardHandle`: One shard file with its stable position.
- `ShardSet`: Immutable ordered collection of handles plus declared dataset shape.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple

import pyarrow as pa
import pyarrow.parquet as pq

from .errors import ShardReadError

# ============================================================
# Types
# ============================================================


@dataclass(frozen=True)
class ShardHandle:
    """A single shard file identified by its position in the shard order."""

    index: int
    path: Path

    def open(self) -> pq.ParquetFile:
        """
        Open the shard and parse its footer.

        Returns:
            ParquetFile whose metadata is loaded but whose row groups are untouched.

        Raises:
            ShardReadError: If the file is missing, unreadable, or not valid Parquet.
        """
        try:
            return pq.ParquetFile(self.path)
        except (OSError, pa.ArrowException) as exc:
            raise ShardReadError(
                f"Unable to open shard: {exc}",
                shard_index=self.index,
                path=self.path,
                original=exc,
            ) from exc

    def num_rows(self) -> int:
        """Return the shard row count from footer metadata only."""
        with self.open() as parquet_file:
            return int(parquet_file.metadata.num_rows)


@dataclass(frozen=True)
class ShardSet:
    """
    Immutable, ordered collection of shards forming one logical dataset.

    Attributes:
        handles: Shard handles in dataset order.
        data_len: Declared total row count, if known. Scans clamp their end to it.
        dimension: Declared vector length, if known.
    """

    handles: Tuple[ShardHandle, ...]
    data_len: Optional[int] = None
    dimension: Optional[int] = None

    def __post_init__(self) -> None:
        for position, handle in enumerate(self.handles):
            if handle.index != position:
                raise ValueError(
                    f"Shard handle at position {position} carries index {handle.index}"
                )
        if self.data_len is not None and self.data_len < 0:
            raise ValueError(f"data_len must be >= 0, got {self.data_len}")
        if self.dimension is not None and self.dimension <= 0:
            raise ValueError(f"dimension must be > 0, got {self.dimension}")

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str | Path],
        *,
        data_len: Optional[int] = None,
        dimension: Optional[int] = None,
    ) -> "ShardSet":
        """Build a shard set from paths given in dataset order."""
        handles = tuple(
            ShardHandle(index=i, path=Path(p).expanduser()) for i, p in enumerate(paths)
        )
        return cls(handles=handles, data_len=data_len, dimension=dimension)

    def __len__(self) -> int:
        return len(self.handles)

    def __iter__(self) -> Iterator[ShardHandle]:
        return iter(self.handles)

    def __getitem__(self, index: int) -> ShardHandle:
        return self.handles[index]

    @property
    def paths(self) -> Tuple[Path, ...]:
        return tuple(handle.path for handle in self.handles)

    def row_counts(self) -> Tuple[int, ...]:
        """Probe every shard footer and return row counts in shard order."""
        return tuple(handle.num_rows() for handle in self.handles)

    def total_rows(self) -> int:
        """
        Return the logical dataset length.

        Uses the declared ``data_len`` when present, otherwise probes every footer.
        """
        if self.data_len is not None:
            return self.data_len
        return sum(self.row_counts())
