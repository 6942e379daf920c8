"""Protocol definitions for datasets consumed by benchmark harnesses.

Benchmarks only need to know a dataset's shape and how to pull a contiguous
slice of its vectors. Concrete datasets (see ``msmarco.py``) satisfy this
contract structurally; ``runtime_checkable`` lets harnesses verify it with
``isinstance``.
"""

from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from .scanner import EmbeddingEntry


@runtime_checkable
class VectorDataset(Protocol):
    """Protocol describing a sharded embedding dataset."""

    @property
    def name(self) -> str:
        """Short dataset identifier used in benchmark reports."""

    @property
    def dimension(self) -> int:
        """Length of every vector in the dataset."""

    @property
    def data_len(self) -> int:
        """Total number of rows across all shards."""

    def load_range(self, offset: int, limit: int) -> List[EmbeddingEntry]:
        """Return entries for rows ``[offset, offset + limit)`` in ascending order."""
