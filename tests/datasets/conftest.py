"""Fixtures for dataset scanner tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Sequence

import pytest

from tests.fixtures.shards import Row, build_shards, dense_rows
from VectorBench.Datasets.shards import ShardSet


@pytest.fixture
def make_shards(tmp_path: Path) -> Callable[..., ShardSet]:
    """Return a factory that writes shards under a fresh temporary directory."""

    def _make(shard_rows: Sequence[Sequence[Row]], **kwargs: object) -> ShardSet:
        return build_shards(tmp_path / "corpus", shard_rows, **kwargs)

    return _make


@pytest.fixture
def four_shards(make_shards) -> ShardSet:
    """Four dense shards of four rows each, global ids 0..15."""
    return make_shards([dense_rows(4 * i, 4) for i in range(4)], data_len=16)
