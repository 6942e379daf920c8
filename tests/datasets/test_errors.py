"""Tests for scan error types and CLI formatting."""

from __future__ import annotations

from pathlib import Path

import pytest

from VectorBench.Datasets.errors import (
    ShardReadError,
    ShardScanError,
    ShardSchemaError,
    format_scan_error,
)


@pytest.mark.parametrize(
    "error_cls, code",
    [
        (ShardScanError, "SCAN_FAILED"),
        (ShardReadError, "SHARD_READ"),
        (ShardSchemaError, "SHARD_SCHEMA"),
    ],
)
def test_error_codes(error_cls, code):
    error = error_cls("failed")
    assert error.error_code == code
    assert isinstance(error, RuntimeError)
    assert str(error) == "failed"


def test_context_is_preserved():
    original = OSError("disk gone")
    error = ShardReadError(
        "Unable to open shard", shard_index=2, path="a/0002.parquet", original=original
    )

    assert error.shard_index == 2
    assert error.path == Path("a/0002.parquet")
    assert error.original is original


def test_format_with_location():
    error = ShardSchemaError("Column 'emb' not found", shard_index=3, path="corpus/0003.parquet")
    expected = "[scan] shard 3 (corpus/0003.parquet): Column 'emb' not found"
    assert format_scan_error(error) == expected


def test_format_without_location():
    assert format_scan_error(ShardScanError("no shards")) == "[scan]: no shards"
