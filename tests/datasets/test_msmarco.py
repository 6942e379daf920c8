"""Tests for the MS MARCO v2 dataset descriptor."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from tests.fixtures.shards import vector_for, write_shard
from VectorBench.Datasets import msmarco
from VectorBench.Datasets.interfaces import VectorDataset
from VectorBench.Datasets.msmarco import MsMarco


@pytest.fixture
def local_corpus(tmp_path: Path) -> Path:
    """One tiny shard per expected file; shard ``i`` holds global id ``i``."""
    for i, name in enumerate(msmarco.shard_files()):
        write_shard(tmp_path / name, [vector_for(i)])
    return tmp_path


def test_shard_file_names():
    files = msmarco.shard_files()
    assert len(files) == msmarco.NUM_SHARDS == 139
    assert files[0] == "corpus/0000.parquet"
    assert files[-1] == "corpus/0138.parquet"


def test_dataset_constants():
    assert msmarco.REPO_ID == "Cohere/msmarco-v2-embed-multilingual-v3"
    assert msmarco.DIMENSION == 1024
    assert msmarco.DATA_LEN == 138_364_198
    assert msmarco.COLUMN == "emb"


def test_wrong_shard_count_is_rejected(tmp_path: Path):
    with pytest.raises(ValueError, match="Expected 139"):
        MsMarco([tmp_path / "corpus" / "0000.parquet"])


def test_from_directory_reports_missing_shards(tmp_path: Path):
    write_shard(tmp_path / "corpus" / "0000.parquet", [vector_for(0)])

    with pytest.raises(FileNotFoundError) as excinfo:
        MsMarco.from_directory(tmp_path)

    message = str(excinfo.value)
    assert message.startswith("138 MS MARCO shard(s) missing")
    assert "corpus/0001.parquet" in message
    assert "(+133 more)" in message


def test_from_directory_uses_configured_root(monkeypatch, local_corpus: Path):
    monkeypatch.setenv("VECTORBENCH_DATA_ROOT", str(local_corpus))
    dataset = MsMarco.from_directory()
    assert dataset.root == local_corpus.resolve()


def test_load_range_spans_shards(local_corpus: Path):
    opened = []
    dataset = MsMarco.from_directory(local_corpus, on_shard_open=lambda h: opened.append(h.index))

    entries = dataset.load_range(offset=5, limit=3)

    assert [entry.global_id for entry in entries] == [5, 6, 7]
    np.testing.assert_array_equal(entries[1].vector, np.array(vector_for(6), dtype=np.float32))
    assert opened == [5, 6, 7]


def test_load_range_past_declared_length_is_empty(local_corpus: Path):
    dataset = MsMarco.from_directory(local_corpus)
    assert dataset.load_range(offset=msmarco.DATA_LEN, limit=10) == []


def test_descriptor_properties(local_corpus: Path):
    dataset = MsMarco.from_directory(local_corpus)

    assert dataset.name == "msmarco-v2"
    assert dataset.dimension == 1024
    assert dataset.data_len == msmarco.DATA_LEN
    assert dataset.ground_truth_path == local_corpus / "ground_truth.parquet"
    assert dataset.shards.data_len == msmarco.DATA_LEN
    assert dataset.shards.dimension == msmarco.DIMENSION
    assert isinstance(dataset, VectorDataset)


def test_ground_truth_unknown_without_root(local_corpus: Path):
    paths = [local_corpus / name for name in msmarco.shard_files()]
    assert MsMarco(paths).ground_truth_path is None
