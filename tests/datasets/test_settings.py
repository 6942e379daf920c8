"""Tests for ScanCfg environment layering and validation."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from VectorBench.Datasets.settings import LogFormat, LogLevel, ScanCfg


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("COLUMN", "BATCH_SIZE", "DATA_ROOT", "CHECK_DIMENSION", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"VECTORBENCH_{name}", raising=False)


def test_defaults():
    cfg = ScanCfg()
    assert cfg.column == "emb"
    assert cfg.batch_size == 10_000
    assert cfg.check_dimension is False
    assert cfg.log_level is LogLevel.INFO
    assert cfg.log_format is LogFormat.JSON
    assert cfg.data_root.is_absolute()
    assert cfg.data_root.name == "msmarco_v2"


def test_environment_overrides(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("VECTORBENCH_BATCH_SIZE", "512")
    monkeypatch.setenv("vectorbench_column", "vec")
    monkeypatch.setenv("VECTORBENCH_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("VECTORBENCH_LOG_FORMAT", "console")

    cfg = ScanCfg()
    assert cfg.batch_size == 512
    assert cfg.column == "vec"
    assert cfg.data_root == (tmp_path / "data").resolve()
    assert cfg.log_format is LogFormat.CONSOLE


def test_explicit_arguments_beat_environment(monkeypatch):
    monkeypatch.setenv("VECTORBENCH_BATCH_SIZE", "512")
    assert ScanCfg(batch_size=64).batch_size == 64


def test_data_root_expands_user(monkeypatch, tmp_path: Path):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert ScanCfg(data_root="~/vectors").data_root == (tmp_path / "vectors").resolve()


@pytest.mark.parametrize(
    "kwargs",
    [{"batch_size": 0}, {"column": "  "}, {"log_level": "LOUD"}],
)
def test_invalid_values_are_rejected(kwargs):
    with pytest.raises(ValidationError):
        ScanCfg(**kwargs)
