"""
Pydantic v2 settings for dataset scans.

Settings are read from ``VECTORBENCH_``-prefixed environment variables and may
be overridden by CLI flags (CLI > ENV > defaults).

NAVMAP:
- LogLevel / LogFormat: Validated logging choices
- ScanCfg: Reader options, local data root, and logging configuration
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scanner import DEFAULT_BATCH_SIZE, DEFAULT_COLUMN

# ============================================================================
# Enums for validated choices
# ============================================================================


class LogLevel(str, Enum):
    """Supported logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    """Supported log output formats."""

    CONSOLE = "console"
    JSON = "json"


# ============================================================================
# Scan configuration (ScanCfg)
# ============================================================================


class ScanCfg(BaseSettings):
    """Configuration shared by dataset handles and the CLI."""

    model_config = SettingsConfigDict(
        env_prefix="VECTORBENCH_",
        case_sensitive=False,
        extra="ignore",
    )

    column: str = Field(DEFAULT_COLUMN, description="Name of the list-of-float vector column")
    batch_size: int = Field(
        DEFAULT_BATCH_SIZE,
        description="Maximum rows decoded per record batch",
        ge=1,
    )
    data_root: Path = Field(
        Path("~/.cache/msmarco_v2"),
        description="Local directory holding the dataset shards",
    )
    check_dimension: bool = Field(
        False, description="Reject rows whose length differs from the declared dimension"
    )
    log_level: LogLevel = Field(LogLevel.INFO, description="Root logging level")
    log_format: LogFormat = Field(LogFormat.JSON, description="Pretty console or structured JSON")

    @field_validator("data_root", mode="before")
    @classmethod
    def expand_paths(cls, v: Any) -> Any:
        """Expand user home and make absolute."""
        if isinstance(v, str):
            return Path(v).expanduser().resolve()
        if isinstance(v, Path):
            return v.expanduser().resolve()
        return v

    @field_validator("column")
    @classmethod
    def validate_column(cls, v: str) -> str:
        """Reject blank column names."""
        if not v.strip():
            raise ValueError("column must be a non-empty name")
        return v


__all__ = ["ScanCfg", "LogLevel", "LogFormat"]
