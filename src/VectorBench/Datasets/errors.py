"""Exception types raised while scanning sharded vector datasets.

Every failure during a range scan is terminal: the scanner never retries and
never returns a partial result. Failures fall into two families. Read errors
cover shard files that cannot be opened or decoded, schema errors cover files
that decode fine but do not carry a usable vector column. Both carry the shard
position and path so callers can point at the offending file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

__all__ = [
    "ShardScanError",
    "ShardReadError",
    "ShardSchemaError",
    "format_scan_error",
]


class ShardScanError(RuntimeError):
    """Base class for failures raised while scanning a shard."""

    stage = "scan"
    error_code = "SCAN_FAILED"

    def __init__(
        self,
        message: str,
        *,
        shard_index: Optional[int] = None,
        path: Optional[Path | str] = None,
        original: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.shard_index = shard_index
        self.path = Path(path) if path is not None else None
        self.original = original


class ShardReadError(ShardScanError):
    """Raised when a shard file cannot be opened, read, or decoded."""

    error_code = "SHARD_READ"


class ShardSchemaError(ShardScanError):
    """Raised when a shard lacks the vector column or stores it in an unsupported type."""

    error_code = "SHARD_SCHEMA"


def format_scan_error(error: ShardScanError) -> str:
    """Return a consistent error string for CLI consumption."""

    prefix = f"[{error.stage}]"
    location = ""
    if error.shard_index is not None:
        location = f" shard {error.shard_index}"
    if error.path is not None:
        location += f" ({error.path})"
    return f"{prefix}{location}: {error.message}".strip()
