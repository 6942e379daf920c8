# === NAVMAP v1 ===
# {
#   "module": "VectorBench.Datasets.scanner",
#   "purpose": "Streaming range scans over sharded Parquet vector datasets.",
#   "sections": [
#     {
#       "id": "embeddingentry",
#       "name": "EmbeddingEntry",
#       "anchor": "class-embeddingentry",
#       "kind": "class"
#     },
#     {
#       "id": "scanstats",
#       "name": "ScanStats",
#       "anchor": "class-scanstats",
#       "kind": "class"
#     },
#     {
#       "id": "rowaction",
#       "name": "RowAction",
#       "anchor": "class-rowaction",
#       "kind": "class"
#     },
#     {
#       "id": "classify-row",
#       "name": "classify_row",
#       "anchor": "function-classify-row",
#       "kind": "function"
#     },
#     {
#       "id": "rangescanner",
#       "name": "RangeScanner",
#       "anchor": "class-rangescanner",
#       "kind": "class"
#     },
#     {
#       "id": "scan",
#       "name": "scan",
#       "anchor": "function-scan",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""
Range Scans over Sharded Vector Datasets

Resolves a logical row range ``[offset, offset + limit)`` against an ordered
set of Parquet shards and yields ``(global_id, vector)`` entries in ascending
global order.

Shards that end before ``offset`` are skipped using their footer row count, so
their row groups are never decoded. Overlapping shards are streamed in bounded
record batches projected to the vector column, which keeps peak memory close to
one decoded batch. Scanning stops as soon as the range is satisfied; later
shards are not opened.

Each row gets exactly one disposition in a single pass:
- null rows consume a global index and produce nothing,
- rows before ``offset`` consume a global index and are discarded,
- rows inside the range are converted to ``float32`` and emitted,
- the first row at or past the end of the range stops the scan.

Vectors stored as ``float64`` are narrowed with ``numpy`` round-to-nearest
casting; ``float32`` values are copied through unchanged.

Key Classes:
- `RangeScanner`: Scanner bound to a shard set and reader options.
- `EmbeddingEntry`: ``(global_id, vector)`` result tuple.
- `ScanStats`: Counters describing the work a scan performed.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, NamedTuple, Optional

import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from .errors import ShardReadError, ShardScanError, ShardSchemaError
from .logging import StructuredLogger, log_event
from .shards import ShardHandle, ShardSet

DEFAULT_BATCH_SIZE = 10_000
DEFAULT_COLUMN = "emb"
MAX_GLOBAL_ID = 2**32 - 1

ShardOpenHook = Callable[[ShardHandle], None]

# ============================================================
# Types
# ============================================================


class EmbeddingEntry(NamedTuple):
    """A vector tagged with its absolute row position in the dataset."""

    global_id: int
    vector: np.ndarray


@dataclass
class ScanStats:
    """Counters describing the work done by one range scan."""

    offset: int = 0
    end: int = 0
    shards_skipped: int = 0
    shards_opened: int = 0
    batches_read: int = 0
    rows_read: int = 0
    null_rows: int = 0
    emitted: int = 0
    elapsed_s: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class RowAction(str, Enum):
    """Disposition of a single decoded row."""

    SKIP_NULL = "skip_null"
    SKIP_BEFORE = "skip_before"
    EMIT = "emit"
    STOP = "stop"


def classify_row(
    is_valid: bool,
    global_index: int,
    offset: int,
    end: int,
    collected: int,
    limit: int,
) -> RowAction:
    """Return what the scanner does with the row at ``global_index``."""

    if global_index >= end or collected >= limit:
        return RowAction.STOP
    if not is_valid:
        return RowAction.SKIP_NULL
    if global_index < offset:
        return RowAction.SKIP_BEFORE
    return RowAction.EMIT


def _vector_value_type(data_type: pa.DataType, handle: ShardHandle, column: str) -> pa.DataType:
    """Validate the vector column type and return its element type."""

    if not (pa.types.is_list(data_type) or pa.types.is_large_list(data_type)):
        raise ShardSchemaError(
            f"Column '{column}' is not a list column (found {data_type})",
            shard_index=handle.index,
            path=handle.path,
        )
    value_type = data_type.value_type
    if not (pa.types.is_float32(value_type) or pa.types.is_float64(value_type)):
        raise ShardSchemaError(
            f"Column '{column}' has unsupported element type {value_type}; "
            "expected float or double",
            shard_index=handle.index,
            path=handle.path,
        )
    return value_type


def _locate_column(schema: pa.Schema, handle: ShardHandle, column: str) -> int:
    index = schema.get_field_index(column)
    if index < 0:
        raise ShardSchemaError(
            f"Column '{column}' not found (available: {', '.join(schema.names) or 'none'})",
            shard_index=handle.index,
            path=handle.path,
        )
    return index


# ============================================================
# Scanner
# ============================================================


class RangeScanner:
    """
    Range query engine over an ordered shard set.

    The scanner holds no per-query state, so a single instance can serve many
    queries. Every query opens its own file handles.

    Args:
        shards: Ordered shard set to scan.
        column: Name of the list-of-float vector column.
        batch_size: Maximum rows decoded per record batch.
        on_shard_open: Callback fired once per shard opened for row decoding.
        check_dimension: Reject rows whose length differs from ``shards.dimension``.
        logger: Logger receiving debug and summary events; plain loggers and adapters
            are wrapped in a :class:`StructuredLogger`.
    """

    def __init__(
        self,
        shards: ShardSet,
        *,
        column: str = DEFAULT_COLUMN,
        batch_size: int = DEFAULT_BATCH_SIZE,
        on_shard_open: Optional[ShardOpenHook] = None,
        check_dimension: bool = False,
        logger: Optional[logging.Logger | logging.LoggerAdapter] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {batch_size}")
        if check_dimension and shards.dimension is None:
            raise ValueError("check_dimension requires a shard set with a declared dimension")
        self.shards = shards
        self.column = column
        self.batch_size = batch_size
        self.on_shard_open = on_shard_open
        self.check_dimension = check_dimension
        if not isinstance(logger, StructuredLogger):
            logger = StructuredLogger(logger or logging.getLogger(__name__))
        self.logger = logger

    def effective_end(self, offset: int, limit: int) -> int:
        """Return the exclusive end of the range after clamping to the dataset length."""

        end = offset + limit
        if self.shards.data_len is not None:
            end = min(end, self.shards.data_len)
        return end

    def scan(
        self, offset: int, limit: int, stats: Optional[ScanStats] = None
    ) -> List[EmbeddingEntry]:
        """
        Return every entry in ``[offset, offset + limit)``.

        Either the full result is returned or an exception propagates; no
        partial result escapes a failed scan.

        Raises:
            ShardReadError: If a touched shard cannot be opened or decoded.
            ShardSchemaError: If a touched shard has no usable vector column.
            ValueError: If ``offset`` or ``limit`` is negative.
        """
        return list(self.iter_range(offset, limit, stats=stats))

    def iter_range(
        self, offset: int, limit: int, stats: Optional[ScanStats] = None
    ) -> Iterator[EmbeddingEntry]:
        """
        Lazily yield entries in ``[offset, offset + limit)`` in ascending order.

        Entries already yielded stay with the consumer if a later shard fails;
        use :meth:`scan` for all-or-nothing results.
        """
        if offset < 0 or limit < 0:
            raise ValueError(f"offset and limit must be >= 0, got offset={offset} limit={limit}")

        end = self.effective_end(offset, limit)
        stats = stats if stats is not None else ScanStats()
        stats.offset, stats.end = offset, max(end, offset)
        if offset >= end:
            return

        started = time.perf_counter()
        global_index = 0
        collected = 0
        try:
            for handle in self.shards:
                if collected >= limit or global_index >= end:
                    break
                shard_log = self.logger.for_shard(handle)
                with handle.open() as parquet_file:
                    num_rows = int(parquet_file.metadata.num_rows)
                    if global_index + num_rows <= offset:
                        global_index += num_rows
                        stats.shards_skipped += 1
                        shard_log.debug(
                            "Skipping shard before range",
                            extra={"extra_fields": {"rows": num_rows}},
                        )
                        continue

                    stats.shards_opened += 1
                    if self.on_shard_open is not None:
                        self.on_shard_open(handle)
                    shard_log.debug(
                        "Decoding shard",
                        extra={"extra_fields": {"rows": num_rows, "first_global_id": global_index}},
                    )
                    column_index = _locate_column(parquet_file.schema_arrow, handle, self.column)
                    _vector_value_type(
                        parquet_file.schema_arrow.field(column_index).type, handle, self.column
                    )

                    for batch in self._read_batches(parquet_file, handle):
                        stats.batches_read += 1
                        list_array = batch.column(_locate_column(batch.schema, handle, self.column))
                        _vector_value_type(list_array.type, handle, self.column)

                        valid = list_array.is_valid().to_numpy(zero_copy_only=False)
                        offsets = list_array.offsets.to_numpy()
                        values = self._float32_values(list_array, handle)

                        for row in range(len(list_array)):
                            action = classify_row(
                                bool(valid[row]), global_index, offset, end, collected, limit
                            )
                            if action is RowAction.STOP:
                                break
                            stats.rows_read += 1
                            if action is RowAction.SKIP_NULL:
                                if global_index >= offset:
                                    stats.null_rows += 1
                                global_index += 1
                                continue
                            if action is RowAction.SKIP_BEFORE:
                                global_index += 1
                                continue

                            vector = values[offsets[row] : offsets[row + 1]].copy()
                            vector.flags.writeable = False
                            self._check_row(handle, global_index, vector)
                            yield EmbeddingEntry(global_index, vector)
                            global_index += 1
                            collected += 1
                            stats.emitted += 1
                        # Stop before pulling a batch the range no longer needs.
                        if collected >= limit or global_index >= end:
                            break
        except ShardScanError as exc:
            log_event(
                self.logger,
                "error",
                "Range scan failed",
                error_code=exc.error_code,
                shard_index=exc.shard_index,
                path=str(exc.path) if exc.path is not None else None,
                offset=offset,
                limit=limit,
                detail=exc.message,
            )
            raise

        stats.elapsed_s = time.perf_counter() - started
        log_event(self.logger, "info", "Range scan complete", **stats.to_dict())

    def _read_batches(
        self, parquet_file: pq.ParquetFile, handle: ShardHandle
    ) -> Iterator[pa.RecordBatch]:
        """Stream record batches, converting decode failures into read errors."""

        batches = parquet_file.iter_batches(batch_size=self.batch_size, columns=[self.column])
        while True:
            try:
                batch = next(batches)
            except StopIteration:
                return
            except (OSError, pa.ArrowException) as exc:
                raise ShardReadError(
                    f"Failed to decode shard: {exc}",
                    shard_index=handle.index,
                    path=handle.path,
                    original=exc,
                ) from exc
            yield batch

    @staticmethod
    def _float32_values(list_array: pa.Array, handle: ShardHandle) -> np.ndarray:
        """Return the flat list values of a batch as ``float32``."""

        try:
            values = list_array.values.to_numpy(zero_copy_only=False)
        except pa.ArrowException as exc:
            raise ShardReadError(
                f"Failed to materialize vector values: {exc}",
                shard_index=handle.index,
                path=handle.path,
                original=exc,
            ) from exc
        if values.dtype != np.float32:
            with np.errstate(over="ignore"):
                values = values.astype(np.float32)
        return values

    def _check_row(self, handle: ShardHandle, global_index: int, vector: np.ndarray) -> None:
        if global_index > MAX_GLOBAL_ID:
            raise OverflowError(f"Global id {global_index} exceeds the unsigned 32-bit range")
        if self.check_dimension and vector.shape[0] != self.shards.dimension:
            raise ShardSchemaError(
                f"Row {global_index} has {vector.shape[0]} values, "
                f"expected dimension {self.shards.dimension}",
                shard_index=handle.index,
                path=handle.path,
            )


def scan(
    shards: ShardSet,
    offset: int,
    limit: int,
    *,
    column: str = DEFAULT_COLUMN,
    batch_size: int = DEFAULT_BATCH_SIZE,
    on_shard_open: Optional[ShardOpenHook] = None,
) -> List[EmbeddingEntry]:
    """Scan ``[offset, offset + limit)`` of ``shards`` and return the entries in order."""

    scanner = RangeScanner(
        shards, column=column, batch_size=batch_size, on_shard_open=on_shard_open
    )
    return scanner.scan(offset, limit)
