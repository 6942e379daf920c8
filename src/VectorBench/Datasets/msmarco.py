"""
MS MARCO v2 corpus with Cohere embed-multilingual-v3 embeddings.

About 138M passages embedded at 1024 dimensions, published as 139 Parquet
shards (``corpus/0000.parquet`` .. ``corpus/0138.parquet``) whose ``emb``
column holds one vector per row. This module only resolves shards that are
already present in a local directory; fetching them is left to the caller.

Usage:
    dataset = MsMarco.from_directory("~/.cache/msmarco_v2")
    entries = dataset.load_range(offset=0, limit=10_000)
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .scanner import EmbeddingEntry, RangeScanner, ShardOpenHook
from .settings import ScanCfg
from .shards import ShardSet

REPO_ID = "Cohere/msmarco-v2-embed-multilingual-v3"
NUM_SHARDS = 139
DIMENSION = 1024
DATA_LEN = 138_364_198
COLUMN = "emb"
GROUND_TRUTH_FILE = "ground_truth.parquet"


def shard_files() -> Tuple[str, ...]:
    """Return shard paths relative to the dataset root, in dataset order."""
    return tuple(f"corpus/{i:04d}.parquet" for i in range(NUM_SHARDS))


def gt_path(root: Path) -> Path:
    """Return where the precomputed nearest-neighbour ground truth is expected."""
    return root / GROUND_TRUTH_FILE


class MsMarco:
    """MS MARCO v2 dataset handle over local shard files."""

    def __init__(
        self,
        shard_paths: Sequence[Path],
        *,
        root: Optional[Path] = None,
        batch_size: Optional[int] = None,
        check_dimension: Optional[bool] = None,
        on_shard_open: Optional[ShardOpenHook] = None,
    ) -> None:
        if len(shard_paths) != NUM_SHARDS:
            raise ValueError(f"Expected {NUM_SHARDS} shard paths, got {len(shard_paths)}")
        self.root = root
        self.shards = ShardSet.from_paths(shard_paths, data_len=DATA_LEN, dimension=DIMENSION)
        cfg = ScanCfg()
        self._scanner = RangeScanner(
            self.shards,
            column=COLUMN,
            batch_size=batch_size or cfg.batch_size,
            check_dimension=cfg.check_dimension if check_dimension is None else check_dimension,
            on_shard_open=on_shard_open,
        )

    @classmethod
    def from_directory(cls, root: Optional[Path | str] = None, **kwargs: object) -> "MsMarco":
        """
        Resolve every shard under ``root``.

        Args:
            root: Directory containing ``corpus/NNNN.parquet``. Defaults to the
                configured ``data_root``.
            **kwargs: Forwarded to :class:`MsMarco`.

        Raises:
            FileNotFoundError: If any shard is missing, listing the missing files.
        """
        base = Path(root).expanduser() if root is not None else ScanCfg().data_root
        paths = [base / name for name in shard_files()]
        missing = [str(p.relative_to(base)) for p in paths if not p.is_file()]
        if missing:
            preview = ", ".join(missing[:5])
            more = f" (+{len(missing) - 5} more)" if len(missing) > 5 else ""
            raise FileNotFoundError(
                f"{len(missing)} MS MARCO shard(s) missing under {base}: {preview}{more}"
            )
        return cls(paths, root=base, **kwargs)  # type: ignore[arg-type]

    @property
    def name(self) -> str:
        return "msmarco-v2"

    @property
    def dimension(self) -> int:
        return DIMENSION

    @property
    def data_len(self) -> int:
        return DATA_LEN

    @property
    def ground_truth_path(self) -> Optional[Path]:
        return gt_path(self.root) if self.root is not None else None

    def load_range(self, offset: int, limit: int) -> List[EmbeddingEntry]:
        """Load vectors in range ``[offset, offset + limit)`` as ``(global_id, vector)`` pairs."""
        return self._scanner.scan(offset, limit)
