"""
Typer CLI for inspecting and scanning sharded vector datasets.

NAVMAP:
- CLI_ROOT: Root Typer app with global logging options
- COMMANDS: scan, inspect
- CONFIG: config show
- HELPERS: Settings layering, shard set construction
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, List, Optional

import typer

from .errors import ShardScanError, format_scan_error
from .logging import get_logger
from .scanner import RangeScanner, ScanStats
from .settings import LogFormat, LogLevel, ScanCfg
from .shards import ShardSet

# ============================================================================
# CLI Application Setup
# ============================================================================

app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
    help="[bold]VectorBench[/bold]: range scans over sharded Parquet vector datasets.",
)

config_app = typer.Typer(no_args_is_help=True, rich_markup_mode="rich")
app.add_typer(config_app, name="config", help="Introspect configuration")


# ============================================================================
# Root Callback (Global Options)
# ============================================================================


@app.callback()
def root_callback(
    ctx: typer.Context,
    log_level: Annotated[
        Optional[LogLevel], typer.Option("--log-level", help="Logging level")
    ] = None,
    log_format: Annotated[
        Optional[LogFormat], typer.Option("--log-format", help="Logging format (console|json)")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("-v", "--verbose", help="Shortcut for --log-level DEBUG")
    ] = False,
) -> None:
    """
    Configure logging and settings shared by every command.

    [bold yellow]Precedence:[/bold yellow] CLI args > ENV vars (VECTORBENCH_*) > defaults
    """
    overrides = {}
    if verbose:
        overrides["log_level"] = LogLevel.DEBUG
    elif log_level is not None:
        overrides["log_level"] = log_level
    if log_format is not None:
        overrides["log_format"] = log_format
    cfg = ScanCfg(**overrides)
    get_logger("VectorBench", cfg.log_level.value, log_format=cfg.log_format.value)
    ctx.obj = cfg


def _settings(ctx: typer.Context) -> ScanCfg:
    cfg = ctx.obj
    return cfg if isinstance(cfg, ScanCfg) else ScanCfg()


# ============================================================================
# Commands
# ============================================================================


@app.command()
def scan(
    ctx: typer.Context,
    shards: Annotated[
        List[Path], typer.Argument(help="Shard files in dataset order")
    ],
    offset: Annotated[int, typer.Option("--offset", min=0, help="First global row id")] = 0,
    limit: Annotated[int, typer.Option("--limit", min=0, help="Maximum rows to return")] = 10,
    column: Annotated[
        Optional[str], typer.Option("--column", help="Vector column name")
    ] = None,
    batch_size: Annotated[
        Optional[int], typer.Option("--batch-size", min=1, help="Rows per decoded batch")
    ] = None,
    data_len: Annotated[
        Optional[int], typer.Option("--data-len", min=0, help="Declared total dataset length")
    ] = None,
    dimension: Annotated[
        Optional[int], typer.Option("--dimension", min=1, help="Declared vector dimension")
    ] = None,
    output: Annotated[
        str, typer.Option("--format", help="Output format (summary|jsonl)")
    ] = "summary",
) -> None:
    """
    Scan rows ``[offset, offset + limit)`` across SHARDS.

    [bold yellow]Example:[/bold yellow]
    [cyan]vectorbench scan corpus/*.parquet --offset 1000 --limit 5 --format jsonl[/cyan]
    """
    if output not in ("summary", "jsonl"):
        typer.secho(f"✗ Unknown format: {output}", fg="red", err=True)
        raise typer.Exit(code=2)

    cfg = _settings(ctx)
    shard_set = ShardSet.from_paths(shards, data_len=data_len, dimension=dimension)
    scanner = RangeScanner(
        shard_set,
        column=column or cfg.column,
        batch_size=batch_size or cfg.batch_size,
        check_dimension=cfg.check_dimension and dimension is not None,
    )
    stats = ScanStats()
    try:
        entries = scanner.scan(offset, limit, stats=stats)
    except ShardScanError as exc:
        typer.secho(f"✗ {format_scan_error(exc)}", fg="red", err=True)
        raise typer.Exit(code=1)

    if output == "jsonl":
        for entry in entries:
            typer.echo(
                json.dumps({"global_id": entry.global_id, "vector": entry.vector.tolist()})
            )
        return

    typer.secho(f"Range: [{stats.offset}, {stats.end})", fg="cyan")
    typer.echo(f"  Entries: {len(entries):,}")
    typer.echo(f"  Null rows: {stats.null_rows:,}")
    typer.echo(f"  Shards decoded: {stats.shards_opened} (skipped {stats.shards_skipped})")
    if entries:
        typer.echo(f"  Global ids: {entries[0].global_id}..{entries[-1].global_id}")
        typer.echo(f"  Dimension: {entries[0].vector.shape[0]}")


@app.command()
def inspect(
    ctx: typer.Context,
    shards: Annotated[List[Path], typer.Argument(help="Shard files in dataset order")],
    column: Annotated[
        Optional[str], typer.Option("--column", help="Vector column name")
    ] = None,
) -> None:
    """
    Show per-shard row counts and vector column types from footers only.

    No row data is decoded.
    """
    cfg = _settings(ctx)
    column_name = column or cfg.column
    shard_set = ShardSet.from_paths(shards)
    total = 0
    try:
        for handle in shard_set:
            with handle.open() as parquet_file:
                rows = int(parquet_file.metadata.num_rows)
                schema = parquet_file.schema_arrow
                index = schema.get_field_index(column_name)
                column_type = str(schema.field(index).type) if index >= 0 else "missing"
            typer.echo(
                f"  [{handle.index:>4}] {handle.path}  rows={rows:,}  first_id={total:,}  "
                f"{column_name}={column_type}"
            )
            total += rows
    except ShardScanError as exc:
        typer.secho(f"✗ {format_scan_error(exc)}", fg="red", err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nShards: {len(shard_set)}  Total rows: {total:,}", fg="green")


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Print the effective settings as JSON."""

    cfg = _settings(ctx)
    typer.echo(json.dumps(cfg.model_dump(mode="json"), indent=2, sort_keys=True))


# ============================================================================
# Entry Point
# ============================================================================


def main() -> None:
    """Main entry point for the CLI. Click reports Ctrl-C as "Aborted!" with exit code 1."""
    app()
