"""
Shared test fixtures for VectorBench.

- shards: Helpers writing small Parquet vector shards with known global ids.
"""
