"""VectorBench: dataset loaders for vector search benchmarks."""

__version__ = "0.1.0"
