"""
Dask integration module for PyIDW.

This module provides the Dask-based parallel map used by leave-one-out
validation and the jackknife, plus query chunking for distance matrices.
"""
from .chunking import ChunkingStrategy
from .parallel_processing import ParallelProcessor

__all__ = ['ChunkingStrategy', 'ParallelProcessor']
