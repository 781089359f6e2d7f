"""
Benchmarking module for PyIDW.

This module provides timing and memory measurements for interpolation,
leave-one-out validation and the jackknife.
"""
from .benchmark_base import BenchmarkResult, BenchmarkRunner, synthetic_samples

__all__ = ['BenchmarkResult', 'BenchmarkRunner', 'synthetic_samples']
