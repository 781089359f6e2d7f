"""
Base module for benchmarking utilities in PyIDW.
"""
import statistics
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import psutil

from pyidw import SampleSet


@dataclass
class BenchmarkResult:
    """Data class to store benchmark results."""
    name: str
    execution_time: float
    memory_usage: float  # in MB
    cpu_percent: float
    throughput: Optional[float] = None  # query points per second
    metadata: Optional[Dict[str, Any]] = None


class BenchmarkRunner:
    """Runs benchmarks and collects performance metrics."""

    def __init__(self):
        self.results: List[BenchmarkResult] = []

    @contextmanager
    def benchmark_context(self, name: str, **metadata):
        """Context manager to measure performance metrics for a code block."""
        initial_memory = self._get_memory_usage()
        initial_cpu = psutil.cpu_percent(interval=None)
        initial_time = time.perf_counter()

        yield

        execution_time = time.perf_counter() - initial_time
        final_memory = self._get_memory_usage()
        final_cpu = psutil.cpu_percent(interval=None)

        n_points = metadata.get('n_points')
        self.results.append(BenchmarkResult(
            name=name,
            execution_time=execution_time,
            memory_usage=final_memory - initial_memory,
            cpu_percent=(initial_cpu + final_cpu) / 2,
            throughput=n_points / execution_time if n_points and execution_time > 0 else None,
            metadata=metadata,
        ))

    def _get_memory_usage(self) -> float:
        """Get current memory usage in MB."""
        return psutil.Process().memory_info().rss / 1024 / 1024

    def run_benchmark(self, name: str, func: Callable, *args, n_points: Optional[int] = None,
                      **kwargs) -> BenchmarkResult:
        """Run a single benchmark function and return its result."""
        with self.benchmark_context(name, n_points=n_points):
            func(*args, **kwargs)
        return self.results[-1]

    def get_statistics(self, results: List[BenchmarkResult]) -> Dict[str, float]:
        """Calculate timing statistics from multiple benchmark results."""
        if not results:
            return {}
        execution_times = [r.execution_time for r in results]
        return {
            'execution_time_mean': statistics.mean(execution_times),
            'execution_time_median': statistics.median(execution_times),
            'execution_time_min': min(execution_times),
            'execution_time_max': max(execution_times),
            'memory_usage_mean': statistics.mean(r.memory_usage for r in results),
        }


def synthetic_samples(n_samples: int, extent: float = 1000.0, seed: int = 0) -> SampleSet:
    """Random samples of a smooth field over a square ``extent`` in projected units."""
    rng = np.random.default_rng(seed)
    x = rng.uniform(0, extent, n_samples)
    y = rng.uniform(0, extent, n_samples)
    values = np.sin(x / extent * np.pi) * np.cos(y / extent * np.pi) * 50 + 100
    return SampleSet(x, y, values, name='field')
