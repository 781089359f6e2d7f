"""
Configuration for benchmark tests using pytest.
"""
from typing import Generator, Optional

import pytest
from dask.distributed import Client, LocalCluster


def pytest_addoption(parser):
    """Add command-line options for benchmark tests."""
    parser.addoption(
        "--benchmark",
        action="store_true",
        default=False,
        help="Run benchmark tests"
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "benchmark: mark test as a performance benchmark"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--benchmark"):
        return
    skip = pytest.mark.skip(reason="needs --benchmark option to run")
    for item in items:
        if "benchmark" in item.keywords:
            item.add_marker(skip)


@pytest.fixture(scope="session")
def dask_client(request) -> Generator[Optional[Client], None, None]:
    """
    Local Dask cluster for the leave-one-out benchmarks.

    Yields None when benchmarks are not requested.
    """
    if not request.config.getoption("--benchmark"):
        yield None
        return

    cluster = LocalCluster(
        n_workers=2,
        threads_per_worker=2,
        processes=False,
        dashboard_address=None
    )
    client = Client(cluster)
    try:
        yield client
    finally:
        client.close()
        cluster.close()
