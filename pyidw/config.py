"""
Library-wide defaults for PyIDW.

Each value can be overridden through an environment variable of the same name
prefixed with ``PYIDW_``. Functions that accept ``None`` for one of these
parameters look the default up here at call time.
"""

import os

# Inverse distance exponent
POWER = float(os.getenv("PYIDW_POWER", "2.0"))

# Upper bound on the number of query points handled per distance matrix
CHUNK_SIZE = int(os.getenv("PYIDW_CHUNK_SIZE", "10000"))

# Element budget for one (queries x samples) distance matrix (~400 MB of float64)
MAX_DISTANCE_ELEMENTS = int(float(os.getenv("PYIDW_MAX_DISTANCE_ELEMENTS", "5e7")))

# Dask scheduler for leave-one-out passes: 'threads', 'processes' or 'synchronous'
SCHEDULER = os.getenv("PYIDW_SCHEDULER", "threads")

# Estimates with an absolute value at or below this give NaN relative confidence
RELATIVE_EPS = float(os.getenv("PYIDW_RELATIVE_EPS", "1e-12"))

# Target number of cells for grids built without an explicit count
N_CELLS = int(os.getenv("PYIDW_N_CELLS", "5000"))

VALID_SCHEDULERS = ("threads", "processes", "synchronous", "sync", "single-threaded")
