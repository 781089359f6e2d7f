"""
PyIDW: inverse distance weighted interpolation with resampling diagnostics.

This library provides:
- Regular query grids over an extent or boundary region
- Inverse distance weighted (IDW) interpolation of point samples
- Leave-one-out cross validation (observed/predicted pairs, RMSE)
- Jackknife confidence half-widths for every grid cell
- Dask-parallel leave-one-out passes

Gridded results are xarray objects, with a .pyidw accessor for masking.
"""

import logging

__version__ = "0.1.0"

from .exceptions import (  # noqa: F401
    PyIDWError,
    InvalidExtentError,
    InvalidParameterError,
    InsufficientSamplesError,
    DegenerateQueryError,
)
from .samples import SampleSet  # noqa: F401
from .grid import Extent, QueryGrid, build_grid, build_grid_from_boundary  # noqa: F401
from .idw import interpolate, idw_interpolation, idw_weights  # noqa: F401
from .validation import LOOResult, validate_loo, compare_powers, rmse  # noqa: F401
from .jackknife import JackknifeResult, confidence_interval, relative_confidence  # noqa: F401
from .io import load_samples, load_boundary  # noqa: F401
from .masking import mask_to_boundary, points_in_boundary  # noqa: F401
from .dask import ChunkingStrategy, ParallelProcessor  # noqa: F401
from .crs import CRSManager  # noqa: F401

# Registers the .pyidw accessor on xarray objects
from .accessors import PyIDWAccessor  # noqa: F401

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Public API
__all__ = [
    "PyIDWError",
    "InvalidExtentError",
    "InvalidParameterError",
    "InsufficientSamplesError",
    "DegenerateQueryError",
    "SampleSet",
    "Extent",
    "QueryGrid",
    "build_grid",
    "build_grid_from_boundary",
    "interpolate",
    "idw_interpolation",
    "idw_weights",
    "LOOResult",
    "validate_loo",
    "compare_powers",
    "rmse",
    "JackknifeResult",
    "confidence_interval",
    "relative_confidence",
    "load_samples",
    "load_boundary",
    "mask_to_boundary",
    "points_in_boundary",
    "ChunkingStrategy",
    "ParallelProcessor",
    "CRSManager",
    "PyIDWAccessor",
]
