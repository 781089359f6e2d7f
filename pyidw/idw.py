"""
Inverse Distance Weighting (IDW) interpolation.

The predicted value at a query location q is

    z(q) = sum_i w_i * z_i / sum_i w_i,    w_i = 1 / d(q, s_i) ** power

over every sample s_i. A query that coincides with a sample takes that
sample's value directly. Distances are Euclidean, so samples and queries must
share a planar coordinate system (see :meth:`SampleSet.to_projected`).
"""

import logging
import math
from typing import Optional, Union

import numpy as np
import xarray as xr
from scipy.spatial.distance import cdist

from . import config
from .dask.chunking import ChunkingStrategy
from .exceptions import DegenerateQueryError, InvalidParameterError
from .grid import QueryGrid
from .samples import SampleSet

logger = logging.getLogger(__name__)


def validate_power(power: Optional[float]) -> float:
    """
    Return ``power`` as a float, substituting ``config.POWER`` for None.

    Raises
    ------
    InvalidParameterError
        If the power is not a finite positive number
    """
    if power is None:
        power = config.POWER
    try:
        power = float(power)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"power must be a number, got {power!r}") from exc
    if not math.isfinite(power) or power <= 0:
        raise InvalidParameterError(f"power must be a finite number > 0, got {power}")
    return power


def require_projected(samples: SampleSet) -> None:
    """Raise ValueError if ``samples`` carry a geographic CRS."""
    if samples.crs is not None and samples.crs.is_geographic:
        raise ValueError(
            f"Samples are in geographic CRS {samples.crs.name!r}; IDW distances need a "
            f"projected coordinate system. Reproject with SampleSet.to_projected() first."
        )


def as_query_points(query: Union[QueryGrid, np.ndarray, tuple, list]) -> np.ndarray:
    """
    Normalize query locations to an ``(m, 2)`` float array.

    Accepts a :class:`QueryGrid`, a single ``(x, y)`` pair or an array of pairs.
    """
    if isinstance(query, QueryGrid):
        return query.points
    points = np.asarray(query, dtype=np.float64)
    if points.ndim == 1 and points.size == 2:
        points = points.reshape(1, 2)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"Query coordinates must have shape (m, 2) with [x, y] rows, got {points.shape}")
    if not np.all(np.isfinite(points)):
        raise ValueError("Query coordinates must be finite")
    return points


def idw_weights(distances: np.ndarray, power: float = 2.0) -> np.ndarray:
    """
    Normalized IDW weights for a single query.

    Parameters
    ----------
    distances : ndarray
        Distances from the query to every sample
    power : float, optional
        Power parameter (default: 2)

    Returns
    -------
    ndarray
        Weights summing to 1. If any distance is zero the weights are one-hot
        on the first such sample.

    Examples
    --------
    >>> w = idw_weights(np.array([1.0, 2.0, 4.0]), power=2)
    >>> bool(abs(w.sum() - 1.0) < 1e-12)
    True
    >>> idw_weights(np.array([3.0, 0.0, 0.0])).tolist()
    [0.0, 1.0, 0.0]
    """
    power = validate_power(power)
    distances = np.asarray(distances, dtype=np.float64)
    if distances.size == 0:
        raise DegenerateQueryError("Cannot weight a query against zero samples")

    hits = distances == 0.0
    if hits.any():
        weights = np.zeros_like(distances)
        weights[np.argmax(hits)] = 1.0
        return weights

    weights = (distances / distances.min()) ** -power
    return weights / weights.sum()


def _interpolate_chunk(points: np.ndarray, locations: np.ndarray, values: np.ndarray,
                       power: float) -> np.ndarray:
    """IDW estimates for one chunk of query points."""
    distances = cdist(points, locations)
    hits = distances == 0.0
    exact = hits.any(axis=1)

    result = np.empty(points.shape[0], dtype=np.float64)
    if exact.any():
        result[exact] = values[np.argmax(hits[exact], axis=1)]

    weighted = ~exact
    if weighted.any():
        d = distances[weighted]
        # Scaling by the nearest distance leaves the ratio unchanged and keeps weights in (0, 1]
        weights = (d / d.min(axis=1, keepdims=True)) ** -power
        result[weighted] = (weights @ values) / weights.sum(axis=1)
    return result


def interpolate(
    samples: SampleSet,
    query: Union[QueryGrid, np.ndarray, tuple, list],
    power: Optional[float] = None,
    chunk_size: Optional[int] = None,
) -> np.ndarray:
    """
    Interpolate sample values at query locations by inverse distance weighting.

    Parameters
    ----------
    samples : SampleSet
        Known sample points
    query : QueryGrid, ndarray or (x, y) pair
        Query locations
    power : float, optional
        Distance exponent, > 0 (default: ``config.POWER``)
    chunk_size : int, optional
        Query points per distance matrix. If None, chosen by
        :class:`ChunkingStrategy` from the sample count.

    Returns
    -------
    ndarray
        One estimate per query point, in query order

    Raises
    ------
    InvalidParameterError
        If ``power`` is not a finite positive number
    DegenerateQueryError
        If ``samples`` is empty
    ValueError
        If the samples are in a geographic CRS

    Examples
    --------
    >>> s = SampleSet([0, 10, 0], [0, 0, 10], [10, 20, 30])
    >>> round(float(interpolate(s, (5, 5), power=2)[0]), 6)
    20.0
    >>> float(interpolate(s, (10, 0))[0])
    20.0
    """
    power = validate_power(power)
    if not isinstance(samples, SampleSet):
        raise TypeError(f"samples must be a SampleSet, got {type(samples)}")
    points = as_query_points(query)
    if len(samples) == 0:
        raise DegenerateQueryError("No samples available to interpolate from")
    require_projected(samples)

    locations = samples.locations
    values = samples.values
    n_queries = points.shape[0]

    strategy = ChunkingStrategy()
    if chunk_size is None:
        chunk_size = strategy.determine_chunk_size(n_queries, len(samples))
    elif chunk_size < 1:
        raise InvalidParameterError(f"chunk_size must be positive, got {chunk_size}")

    if n_queries <= chunk_size:
        return _interpolate_chunk(points, locations, values, power)

    result = np.empty(n_queries, dtype=np.float64)
    for chunk in strategy.iter_slices(n_queries, chunk_size):
        result[chunk] = _interpolate_chunk(points[chunk], locations, values, power)
    return result


def idw_interpolation(
    samples: SampleSet,
    grid: QueryGrid,
    power: Optional[float] = None,
    chunk_size: Optional[int] = None,
) -> xr.DataArray:
    """
    Interpolate samples onto a query grid and return the surface as a DataArray.

    Parameters
    ----------
    samples : SampleSet
        Known sample points
    grid : QueryGrid
        Target grid
    power : float, optional
        Distance exponent (default: ``config.POWER``)
    chunk_size : int, optional
        Query points per distance matrix

    Returns
    -------
    xr.DataArray
        Surface with dims ``(y, x)``, named after the sample variable
    """
    if not isinstance(grid, QueryGrid):
        raise TypeError(f"grid must be a QueryGrid, got {type(grid)}")
    power = validate_power(power)
    values = interpolate(samples, grid, power=power, chunk_size=chunk_size)
    logger.debug("IDW surface of %s from %d samples on %s grid", samples.name, len(samples), grid.shape)
    return grid.to_dataarray(
        values,
        name=samples.name,
        attrs={'interpolation_method': 'idw', 'power': power, 'n_samples': len(samples)},
    )
