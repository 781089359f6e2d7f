"""
Jackknife confidence estimation for IDW surfaces.

For n samples, the surface is interpolated once from all samples and once per
withheld sample. With ``full`` the all-sample surface and ``leave_i`` the
surface without sample i, each cell j gets n pseudo-values

    Z[i, j] = n * full[j] - (n - 1) * leave_i[j]

whose mean is the jackknife estimate and whose spread gives the confidence
half-width

    half_width[j] = sqrt(sum_i (Z[i, j] - mean_i Z[i, j]) ** 2 / (n * (n - 1)))

The n leave-one-out surfaces cost O(n ** 2 * m) distance evaluations for a grid
of m cells; they run as independent Dask tasks.
"""

import logging
from typing import Optional, Union

import numpy as np
import xarray as xr
from dask.distributed import Client

from . import config
from .dask.parallel_processing import ParallelProcessor
from .exceptions import InsufficientSamplesError
from .grid import QueryGrid
from .idw import as_query_points, interpolate, require_projected, validate_power
from .samples import SampleSet

logger = logging.getLogger(__name__)


def relative_confidence(half_width, estimate, eps: Optional[float] = None) -> np.ndarray:
    """
    Half-width as a fraction of the estimate.

    Cells whose estimate has an absolute value at or below ``eps`` (default:
    ``config.RELATIVE_EPS``) are NaN, since the ratio is undefined there.
    """
    if eps is None:
        eps = config.RELATIVE_EPS
    half_width = np.asarray(half_width, dtype=np.float64)
    estimate = np.asarray(estimate, dtype=np.float64)
    defined = np.abs(estimate) > eps
    return np.divide(half_width, estimate, out=np.full_like(half_width, np.nan), where=defined)


def pseudo_values(full: np.ndarray, leave_out: np.ndarray) -> np.ndarray:
    """
    Jackknife pseudo-values ``n * full - (n - 1) * leave_out[i]``.

    Parameters
    ----------
    full : ndarray of shape (m,)
        Estimate from all n samples
    leave_out : ndarray of shape (n, m)
        Row i is the estimate without sample i

    Returns
    -------
    ndarray of shape (n, m)
    """
    n = leave_out.shape[0]
    return n * full[np.newaxis, :] - (n - 1) * leave_out


class JackknifeResult:
    """
    Per-cell jackknife statistics.

    Attributes
    ----------
    estimate : ndarray
        IDW estimate from all samples
    jackknife_estimate : ndarray
        Mean of the pseudo-values
    half_width : ndarray
        Confidence half-width, always >= 0
    relative_confidence : ndarray
        ``half_width / estimate``, NaN where the estimate is (near) zero
    pseudo_values : ndarray or None
        ``(n, m)`` pseudo-values when requested with ``keep_pseudo_values``
    grid : QueryGrid or None
        The query grid when the queries were given as one
    """

    def __init__(self, estimate, jackknife_estimate, half_width, n_samples: int, power: float,
                 grid: Optional[QueryGrid] = None, pseudo_values: Optional[np.ndarray] = None,
                 name: str = "value"):
        self.estimate = estimate
        self.jackknife_estimate = jackknife_estimate
        self.half_width = half_width
        self.relative_confidence = relative_confidence(half_width, estimate)
        self.n_samples = n_samples
        self.power = power
        self.grid = grid
        self.pseudo_values = pseudo_values
        self.name = name

    def __repr__(self) -> str:
        return (f"JackknifeResult(n_samples={self.n_samples}, cells={self.estimate.size}, "
                f"power={self.power})")

    def to_dataset(self) -> xr.Dataset:
        """
        Return the statistics as a ``(y, x)`` Dataset.

        Raises
        ------
        ValueError
            If the queries were not given as a QueryGrid
        """
        if self.grid is None:
            raise ValueError("to_dataset requires the queries to be a QueryGrid")
        variables = {
            'estimate': self.estimate,
            'jackknife_estimate': self.jackknife_estimate,
            'half_width': self.half_width,
            'relative_confidence': self.relative_confidence,
        }
        ds = xr.Dataset({key: self.grid.to_dataarray(val) for key, val in variables.items()})
        ds.attrs.update({
            'variable': self.name,
            'interpolation_method': 'idw',
            'power': self.power,
            'n_samples': self.n_samples,
        })
        if self.grid.crs is not None:
            ds.attrs['crs'] = self.grid.crs.to_wkt()
        return ds


def _leave_out_surface(index: int, samples: SampleSet, points: np.ndarray, power: float) -> np.ndarray:
    return interpolate(samples.without(index), points, power=power)


def confidence_interval(
    samples: SampleSet,
    query_grid: Union[QueryGrid, np.ndarray],
    power: Optional[float] = None,
    scheduler: Optional[Union[str, Client, ParallelProcessor]] = None,
    keep_pseudo_values: bool = False,
) -> JackknifeResult:
    """
    Jackknife confidence half-width of the IDW surface at every query point.

    Parameters
    ----------
    samples : SampleSet
        Samples, n >= 2
    query_grid : QueryGrid or ndarray of shape (m, 2)
        Query locations
    power : float, optional
        Distance exponent (default: ``config.POWER``)
    scheduler : str, dask.distributed.Client or ParallelProcessor, optional
        Where to run the n leave-one-out surfaces (default: ``config.SCHEDULER``)
    keep_pseudo_values : bool, optional
        Keep the ``(n, m)`` pseudo-value matrix on the result (default: False)

    Returns
    -------
    JackknifeResult

    Raises
    ------
    InsufficientSamplesError
        If fewer than two samples are given
    InvalidParameterError
        If ``power`` is not a finite positive number
    ValueError
        If the samples are in a geographic CRS

    Notes
    -----
    Any failing leave-one-out pass aborts the whole computation with the
    same error.
    """
    if not isinstance(samples, SampleSet):
        raise TypeError(f"samples must be a SampleSet, got {type(samples)}")
    require_projected(samples)
    power = validate_power(power)
    n = len(samples)
    if n < 2:
        raise InsufficientSamplesError(f"The jackknife needs at least 2 samples, got {n}")

    grid = query_grid if isinstance(query_grid, QueryGrid) else None
    points = as_query_points(query_grid)

    full = interpolate(samples, points, power=power)

    processor = ParallelProcessor.from_option(scheduler)
    leave_out = processor.stack_results(
        processor.map_leave_one_out(_leave_out_surface, n, samples, points, power)
    )

    z = pseudo_values(full, leave_out)
    z_mean = z.mean(axis=0)
    variance = ((z - z_mean) ** 2).sum(axis=0) / (n * (n - 1))
    half_width = np.sqrt(variance)

    logger.info("Jackknife over %d samples and %d query points at power %s",
                n, points.shape[0], power)
    return JackknifeResult(
        estimate=full,
        jackknife_estimate=z_mean,
        half_width=half_width,
        n_samples=n,
        power=power,
        grid=grid,
        pseudo_values=z if keep_pseudo_values else None,
        name=samples.name,
    )
