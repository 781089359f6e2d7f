"""
Leave-one-out cross validation of IDW interpolation.

Each sample is withheld in turn and predicted from the remaining n - 1
samples at its own location. The resulting (observed, predicted) pairs give
the RMSE of the interpolator for a given power.
"""

import logging
from typing import Optional, Union

import numpy as np
import pandas as pd
from dask.distributed import Client

from .dask.parallel_processing import ParallelProcessor
from .exceptions import InsufficientSamplesError
from .idw import interpolate, require_projected, validate_power
from .samples import SampleSet

logger = logging.getLogger(__name__)


def rmse(observed, predicted) -> float:
    """
    Root mean square error ``sqrt(sum((predicted - observed) ** 2) / n)``.

    Examples
    --------
    >>> rmse([1.0, 2.0], [1.0, 4.0])
    1.4142135623730951
    """
    observed = np.asarray(observed, dtype=np.float64)
    predicted = np.asarray(predicted, dtype=np.float64)
    if observed.shape != predicted.shape:
        raise ValueError(f"Shape mismatch: {observed.shape} vs {predicted.shape}")
    if observed.size == 0:
        raise ValueError("rmse needs at least one pair")
    return float(np.sqrt(np.mean((predicted - observed) ** 2)))


class LOOResult:
    """
    Outcome of leave-one-out validation.

    Attributes
    ----------
    pairs : pandas.DataFrame
        One row per sample in original order with columns
        ``x``, ``y``, ``observed``, ``predicted`` and ``residual``
        (predicted minus observed)
    power : float
        Power parameter used for every prediction
    """

    def __init__(self, pairs: pd.DataFrame, power: float):
        self.pairs = pairs
        self.power = power

    def __len__(self) -> int:
        return len(self.pairs)

    def __repr__(self) -> str:
        return f"LOOResult(n={len(self)}, power={self.power}, rmse={self.rmse:.6g})"

    @property
    def observed(self) -> np.ndarray:
        return self.pairs['observed'].to_numpy()

    @property
    def predicted(self) -> np.ndarray:
        return self.pairs['predicted'].to_numpy()

    @property
    def residuals(self) -> np.ndarray:
        return self.pairs['residual'].to_numpy()

    @property
    def rmse(self) -> float:
        return rmse(self.observed, self.predicted)

    @property
    def mae(self) -> float:
        """Mean absolute error."""
        return float(np.mean(np.abs(self.residuals)))

    @property
    def bias(self) -> float:
        """Mean residual; positive when the interpolator overestimates."""
        return float(np.mean(self.residuals))

    def summary(self) -> dict:
        return {'n': len(self), 'power': self.power, 'rmse': self.rmse, 'mae': self.mae, 'bias': self.bias}


def _predict_withheld(index: int, samples: SampleSet, power: float) -> float:
    """Predict sample ``index`` from every other sample."""
    remaining = samples.without(index)
    location = samples.locations[index]
    return float(interpolate(remaining, location, power=power)[0])


def validate_loo(
    samples: SampleSet,
    power: Optional[float] = None,
    scheduler: Optional[Union[str, Client, ParallelProcessor]] = None,
) -> LOOResult:
    """
    Leave-one-out cross validation of IDW interpolation.

    Parameters
    ----------
    samples : SampleSet
        Samples to validate, n >= 2
    power : float, optional
        Distance exponent (default: ``config.POWER``)
    scheduler : str, dask.distributed.Client or ParallelProcessor, optional
        Where to run the n independent predictions (default: ``config.SCHEDULER``)

    Returns
    -------
    LOOResult
        n (observed, predicted) pairs in sample order

    Raises
    ------
    InsufficientSamplesError
        If fewer than two samples are given
    InvalidParameterError
        If ``power`` is not a finite positive number
    ValueError
        If the samples are in a geographic CRS
    """
    if not isinstance(samples, SampleSet):
        raise TypeError(f"samples must be a SampleSet, got {type(samples)}")
    require_projected(samples)
    power = validate_power(power)
    n = len(samples)
    if n < 2:
        raise InsufficientSamplesError(
            f"Leave-one-out validation needs at least 2 samples, got {n}"
        )

    processor = ParallelProcessor.from_option(scheduler)
    predicted = np.asarray(
        processor.map_leave_one_out(_predict_withheld, n, samples, power),
        dtype=np.float64,
    )

    observed = samples.values
    pairs = pd.DataFrame({
        'x': samples.x,
        'y': samples.y,
        'observed': observed,
        'predicted': predicted,
        'residual': predicted - observed,
    })
    result = LOOResult(pairs, power)
    logger.info("Leave-one-out validation of %d samples at power %s: RMSE %.6g",
                n, power, result.rmse)
    return result


def compare_powers(
    samples: SampleSet,
    powers,
    scheduler: Optional[Union[str, Client, ParallelProcessor]] = None,
) -> pd.DataFrame:
    """
    Run :func:`validate_loo` for several powers.

    Returns
    -------
    pandas.DataFrame
        One row per power with columns ``power``, ``rmse``, ``mae`` and
        ``bias``, sorted by RMSE
    """
    processor = ParallelProcessor.from_option(scheduler)
    rows = []
    for power in powers:
        summary = validate_loo(samples, power=power, scheduler=processor).summary()
        summary.pop('n')
        rows.append(summary)
    return pd.DataFrame(rows).sort_values('rmse', kind='stable').reset_index(drop=True)
