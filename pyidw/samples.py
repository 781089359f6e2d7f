"""
Sample point container.

This module provides the SampleSet class, an immutable ordered collection of
measured values at planar (x, y) locations. It is the input to every
interpolation, validation and jackknife operation in PyIDW.
"""

import logging
import warnings
from typing import Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd
import xarray as xr
from pyproj import CRS

from .crs.crs_manager import crs_manager

logger = logging.getLogger(__name__)

X_NAMES = ('x', 'easting', 'east', 'lon', 'lng', 'long', 'longitude')
Y_NAMES = ('y', 'northing', 'north', 'lat', 'latitude')


def _find_name(candidates: Sequence[str], names: Sequence[str], kind: str) -> str:
    """Return the first name in ``candidates`` matching one of ``names`` (case-insensitive)."""
    lowered = {str(c).lower(): str(c) for c in candidates}
    for name in names:
        if name in lowered:
            return lowered[name]
    raise ValueError(f"Could not find {kind} coordinate among {list(candidates)}")


def _readonly(values) -> np.ndarray:
    array = np.array(values, dtype=np.float64)
    array.setflags(write=False)
    return array


class SampleSet:
    """
    Immutable ordered collection of sample points.

    Parameters
    ----------
    x, y : array-like
        Planar coordinates of the samples
    values : array-like
        Measured value at each sample (e.g. precipitation in inches)
    crs : str, int or pyproj.CRS, optional
        Coordinate reference system of ``x``/``y``
    name : str, optional
        Name of the measured variable (default: 'value')

    Notes
    -----
    Arrays are copied and flagged read-only. Duplicate locations are kept as
    distinct measurements.
    """

    def __init__(
        self,
        x,
        y,
        values,
        crs: Optional[Union[str, int, CRS]] = None,
        name: str = "value",
    ):
        x = _readonly(x).ravel()
        y = _readonly(y).ravel()
        values = _readonly(values).ravel()

        if not (x.shape == y.shape == values.shape):
            raise ValueError(
                f"x, y and values must have the same length, got "
                f"{x.size}, {y.size} and {values.size}"
            )
        if x.size == 0:
            raise ValueError("A SampleSet needs at least one sample")

        crs = crs_manager.parse_crs(crs)
        if not crs_manager.validate_coordinate_arrays(x, y, crs):
            raise ValueError("Invalid coordinate arrays detected (NaN, infinite or out of range)")
        if not np.all(np.isfinite(values)):
            raise ValueError("Sample values must be finite")

        self._set_arrays(x, y, values, crs, name)

    def _set_arrays(self, x, y, values, crs: Optional[CRS], name: str):
        self._x = _readonly(x)
        self._y = _readonly(y)
        self._values = _readonly(values)
        self.crs = crs
        self.name = name

    @classmethod
    def _from_arrays(cls, x, y, values, crs: Optional[CRS], name: str) -> "SampleSet":
        """
        Build a SampleSet from arrays taken from a validated set.

        Skips validation, so the result may be empty.
        """
        samples = cls.__new__(cls)
        samples._set_arrays(x, y, values, crs, name)
        return samples

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        value: str,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        crs: Optional[Union[str, int, CRS]] = None,
    ) -> "SampleSet":
        """
        Build a SampleSet from a DataFrame.

        Coordinate columns are inferred from common names when not given. Rows
        with a missing value are dropped with a warning. If ``crs`` is None, it
        is read from ``df.attrs['crs']`` or assumed WGS 84 for lat/lon columns.
        """
        if not isinstance(df, pd.DataFrame):
            raise TypeError(f"df must be a pandas.DataFrame, got {type(df)}")
        if value not in df.columns:
            raise ValueError(f"Value column '{value}' not found in {list(df.columns)}")

        x_coord = x_coord or _find_name(df.columns, X_NAMES, 'x')
        y_coord = y_coord or _find_name(df.columns, Y_NAMES, 'y')

        missing = df[value].isna()
        if missing.any():
            warnings.warn(
                f"Dropping {int(missing.sum())} samples with missing '{value}' values.",
                UserWarning
            )
            df = df.loc[~missing]

        x = df[x_coord].to_numpy(dtype=np.float64)
        y = df[y_coord].to_numpy(dtype=np.float64)
        if crs is None:
            crs = crs_manager.parse_crs_from_source(df)
        if crs is None:
            crs = crs_manager.detect_crs_from_coordinates(x, y, x_coord, y_coord)

        return cls(x, y, df[value].to_numpy(dtype=np.float64), crs=crs, name=value)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Sequence[float]],
        value: str,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        crs: Optional[Union[str, int, CRS]] = None,
    ) -> "SampleSet":
        """Build a SampleSet from a mapping of column name to sequence."""
        if not isinstance(data, dict):
            raise TypeError(f"data must be a dict, got {type(data)}")
        return cls.from_dataframe(pd.DataFrame(data), value, x_coord, y_coord, crs)

    @classmethod
    def from_dataset(
        cls,
        ds: xr.Dataset,
        value: str,
        x_coord: Optional[str] = None,
        y_coord: Optional[str] = None,
        crs: Optional[Union[str, int, CRS]] = None,
    ) -> "SampleSet":
        """
        Build a SampleSet from a one-dimensional xarray Dataset of stations.

        The coordinates are looked up among ``ds.coords`` and ``ds.data_vars``.
        """
        if not isinstance(ds, xr.Dataset):
            raise TypeError(f"ds must be an xarray.Dataset, got {type(ds)}")
        names = list(ds.coords) + list(ds.data_vars)
        x_coord = x_coord or _find_name(names, X_NAMES, 'x')
        y_coord = y_coord or _find_name(names, Y_NAMES, 'y')
        if crs is None:
            crs = crs_manager.parse_crs_from_source(ds)

        df = pd.DataFrame({
            x_coord: np.asarray(ds[x_coord].values).ravel(),
            y_coord: np.asarray(ds[y_coord].values).ravel(),
            value: np.asarray(ds[value].values).ravel(),
        })
        return cls.from_dataframe(df, value, x_coord, y_coord, crs)

    @property
    def x(self) -> np.ndarray:
        return self._x

    @property
    def y(self) -> np.ndarray:
        return self._y

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def locations(self) -> np.ndarray:
        """Sample locations as an ``(n, 2)`` array of [x, y]."""
        return np.column_stack([self._x, self._y])

    def __len__(self) -> int:
        return self._values.size

    def __repr__(self) -> str:
        crs_name = self.crs.name if self.crs is not None else None
        return f"SampleSet(n={len(self)}, name={self.name!r}, crs={crs_name!r})"

    def without(self, index: int) -> "SampleSet":
        """
        Return a new SampleSet with the sample at ``index`` removed.

        Raises
        ------
        IndexError
            If ``index`` is out of range
        """
        n = len(self)
        if not -n <= index < n:
            raise IndexError(f"Sample index {index} out of range for {n} samples")
        keep = np.ones(n, dtype=bool)
        keep[index] = False
        return self._from_arrays(self._x[keep], self._y[keep], self._values[keep], self.crs, self.name)

    def to_projected(self, target_crs: Optional[Union[str, int, CRS]] = None) -> "SampleSet":
        """
        Return a SampleSet in a planar CRS.

        Geographic samples are reprojected to ``target_crs`` or, if None, the
        UTM zone covering them. Samples already projected are returned as is.
        """
        x, y, crs = crs_manager.ensure_projected(self._x, self._y, self.crs, target_crs)
        if crs is self.crs and x is self._x:
            return self
        return SampleSet(x, y, self._values, crs=crs, name=self.name)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the samples as a DataFrame with columns x, y and the value name."""
        df = pd.DataFrame({'x': self._x, 'y': self._y, self.name: self._values})
        if self.crs is not None:
            df.attrs['crs'] = self.crs.to_wkt()
        return df
