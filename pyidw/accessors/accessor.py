"""
PyIDW Accessor implementation.

This module implements the xarray accessor that provides the .pyidw interface
on interpolated surfaces and jackknife datasets.
"""

from typing import Tuple, Union

import numpy as np
import xarray as xr
from shapely.geometry.base import BaseGeometry


@xr.register_dataset_accessor("pyidw")
@xr.register_dataarray_accessor("pyidw")
class PyIDWAccessor:
    """
    xarray accessor for PyIDW surfaces.

    This accessor provides methods for:
    - Masking a surface to a boundary region
    - Flattening a surface back to query points
    """

    def __init__(self, xarray_obj: Union[xr.Dataset, xr.DataArray]):
        self._obj = xarray_obj
        self._name = "pyidw"

    def _validate_surface(self):
        missing = [dim for dim in ('y', 'x') if dim not in self._obj.dims]
        if missing:
            raise ValueError(f"PyIDW surfaces need 'y' and 'x' dimensions, missing {missing}")

    def mask(self, boundary: BaseGeometry) -> Union[xr.Dataset, xr.DataArray]:
        """
        Set cells outside ``boundary`` to NaN.

        Parameters
        ----------
        boundary : shapely geometry
            Boundary region in the surface's coordinate system

        Returns
        -------
        xr.Dataset or xr.DataArray
            Masked copy of the surface
        """
        from ..masking import mask_to_boundary

        self._validate_surface()
        return mask_to_boundary(self._obj, boundary)

    def to_points(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Flatten a ``(y, x)`` DataArray to query points and values.

        Returns
        -------
        tuple of ndarray
            ``(points, values)`` with points of shape ``(m, 2)`` ordered like
            :attr:`pyidw.grid.QueryGrid.points`
        """
        if not isinstance(self._obj, xr.DataArray):
            raise TypeError("to_points is only available on DataArray surfaces")
        self._validate_surface()
        surface = self._obj.transpose('y', 'x')
        xx, yy = np.meshgrid(surface['x'].values, surface['y'].values)
        return np.column_stack([xx.ravel(), yy.ravel()]), surface.values.ravel()
