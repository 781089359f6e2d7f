"""
Masking of gridded surfaces to a boundary region.

Interpolation runs over the full rectangular grid; masking afterwards
restricts the output to cells whose centre lies inside the boundary.
"""

import logging
from typing import Union

import numpy as np
import shapely
import xarray as xr
from shapely.geometry.base import BaseGeometry

logger = logging.getLogger(__name__)


def points_in_boundary(points: np.ndarray, boundary: BaseGeometry) -> np.ndarray:
    """
    Boolean mask of points lying inside (or on the edge of) the boundary.

    Parameters
    ----------
    points : ndarray of shape (m, 2)
        Point coordinates as [x, y] rows
    boundary : shapely geometry
        Boundary region

    Returns
    -------
    ndarray of bool, shape (m,)
    """
    points = np.asarray(points, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] != 2:
        raise ValueError(f"points must have shape (m, 2), got {points.shape}")
    inside = shapely.contains_xy(boundary, points[:, 0], points[:, 1])
    on_edge = shapely.intersects_xy(boundary.boundary, points[:, 0], points[:, 1])
    return np.asarray(inside | on_edge, dtype=bool)


def mask_to_boundary(
    surface: Union[xr.DataArray, xr.Dataset],
    boundary: BaseGeometry,
    x_dim: str = 'x',
    y_dim: str = 'y',
) -> Union[xr.DataArray, xr.Dataset]:
    """
    Set cells whose centre lies outside ``boundary`` to NaN.

    Parameters
    ----------
    surface : xr.DataArray or xr.Dataset
        Gridded surface with 1D ``x_dim`` and ``y_dim`` coordinates
    boundary : shapely geometry
        Boundary region in the surface's coordinate system

    Returns
    -------
    xr.DataArray or xr.Dataset
        Masked copy of ``surface`` (attributes kept)
    """
    if not isinstance(surface, (xr.DataArray, xr.Dataset)):
        raise TypeError(f"surface must be xr.DataArray or xr.Dataset, got {type(surface)}")
    x = np.asarray(surface[x_dim].values)
    y = np.asarray(surface[y_dim].values)
    xx, yy = np.meshgrid(x, y)
    inside = points_in_boundary(np.column_stack([xx.ravel(), yy.ravel()]), boundary)

    mask = xr.DataArray(inside.reshape(xx.shape), dims=[y_dim, x_dim],
                        coords={y_dim: surface[y_dim], x_dim: surface[x_dim]})
    logger.debug("Boundary keeps %d of %d cells", int(inside.sum()), inside.size)
    return surface.where(mask)
