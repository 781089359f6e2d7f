"""
Regular query grids.

This module builds the grid of query locations (cell centres) that the IDW
interpolator and the jackknife estimator evaluate. Grids tile a rectangular
extent, usually the bounding box of a boundary region, with a cell count as
close as possible to a requested target.
"""

import logging
import math
from typing import NamedTuple, Optional, Tuple, Union

import numpy as np
import xarray as xr
from pyproj import CRS

from . import config
from .crs.crs_manager import crs_manager
from .exceptions import InvalidExtentError, InvalidParameterError

logger = logging.getLogger(__name__)


class Extent(NamedTuple):
    """Axis-aligned bounding box ``(xmin, ymin, xmax, ymax)``."""

    xmin: float
    ymin: float
    xmax: float
    ymax: float

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    def validate(self) -> "Extent":
        """
        Check that the extent has finite bounds and positive area.

        Raises
        ------
        InvalidExtentError
            If any bound is not finite or the width or height is not positive
        """
        if not all(math.isfinite(v) for v in self):
            raise InvalidExtentError(f"Extent bounds must be finite, got {tuple(self)}")
        if self.width <= 0 or self.height <= 0:
            raise InvalidExtentError(
                f"Extent must have positive width and height, got "
                f"width={self.width}, height={self.height}"
            )
        return self

    @classmethod
    def from_bounds(cls, bounds) -> "Extent":
        """Build an extent from any ``(xmin, ymin, xmax, ymax)`` sequence."""
        if isinstance(bounds, Extent):
            return bounds
        if len(bounds) != 4:
            raise InvalidExtentError(f"Extent needs 4 bounds, got {len(bounds)}")
        return cls(*(float(b) for b in bounds))

    @classmethod
    def from_boundary(cls, boundary) -> "Extent":
        """Bounding box of a shapely geometry."""
        if boundary.is_empty:
            raise InvalidExtentError("Boundary geometry is empty")
        return cls(*(float(b) for b in boundary.bounds))

    @classmethod
    def from_samples(cls, samples, pad: float = 0.0) -> "Extent":
        """Bounding box of a SampleSet, grown by ``pad`` on every side."""
        return cls(
            float(np.min(samples.x)) - pad,
            float(np.min(samples.y)) - pad,
            float(np.max(samples.x)) + pad,
            float(np.max(samples.y)) + pad,
        )


class QueryGrid:
    """
    Regular grid of query points located at cell centres.

    Parameters
    ----------
    x : array-like
        Cell centre x coordinates (columns), increasing
    y : array-like
        Cell centre y coordinates (rows), increasing
    extent : Extent
        The extent the grid tiles
    crs : pyproj.CRS, optional
        Coordinate reference system of the grid
    """

    def __init__(self, x, y, extent: Extent, crs: Optional[CRS] = None):
        self.x = np.asarray(x, dtype=np.float64)
        self.y = np.asarray(y, dtype=np.float64)
        self.extent = extent
        self.crs = crs

    @property
    def shape(self) -> Tuple[int, int]:
        """Grid shape as ``(ny, nx)``."""
        return (self.y.size, self.x.size)

    @property
    def size(self) -> int:
        return self.y.size * self.x.size

    @property
    def cell_width(self) -> float:
        return self.extent.width / self.x.size

    @property
    def cell_height(self) -> float:
        return self.extent.height / self.y.size

    @property
    def points(self) -> np.ndarray:
        """Query locations as an ``(ny * nx, 2)`` array, rows outer and columns inner."""
        xx, yy = np.meshgrid(self.x, self.y)
        return np.column_stack([xx.ravel(), yy.ravel()])

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"QueryGrid(shape={self.shape}, extent={tuple(self.extent)})"

    def to_dataarray(self, values, name: Optional[str] = None, attrs: Optional[dict] = None) -> xr.DataArray:
        """
        Reshape a flat vector aligned with :attr:`points` into a ``(y, x)`` DataArray.
        """
        values = np.asarray(values)
        if values.size != self.size:
            raise ValueError(f"Expected {self.size} values for grid of shape {self.shape}, got {values.size}")
        attrs = dict(attrs or {})
        if self.crs is not None:
            attrs.setdefault('crs', self.crs.to_wkt())
        return xr.DataArray(
            values.reshape(self.shape),
            dims=['y', 'x'],
            coords={'y': self.y, 'x': self.x},
            name=name,
            attrs=attrs,
        )

    @classmethod
    def from_dataarray(cls, da: Union[xr.DataArray, xr.Dataset]) -> "QueryGrid":
        """Rebuild a grid from a ``(y, x)`` DataArray or Dataset produced by :meth:`to_dataarray`."""
        x = np.asarray(da['x'].values, dtype=np.float64)
        y = np.asarray(da['y'].values, dtype=np.float64)
        dx = (x[1] - x[0]) if x.size > 1 else 0.0
        dy = (y[1] - y[0]) if y.size > 1 else 0.0
        extent = Extent(x[0] - dx / 2, y[0] - dy / 2, x[-1] + dx / 2, y[-1] + dy / 2)
        return cls(x, y, extent, crs=crs_manager.parse_crs_from_source(da))


def grid_dimensions(extent: Extent, n_cells: int) -> Tuple[int, int]:
    """
    Columns and rows of the integer grid closest to ``n_cells`` square cells.

    Returns
    -------
    tuple of int
        ``(nx, ny)``
    """
    side = math.sqrt(extent.width * extent.height / n_cells)
    nx = max(1, int(round(extent.width / side)))
    ny = max(1, int(round(extent.height / side)))
    # A clamped axis leaves the whole cell budget to the other one
    if ny == 1:
        nx = max(1, int(round(n_cells / ny)))
    elif nx == 1:
        ny = max(1, int(round(n_cells / nx)))
    return nx, ny


def build_grid(
    extent: Union[Extent, Tuple[float, float, float, float]],
    n_cells: Optional[int] = None,
    crs: Optional[Union[str, int, CRS]] = None,
) -> QueryGrid:
    """
    Build a regular grid of query points covering ``extent``.

    Parameters
    ----------
    extent : Extent or tuple
        Bounds ``(xmin, ymin, xmax, ymax)``
    n_cells : int, optional
        Target cell count (default: ``config.N_CELLS``). The actual count is
        ``nx * ny`` derived from the extent's aspect ratio.
    crs : str, int or pyproj.CRS, optional
        Coordinate reference system of the grid

    Returns
    -------
    QueryGrid
        Grid whose cells tile ``extent`` exactly

    Raises
    ------
    InvalidExtentError
        If the extent is degenerate
    InvalidParameterError
        If ``n_cells`` is less than 1
    """
    extent = Extent.from_bounds(extent).validate()
    if n_cells is None:
        n_cells = config.N_CELLS
    if int(n_cells) != n_cells or n_cells < 1:
        raise InvalidParameterError(f"n_cells must be a positive integer, got {n_cells}")

    nx, ny = grid_dimensions(extent, int(n_cells))
    cell_width = extent.width / nx
    cell_height = extent.height / ny
    x = extent.xmin + cell_width * (np.arange(nx) + 0.5)
    y = extent.ymin + cell_height * (np.arange(ny) + 0.5)

    logger.debug("Built %dx%d grid (%d cells, requested %d) over %s",
                 nx, ny, nx * ny, n_cells, tuple(extent))
    return QueryGrid(x, y, extent, crs=crs_manager.parse_crs(crs))


def build_grid_from_boundary(boundary, n_cells: Optional[int] = None,
                             crs: Optional[Union[str, int, CRS]] = None) -> QueryGrid:
    """Build a grid over the bounding box of a shapely boundary geometry."""
    return build_grid(Extent.from_boundary(boundary), n_cells, crs=crs)
