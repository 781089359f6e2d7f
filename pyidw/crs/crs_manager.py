"""
Coordinate Reference System (CRS) management for PyIDW.

Inverse distance weighting uses Euclidean distances, which are only meaningful
in a planar (projected) coordinate system. This module provides:
- CRS parsing from strings, EPSG codes and pandas/xarray metadata
- WGS 84 assumption policy for lat/lon named coordinates
- Coordinate validation and coordinate system type detection
- Reprojection of geographic coordinates into a projected CRS
"""

import logging
import warnings
from typing import Any, Optional, Tuple, Union

import numpy as np
import xarray as xr
from pyproj import CRS, Transformer
from pyproj.aoi import AreaOfInterest
from pyproj.database import query_utm_crs_info
from pyproj.exceptions import CRSError

logger = logging.getLogger(__name__)

LAT_NAMES = ('lat', 'latitude')
LON_NAMES = ('lon', 'lng', 'long', 'longitude')


class CRSManager:
    """
    Handles all Coordinate Reference System operations for PyIDW.

    The policy is "strict but helpful":
    - Explicit CRS information is always prioritized
    - WGS 84 is assumed for lat/lon named coordinates without explicit CRS
    - Geographic coordinates are reprojected before any distance is computed
    """

    def __init__(self):
        """Initialize the CRSManager."""
        self.wgs84_crs = CRS.from_epsg(4326)

    def parse_crs(self, crs: Optional[Union[str, int, CRS]]) -> Optional[CRS]:
        """
        Build a CRS object from a user supplied value.

        Args:
            crs: CRS object, EPSG code, or any string pyproj understands

        Returns:
            Parsed CRS, or None if ``crs`` is None

        Raises:
            ValueError: If the value cannot be parsed
        """
        if crs is None or isinstance(crs, CRS):
            return crs
        try:
            return CRS.from_user_input(crs)
        except CRSError as exc:
            raise ValueError(f"Could not parse coordinate reference system {crs!r}") from exc

    def parse_crs_from_source(self, source: Any) -> Optional[CRS]:
        """
        Look for CRS metadata on a pandas or xarray object.

        Args:
            source: DataFrame, Dataset or DataArray with a ``crs``/``crs_wkt``/``spatial_ref`` attribute

        Returns:
            Parsed CRS object or None if no CRS is found
        """
        if isinstance(source, (xr.Dataset, xr.DataArray)) and 'crs' in source.coords:
            crs_coord = source.coords['crs']
            for key in ('crs_wkt', 'spatial_ref', 'epsg'):
                if key in crs_coord.attrs:
                    try:
                        return CRS.from_user_input(crs_coord.attrs[key])
                    except CRSError:
                        continue

        attrs = getattr(source, 'attrs', None) or {}
        for attr_name in ('crs', 'crs_wkt', 'spatial_ref'):
            if attr_name in attrs:
                try:
                    return CRS.from_user_input(attrs[attr_name])
                except (CRSError, TypeError):
                    continue
        return None

    def detect_coordinate_system_type(self, crs: Optional[CRS]) -> str:
        """
        Detect if the coordinate system is geographic or projected.

        Args:
            crs: The coordinate reference system to analyze

        Returns:
            'geographic', 'projected', 'other' or 'unknown' when ``crs`` is None
        """
        if crs is None:
            return "unknown"
        if crs.is_geographic:
            return "geographic"
        if crs.is_projected:
            return "projected"
        return "other"

    def validate_coordinate_arrays(self,
                                   x_coords: np.ndarray,
                                   y_coords: np.ndarray,
                                   crs: Optional[CRS] = None) -> bool:
        """
        Validate coordinate arrays.

        Args:
            x_coords: X coordinate array (longitude or easting)
            y_coords: Y coordinate array (latitude or northing)
            crs: Optional CRS to validate against

        Returns:
            True if coordinates appear valid, False otherwise
        """
        if x_coords.shape != y_coords.shape:
            return False
        if not (np.all(np.isfinite(x_coords)) and np.all(np.isfinite(y_coords))):
            return False

        if crs is not None and crs.is_geographic and x_coords.size:
            if np.any(np.abs(x_coords) > 360) or np.any(np.abs(y_coords) > 90):
                return False

        return True

    def detect_crs_from_coordinates(self,
                                    x_coords: np.ndarray,
                                    y_coords: np.ndarray,
                                    x_name: str = 'x',
                                    y_name: str = 'y') -> Optional[CRS]:
        """
        Attempt to detect CRS from coordinate names and values.

        Only explicit lat/lon names are considered; generic 'x'/'y' never imply
        a geographic system.

        Returns:
            WGS 84 if the names and value ranges look geographic, None otherwise
        """
        is_lat_lon = x_name.lower() in LON_NAMES and y_name.lower() in LAT_NAMES
        if not is_lat_lon or x_coords.size == 0:
            return None

        if np.all(np.abs(x_coords) <= 360) and np.all(np.abs(y_coords) <= 90):
            warnings.warn(
                f"Coordinates named '{x_name}' and '{y_name}' appear to be "
                f"geographic (lat/lon) but no explicit CRS was provided. "
                f"Assuming WGS 84 (EPSG:4326) coordinate system.",
                UserWarning
            )
            return self.wgs84_crs

        raise ValueError(
            f"Coordinate variables named '{x_name}' and '{y_name}' suggest "
            f"geographic coordinates (lat/lon), but the coordinate values "
            f"({np.min(x_coords):.6f} to {np.max(x_coords):.6f}, "
            f"{np.min(y_coords):.6f} to {np.max(y_coords):.6f}) are outside the "
            f"geographic range. Please provide an explicit coordinate reference system."
        )

    def estimate_utm_crs(self, lon: np.ndarray, lat: np.ndarray) -> CRS:
        """
        Pick the WGS 84 / UTM zone covering the given geographic coordinates.

        Args:
            lon: Longitudes in degrees
            lat: Latitudes in degrees

        Returns:
            Projected CRS of the best matching UTM zone
        """
        lon = np.asarray(lon, dtype=float)
        lat = np.asarray(lat, dtype=float)
        aoi = AreaOfInterest(
            west_lon_degree=float(np.min(lon)),
            south_lat_degree=float(np.min(lat)),
            east_lon_degree=float(np.max(lon)),
            north_lat_degree=float(np.max(lat)),
        )
        candidates = query_utm_crs_info(datum_name="WGS 84", area_of_interest=aoi)
        if not candidates:
            raise ValueError("No UTM zone covers the supplied coordinates")
        return CRS.from_epsg(candidates[0].code)

    def transform_coordinates(self,
                              x_coords: np.ndarray,
                              y_coords: np.ndarray,
                              source_crs: Union[CRS, str],
                              target_crs: Union[CRS, str]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Transform coordinates from one CRS to another.

        Returns:
            Tuple of (transformed_x, transformed_y) coordinate arrays
        """
        source_crs = self.parse_crs(source_crs)
        target_crs = self.parse_crs(target_crs)
        transformer = Transformer.from_crs(source_crs, target_crs, always_xy=True)
        x_transformed, y_transformed = transformer.transform(x_coords, y_coords)
        return np.asarray(x_transformed, dtype=float), np.asarray(y_transformed, dtype=float)

    def ensure_projected(self,
                         x_coords: np.ndarray,
                         y_coords: np.ndarray,
                         crs: Optional[CRS],
                         target_crs: Optional[Union[CRS, str]] = None
                         ) -> Tuple[np.ndarray, np.ndarray, Optional[CRS]]:
        """
        Return planar coordinates suitable for Euclidean distances.

        Geographic coordinates are reprojected to ``target_crs``, or to the UTM
        zone covering them when no target is given. Projected (or unknown)
        coordinates pass through unless a different ``target_crs`` is requested.

        Returns:
            Tuple of (x, y, crs) where crs is the CRS of the returned coordinates
        """
        target_crs = self.parse_crs(target_crs)
        if crs is None:
            if target_crs is not None:
                raise ValueError("Source CRS must be defined to reproject coordinates")
            return x_coords, y_coords, None

        if target_crs is None:
            if not crs.is_geographic:
                return x_coords, y_coords, crs
            target_crs = self.estimate_utm_crs(x_coords, y_coords)
        elif target_crs.is_geographic:
            raise ValueError(
                f"Target CRS {target_crs.name!r} is geographic; IDW distances "
                f"need a projected coordinate system"
            )

        if crs == target_crs:
            return x_coords, y_coords, crs

        logger.debug("Reprojecting %d coordinates from %s to %s",
                     x_coords.size, crs.name, target_crs.name)
        x_out, y_out = self.transform_coordinates(x_coords, y_coords, crs, target_crs)
        return x_out, y_out, target_crs


# Global instance for convenience
crs_manager = CRSManager()
