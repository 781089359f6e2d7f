"""
Loading of sample points and boundary regions.

Samples are read from delimited text with pandas; boundaries from GeoJSON or
WKT with shapely. Geographic inputs are reprojected into a planar CRS so the
interpolators can use Euclidean distances.
"""

import json
import logging
from os import PathLike
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import pandas as pd
import shapely
import shapely.wkt
from pyproj import CRS, Transformer
from shapely.geometry import MultiPolygon, Polygon, shape
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform, unary_union

from .crs.crs_manager import crs_manager
from .samples import SampleSet

logger = logging.getLogger(__name__)


def load_samples(
    path: Union[str, PathLike],
    value: str,
    x_coord: Optional[str] = None,
    y_coord: Optional[str] = None,
    crs: Optional[Union[str, int, CRS]] = None,
    target_crs: Optional[Union[str, int, CRS]] = None,
    **read_csv_kwargs
) -> SampleSet:
    """
    Load sample points from a CSV file.

    Parameters
    ----------
    path : str or path-like
        Delimited text file with one row per sample
    value : str
        Column holding the measured value
    x_coord, y_coord : str, optional
        Coordinate columns; inferred from common names when omitted
    crs : str, int or pyproj.CRS, optional
        CRS of the coordinates. Lat/lon named columns default to WGS 84.
    target_crs : str, int or pyproj.CRS, optional
        Planar CRS to reproject into. Geographic samples without a target go
        to the UTM zone covering them.
    **read_csv_kwargs
        Passed to :func:`pandas.read_csv`

    Returns
    -------
    SampleSet
    """
    df = pd.read_csv(path, **read_csv_kwargs)
    samples = SampleSet.from_dataframe(df, value, x_coord=x_coord, y_coord=y_coord, crs=crs)
    if target_crs is not None or (samples.crs is not None and samples.crs.is_geographic):
        samples = samples.to_projected(target_crs)
    logger.info("Loaded %d samples of '%s' from %s", len(samples), value, path)
    return samples


def _geometry_from_geojson(data: Mapping[str, Any]) -> BaseGeometry:
    kind = data.get('type')
    if kind == 'FeatureCollection':
        geometries = [shape(feature['geometry']) for feature in data.get('features', [])
                      if feature.get('geometry') is not None]
        if not geometries:
            raise ValueError("FeatureCollection contains no geometries")
        return unary_union(geometries)
    if kind == 'Feature':
        if data.get('geometry') is None:
            raise ValueError("Feature has no geometry")
        return shape(data['geometry'])
    return shape(data)


def load_boundary(
    source: Union[str, PathLike, Mapping[str, Any], BaseGeometry],
    crs: Optional[Union[str, int, CRS]] = None,
    target_crs: Optional[Union[str, int, CRS]] = None,
) -> BaseGeometry:
    """
    Load a boundary region as a shapely (Multi)Polygon.

    Parameters
    ----------
    source : str, path-like, mapping or shapely geometry
        A ``.geojson``/``.json`` or ``.wkt`` file, a GeoJSON mapping
        (geometry, Feature or FeatureCollection), WKT text, or a geometry
    crs : str, int or pyproj.CRS, optional
        CRS of the boundary coordinates
    target_crs : str, int or pyproj.CRS, optional
        CRS to reproject the boundary into; requires ``crs``

    Returns
    -------
    shapely.geometry.Polygon or shapely.geometry.MultiPolygon

    Raises
    ------
    ValueError
        If the input holds no polygonal geometry
    """
    if isinstance(source, BaseGeometry):
        geometry = source
    elif isinstance(source, Mapping):
        geometry = _geometry_from_geojson(source)
    elif isinstance(source, str) and source.lstrip().upper().startswith(('POLYGON', 'MULTIPOLYGON')):
        geometry = shapely.wkt.loads(source)
    else:
        path = Path(source)
        text = path.read_text()
        if path.suffix.lower() == '.wkt':
            geometry = shapely.wkt.loads(text)
        else:
            geometry = _geometry_from_geojson(json.loads(text))

    if not isinstance(geometry, (Polygon, MultiPolygon)):
        raise ValueError(f"Boundary must be a Polygon or MultiPolygon, got {geometry.geom_type}")
    if geometry.is_empty:
        raise ValueError("Boundary geometry is empty")

    if target_crs is not None:
        source_crs = crs_manager.parse_crs(crs)
        if source_crs is None:
            raise ValueError("crs must be given to reproject a boundary")
        transformer = Transformer.from_crs(source_crs, crs_manager.parse_crs(target_crs), always_xy=True)
        geometry = transform(transformer.transform, geometry)

    shapely.prepare(geometry)
    return geometry
