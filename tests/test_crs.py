"""
Tests for the CRS management functionality in PyIDW.
"""

import numpy as np
import pandas as pd
import pytest
import xarray as xr
from pyproj import CRS

from pyidw.crs.crs_manager import CRSManager


class TestCRSManager:
    """Test the CRSManager class functionality."""

    def test_parse_crs(self):
        crs_manager = CRSManager()
        assert crs_manager.parse_crs(None) is None
        assert crs_manager.parse_crs('EPSG:4326').to_epsg() == 4326
        assert crs_manager.parse_crs(32617).to_epsg() == 32617
        wgs84 = CRS.from_epsg(4326)
        assert crs_manager.parse_crs(wgs84) is wgs84

    def test_parse_crs_invalid(self):
        with pytest.raises(ValueError, match="Could not parse"):
            CRSManager().parse_crs('not a crs')

    def test_parse_crs_from_dataframe_attrs(self):
        df = pd.DataFrame({'x': [0.0], 'y': [0.0]})
        df.attrs = {'crs': 'EPSG:32617'}
        assert CRSManager().parse_crs_from_source(df).to_epsg() == 32617

    def test_parse_crs_from_xarray_crs_coord(self):
        ds = xr.Dataset(coords={'crs': ([], 1)})
        ds.coords['crs'].attrs['crs_wkt'] = CRS.from_epsg(4326).to_wkt()
        assert CRSManager().parse_crs_from_source(ds).to_epsg() == 4326

    def test_parse_crs_from_source_missing(self):
        assert CRSManager().parse_crs_from_source(pd.DataFrame({'x': [0]})) is None

    def test_detect_coordinate_system_type(self):
        crs_manager = CRSManager()
        assert crs_manager.detect_coordinate_system_type(CRS.from_epsg(4326)) == 'geographic'
        assert crs_manager.detect_coordinate_system_type(CRS.from_epsg(32617)) == 'projected'
        assert crs_manager.detect_coordinate_system_type(None) == 'unknown'

    def test_validate_coordinate_arrays(self):
        crs_manager = CRSManager()
        assert crs_manager.validate_coordinate_arrays(np.array([0.0, 1.0]), np.array([0.0, 1.0]))
        assert not crs_manager.validate_coordinate_arrays(np.array([0.0, np.inf]), np.array([0.0, 1.0]))
        assert not crs_manager.validate_coordinate_arrays(np.array([0.0]), np.array([0.0, 1.0]))
        assert not crs_manager.validate_coordinate_arrays(
            np.array([0.0]), np.array([95.0]), CRS.from_epsg(4326)
        )

    def test_detect_crs_from_lat_lon_names(self):
        with pytest.warns(UserWarning, match="Assuming WGS 84"):
            crs = CRSManager().detect_crs_from_coordinates(
                np.array([-84.0]), np.array([33.0]), 'lon', 'lat'
            )
        assert crs.to_epsg() == 4326

    def test_detect_crs_ignores_generic_names(self):
        assert CRSManager().detect_crs_from_coordinates(np.array([1.0]), np.array([2.0])) is None

    def test_detect_crs_out_of_range(self):
        with pytest.raises(ValueError, match="outside the geographic range"):
            CRSManager().detect_crs_from_coordinates(
                np.array([500000.0]), np.array([4800000.0]), 'longitude', 'latitude'
            )

    def test_estimate_utm_crs(self):
        crs = CRSManager().estimate_utm_crs(np.array([-84.4, -84.2]), np.array([33.6, 33.9]))
        assert "UTM zone 16N" in crs.name

    def test_transform_round_trip(self):
        crs_manager = CRSManager()
        lon, lat = np.array([-84.39]), np.array([33.75])
        x, y = crs_manager.transform_coordinates(lon, lat, 'EPSG:4326', 'EPSG:32616')
        back_lon, back_lat = crs_manager.transform_coordinates(x, y, 'EPSG:32616', 'EPSG:4326')
        np.testing.assert_allclose(back_lon, lon)
        np.testing.assert_allclose(back_lat, lat)

    def test_ensure_projected_reprojects_geographic(self):
        x, y, crs = CRSManager().ensure_projected(
            np.array([-84.39]), np.array([33.75]), CRS.from_epsg(4326)
        )
        assert crs.is_projected
        assert 100000 < x[0] < 900000

    def test_ensure_projected_passes_projected_through(self):
        x_in, y_in = np.array([500000.0]), np.array([4800000.0])
        x, y, crs = CRSManager().ensure_projected(x_in, y_in, CRS.from_epsg(32617))
        assert x is x_in and y is y_in
        assert crs.to_epsg() == 32617

    def test_ensure_projected_rejects_geographic_target(self):
        with pytest.raises(ValueError, match="geographic"):
            CRSManager().ensure_projected(
                np.array([500000.0]), np.array([4800000.0]), CRS.from_epsg(32617), 'EPSG:4326'
            )

    def test_ensure_projected_needs_source_crs(self):
        with pytest.raises(ValueError, match="Source CRS"):
            CRSManager().ensure_projected(np.array([0.0]), np.array([0.0]), None, 'EPSG:32617')
