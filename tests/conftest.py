"""
Test fixtures for PyIDW library.

This module contains shared test fixtures for creating common data scenarios
used throughout the test suite.
"""

import pytest
import numpy as np
import pandas as pd
from shapely.geometry import Polygon

from pyidw import SampleSet, build_grid


@pytest.fixture
def triangle_samples():
    """Three samples equidistant from (5, 5)."""
    return SampleSet([0, 10, 0], [0, 0, 10], [10, 20, 30])


@pytest.fixture
def precipitation_frame():
    """Station precipitation (inches) in a projected CRS (UTM 17N, metres)."""
    rng = np.random.default_rng(42)
    n = 12
    easting = 500000 + rng.uniform(0, 40000, n)
    northing = 4800000 + rng.uniform(0, 30000, n)
    precip = 20 + 0.0002 * (easting - 500000) + rng.normal(0, 1.5, n)
    df = pd.DataFrame({'easting': easting, 'northing': northing, 'precip': precip})
    df.attrs['crs'] = 'EPSG:32617'
    return df


@pytest.fixture
def precipitation_samples(precipitation_frame):
    """Station precipitation as a SampleSet."""
    return SampleSet.from_dataframe(precipitation_frame, 'precip')


@pytest.fixture
def small_grid():
    """A 4 x 5 grid over (0, 0, 10, 8)."""
    return build_grid((0, 0, 10, 8), n_cells=20)


@pytest.fixture
def square_boundary():
    """Unit-free square boundary covering the left half of (0, 0, 10, 8)."""
    return Polygon([(0, 0), (5, 0), (5, 8), (0, 8)])


@pytest.fixture
def boundary_geojson():
    """GeoJSON FeatureCollection with two adjacent squares."""
    return {
        'type': 'FeatureCollection',
        'features': [
            {
                'type': 'Feature',
                'properties': {'name': 'west'},
                'geometry': {
                    'type': 'Polygon',
                    'coordinates': [[[0, 0], [5, 0], [5, 5], [0, 5], [0, 0]]],
                },
            },
            {
                'type': 'Feature',
                'properties': {'name': 'east'},
                'geometry': {
                    'type': 'Polygon',
                    'coordinates': [[[5, 0], [10, 0], [10, 5], [5, 5], [5, 0]]],
                },
            },
        ],
    }
