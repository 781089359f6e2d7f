"""
Tests for inverse distance weighted interpolation.
"""

import numpy as np
import pytest
import xarray as xr

from pyidw import config
from pyidw.exceptions import DegenerateQueryError, InvalidParameterError
from pyidw.grid import build_grid
from pyidw.idw import as_query_points, idw_interpolation, idw_weights, interpolate, validate_power
from pyidw.samples import SampleSet


class TestIdwWeights:
    """Test idw_weights."""

    def test_weights_sum_to_one(self):
        weights = idw_weights(np.array([1.0, 2.0, 4.0]), power=2)
        assert weights.sum() == pytest.approx(1.0)
        assert weights[0] > weights[1] > weights[2]

    def test_weight_ratios(self):
        weights = idw_weights(np.array([1.0, 2.0]), power=2)
        assert weights[0] / weights[1] == pytest.approx(4.0)

    def test_exact_hit_is_one_hot(self):
        weights = idw_weights(np.array([3.0, 0.0, 0.0]), power=2)
        np.testing.assert_array_equal(weights, [0.0, 1.0, 0.0])

    def test_empty(self):
        with pytest.raises(DegenerateQueryError):
            idw_weights(np.array([]))


class TestValidatePower:
    """Test power parameter validation."""

    @pytest.mark.parametrize("power", [0, -1, -0.5, np.inf, np.nan, "two"])
    def test_invalid(self, power):
        with pytest.raises(InvalidParameterError):
            validate_power(power)

    def test_default(self, monkeypatch):
        monkeypatch.setattr(config, 'POWER', 3.0)
        assert validate_power(None) == 3.0

    def test_accepts_integer(self):
        assert validate_power(2) == 2.0


class TestQueryPoints:
    """Test query normalization."""

    def test_single_pair(self):
        assert as_query_points((5, 5)).shape == (1, 2)

    def test_grid(self, small_grid):
        assert as_query_points(small_grid).shape == (20, 2)

    def test_bad_shape(self):
        with pytest.raises(ValueError, match="shape"):
            as_query_points(np.zeros((4, 3)))

    def test_non_finite(self):
        with pytest.raises(ValueError, match="finite"):
            as_query_points([[0.0, np.nan]])


class TestInterpolate:
    """Test interpolate."""

    def test_symmetric_triangle(self, triangle_samples):
        result = interpolate(triangle_samples, (5, 5), power=2)
        assert result.shape == (1,)
        assert result[0] == pytest.approx(20.0)
        assert 10 < result[0] < 30

    def test_matches_explicit_formula(self, triangle_samples):
        query = np.array([[2.0, 3.0]])
        d = np.hypot(triangle_samples.x - 2.0, triangle_samples.y - 3.0)
        expected = np.sum(triangle_samples.values / d ** 2) / np.sum(1 / d ** 2)
        assert interpolate(triangle_samples, query, power=2)[0] == pytest.approx(expected)

    def test_zero_distance_short_circuit(self):
        samples = SampleSet([0, 1], [0, 0], [5, 5])
        assert interpolate(samples, (0, 0), power=2)[0] == 5.0

    def test_exact_hit_returns_sample_value(self, precipitation_samples):
        result = interpolate(precipitation_samples, precipitation_samples.locations, power=2)
        np.testing.assert_array_equal(result, precipitation_samples.values)

    def test_duplicate_location_uses_first_sample(self):
        samples = SampleSet([0, 0, 4], [0, 0, 4], [1.0, 9.0, 3.0])
        assert interpolate(samples, (0, 0))[0] == 1.0

    def test_rejects_geographic_samples(self):
        samples = SampleSet([-80, -79, -80], [40, 40, 41], [10, 20, 30], crs='EPSG:4326')
        with pytest.raises(ValueError, match="to_projected"):
            interpolate(samples, (-79.5, 40.5))

    def test_projected_samples_from_geographic(self):
        samples = SampleSet([-80, -79, -80], [40, 40, 41], [10, 20, 30], crs='EPSG:4326')
        projected = samples.to_projected()
        result = interpolate(projected, projected.locations[1])
        assert result[0] == 20.0

    def test_order_independent(self, precipitation_samples, small_grid):
        grid = build_grid((500000, 4800000, 540000, 4830000), n_cells=50)
        order = np.random.default_rng(0).permutation(len(precipitation_samples))
        shuffled = SampleSet(
            precipitation_samples.x[order],
            precipitation_samples.y[order],
            precipitation_samples.values[order],
        )
        np.testing.assert_allclose(
            interpolate(precipitation_samples, grid),
            interpolate(shuffled, grid),
            rtol=1e-12,
        )

    def test_constant_field(self):
        samples = SampleSet([0, 1, 2, 3, 4], [0, 0, 0, 0, 0], [7.5] * 5)
        query = np.array([[0.5, 3.0], [10.0, -4.0], [2.0, 0.0], [-100.0, 50.0]])
        np.testing.assert_allclose(interpolate(samples, query, power=2), 7.5)

    def test_within_sample_range(self, precipitation_samples):
        grid = build_grid((490000, 4790000, 550000, 4840000), n_cells=200)
        result = interpolate(precipitation_samples, grid, power=1.5)
        assert np.all(result >= precipitation_samples.values.min() - 1e-9)
        assert np.all(result <= precipitation_samples.values.max() + 1e-9)

    def test_output_count_matches_queries(self, triangle_samples, small_grid):
        assert interpolate(triangle_samples, small_grid).shape == (small_grid.size,)

    def test_higher_power_favours_nearest(self, triangle_samples):
        query = (1.0, 1.0)
        low = interpolate(triangle_samples, query, power=1)[0]
        high = interpolate(triangle_samples, query, power=8)[0]
        assert abs(high - 10) < abs(low - 10)

    def test_large_power_no_underflow(self):
        samples = SampleSet([0, 1e6], [0, 0], [1.0, 3.0])
        result = interpolate(samples, (4e5, 0), power=60)
        assert np.isfinite(result[0])
        assert result[0] == pytest.approx(1.0)

    def test_deterministic(self, precipitation_samples, small_grid):
        a = interpolate(precipitation_samples, small_grid)
        b = interpolate(precipitation_samples, small_grid)
        np.testing.assert_array_equal(a, b)

    def test_chunking_gives_same_result(self, precipitation_samples):
        grid = build_grid((500000, 4800000, 540000, 4830000), n_cells=300)
        whole = interpolate(precipitation_samples, grid, chunk_size=10**6)
        chunked = interpolate(precipitation_samples, grid, chunk_size=7)
        np.testing.assert_array_equal(whole, chunked)

    def test_invalid_chunk_size(self, triangle_samples):
        with pytest.raises(InvalidParameterError):
            interpolate(triangle_samples, (1, 1), chunk_size=0)

    @pytest.mark.parametrize("power", [0, -2])
    def test_invalid_power(self, triangle_samples, power):
        with pytest.raises(InvalidParameterError):
            interpolate(triangle_samples, (1, 1), power=power)

    def test_no_samples(self):
        empty = SampleSet([1.0], [1.0], [2.0]).without(0)
        with pytest.raises(DegenerateQueryError):
            interpolate(empty, (0, 0))

    def test_rejects_non_sampleset(self):
        with pytest.raises(TypeError):
            interpolate({'x': [0], 'y': [0]}, (0, 0))

    def test_removing_a_sample_changes_surface(self, precipitation_samples, small_grid):
        grid = build_grid((500000, 4800000, 540000, 4830000), n_cells=60)
        full = interpolate(precipitation_samples, grid)
        for i in range(len(precipitation_samples)):
            reduced = interpolate(precipitation_samples.without(i), grid)
            assert not np.array_equal(full, reduced)

    def test_removing_a_sample_from_constant_field(self, small_grid):
        samples = SampleSet([0, 4, 8], [0, 6, 2], [3.0, 3.0, 3.0])
        full = interpolate(samples, small_grid)
        np.testing.assert_allclose(interpolate(samples.without(1), small_grid), full)


class TestIdwInterpolation:
    """Test the DataArray convenience wrapper."""

    def test_returns_named_dataarray(self, triangle_samples, small_grid):
        da = idw_interpolation(triangle_samples, small_grid, power=2)
        assert isinstance(da, xr.DataArray)
        assert da.dims == ('y', 'x')
        assert da.shape == small_grid.shape
        assert da.name == 'value'
        assert da.attrs['interpolation_method'] == 'idw'
        assert da.attrs['power'] == 2.0
        assert da.attrs['n_samples'] == 3

    def test_values_match_interpolate(self, triangle_samples, small_grid):
        da = idw_interpolation(triangle_samples, small_grid)
        np.testing.assert_array_equal(da.values.ravel(), interpolate(triangle_samples, small_grid))

    def test_requires_grid(self, triangle_samples):
        with pytest.raises(TypeError):
            idw_interpolation(triangle_samples, np.zeros((3, 2)))
