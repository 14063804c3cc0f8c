# tests/test_interpolate.py
import numpy as np
import pytest

from meteointerp.errors import (
    InputShapeMismatchError,
    InsufficientStationsError,
    InterpolationError,
    ZeroWeightMassError,
)
from meteointerp.interpolate import (
    SeriesInterpolation,
    interpolate_point,
    interpolate_points,
    interpolate_series,
)
from meteointerp.kernel import calibrate_radius, gaussian_weights
from meteointerp.neighbors import planar_distance
from meteointerp.params import InterpolationParams
from meteointerp.regression import pairwise_differences


def _stations(n=15, seed=0):
    rng = np.random.default_rng(seed)
    x = rng.uniform(0, 100000, n)
    y = rng.uniform(0, 100000, n)
    z = rng.uniform(0, 1500, n)
    t = 22.0 - 0.0065 * z + rng.normal(0, 0.8, n)
    return x, y, z, t


def _two_station_value(xp, yp, x, y, t, params):
    """Weighted mean of T + (T[1] - T[0]), the zero-slope fit of a single pair."""
    r = planar_distance(xp, yp, x, y)
    w = gaussian_weights(r, calibrate_radius(r, params), params.shape)
    return np.sum(w * (t + (t[1] - t[0]))) / np.sum(w)


def _triangle():
    """3 stations equidistant (10 km) from the origin with a -0.006 gradient."""
    ang = np.radians([90.0, 210.0, 330.0])
    x = 10000.0 * np.cos(ang)
    y = 10000.0 * np.sin(ang)
    z = np.array([0.0, 500.0, 1000.0])
    t = np.array([20.0, 17.0, 14.0])
    return x, y, z, t


# --------------------------------------------------------------------------- #
# interpolate_point
# --------------------------------------------------------------------------- #


def test_gradient_scenario():
    x, y, z, t = _triangle()
    value = interpolate_point(0.0, 0.0, 250.0, x, y, z, t)
    assert np.isclose(value, 18.5)


def test_constant_field_is_reproduced():
    x, y, z, _ = _stations()
    t = np.full(x.size, 12.5)
    for xp, yp, zp in [(50000.0, 50000.0, 0.0), (10000.0, 90000.0, 3000.0)]:
        assert np.isclose(interpolate_point(xp, yp, zp, x, y, z, t), 12.5, rtol=1e-12)


def test_precomputed_differences_give_same_result():
    x, y, z, t = _stations()
    z_dif, t_dif = pairwise_differences(z, t)
    a = interpolate_point(40000.0, 60000.0, 800.0, x, y, z, t)
    b = interpolate_point(40000.0, 60000.0, 800.0, x, y, z, t, z_dif=z_dif, t_dif=t_dif)
    assert a == b


def test_params_as_dict():
    x, y, z, t = _stations()
    a = interpolate_point(40000.0, 60000.0, 800.0, x, y, z, t, {"shape": 6.0})
    b = interpolate_point(40000.0, 60000.0, 800.0, x, y, z, t, InterpolationParams(shape=6.0))
    assert a == b


def test_two_stations_use_zero_slope_fallback():
    rng = np.random.default_rng(5)
    params = InterpolationParams(initial_radius=30000.0, radius_iterations=0)
    for _ in range(500):
        # all within 15 km of the query point, so both weights are positive
        x = rng.uniform(0.0, 20000.0, 2)
        y = rng.uniform(0.0, 20000.0, 2)
        z = rng.uniform(0.0, 2000.0, 2)
        t = rng.uniform(-5.0, 30.0, 2)
        zp = rng.uniform(0.0, 3000.0)
        value = interpolate_point(10000.0, 10000.0, zp, x, y, z, t, params)
        expected = _two_station_value(10000.0, 10000.0, x, y, t, params)
        assert np.isclose(value, expected, rtol=1e-12, atol=1e-12)


def test_zero_weight_mass_raises():
    x = np.array([0.0, 1000.0, 0.0])
    y = np.array([0.0, 0.0, 1000.0])
    z = np.array([0.0, 100.0, 200.0])
    t = np.array([10.0, 9.0, 8.0])
    params = InterpolationParams(initial_radius=5000.0)
    with pytest.raises(ZeroWeightMassError) as info:
        interpolate_point(1e7, 1e7, 0.0, x, y, z, t, params)
    assert info.value.radius == 5000.0


def test_insufficient_stations_raises():
    with pytest.raises(InsufficientStationsError) as info:
        interpolate_point(0.0, 0.0, 0.0, [0.0], [0.0], [0.0], [1.0])
    assert info.value.n_stations == 1


def test_shape_mismatch_raises():
    with pytest.raises(InputShapeMismatchError):
        interpolate_point(0.0, 0.0, 0.0, [0.0, 1.0, 2.0], [0.0, 1.0], [0.0, 1.0, 2.0], [1.0, 2.0, 3.0])


def test_wrong_precomputed_length_raises():
    x, y, z, t = _stations(n=5)
    with pytest.raises(InputShapeMismatchError):
        interpolate_point(0.0, 0.0, 0.0, x, y, z, t, z_dif=np.zeros(3), t_dif=np.zeros(3))


def test_missing_station_values_rejected():
    x, y, z, t = _stations(n=5)
    t[2] = np.nan
    with pytest.raises(InterpolationError):
        interpolate_point(0.0, 0.0, 0.0, x, y, z, t)


def test_errors_are_value_errors():
    assert issubclass(InterpolationError, ValueError)
    for exc in (InputShapeMismatchError, InsufficientStationsError, ZeroWeightMassError):
        assert issubclass(exc, InterpolationError)


def test_verbose_prints_diagnostics_without_changing_result(capsys):
    x, y, z, t = _stations()
    quiet = interpolate_point(40000.0, 60000.0, 800.0, x, y, z, t)
    loud = interpolate_point(
        40000.0, 60000.0, 800.0, x, y, z, t, InterpolationParams(verbose=True)
    )
    out = capsys.readouterr().out
    assert "nstations: 15" in out
    assert "sumW" in out
    assert quiet == loud


# --------------------------------------------------------------------------- #
# interpolate_points
# --------------------------------------------------------------------------- #


def test_batch_equals_independent_points():
    x, y, z, t = _stations(n=20, seed=1)
    rng = np.random.default_rng(7)
    xp = rng.uniform(0, 100000, 6)
    yp = rng.uniform(0, 100000, 6)
    zp = rng.uniform(0, 2000, 6)

    batch = interpolate_points(xp, yp, zp, x, y, z, t)
    single = np.array(
        [interpolate_point(xp[k], yp[k], zp[k], x, y, z, t) for k in range(6)]
    )
    assert isinstance(batch, np.ma.MaskedArray)
    assert not np.ma.getmaskarray(batch).any()
    assert np.array_equal(batch.filled(np.nan), single)


def test_batch_masks_zero_weight_points():
    x = np.array([0.0, 1000.0, 0.0])
    y = np.array([0.0, 0.0, 1000.0])
    z = np.array([0.0, 100.0, 200.0])
    t = np.array([10.0, 9.0, 8.0])
    params = InterpolationParams(initial_radius=5000.0)

    out = interpolate_points([100.0, 1e7], [100.0, 1e7], [50.0, 0.0], x, y, z, t, params)
    mask = np.ma.getmaskarray(out)
    assert mask.tolist() == [False, True]
    assert np.isfinite(out[0])
    assert np.isnan(out.data[1])


def test_batch_masks_query_points_with_missing_coordinates():
    x, y, z, t = _stations()
    out = interpolate_points([50000.0, np.nan], [50000.0, 50000.0], [100.0, 100.0], x, y, z, t)
    assert np.ma.getmaskarray(out).tolist() == [False, True]


def test_batch_requires_two_stations():
    with pytest.raises(InsufficientStationsError):
        interpolate_points([0.0], [0.0], [0.0], [], [], [], [])


def test_batch_query_shape_mismatch():
    x, y, z, t = _stations()
    with pytest.raises(InputShapeMismatchError):
        interpolate_points([0.0, 1.0], [0.0], [0.0, 1.0], x, y, z, t)


# --------------------------------------------------------------------------- #
# interpolate_series
# --------------------------------------------------------------------------- #


def _series(n=8, days=4, seed=2):
    x, y, z, _ = _stations(n=n, seed=seed)
    rng = np.random.default_rng(seed)
    base = rng.uniform(5, 25, days)
    t = base[None, :] - 0.0065 * z[:, None] + rng.normal(0, 0.5, (n, days))
    return x, y, z, t


def test_series_shape_and_columns_match_batch():
    x, y, z, t = _series()
    t[1, 2] = np.nan
    xp = np.array([30000.0, 70000.0])
    yp = np.array([30000.0, 60000.0])
    zp = np.array([200.0, 900.0])

    res = interpolate_series(xp, yp, zp, x, y, z, t)
    assert isinstance(res, SeriesInterpolation)
    assert res.values.shape == (2, 4)
    assert res.errors == {}
    assert res.n_stations.tolist() == [8, 8, 7, 8]

    for d in range(4):
        valid = ~np.isnan(t[:, d])
        day = interpolate_points(xp, yp, zp, x[valid], y[valid], z[valid], t[valid, d])
        assert np.array_equal(res.filled()[:, d], day.filled(np.nan))


def test_series_per_day_isolation():
    x, y, z, t = _series()
    xp, yp, zp = [50000.0], [50000.0], [500.0]

    before = interpolate_series(xp, yp, zp, x, y, z, t).filled()

    t2 = t.copy()
    t2[0, 1] += 5.0
    t2[3, 1] = np.nan
    after = interpolate_series(xp, yp, zp, x, y, z, t2).filled()

    for d in (0, 2, 3):
        assert np.array_equal(before[:, d], after[:, d])
    assert not np.array_equal(before[:, 1], after[:, 1])


def test_series_day_with_single_station_reports_insufficient():
    x, y, z, t = _series(n=4, days=3)
    t[1:, 1] = np.nan  # only station 0 left on day 1

    res = interpolate_series([50000.0], [50000.0], [300.0], x, y, z, t)

    assert list(res.errors) == [1]
    assert isinstance(res.errors[1], InsufficientStationsError)
    assert res.failed_days.tolist() == [1]
    assert res.n_stations.tolist() == [4, 1, 4]

    mask = np.ma.getmaskarray(res.values)
    assert mask[:, 1].all()
    assert not mask[:, 0].any()
    assert not mask[:, 2].any()
    assert np.isfinite(res.filled()[:, [0, 2]]).all()


def test_series_excludes_stations_with_missing_coordinates():
    x, y, z, t = _series()
    z[4] = np.nan
    res = interpolate_series([50000.0], [50000.0], [300.0], x, y, z, t)
    assert res.n_stations.tolist() == [7, 7, 7, 7]

    keep = np.arange(8) != 4
    expected = interpolate_points(
        [50000.0], [50000.0], [300.0], x[keep], y[keep], z[keep], t[keep, 0]
    )
    assert np.array_equal(res.filled()[:, 0], expected.filled(np.nan))


def test_series_observation_rows_must_match_stations():
    x, y, z, t = _series()
    with pytest.raises(InputShapeMismatchError):
        interpolate_series([0.0], [0.0], [0.0], x, y, z, t[:-1])
    with pytest.raises(InputShapeMismatchError):
        interpolate_series([0.0], [0.0], [0.0], x, y, z, t[:, 0])


def test_series_filled_uses_fill_value():
    x, y, z, t = _series(n=4, days=2)
    t[:, 0] = np.nan
    res = interpolate_series([50000.0], [50000.0], [300.0], x, y, z, t)
    assert res.filled(-999.0)[0, 0] == -999.0


def test_series_day_with_two_stations_uses_zero_slope_fallback():
    x, y, z, t = _series(n=4, days=3)
    t[2:, 1] = np.nan  # stations 0 and 1 left on day 1
    xp, yp = [50000.0, 20000.0], [50000.0, 80000.0]

    low = interpolate_series(xp, yp, [0.0, 0.0], x, y, z, t)
    high = interpolate_series(xp, yp, [3000.0, 3000.0], x, y, z, t)

    assert low.errors == {}
    assert low.n_stations.tolist() == [4, 2, 4]
    params = InterpolationParams()
    for k in range(2):
        expected = _two_station_value(xp[k], yp[k], x[:2], y[:2], t[:2, 1], params)
        assert np.isclose(low.filled()[k, 1], expected, rtol=1e-12)
    # no elevation correction on the two-station day only
    assert np.array_equal(low.filled()[:, 1], high.filled()[:, 1])
    assert not np.array_equal(low.filled()[:, 0], high.filled()[:, 0])

    full = interpolate_points(xp, yp, [0.0, 0.0], x, y, z, t[:, 0])
    assert np.array_equal(low.filled()[:, 0], full.filled(np.nan))
