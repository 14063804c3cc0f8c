# SPDX-License-Identifier: MIT
"""
Tests for meteointerp.metrics
"""

import numpy as np
import pytest

from meteointerp.metrics import (
    bias,
    mae,
    rmse,
    r2,
    kge,
    compute_metrics,
)


def test_perfect_fit():
    y = [1.0, 2.0, 3.0, 4.0]
    assert mae(y, y) == 0.0
    assert rmse(y, y) == 0.0
    assert bias(y, y) == 0.0
    assert r2(y, y) == 1.0
    assert np.isclose(kge(y, y), 1.0)


def test_nan_pairs_dropped():
    y = [1.0, 2.0, np.nan, 4.0]
    yhat = [1.0, 3.0, 2.0, 5.0]

    # clean pairs: (1,1), (2,3), (4,5)
    assert np.isclose(mae(y, yhat), 2.0 / 3.0)
    assert np.isclose(rmse(y, yhat), np.sqrt(2.0 / 3.0))
    assert np.isclose(bias(y, yhat), 2.0 / 3.0)


def test_masked_cells_dropped():
    y = np.array([1.0, 2.0, 3.0])
    yhat = np.ma.masked_array([1.0, 100.0, 3.0], mask=[False, True, False])
    assert mae(y, yhat) == 0.0


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        mae([1.0, 2.0], [1.0, 2.0, 3.0])


def test_degenerate_cases_return_nan():
    assert np.isnan(mae([], []))
    assert np.isnan(r2([3.0, 3.0, 3.0], [1.0, 2.0, 3.0]))
    assert np.isnan(r2([1.0], [1.0]))
    # zero observed mean
    assert np.isnan(kge([-1.0, 1.0], [-1.0, 1.0]))
    # constant predictions
    assert np.isnan(kge([1.0, 2.0, 3.0], [2.0, 2.0, 2.0]))


def test_compute_metrics_keys():
    out = compute_metrics([1.0, 2.0, np.nan], [1.5, 2.5, 3.0])
    assert set(out) == {"n", "Bias", "MAE", "RMSE", "R2", "KGE"}
    assert out["n"] == 2
    assert np.isclose(out["Bias"], 0.5)

    out = compute_metrics([1.0, 2.0], [1.0, 2.0], include_kge=False)
    assert "KGE" not in out
