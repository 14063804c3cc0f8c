# SPDX-License-Identifier: MIT
"""
meteointerp
===========

Elevation-corrected spatial interpolation of daily station temperature
after Thornton, Running & White (1997):

    truncated Gaussian weights with an adaptive radius
    + weighted pairwise regression for the local lapse rate

Main entry points
-----------------

Array level (planar coordinates, elevation in metres):

- :func:`interpolate_point`  - one query point, one day.
- :func:`interpolate_points` - many query points, one day.
- :func:`interpolate_series` - many query points, stations x days matrix
  with per-day handling of missing stations.

Table level (long-format station records):

- :func:`interpolate_dataset`     - daily values at target points.
- :func:`impute_dataset`          - fill gaps in station series.
- :func:`cross_validate_stations` - leave-one-station-out verification.

Core submodules
---------------

- :mod:`meteointerp.params`     - :class:`InterpolationParams`
- :mod:`meteointerp.kernel`     - Gaussian weights and radius calibration
- :mod:`meteointerp.regression` - pairwise differences and weighted fit
- :mod:`meteointerp.interpolate` - point / batch / series interpolators
- :mod:`meteointerp.neighbors`  - planar distances and KDTree neighbors
- :mod:`meteointerp.metrics`    - Bias, MAE, RMSE, R2, KGE
- :mod:`meteointerp.viz`        - plotting helpers
"""

from __future__ import annotations

# Configuration and errors
from .params import InterpolationParams, coerce_params
from .errors import (
    InterpolationError,
    InputShapeMismatchError,
    InsufficientStationsError,
    ZeroWeightMassError,
)

# Engine
from .kernel import (
    gaussian_weights,
    estimate_radius,
    estimate_radius_adaptive,
    calibrate_radius,
)
from .regression import (
    RegressionResult,
    pairwise_differences,
    pairwise_products,
    weighted_regression,
)
from .interpolate import (
    SeriesInterpolation,
    interpolate_point,
    interpolate_points,
    interpolate_series,
)

# Tables
from .dataset import station_matrix, interpolate_dataset
from .impute import impute_dataset
from .evaluate import cross_validate_stations

# Neighbors / metrics
from .neighbors import (
    planar_distance,
    nearest_neighbor_distance,
    suggest_initial_radius,
)
from .metrics import compute_metrics

# Visualization
from .viz import (
    plot_parity_scatter,
    plot_spatial_scatter,
    plot_lapse_rate,
    plot_series_overlay,
)


__all__ = [
    # Configuration / errors
    "InterpolationParams",
    "coerce_params",
    "InterpolationError",
    "InputShapeMismatchError",
    "InsufficientStationsError",
    "ZeroWeightMassError",
    # Engine
    "gaussian_weights",
    "estimate_radius",
    "estimate_radius_adaptive",
    "calibrate_radius",
    "RegressionResult",
    "pairwise_differences",
    "pairwise_products",
    "weighted_regression",
    "SeriesInterpolation",
    "interpolate_point",
    "interpolate_points",
    "interpolate_series",
    # Tables
    "station_matrix",
    "interpolate_dataset",
    "impute_dataset",
    "cross_validate_stations",
    # Neighbors / metrics
    "planar_distance",
    "nearest_neighbor_distance",
    "suggest_initial_radius",
    "compute_metrics",
    # Visualization
    "plot_parity_scatter",
    "plot_spatial_scatter",
    "plot_lapse_rate",
    "plot_series_overlay",
]


# Sync this with pyproject.toml if you bump the version
__version__ = "0.1.0"
