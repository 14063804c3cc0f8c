# SPDX-License-Identifier: MIT
"""
meteointerp.interpolate
=======================

Elevation-corrected, adaptive-radius Gaussian interpolation of a scalar
station variable (Thornton, Running & White, 1997).

For a query point ``(xp, yp, zp)``:

1. planar distances to every station (elevation is not part of the metric),
2. truncation radius calibrated towards ``target_station_count``
   (:func:`meteointerp.kernel.calibrate_radius`),
3. truncated Gaussian weights ``W``,
4. weighted regression of pairwise value differences on pairwise elevation
   differences, with pair weights ``W[i] * W[j]``,
5. weighted average of station values moved to the query elevation::

       sum(W * (T + intercept + slope * (zp - Z))) / sum(W)

Entry points
------------

- :func:`interpolate_point`  - one query point, one time step.
- :func:`interpolate_points` - many query points sharing one station set;
  pairwise differences are built once and reused.
- :func:`interpolate_series` - many query points over a stations x days
  observation matrix, with per-day missing-data filtering.

Missing results are never silently NaN: a single point raises
:class:`~meteointerp.errors.ZeroWeightMassError`, batch and series calls
return :class:`numpy.ma.MaskedArray` objects whose masked cells mark
"no data".
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import numpy as np
from tqdm.auto import tqdm

from .errors import (
    InputShapeMismatchError,
    InsufficientStationsError,
    InterpolationError,
    ZeroWeightMassError,
)
from .kernel import calibrate_radius, gaussian_weights
from .neighbors import planar_distance
from .params import InterpolationParams, coerce_params
from .regression import pairwise_differences, pairwise_products, weighted_regression

ParamsLike = Optional[Union[InterpolationParams, Mapping[str, Any]]]


# --------------------------------------------------------------------------- #
# Input validation
# --------------------------------------------------------------------------- #


def _as_vectors(context: str, **arrays) -> Tuple[np.ndarray, ...]:
    """
    Convert keyword arrays to 1-D float vectors of a common length.

    Raises InputShapeMismatchError on non-1-D input or differing lengths.
    """
    out = []
    lengths = {}
    for name, arr in arrays.items():
        vec = np.asarray(arr, dtype="float64")
        if vec.ndim == 0:
            vec = vec.reshape(1)
        if vec.ndim != 1:
            raise InputShapeMismatchError(
                f"[{context}] '{name}' must be one-dimensional, got shape {vec.shape}."
            )
        lengths[name] = vec.size
        out.append(vec)

    if len(set(lengths.values())) > 1:
        raise InputShapeMismatchError(
            f"[{context}] arrays must have the same length, got {lengths}."
        )
    return tuple(out)


def _require_finite_stations(context: str, *arrays: np.ndarray) -> None:
    for arr in arrays:
        if not np.all(np.isfinite(arr)):
            raise InterpolationError(
                f"[{context}] station arrays contain missing values; "
                "filter them first or use interpolate_series."
            )


# --------------------------------------------------------------------------- #
# Core computation (no validation)
# --------------------------------------------------------------------------- #


def _interpolate_one(
    xp: float,
    yp: float,
    zp: float,
    x: np.ndarray,
    y: np.ndarray,
    z: np.ndarray,
    t: np.ndarray,
    z_dif: np.ndarray,
    t_dif: np.ndarray,
    params: InterpolationParams,
) -> float:
    r = planar_distance(xp, yp, x, y)
    rp = calibrate_radius(r, params)
    w = gaussian_weights(r, rp, params.shape)

    fit = weighted_regression(t_dif, z_dif, pairwise_products(w))

    sum_w = float(np.sum(w))
    w_num = float(np.sum(w * (t + fit.intercept + fit.slope * (zp - z))))
    if params.verbose:
        tqdm.write(
            f" nstations: {x.size} wr0: {fit.intercept:.6g} wr1: {fit.slope:.6g} "
            f"Wnum: {w_num:.6g} sumW: {sum_w:.6g}"
        )
    if sum_w == 0.0:
        raise ZeroWeightMassError(rp)
    return w_num / sum_w


# --------------------------------------------------------------------------- #
# Public entry points
# --------------------------------------------------------------------------- #


def interpolate_point(
    xp: float,
    yp: float,
    zp: float,
    x,
    y,
    z,
    t,
    params: ParamsLike = None,
    *,
    z_dif=None,
    t_dif=None,
) -> float:
    """
    Interpolate one value at ``(xp, yp, zp)``.

    Parameters
    ----------
    xp, yp, zp : float
        Query point planar coordinates and elevation.
    x, y, z, t : array-like
        Station coordinates, elevations and observed values (same length).
    params : InterpolationParams, dict or None
        Engine configuration; defaults when None.
    z_dif, t_dif : array-like, optional
        Precomputed pairwise elevation / value differences of the stations
        (see :func:`meteointerp.regression.pairwise_differences`). Built
        from ``z`` and ``t`` when omitted.

    Returns
    -------
    float

    Raises
    ------
    InputShapeMismatchError
        Station arrays (or the precomputed differences) have inconsistent
        lengths.
    InsufficientStationsError
        Fewer than two stations.
    ZeroWeightMassError
        No station receives a positive weight.
    """
    params = coerce_params(params)
    x, y, z, t = _as_vectors("interpolate_point", x=x, y=y, z=z, t=t)
    if not np.all(np.isfinite([xp, yp, zp])):
        raise InterpolationError("[interpolate_point] query point has missing coordinates.")
    _require_finite_stations("interpolate_point", x, y, z, t)

    n = x.size
    if n < 2:
        raise InsufficientStationsError(n, context="interpolate_point")

    if z_dif is None or t_dif is None:
        z_dif, t_dif = pairwise_differences(z, t)
    else:
        z_dif, t_dif = _as_vectors("interpolate_point", z_dif=z_dif, t_dif=t_dif)
        if z_dif.size != n * (n - 1) // 2:
            raise InputShapeMismatchError(
                f"[interpolate_point] expected {n * (n - 1) // 2} pairwise "
                f"differences for {n} stations, got {z_dif.size}."
            )

    return _interpolate_one(
        float(xp), float(yp), float(zp), x, y, z, t, z_dif, t_dif, params
    )


def interpolate_points(
    xp,
    yp,
    zp,
    x,
    y,
    z,
    t,
    params: ParamsLike = None,
) -> np.ma.MaskedArray:
    """
    Interpolate many query points sharing one station set.

    Pairwise differences depend on the stations only, so they are computed
    once and reused for every point; results equal independent
    :func:`interpolate_point` calls.

    Parameters
    ----------
    xp, yp, zp : array-like
        Query point coordinates and elevations.
    x, y, z, t : array-like
        Station coordinates, elevations and values.
    params : InterpolationParams, dict or None
        Engine configuration.

    Returns
    -------
    numpy.ma.MaskedArray
        One value per query point, in input order. Points with zero weight
        mass or missing coordinates are masked (underlying value NaN).

    Raises
    ------
    InputShapeMismatchError, InsufficientStationsError
    """
    params = coerce_params(params)
    xp, yp, zp = _as_vectors("interpolate_points", xp=xp, yp=yp, zp=zp)
    x, y, z, t = _as_vectors("interpolate_points", x=x, y=y, z=z, t=t)
    _require_finite_stations("interpolate_points", x, y, z, t)

    n = x.size
    if n < 2:
        raise InsufficientStationsError(n, context="interpolate_points")

    z_dif, t_dif = pairwise_differences(z, t)

    values = np.full(xp.size, np.nan, dtype=float)
    mask = np.ones(xp.size, dtype=bool)
    for k in range(xp.size):
        if not (np.isfinite(xp[k]) and np.isfinite(yp[k]) and np.isfinite(zp[k])):
            continue
        try:
            values[k] = _interpolate_one(
                xp[k], yp[k], zp[k], x, y, z, t, z_dif, t_dif, params
            )
        except ZeroWeightMassError as exc:
            if params.verbose:
                tqdm.write(f"Point {k}: {exc}")
            continue
        mask[k] = False

    return np.ma.masked_array(values, mask=mask)


@dataclass
class SeriesInterpolation:
    """
    Result of :func:`interpolate_series`.

    Attributes
    ----------
    values : numpy.ma.MaskedArray
        Interpolated values, shape (n_points, n_days). Masked cells have no
        value (failed day or zero weight mass at that point).
    n_stations : np.ndarray
        Number of valid stations used on each day.
    errors : dict
        ``{day_index: InterpolationError}`` for days that failed as a whole.
    """

    values: np.ma.MaskedArray
    n_stations: np.ndarray
    errors: Dict[int, InterpolationError] = field(default_factory=dict)

    @property
    def failed_days(self) -> np.ndarray:
        return np.array(sorted(self.errors), dtype=int)

    def filled(self, fill_value: float = np.nan) -> np.ndarray:
        """Plain ndarray with masked cells replaced by ``fill_value``."""
        return self.values.filled(fill_value)


def interpolate_series(
    xp,
    yp,
    zp,
    x,
    y,
    z,
    t,
    params: ParamsLike = None,
    *,
    show_progress: bool = False,
) -> SeriesInterpolation:
    """
    Interpolate a stations x days observation matrix onto query points.

    For every day, a station takes part only if its value and its three
    coordinates are all present. Station membership is recomputed per day,
    so a station missing on one day still contributes on the next.

    Parameters
    ----------
    xp, yp, zp : array-like
        Query point coordinates and elevations (length n_points).
    x, y, z : array-like
        Station coordinates and elevations (length n_stations). NaN marks a
        missing coordinate.
    t : array-like
        Observations, shape (n_stations, n_days). NaN marks a missing value.
    params : InterpolationParams, dict or None
        Engine configuration.
    show_progress : bool, default False
        Show a progress bar over days (also shown when ``params.verbose``).

    Returns
    -------
    SeriesInterpolation

    Raises
    ------
    InputShapeMismatchError
        Coordinate lengths differ, or ``t`` does not have one row per station.
    """
    params = coerce_params(params)
    xp, yp, zp = _as_vectors("interpolate_series", xp=xp, yp=yp, zp=zp)
    x, y, z = _as_vectors("interpolate_series", x=x, y=y, z=z)
    t = np.asarray(t, dtype="float64")
    if t.ndim != 2 or t.shape[0] != x.size:
        raise InputShapeMismatchError(
            f"[interpolate_series] observation matrix must have shape "
            f"({x.size}, n_days), got {t.shape}."
        )

    n_points = xp.size
    n_days = t.shape[1]
    values = np.full((n_points, n_days), np.nan, dtype=float)
    mask = np.ones((n_points, n_days), dtype=bool)
    n_stations = np.zeros(n_days, dtype=int)
    errors: Dict[int, InterpolationError] = {}

    coords_ok = np.isfinite(x) & np.isfinite(y) & np.isfinite(z)

    days = range(n_days)
    iterator = tqdm(days, desc="Interpolating days", unit="day") if (show_progress or params.verbose) else days

    for d in iterator:
        valid = coords_ok & np.isfinite(t[:, d])
        n_valid = int(valid.sum())
        n_stations[d] = n_valid
        if params.verbose:
            tqdm.write(f"Day {d} nexcluded = {x.size - n_valid}")

        try:
            day = interpolate_points(
                xp, yp, zp, x[valid], y[valid], z[valid], t[valid, d], params
            )
        except InsufficientStationsError as exc:
            errors[d] = exc
            if params.verbose:
                tqdm.write(f"Day {d}: {exc}")
            continue

        values[:, d] = day.filled(np.nan)
        mask[:, d] = np.ma.getmaskarray(day)

    return SeriesInterpolation(
        values=np.ma.masked_array(values, mask=mask),
        n_stations=n_stations,
        errors=errors,
    )


__all__ = [
    "interpolate_point",
    "interpolate_points",
    "interpolate_series",
    "SeriesInterpolation",
]
