# SPDX-License-Identifier: MIT
"""
meteointerp.kernel
==================

Truncated Gaussian weighting and truncation-radius calibration.

- :func:`gaussian_weights`:
    Weight per station, 1 at distance 0, exactly 0 at and beyond the
    truncation radius ``Rp``.
- :func:`estimate_radius`:
    Fixed-iteration rescaling of ``Rp`` towards a target effective station
    count (sum of weights).
- :func:`estimate_radius_adaptive`:
    Same rescaling rule with an early stop once the weight sum is within a
    relative tolerance of the target.
- :func:`calibrate_radius`:
    Dispatch on :attr:`InterpolationParams.radius_method`.

Rescaling assumes the weight mass grows with the enclosed planar area
(proportional to ``Rp**2``), hence ``Rp <- Rp * sqrt(N / sumW)``.
"""

from __future__ import annotations

import numpy as np

from .params import InterpolationParams


def gaussian_weights(r, radius: float, alpha: float) -> np.ndarray:
    """
    Truncated Gaussian weights.

    For ``0 <= r < radius``::

        w(r) = (exp(-alpha * (r / radius)**2) - exp(-alpha)) / (1 - exp(-alpha))

    and ``w(r) = 0`` for ``r >= radius``.

    Parameters
    ----------
    r : array-like
        Non-negative distances.
    radius : float
        Truncation radius (must be positive).
    alpha : float
        Shape parameter (must be positive).

    Returns
    -------
    np.ndarray
        Float array with the same shape as ``r``.
    """
    r = np.asarray(r, dtype="float64")
    tail = np.exp(-alpha)
    w = (np.exp(-alpha * (r / radius) ** 2) - tail) / (1.0 - tail)
    w[r >= radius] = 0.0
    return w


def estimate_radius(
    r,
    ini_radius: float,
    alpha: float,
    n_target: float,
    iterations: int = 3,
) -> float:
    """
    Calibrate the truncation radius with a fixed number of rescalings.

    When no station falls inside the current radius (``sumW == 0``) the
    radius is left unchanged for that iteration. There is no convergence
    test; the radius after ``iterations`` steps is returned as is.
    """
    r = np.asarray(r, dtype="float64")
    rp = float(ini_radius)
    for _ in range(int(iterations)):
        sum_w = float(np.sum(gaussian_weights(r, rp, alpha)))
        if sum_w > 0.0:
            rp = rp * np.sqrt(n_target / sum_w)
    return float(rp)


def estimate_radius_adaptive(
    r,
    ini_radius: float,
    alpha: float,
    n_target: float,
    max_iterations: int = 20,
    rtol: float = 0.05,
) -> float:
    """
    Like :func:`estimate_radius`, but stop once ``|sumW - N| <= rtol * N``.

    Gives different numbers than the fixed-iteration search and is only
    used when explicitly requested.
    """
    r = np.asarray(r, dtype="float64")
    rp = float(ini_radius)
    for _ in range(int(max_iterations)):
        sum_w = float(np.sum(gaussian_weights(r, rp, alpha)))
        if abs(sum_w - n_target) <= rtol * n_target:
            break
        if sum_w > 0.0:
            rp = rp * np.sqrt(n_target / sum_w)
    return float(rp)


def calibrate_radius(r, params: InterpolationParams) -> float:
    """Radius for distances ``r`` according to ``params.radius_method``."""
    if params.radius_method == "adaptive":
        return estimate_radius_adaptive(
            r,
            params.initial_radius,
            params.shape,
            params.target_station_count,
            max_iterations=params.radius_iterations,
            rtol=params.radius_rtol,
        )
    return estimate_radius(
        r,
        params.initial_radius,
        params.shape,
        params.target_station_count,
        iterations=params.radius_iterations,
    )


__all__ = [
    "gaussian_weights",
    "estimate_radius",
    "estimate_radius_adaptive",
    "calibrate_radius",
]
