# SPDX-License-Identifier: MIT
"""
meteointerp.regression
======================

Pairwise-difference bookkeeping and the weighted least-squares fit used to
estimate the local vertical gradient (lapse rate).

Pair enumeration
----------------
All helpers enumerate unordered station pairs ``(i, j)`` with ``j < i``,
``i`` as the outer index and ``j`` as the inner index, both ascending::

    (1, 0), (2, 0), (2, 1), (3, 0), (3, 1), (3, 2), ...

This is the row-major order of the strict lower triangle, which is what
:func:`numpy.tril_indices` returns. Elevation differences, value
differences and weight products built here are therefore index-aligned.
"""

from __future__ import annotations

from typing import NamedTuple, Tuple

import numpy as np


class RegressionResult(NamedTuple):
    """Intercept and slope of the value-difference ~ elevation-difference fit."""

    intercept: float
    slope: float


def pair_indices(n: int) -> Tuple[np.ndarray, np.ndarray]:
    """Return ``(i, j)`` index arrays of the ``n * (n - 1) / 2`` station pairs."""
    return np.tril_indices(int(n), k=-1)


def pairwise_differences(z, t) -> Tuple[np.ndarray, np.ndarray]:
    """
    Elevation and value differences over all station pairs.

    Parameters
    ----------
    z, t : array-like
        Station elevations and observed values (same length ``n``).

    Returns
    -------
    (z_dif, t_dif) : tuple of ndarray
        ``z[i] - z[j]`` and ``t[i] - t[j]`` for every pair, each of length
        ``n * (n - 1) / 2``.
    """
    z = np.asarray(z, dtype="float64")
    t = np.asarray(t, dtype="float64")
    i, j = pair_indices(z.size)
    return z[i] - z[j], t[i] - t[j]


def pairwise_products(w) -> np.ndarray:
    """Weight products ``w[i] * w[j]`` in pair enumeration order."""
    w = np.asarray(w, dtype="float64")
    i, j = pair_indices(w.size)
    return w[i] * w[j]


def weighted_regression(t_dif, z_dif, w_dif) -> RegressionResult:
    """
    Weighted least-squares fit of ``t_dif = intercept + slope * z_dif``.

    Parameters
    ----------
    t_dif : array-like
        Pairwise value differences (response).
    z_dif : array-like
        Pairwise elevation differences (predictor).
    w_dif : array-like
        Pairwise weights.

    Returns
    -------
    RegressionResult
        ``(intercept, slope)``. When the weighted variance of ``z_dif`` is
        zero (flat terrain, a single weighted pair, or zero total weight) the slope is 0 and the
        intercept is the weighted mean of ``t_dif`` (0 without weight).
    """
    t_dif = np.asarray(t_dif, dtype="float64")
    z_dif = np.asarray(z_dif, dtype="float64")
    w_dif = np.asarray(w_dif, dtype="float64")

    sw = float(np.sum(w_dif))
    if sw <= 0.0:
        return RegressionResult(0.0, 0.0)

    mz = float(np.sum(w_dif * z_dif)) / sw
    mt = float(np.sum(w_dif * t_dif)) / sw
    dz = z_dif - mz
    var = float(np.sum(w_dif * dz * dz))
    # zero up to rounding of mz (e.g. a single weighted pair)
    if var <= np.finfo(float).eps * float(np.sum(w_dif * z_dif * z_dif)):
        return RegressionResult(mt, 0.0)

    cov = float(np.sum(w_dif * dz * (t_dif - mt)))
    slope = cov / var
    return RegressionResult(mt - slope * mz, slope)


__all__ = [
    "RegressionResult",
    "pair_indices",
    "pairwise_differences",
    "pairwise_products",
    "weighted_regression",
]
