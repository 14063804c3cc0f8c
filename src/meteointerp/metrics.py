# SPDX-License-Identifier: MIT
"""
meteointerp.metrics
===================

Verification scores for interpolated values against station observations,
used by the cross-validation in :mod:`meteointerp.evaluate`:

* Bias (mean error, predicted minus observed)
* MAE  (mean absolute error)
* RMSE (root-mean-square error)
* R2   (coefficient of determination)
* KGE  (Kling-Gupta efficiency)

Inputs are converted to float arrays and paired NaNs are dropped first.
Degenerate cases (empty series, zero variance, zero mean) give ``nan``
instead of raising.
"""

from __future__ import annotations

from typing import Dict, Tuple

import numpy as np


# --------------------------------------------------------------------------- #
# Basic metric primitives
# --------------------------------------------------------------------------- #


def _to_clean_pairs(y_true, y_pred) -> Tuple[np.ndarray, np.ndarray]:
    """
    Paired float arrays with NaNs (and masked cells) dropped pairwise.

    Raises ValueError on shape mismatch.
    """
    yt = np.ma.filled(np.ma.asarray(y_true, dtype="float64"), np.nan)
    yp = np.ma.filled(np.ma.asarray(y_pred, dtype="float64"), np.nan)

    if yt.shape != yp.shape:
        raise ValueError(
            f"y_true and y_pred must have the same shape. "
            f"Got {yt.shape} vs {yp.shape}."
        )

    keep = ~(np.isnan(yt) | np.isnan(yp))
    return yt[keep], yp[keep]


def bias(y_true, y_pred) -> float:
    """Mean error ``mean(y_pred - y_true)``; NaN when empty."""
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    return float(np.mean(yp - yt))


def mae(y_true, y_pred) -> float:
    """Mean absolute error; NaN when empty."""
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    return float(np.mean(np.abs(yt - yp)))


def rmse(y_true, y_pred) -> float:
    """Root-mean-square error; NaN when empty."""
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    diff = yt - yp
    return float(np.sqrt(np.mean(diff * diff)))


def r2(y_true, y_pred) -> float:
    """
    Coefficient of determination.

    NaN for fewer than two pairs or a constant ``y_true``.
    """
    yt, yp = _to_clean_pairs(y_true, y_pred)
    if yt.size < 2:
        return float("nan")

    ss_tot = float(np.sum((yt - np.mean(yt)) ** 2))
    if ss_tot == 0.0:
        return float("nan")

    ss_res = float(np.sum((yt - yp) ** 2))
    return float(1.0 - ss_res / ss_tot)


def kge(y_true, y_pred) -> float:
    """
    Kling-Gupta efficiency::

        KGE = 1 - sqrt((r - 1)^2 + (alpha - 1)^2 + (beta - 1)^2)

    with ``r`` the Pearson correlation, ``alpha`` the ratio of standard
    deviations (pred / obs) and ``beta`` the ratio of means.

    NaN when any statistic is undefined (fewer than two pairs, zero
    variance, zero observed mean).
    """
    yt, yp = _to_clean_pairs(y_true, y_pred)
    n = yt.size
    if n < 2:
        return float("nan")

    mu_o = float(np.mean(yt))
    mu_p = float(np.mean(yp))
    std_o = float(np.std(yt, ddof=1))
    std_p = float(np.std(yp, ddof=1))

    if std_o == 0.0 or std_p == 0.0 or mu_o == 0.0:
        return float("nan")

    r = float(np.sum((yt - mu_o) * (yp - mu_p))) / ((n - 1) * std_o * std_p)
    alpha = std_p / std_o
    beta = mu_p / mu_o

    return float(1.0 - np.sqrt((r - 1.0) ** 2 + (alpha - 1.0) ** 2 + (beta - 1.0) ** 2))


# --------------------------------------------------------------------------- #
# High-level helper
# --------------------------------------------------------------------------- #


def compute_metrics(
    y_true,
    y_pred,
    *,
    include_kge: bool = True,
) -> Dict[str, float]:
    """
    Compute n, Bias, MAE, RMSE, R2 and optionally KGE for a paired series.

    Returns
    -------
    dict
        Keys ``"n"``, ``"Bias"``, ``"MAE"``, ``"RMSE"``, ``"R2"`` and
        ``"KGE"`` (when ``include_kge``). Values may be NaN.
    """
    yt, _ = _to_clean_pairs(y_true, y_pred)
    out = {
        "n": int(yt.size),
        "Bias": bias(y_true, y_pred),
        "MAE": mae(y_true, y_pred),
        "RMSE": rmse(y_true, y_pred),
        "R2": r2(y_true, y_pred),
    }
    if include_kge:
        out["KGE"] = kge(y_true, y_pred)
    return out


__all__ = ["bias", "mae", "rmse", "r2", "kge", "compute_metrics"]
