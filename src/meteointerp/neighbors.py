# src/meteointerp/neighbors.py
# SPDX-License-Identifier: MIT
"""
Spatial neighbor utilities for meteointerp.

All coordinates are **planar** (e.g. metres in a projected CRS); elevation
never enters a distance.

- :func:`planar_distance`:
    Vectorized Euclidean distance from one point to many stations.
- :func:`kth_neighbor_distance`:
    Distance from every station to its k-th closest *other* station, using
    a scikit-learn KDTree.
- :func:`nearest_neighbor_distance`:
    Shortcut for ``k=1``.
- :func:`suggest_initial_radius`:
    Median distance enclosing the target number of stations; a data-driven
    starting point for ``InterpolationParams.initial_radius``.
"""

from __future__ import annotations

import numpy as np
from sklearn.neighbors import KDTree


# ---------------------------------------------------------------------------
# Point-to-stations distance
# ---------------------------------------------------------------------------


def planar_distance(xp: float, yp: float, x, y) -> np.ndarray:
    """
    Euclidean distance from ``(xp, yp)`` to every ``(x[i], y[i])``.

    Parameters
    ----------
    xp, yp : float
        Query point coordinates.
    x, y : array-like
        Station coordinates.

    Returns
    -------
    np.ndarray
        Distances, same length as ``x``.
    """
    x = np.asarray(x, dtype="float64")
    y = np.asarray(y, dtype="float64")
    return np.sqrt((xp - x) ** 2 + (yp - y) ** 2)


# ---------------------------------------------------------------------------
# Station-to-station neighbors (KDTree)
# ---------------------------------------------------------------------------


def kth_neighbor_distance(x, y, k: int = 1) -> np.ndarray:
    """
    Distance from each station to its k-th nearest other station.

    When ``k`` exceeds the number of other stations, the effective k is
    capped to ``n - 1``. With fewer than two stations the result is all NaN.
    """
    coords = np.column_stack(
        [np.asarray(x, dtype="float64"), np.asarray(y, dtype="float64")]
    )
    n_stations = coords.shape[0]
    if n_stations < 2:
        return np.full(n_stations, np.nan, dtype=float)

    # self is always the first hit, so query one extra neighbor
    k = int(max(1, min(int(k), n_stations - 1)))
    tree = KDTree(coords)
    dist, _ = tree.query(coords, k=k + 1)
    return dist[:, k]


def nearest_neighbor_distance(x, y) -> np.ndarray:
    """Distance from each station to its closest other station."""
    return kth_neighbor_distance(x, y, k=1)


def suggest_initial_radius(x, y, n_target: int = 30) -> float:
    """
    Median distance from a station to its ``n_target``-th neighbor.

    Returns NaN with fewer than two stations.
    """
    d = kth_neighbor_distance(x, y, k=n_target)
    if d.size == 0 or np.all(np.isnan(d)):
        return float("nan")
    return float(np.nanmedian(d))


__all__ = [
    "planar_distance",
    "kth_neighbor_distance",
    "nearest_neighbor_distance",
    "suggest_initial_radius",
]
