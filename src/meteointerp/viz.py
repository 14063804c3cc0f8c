# SPDX-License-Identifier: MIT
"""
meteointerp.viz
===============

Plotting helpers for inspecting interpolation inputs and results:

- Observed vs. interpolated parity (cross-validation predictions).
- Spatial scatter of a station or target value in planar coordinates.
- Pairwise elevation/value differences with the fitted lapse rate.
- Station series with observed and imputed values distinguished.

Every function returns an Axes, creates a Figure only when ``ax`` is None,
and annotates "No data" instead of failing on empty input.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from matplotlib.axes import Axes
from matplotlib.figure import Figure

from .features import ensure_datetime_naive, validate_required_columns
from .regression import pairwise_differences, pairwise_products, weighted_regression


# --------------------------------------------------------------------- #
# Internal helpers
# --------------------------------------------------------------------- #


def _ensure_ax(
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (8.0, 4.0),
) -> Tuple[Figure, Axes]:
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
        return fig, ax
    return ax.figure, ax


def _no_data(ax: Axes, message: str = "No data") -> Axes:
    ax.cla()
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12)
    ax.set_xticks([])
    ax.set_yticks([])
    return ax


# --------------------------------------------------------------------- #
# Public plots
# --------------------------------------------------------------------- #


def plot_parity_scatter(
    df: pd.DataFrame,
    *,
    y_true_col: str = "y_obs",
    y_pred_col: str = "y_mod",
    sample: Optional[int] = 10000,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (5.0, 5.0),
) -> Axes:
    """
    Observed vs. interpolated scatter with a 1:1 reference line.

    ``sample`` caps the number of plotted points (random, fixed seed).
    """
    fig, ax = _ensure_ax(ax, figsize)

    if df.empty or y_true_col not in df.columns or y_pred_col not in df.columns:
        return _no_data(ax, "No parity data")

    work = df[[y_true_col, y_pred_col]].dropna()
    if work.empty:
        return _no_data(ax, "No parity data (after dropna)")

    if sample is not None and work.shape[0] > sample:
        work = work.sample(n=sample, random_state=42)

    x = work[y_true_col].to_numpy()
    y = work[y_pred_col].to_numpy()
    ax.scatter(x, y, s=8, alpha=0.6)

    lo = float(min(x.min(), y.min()))
    hi = float(max(x.max(), y.max()))
    ax.plot([lo, hi], [lo, hi], linestyle="--")

    ax.set_xlabel("Observed")
    ax.set_ylabel("Interpolated")
    ax.set_title("Observed vs. Interpolated")
    return ax


def plot_spatial_scatter(
    df: pd.DataFrame,
    *,
    x_col: str = "x",
    y_col: str = "y",
    value_col: str = "RMSE",
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (6.0, 5.0),
) -> Axes:
    """Planar x/y scatter colored by ``value_col``."""
    fig, ax = _ensure_ax(ax, figsize)

    validate_required_columns(df, [x_col, y_col, value_col], context="plot_spatial_scatter")

    dat = df[[x_col, y_col, value_col]].dropna()
    if dat.empty:
        return _no_data(ax, "No spatial data")

    sc = ax.scatter(dat[x_col], dat[y_col], c=dat[value_col], s=30)
    ax.set_xlabel(x_col)
    ax.set_ylabel(y_col)
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_title(f"Spatial scatter colored by {value_col}")
    cbar = fig.colorbar(sc, ax=ax)
    cbar.set_label(value_col)
    return ax


def plot_lapse_rate(
    z,
    t,
    weights=None,
    *,
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (6.0, 4.5),
) -> Axes:
    """
    Pairwise value differences against elevation differences.

    The line is the weighted fit used by the engine; pair weights are
    ``weights[i] * weights[j]`` (uniform when ``weights`` is None). The
    slope (lapse rate) is shown in the legend.
    """
    fig, ax = _ensure_ax(ax, figsize)

    z = np.asarray(z, dtype="float64")
    t = np.asarray(t, dtype="float64")
    if z.size < 2:
        return _no_data(ax, "Need at least 2 stations")

    z_dif, t_dif = pairwise_differences(z, t)
    w = np.ones_like(z) if weights is None else np.asarray(weights, dtype="float64")
    fit = weighted_regression(t_dif, z_dif, pairwise_products(w))

    ax.scatter(z_dif, t_dif, s=8, alpha=0.5)
    xs = np.array([z_dif.min(), z_dif.max()])
    ax.plot(
        xs,
        fit.intercept + fit.slope * xs,
        linestyle="--",
        label=f"slope = {fit.slope * 1000.0:.2f} per 1000 m",
    )
    ax.set_xlabel("Elevation difference (m)")
    ax.set_ylabel("Value difference")
    ax.set_title("Pairwise lapse-rate fit")
    ax.legend()
    return ax


def plot_series_overlay(
    df: pd.DataFrame,
    *,
    station_id: object,
    id_col: str,
    date_col: str,
    value_col: str,
    source_col: str = "source",
    ax: Optional[Axes] = None,
    figsize: Tuple[float, float] = (12.0, 3.5),
) -> Axes:
    """
    One station's series from :func:`meteointerp.impute.impute_dataset`,
    with imputed values marked separately from observed ones.
    """
    fig, ax = _ensure_ax(ax, figsize)

    validate_required_columns(
        df, [id_col, date_col, value_col, source_col], context="plot_series_overlay"
    )

    sub = df[df[id_col] == station_id].copy()
    if sub.empty:
        return _no_data(ax, f"No data for station {station_id}")

    sub[date_col] = ensure_datetime_naive(sub[date_col])
    sub = sub.dropna(subset=[date_col]).sort_values(date_col)

    ax.plot(sub[date_col], sub[value_col], linewidth=0.8, color="0.6")
    for label, marker in (("observed", "o"), ("imputed", "x")):
        part = sub[sub[source_col] == label]
        if not part.empty:
            ax.scatter(part[date_col], part[value_col], s=12, marker=marker, label=label.capitalize())

    ax.set_title(f"Station {station_id} - {value_col}")
    ax.set_xlabel("Date")
    ax.set_ylabel(value_col)
    ax.legend()
    return ax


__all__ = [
    "plot_parity_scatter",
    "plot_spatial_scatter",
    "plot_lapse_rate",
    "plot_series_overlay",
]
