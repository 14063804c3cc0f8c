# SPDX-License-Identifier: MIT
"""
meteointerp.dataset
===================

Long-format front end of the series interpolator.

Station records usually arrive as a long table, one row per
(station, date), with planar coordinates, elevation and the observed
variable. This module reshapes such a table into the station arrays and
stations x days matrix consumed by
:func:`meteointerp.interpolate.interpolate_series`, and returns results in
long format again.

- :func:`station_matrix`:
    Station metadata (median coordinates) plus a station x date matrix on a
    complete daily index.
- :func:`interpolate_dataset`:
    Interpolate every day of a station table onto a table of target points.
    Output rows carry a ``source`` flag:

    * "interpolated" - value computed by the engine
    * "no_data"      - no value (too few stations that day, or no station
      within the truncation radius of the target)
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from .features import ensure_datetime_naive, validate_required_columns
from .interpolate import interpolate_series
from .params import InterpolationParams, coerce_params


def station_matrix(
    data: pd.DataFrame,
    *,
    id_col: str,
    date_col: str,
    x_col: str,
    y_col: str,
    alt_col: str,
    target_col: str,
    start: Optional[str] = None,
    end: Optional[str] = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Reshape a long station table into metadata and a station x date matrix.

    Parameters
    ----------
    data : DataFrame
        Long-format table with [id_col, date_col, x_col, y_col, alt_col,
        target_col].
    id_col, date_col, x_col, y_col, alt_col, target_col : str
        Column names.
    start, end : str or None
        Optional inclusive window. Defaults to the span of the data.

    Returns
    -------
    (meta, values)
        - meta : index = station id (sorted), columns [x_col, y_col, alt_col]
          holding the per-station median coordinates.
        - values : index = station id (same order as ``meta``), columns =
          complete daily DatetimeIndex, NaN where not observed. Duplicate
          (station, date) rows are averaged.
    """
    validate_required_columns(
        data,
        [id_col, date_col, x_col, y_col, alt_col, target_col],
        context="station_matrix",
    )

    work = data[[id_col, date_col, x_col, y_col, alt_col, target_col]].copy()
    work[date_col] = ensure_datetime_naive(work[date_col]).dt.normalize()
    work = work.dropna(subset=[id_col, date_col])

    if work.empty:
        return (
            pd.DataFrame(columns=[x_col, y_col, alt_col]),
            pd.DataFrame(),
        )

    lo = pd.to_datetime(start) if start else work[date_col].min()
    hi = pd.to_datetime(end) if end else work[date_col].max()
    if lo > hi:
        raise ValueError("start must be <= end (or implied min <= max).")

    meta = work.groupby(id_col)[[x_col, y_col, alt_col]].median().sort_index()

    work = work[(work[date_col] >= lo) & (work[date_col] <= hi)]
    dates = pd.date_range(lo, hi, freq="D")

    values = (
        work.pivot_table(index=id_col, columns=date_col, values=target_col, aggfunc="mean")
        .reindex(index=meta.index, columns=dates)
        .astype(float)
    )
    values.columns.name = date_col
    return meta, values


def _long_output(
    ids: np.ndarray,
    coords: pd.DataFrame,
    dates: pd.DatetimeIndex,
    values: np.ndarray,
    source: np.ndarray,
    *,
    id_col: str,
    date_col: str,
    x_col: str,
    y_col: str,
    alt_col: str,
    target_col: str,
) -> pd.DataFrame:
    """Flatten (n_ids x n_dates) arrays into a long table, id-major."""
    n_ids, n_dates = values.shape
    return pd.DataFrame(
        {
            id_col: np.repeat(ids, n_dates),
            date_col: np.tile(dates.to_numpy(), n_ids),
            x_col: np.repeat(coords[x_col].to_numpy(dtype=float), n_dates),
            y_col: np.repeat(coords[y_col].to_numpy(dtype=float), n_dates),
            alt_col: np.repeat(coords[alt_col].to_numpy(dtype=float), n_dates),
            target_col: values.ravel(),
            "source": source.ravel(),
        }
    )


def interpolate_dataset(
    data: pd.DataFrame,
    targets: pd.DataFrame,
    *,
    id_col: str,
    date_col: str,
    x_col: str,
    y_col: str,
    alt_col: str,
    target_col: str,
    target_id_col: Optional[str] = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    params: Optional[Union[InterpolationParams, Mapping[str, Any]]] = None,
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Interpolate daily station values onto target points.

    Parameters
    ----------
    data : DataFrame
        Long-format station table with [id_col, date_col, x_col, y_col,
        alt_col, target_col].
    targets : DataFrame
        One row per target point with [target_id_col, x_col, y_col, alt_col].
    id_col, date_col, x_col, y_col, alt_col, target_col : str
        Column names (coordinate columns are shared by both tables).
    target_id_col : str or None
        Identifier column of ``targets``; defaults to ``id_col``.
    start, end : str or None
        Optional inclusive date window.
    params : InterpolationParams, dict or None
        Engine configuration.
    show_progress : bool, default False
        Progress bar over days plus a short summary.

    Returns
    -------
    DataFrame
        [target_id_col, date_col, x_col, y_col, alt_col, target_col, "source"]
        sorted by target (input order) then date; ``source`` is
        "interpolated" or "no_data".
    """
    target_id_col = target_id_col or id_col
    out_cols: List[str] = [target_id_col, date_col, x_col, y_col, alt_col, target_col, "source"]
    validate_required_columns(
        targets,
        [target_id_col, x_col, y_col, alt_col],
        context="interpolate_dataset",
    )
    params = coerce_params(params)

    meta, values = station_matrix(
        data,
        id_col=id_col,
        date_col=date_col,
        x_col=x_col,
        y_col=y_col,
        alt_col=alt_col,
        target_col=target_col,
        start=start,
        end=end,
    )
    if values.empty or targets.empty:
        return pd.DataFrame(columns=out_cols)

    res = interpolate_series(
        targets[x_col],
        targets[y_col],
        targets[alt_col],
        meta[x_col],
        meta[y_col],
        meta[alt_col],
        values.to_numpy(),
        params,
        show_progress=show_progress,
    )

    if show_progress and res.errors:
        tqdm.write(
            f"[interpolate] {len(res.errors)} of {values.shape[1]} days "
            f"without enough stations."
        )

    source = np.where(np.ma.getmaskarray(res.values), "no_data", "interpolated")
    return _long_output(
        targets[target_id_col].to_numpy(),
        targets,
        values.columns,
        res.filled(np.nan),
        source,
        id_col=target_id_col,
        date_col=date_col,
        x_col=x_col,
        y_col=y_col,
        alt_col=alt_col,
        target_col=target_col,
    )


__all__ = ["station_matrix", "interpolate_dataset"]
