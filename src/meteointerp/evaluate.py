# SPDX-License-Identifier: MIT
"""
meteointerp.evaluate
====================

Leave-one-station-out cross-validation of the interpolation engine.

For each selected station:

1. its whole record is withheld from the station matrix,
2. every day on which it was observed is interpolated at its coordinates
   and elevation from the stations remaining that day,
3. the estimates are compared with the withheld observations.

Metrics (see :mod:`meteointerp.metrics`): n, Bias, MAE, RMSE, R2, KGE.
The report also lists the distance to the nearest other station, which
usually explains most of the spread in station errors, and the number of
observed days left without an estimate (``n_no_data``).

The main public entry point is :func:`cross_validate_stations`.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, List, Mapping, Optional, Tuple, Union

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from .dataset import station_matrix
from .features import filter_by_min_station_rows, select_station_ids
from .interpolate import interpolate_series
from .metrics import compute_metrics
from .neighbors import nearest_neighbor_distance
from .params import InterpolationParams, coerce_params


def cross_validate_stations(
    data: pd.DataFrame,
    *,
    # column names
    id_col: str,
    date_col: str,
    x_col: str,
    y_col: str,
    alt_col: str,
    target_col: str,
    # period
    start: Optional[str] = None,
    end: Optional[str] = None,
    # station selection
    prefix: Optional[Iterable[str]] = None,
    station_ids: Optional[Iterable[Hashable]] = None,
    regex: Optional[str] = None,
    custom_filter: Optional[Callable[[Hashable], bool]] = None,
    min_station_rows: Optional[int] = None,
    # engine
    params: Optional[Union[InterpolationParams, Mapping[str, Any]]] = None,
    # UX / logging
    show_progress: bool = False,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Leave-one-station-out evaluation.

    Parameters
    ----------
    data : DataFrame
        Long-format table with [id_col, date_col, x_col, y_col, alt_col,
        target_col].
    id_col, date_col, x_col, y_col, alt_col, target_col : str
        Column names.
    start, end : str or None
        Optional inclusive window.
    prefix, station_ids, regex, custom_filter :
        OR-combined station selection (all stations when omitted). Every
        station remains available as a donor.
    min_station_rows : int or None
        Skip stations with fewer observed rows.
    params : InterpolationParams, dict or None
        Engine configuration.
    show_progress : bool, default False
        Progress bar over stations and one summary line per station.

    Returns
    -------
    (report, preds)
        - report : one row per evaluated station with
          [id_col, x_col, y_col, alt_col, "nn_distance", "n_no_data",
          "n", "Bias", "MAE", "RMSE", "R2", "KGE"].
        - preds : one row per observed station-day with
          [id_col, date_col, "y_obs", "y_mod"]; ``y_mod`` is NaN where the
          engine produced no value.
    """
    report_cols = [
        id_col, x_col, y_col, alt_col, "nn_distance", "n_no_data",
        "n", "Bias", "MAE", "RMSE", "R2", "KGE",
    ]
    preds_cols = [id_col, date_col, "y_obs", "y_mod"]
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
    if values.empty:
        return pd.DataFrame(columns=report_cols), pd.DataFrame(columns=preds_cols)

    stations = select_station_ids(
        list(meta.index),
        prefix=prefix,
        station_ids=station_ids,
        regex=regex,
        custom_filter=custom_filter,
    )
    if min_station_rows is not None:
        stations = filter_by_min_station_rows(
            data,
            id_col=id_col,
            target_col=target_col,
            min_station_rows=min_station_rows,
            station_ids=stations,
        )

    located = meta[[x_col, y_col]].notna().all(axis=1)
    nn = pd.Series(np.nan, index=meta.index, dtype=float)
    nn[located] = nearest_neighbor_distance(
        meta.loc[located, x_col], meta.loc[located, y_col]
    )

    obs = values.to_numpy()
    dates = values.columns
    pos = {sid: k for k, sid in enumerate(meta.index)}

    rows: List[dict] = []
    preds: List[pd.DataFrame] = []

    iterator = tqdm(stations, desc="Cross-validating stations", unit="st") if show_progress else stations

    for sid in iterator:
        k = pos[sid]
        days = np.flatnonzero(~np.isnan(obs[k]))
        if days.size == 0:
            if show_progress:
                tqdm.write(f"Station {sid}: 0 observed days (skipped)")
            continue

        withheld = obs[:, days].copy()
        withheld[k, :] = np.nan

        res = interpolate_series(
            meta.loc[[sid], x_col],
            meta.loc[[sid], y_col],
            meta.loc[[sid], alt_col],
            meta[x_col],
            meta[y_col],
            meta[alt_col],
            withheld,
            params,
        )
        y_obs = obs[k, days]
        y_mod = res.filled(np.nan)[0]

        preds.append(
            pd.DataFrame(
                {id_col: sid, date_col: dates[days], "y_obs": y_obs, "y_mod": y_mod}
            )
        )
        row = {
            id_col: sid,
            x_col: float(meta.at[sid, x_col]),
            y_col: float(meta.at[sid, y_col]),
            alt_col: float(meta.at[sid, alt_col]),
            "nn_distance": float(nn[sid]),
            "n_no_data": int(np.isnan(y_mod).sum()),
        }
        row.update(compute_metrics(y_obs, y_mod, include_kge=True))
        rows.append(row)

        if show_progress:
            tqdm.write(
                f"Station {sid}: days={days.size:,}  "
                f"MAE={row['MAE']:.3f}  RMSE={row['RMSE']:.3f}  no_data={row['n_no_data']}"
            )

    if not rows:
        return pd.DataFrame(columns=report_cols), pd.DataFrame(columns=preds_cols)

    report = pd.DataFrame(rows, columns=report_cols)
    preds_df = pd.concat(preds, axis=0, ignore_index=True)[preds_cols]
    return report, preds_df


__all__ = ["cross_validate_stations"]
