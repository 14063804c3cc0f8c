# SPDX-License-Identifier: MIT
"""
meteointerp.impute
==================

Gap filling of daily station series by spatial interpolation.

For every selected station, each missing day is estimated from the other
stations observed on that same day, at the station's own coordinates and
elevation. The station cannot contribute to its own estimate: a missing
value excludes it from that day's station set.

Returned schema
---------------

One row per (station, date) on the complete daily grid of the window:

    [id_col, date_col, x_col, y_col, alt_col, target_col, "source"]

where ``source`` is one of:

- "observed" - original non-missing values
- "imputed"  - values filled by interpolation
- "missing"  - still missing (too few stations that day, no station within
  the truncation radius, or the station has no coordinates)
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Union

import numpy as np
import pandas as pd
from tqdm.auto import tqdm

from .dataset import _long_output, station_matrix
from .features import filter_by_min_station_rows, select_station_ids
from .interpolate import interpolate_series
from .params import InterpolationParams, coerce_params


def impute_dataset(
    data: pd.DataFrame,
    *,
    # column names (generic schema)
    id_col: str,
    date_col: str,
    x_col: str,
    y_col: str,
    alt_col: str,
    target_col: str,
    # temporal window
    start: Optional[str] = None,
    end: Optional[str] = None,
    # selection of stations to fill
    prefix: Optional[Iterable[str]] = None,
    station_ids: Optional[Iterable[Hashable]] = None,
    regex: Optional[str] = None,
    custom_filter: Optional[Callable[[Hashable], bool]] = None,
    min_station_rows: Optional[int] = None,
    # engine
    params: Optional[Union[InterpolationParams, Mapping[str, Any]]] = None,
    # logging / UX
    show_progress: bool = False,
) -> pd.DataFrame:
    """
    Fill missing daily values of the selected stations.

    All stations in ``data`` act as donors; the selection filters (OR
    semantics, see :func:`meteointerp.features.select_station_ids`) and
    ``min_station_rows`` only decide which stations are returned.
    """
    out_cols = [id_col, date_col, x_col, y_col, alt_col, target_col, "source"]
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
        return pd.DataFrame(columns=out_cols)

    stations = select_station_ids(
        list(meta.index),
        prefix=prefix,
        station_ids=station_ids,
        regex=regex,
        custom_filter=custom_filter,
    )
    if min_station_rows is not None:
        before = len(stations)
        stations = filter_by_min_station_rows(
            data,
            id_col=id_col,
            target_col=target_col,
            min_station_rows=min_station_rows,
            station_ids=stations,
        )
        if show_progress:
            tqdm.write(
                f"Filtered by min_station_rows(observed)={int(min_station_rows)}: "
                f"{before} -> {len(stations)} stations"
            )

    if not stations:
        if show_progress:
            tqdm.write("No stations left to impute after filtering.")
        return pd.DataFrame(columns=out_cols)

    sel_meta = meta.loc[stations]
    sel_obs = values.loc[stations].to_numpy()
    filled = sel_obs.copy()
    source = np.where(np.isnan(sel_obs), "missing", "observed").astype(object)

    # only days with at least one gap among the selected stations
    gap_days = np.flatnonzero(np.isnan(sel_obs).any(axis=0))
    if gap_days.size:
        res = interpolate_series(
            sel_meta[x_col],
            sel_meta[y_col],
            sel_meta[alt_col],
            meta[x_col],
            meta[y_col],
            meta[alt_col],
            values.to_numpy()[:, gap_days],
            params,
            show_progress=show_progress,
        )
        est = res.filled(np.nan)
        got = ~np.ma.getmaskarray(res.values)

        block = filled[:, gap_days]
        block_src = source[:, gap_days]
        fill = np.isnan(block) & got
        block[fill] = est[fill]
        block_src[fill] = "imputed"
        filled[:, gap_days] = block
        source[:, gap_days] = block_src

    if show_progress:
        for k, sid in enumerate(stations):
            n_imp = int((source[k] == "imputed").sum())
            n_mis = int((source[k] == "missing").sum())
            tqdm.write(
                f"[impute] Station {sid}: "
                f"grid={filled.shape[1]:,}  obs={filled.shape[1] - n_imp - n_mis:,}  "
                f"imputed={n_imp:,}  missing={n_mis:,}"
            )

    return _long_output(
        sel_meta.index.to_numpy(),
        sel_meta,
        values.columns,
        filled,
        source,
        id_col=id_col,
        date_col=date_col,
        x_col=x_col,
        y_col=y_col,
        alt_col=alt_col,
        target_col=target_col,
    )


__all__ = ["impute_dataset"]
