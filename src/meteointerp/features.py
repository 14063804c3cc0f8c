# SPDX-License-Identifier: MIT
"""
meteointerp.features
====================

Small table helpers shared by the long-format entry points
(:mod:`meteointerp.dataset`, :mod:`meteointerp.impute`,
:mod:`meteointerp.evaluate`):

- Normalize datetime columns to timezone-free pandas datetimes.
- Validate required columns in user-provided DataFrames.
- Select station identifiers with flexible filters (prefix, regex, etc.).
- Filter station ids by a minimum number of observed rows.
"""

from __future__ import annotations

import re
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, Union

import pandas as pd


# ---------------------------------------------------------------------------
# Datetime utilities
# ---------------------------------------------------------------------------


def ensure_datetime_naive(s: pd.Series) -> pd.Series:
    """
    Coerce a Series to timezone-free ``datetime64[ns]``.

    Unparseable values become ``NaT``; timezone-aware values lose their
    timezone.
    """
    s = pd.to_datetime(s, errors="coerce")
    if isinstance(s.dtype, pd.DatetimeTZDtype):
        s = s.dt.tz_localize(None)
    return s


# ---------------------------------------------------------------------------
# Validation helper
# ---------------------------------------------------------------------------


def validate_required_columns(
    df: pd.DataFrame,
    required: Sequence[str],
    context: Optional[str] = None,
) -> None:
    """
    Raise a ValueError if any required columns are missing.

    Parameters
    ----------
    df : DataFrame
        Input table.
    required : sequence of str
        Column names that must be present.
    context : str or None, default None
        Optional string to prepend to the error message (e.g., the
        calling function name).
    """
    missing = [c for c in required if c not in df.columns]
    if not missing:
        return

    prefix = f"[{context}] " if context else ""
    raise ValueError(
        f"{prefix}missing required columns {missing}. "
        f"Available columns include: {list(df.columns)[:12]}..."
    )


# ---------------------------------------------------------------------------
# Station selection
# ---------------------------------------------------------------------------


def select_station_ids(
    obj: Union[pd.DataFrame, Sequence[Hashable]],
    *,
    id_col: Optional[str] = None,
    prefix: Optional[Union[str, Iterable[str]]] = None,
    station_ids: Optional[Iterable[Hashable]] = None,
    regex: Optional[str] = None,
    custom_filter: Optional[Callable[[Hashable], bool]] = None,
) -> List[Hashable]:
    """
    Select station identifiers with OR-combined filters.

    Accepts either a DataFrame plus ``id_col`` or a plain sequence of ids.
    An id is kept when it starts with any ``prefix``, is listed in
    ``station_ids``, matches ``regex`` or satisfies ``custom_filter``.
    Without filters every id is returned. Unlike a pure filter, a selection
    that matches nothing also falls back to every id.

    Returns
    -------
    list
        Selected ids without duplicates, in first-seen order.
    """
    if isinstance(obj, pd.DataFrame):
        if id_col is None:
            raise ValueError(
                "select_station_ids: 'id_col' must be provided when passing a DataFrame."
            )
        validate_required_columns(obj, [id_col], context="select_station_ids")
        all_ids: List[Hashable] = list(pd.unique(obj[id_col].dropna()))
    else:
        all_ids = list(obj)

    if prefix is None and station_ids is None and regex is None and custom_filter is None:
        return list(dict.fromkeys(all_ids))

    prefixes = [prefix] if isinstance(prefix, str) else list(prefix or [])
    wanted = set(station_ids) if station_ids is not None else set()
    pat = re.compile(regex) if regex is not None else None

    selected: List[Hashable] = []
    for sid in all_ids:
        s = str(sid)
        if (
            any(s.startswith(str(p)) for p in prefixes)
            or sid in wanted
            or (pat is not None and pat.match(s))
            or (custom_filter is not None and custom_filter(sid))
        ):
            selected.append(sid)

    if not selected:
        selected = all_ids

    return list(dict.fromkeys(selected))


def filter_by_min_station_rows(
    df: pd.DataFrame,
    *,
    id_col: str,
    target_col: str,
    min_station_rows: int,
    station_ids: Optional[Iterable[Hashable]] = None,
) -> List[Hashable]:
    """
    Keep station ids with at least ``min_station_rows`` non-null targets.
    """
    validate_required_columns(
        df,
        [id_col, target_col],
        context="filter_by_min_station_rows",
    )

    if station_ids is None:
        candidate_ids = df[id_col].dropna().unique().tolist()
    else:
        candidate_ids = list(station_ids)

    obs_counts = (
        df.loc[df[target_col].notna(), [id_col, target_col]]
        .groupby(id_col)[target_col]
        .size()
        .astype(int)
    )

    threshold = int(min_station_rows)
    return [sid for sid in candidate_ids if int(obs_counts.get(sid, 0)) >= threshold]


__all__ = [
    "ensure_datetime_naive",
    "validate_required_columns",
    "select_station_ids",
    "filter_by_min_station_rows",
]
