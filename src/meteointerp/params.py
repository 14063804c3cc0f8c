# SPDX-License-Identifier: MIT
"""
meteointerp.params
==================

Configuration of the interpolation engine.

:class:`InterpolationParams` is an immutable value threaded explicitly
through every call. Defaults follow Thornton et al. (1997) as used for
daily temperature surfaces:

- ``initial_radius``       140000 (same planar units as the coordinates)
- ``shape``                3.0    (Gaussian shape parameter, alpha)
- ``target_station_count`` 30     (effective number of stations, N)
- ``radius_iterations``    3
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Mapping, Optional, Union

RADIUS_METHODS = ("fixed", "adaptive")


@dataclass(frozen=True)
class InterpolationParams:
    """
    Parameters shared by all interpolation entry points.

    Parameters
    ----------
    initial_radius : float, default 140000.0
        Initial truncation radius of the Gaussian kernel.
    shape : float, default 3.0
        Shape parameter (alpha). Larger values decay faster.
    target_station_count : float, default 30
        Target sum of weights used to calibrate the radius.
    radius_iterations : int, default 3
        Number of radius rescaling iterations. With ``radius_method="adaptive"``
        this is the upper bound on iterations.
    radius_method : {"fixed", "adaptive"}, default "fixed"
        ``"fixed"`` runs exactly ``radius_iterations`` rescalings.
        ``"adaptive"`` stops early once the weight sum is within
        ``radius_rtol`` of the target.
    radius_rtol : float, default 0.05
        Relative tolerance of the adaptive radius search.
    verbose : bool, default False
        Print diagnostics (never changes results).
    """

    initial_radius: float = 140000.0
    shape: float = 3.0
    target_station_count: float = 30
    radius_iterations: int = 3
    radius_method: str = "fixed"
    radius_rtol: float = 0.05
    verbose: bool = False

    def validate(self) -> "InterpolationParams":
        """Raise ``ValueError`` on out-of-range values; return ``self``."""
        if not self.initial_radius > 0:
            raise ValueError(f"initial_radius must be > 0, got {self.initial_radius!r}.")
        if not self.shape > 0:
            raise ValueError(f"shape must be > 0, got {self.shape!r}.")
        if not self.target_station_count > 0:
            raise ValueError(
                f"target_station_count must be > 0, got {self.target_station_count!r}."
            )
        if int(self.radius_iterations) < 0:
            raise ValueError(
                f"radius_iterations must be >= 0, got {self.radius_iterations!r}."
            )
        if self.radius_method not in RADIUS_METHODS:
            raise ValueError(
                f"Unsupported radius_method '{self.radius_method}'. "
                f"Supported methods are: {list(RADIUS_METHODS)}."
            )
        if not self.radius_rtol > 0:
            raise ValueError(f"radius_rtol must be > 0, got {self.radius_rtol!r}.")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def coerce_params(
    params: Optional[Union[InterpolationParams, Mapping[str, Any]]] = None,
    **overrides: Any,
) -> InterpolationParams:
    """
    Normalise user input into a validated :class:`InterpolationParams`.

    ``params`` may be None (defaults), a mapping of field overrides, or an
    existing instance. Keyword ``overrides`` are applied last.
    """
    if params is None:
        out = InterpolationParams()
    elif isinstance(params, InterpolationParams):
        out = params
    else:
        unknown = set(params) - set(InterpolationParams.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown interpolation parameters: {sorted(unknown)}.")
        out = InterpolationParams(**dict(params))

    if overrides:
        out = replace(out, **overrides)
    return out.validate()


__all__ = ["RADIUS_METHODS", "InterpolationParams", "coerce_params"]
