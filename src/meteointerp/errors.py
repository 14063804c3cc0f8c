# SPDX-License-Identifier: MIT
"""
meteointerp.errors
==================

Exception types raised by the interpolation engine.

All errors derive from :class:`InterpolationError`, itself a
:class:`ValueError`, so callers that already guard input validation with
``except ValueError`` keep working.
"""

from __future__ import annotations

from typing import Optional


class InterpolationError(ValueError):
    """Base class for every interpolation failure."""


class InputShapeMismatchError(InterpolationError):
    """Coordinate, elevation or value arrays have inconsistent shapes."""


class InsufficientStationsError(InterpolationError):
    """Fewer than two valid stations are available for a unit of work."""

    def __init__(self, n_stations: int, context: Optional[str] = None):
        self.n_stations = int(n_stations)
        prefix = f"[{context}] " if context else ""
        super().__init__(
            f"{prefix}at least 2 valid stations are required, got {self.n_stations}."
        )


class ZeroWeightMassError(InterpolationError):
    """Every station weight is zero at the query point."""

    def __init__(self, radius: float):
        self.radius = float(radius)
        super().__init__(
            f"No station within truncation radius {self.radius:g}; "
            "the query point has zero weight mass."
        )


__all__ = [
    "InterpolationError",
    "InputShapeMismatchError",
    "InsufficientStationsError",
    "ZeroWeightMassError",
]
