################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Angle conversions and floating-point tolerances."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray


class Angle:
    """Angular unit conversions."""

    @staticmethod
    def deg2rad(x: float | NDArray[np.float64]) -> float | NDArray[np.float64]:
        """Convert degrees to radians."""
        arr: NDArray[np.float64] = np.asarray(x, dtype=float)
        result: NDArray[np.float64] = np.deg2rad(arr)
        if np.ndim(result) == 0:
            return float(result)
        return result

    @staticmethod
    def rad2deg(x: float | NDArray[np.float64]) -> float | NDArray[np.float64]:
        """Convert radians to degrees."""
        arr: NDArray[np.float64] = np.asarray(x, dtype=float)
        result: NDArray[np.float64] = np.rad2deg(arr)
        if np.ndim(result) == 0:
            return float(result)
        return result


class Tolerances:
    """Tolerances shared by the geometry utilities."""

    # Near-zero norm threshold for normalization
    EPS: float = 1e-12
    # Rounding error accepted when comparing matrix entries
    FLOAT_ROUNDING_ERROR: float = 1e-6


def is_zero(value: float, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR) -> bool:
    """Return True when a value is within tolerance of zero."""
    return abs(value) <= tolerance


def is_equal(
    a: float, b: float, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR
) -> bool:
    """Return True when two values are within tolerance of each other."""
    return abs(a - b) <= tolerance


def assert_finite(x: NDArray[np.float64], name: str) -> None:
    """Raise ValueError when the array contains non-finite values."""
    if not np.all(np.isfinite(x)):
        raise ValueError(f"{name} must be finite")
