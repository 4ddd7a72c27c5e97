################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Column-major storage layout for 4x4 homogeneous matrices.

Matrix entry (row r, column c) lives at linear offset ``c * 4 + r``. On point
multiplication, row r of the matrix produces output component r, so the
fourth column (``M03``, ``M13``, ``M23``) holds the translation and the
fourth row (``M30`` .. ``M33``) is ``0 0 0 1`` for affine transforms.
"""

from __future__ import annotations

from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray


# Number of values backing a 4x4 matrix
MATRIX_SIZE: int = 16

# XX: x scale, cosine of rotations about Y and Z
M00: int = 0
# XY: negative sine of a rotation about Z
M01: int = 4
# XZ: sine of a rotation about Y
M02: int = 8
# XW: x translation
M03: int = 12
# YX: sine of a rotation about Z
M10: int = 1
# YY: y scale, cosine of rotations about X and Z
M11: int = 5
# YZ: negative sine of a rotation about X
M12: int = 9
# YW: y translation
M13: int = 13
# ZX: negative sine of a rotation about Y
M20: int = 2
# ZY: sine of a rotation about X
M21: int = 6
# ZZ: z scale, cosine of rotations about X and Y
M22: int = 10
# ZW: z translation
M23: int = 14
# WX: zero for affine transforms
M30: int = 3
# WY: zero for affine transforms
M31: int = 7
# WZ: zero for affine transforms, -1 for perspective projections
M32: int = 11
# WW: one for affine transforms
M33: int = 15

# Identity matrix values in column-major order
IDENTITY_VALUES: tuple[float, ...] = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)  # fmt: skip

# Raw buffers accepted in place of a 16-value array
ValuesLike = Union[Sequence[float], NDArray[np.float64]]


def index(row: int, col: int) -> int:
    """Return the linear offset of entry (row, col)."""
    if not 0 <= row < 4 or not 0 <= col < 4:
        raise ValueError(f"({row}, {col}) is outside a 4x4 matrix")
    return col * 4 + row


def identity_values() -> NDArray[np.float64]:
    """Return a new array holding the identity matrix."""
    return np.array(IDENTITY_VALUES, dtype=float)


def as_values(values: ValuesLike, name: str = "values") -> NDArray[np.float64]:
    """Return a float copy of the first 16 values of a raw matrix buffer.

    Only the length is checked. Values are copied as-is, so a buffer holding
    non-finite entries produces a matrix holding non-finite entries.
    """
    array: NDArray[np.float64] = np.asarray(values, dtype=float).reshape(-1)
    if array.size < MATRIX_SIZE:
        raise ValueError(f"{name} must have at least {MATRIX_SIZE} elements")
    return np.array(array[:MATRIX_SIZE], dtype=float)


def to_rows(values: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return a 4x4 [row, col] copy of column-major matrix values."""
    return np.array(values, dtype=float).reshape((4, 4), order="F")


def from_rows(matrix: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return column-major values from a 4x4 [row, col] array."""
    mat: NDArray[np.float64] = np.asarray(matrix, dtype=float)
    if mat.shape != (4, 4):
        raise ValueError("matrix must be shape (4, 4)")
    return mat.reshape(MATRIX_SIZE, order="F").copy()
