################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Kernels operating on raw column-major 4x4 matrix buffers.

Every kernel works on call-local temporaries only, so kernels may run
concurrently on different buffers. Kernels that write a result mutate their
first buffer argument in place.
"""

from __future__ import annotations

from typing import MutableSequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from .matrix_layout import M00
from .matrix_layout import M01
from .matrix_layout import M02
from .matrix_layout import M03
from .matrix_layout import M10
from .matrix_layout import M11
from .matrix_layout import M12
from .matrix_layout import M13
from .matrix_layout import M20
from .matrix_layout import M21
from .matrix_layout import M22
from .matrix_layout import M23
from .matrix_layout import M30
from .matrix_layout import M31
from .matrix_layout import M32
from .matrix_layout import M33
from .matrix_layout import MATRIX_SIZE


# Mutable 3-element buffer updated in place by the vector kernels
VectorBuffer = Union[MutableSequence[float], NDArray[np.float64]]


def multiply(mata: NDArray[np.float64], matb: NDArray[np.float64]) -> None:
    """Postmultiply mata by matb in place, mata := mata * matb.

    result[r][c] = sum_k mata[r][k] * matb[k][c]. The product is formed in a
    temporary before being written back, so mata and matb may be the same
    buffer.
    """
    a: NDArray[np.float64] = np.reshape(mata, (4, 4), order="F")
    b: NDArray[np.float64] = np.reshape(matb, (4, 4), order="F")
    product: NDArray[np.float64] = a @ b
    mata[:] = product.reshape(MATRIX_SIZE, order="F")


def transform_values(mat: NDArray[np.float64], vec: VectorBuffer) -> VectorBuffer:
    """Transform a point in place, treating its w component as 1."""
    vx: float = float(vec[0])
    vy: float = float(vec[1])
    vz: float = float(vec[2])
    vec[0] = vx * mat[M00] + vy * mat[M01] + vz * mat[M02] + mat[M03]
    vec[1] = vx * mat[M10] + vy * mat[M11] + vz * mat[M12] + mat[M13]
    vec[2] = vx * mat[M20] + vy * mat[M21] + vz * mat[M22] + mat[M23]
    return vec


def project_values(mat: NDArray[np.float64], vec: VectorBuffer) -> VectorBuffer:
    """Transform a point in place and divide by the resulting w.

    A point mapping to w == 0 produces infinite or NaN components.
    """
    vx: float = float(vec[0])
    vy: float = float(vec[1])
    vz: float = float(vec[2])
    w: np.float64 = np.float64(
        vx * mat[M30] + vy * mat[M31] + vz * mat[M32] + mat[M33]
    )
    with np.errstate(divide="ignore", invalid="ignore"):
        inv_w: np.float64 = np.float64(1.0) / w
        vec[0] = (vx * mat[M00] + vy * mat[M01] + vz * mat[M02] + mat[M03]) * inv_w
        vec[1] = (vx * mat[M10] + vy * mat[M11] + vz * mat[M12] + mat[M13]) * inv_w
        vec[2] = (vx * mat[M20] + vy * mat[M21] + vz * mat[M22] + mat[M23]) * inv_w
    return vec


def rotate_values(mat: NDArray[np.float64], vec: VectorBuffer) -> VectorBuffer:
    """Apply only the upper 3x3 block to a direction in place."""
    vx: float = float(vec[0])
    vy: float = float(vec[1])
    vz: float = float(vec[2])
    vec[0] = vx * mat[M00] + vy * mat[M01] + vz * mat[M02]
    vec[1] = vx * mat[M10] + vy * mat[M11] + vz * mat[M12]
    vec[2] = vx * mat[M20] + vy * mat[M21] + vz * mat[M22]
    return vec


def transpose(values: NDArray[np.float64]) -> None:
    """Transpose matrix values in place through a temporary copy."""
    src: NDArray[np.float64] = np.array(values, dtype=float)
    values[M00] = src[M00]
    values[M01] = src[M10]
    values[M02] = src[M20]
    values[M03] = src[M30]
    values[M10] = src[M01]
    values[M11] = src[M11]
    values[M12] = src[M21]
    values[M13] = src[M31]
    values[M20] = src[M02]
    values[M21] = src[M12]
    values[M22] = src[M22]
    values[M23] = src[M32]
    values[M30] = src[M03]
    values[M31] = src[M13]
    values[M32] = src[M23]
    values[M33] = src[M33]


def determinant(values: NDArray[np.float64]) -> float:
    """Return the determinant of a general 4x4 matrix.

    Closed-form cofactor expansion down the first column: four 3x3 minors of
    six terms each, 24 terms in total. No affine structure is assumed.
    """
    m00, m10, m20, m30 = (float(v) for v in values[M00 : M30 + 1])
    m01, m11, m21, m31 = (float(v) for v in values[M01 : M31 + 1])
    m02, m12, m22, m32 = (float(v) for v in values[M02 : M32 + 1])
    m03, m13, m23, m33 = (float(v) for v in values[M03 : M33 + 1])
    return (
        m00
        * (
            m11 * m22 * m33
            - m11 * m23 * m32
            - m21 * m12 * m33
            + m21 * m13 * m32
            + m31 * m12 * m23
            - m31 * m13 * m22
        )
        + m10
        * (
            -m01 * m22 * m33
            + m01 * m23 * m32
            + m21 * m02 * m33
            - m21 * m03 * m32
            - m31 * m02 * m23
            + m31 * m03 * m22
        )
        + m20
        * (
            m01 * m12 * m33
            - m01 * m13 * m32
            - m11 * m02 * m33
            + m11 * m03 * m32
            + m31 * m02 * m13
            - m31 * m03 * m12
        )
        + m30
        * (
            -m01 * m12 * m23
            + m01 * m13 * m22
            + m11 * m02 * m23
            - m11 * m03 * m22
            - m21 * m02 * m13
            + m21 * m03 * m12
        )
    )


def determinant_3x3(values: NDArray[np.float64]) -> float:
    """Return the determinant of the upper 3x3 block."""
    return float(
        values[M00] * values[M11] * values[M22]
        + values[M01] * values[M12] * values[M20]
        + values[M02] * values[M10] * values[M21]
        - values[M00] * values[M12] * values[M21]
        - values[M01] * values[M10] * values[M22]
        - values[M02] * values[M11] * values[M20]
    )


def adjugate(values: NDArray[np.float64]) -> NDArray[np.float64]:
    """Return the adjugate (transposed cofactor matrix) in column-major order.

    Each entry is a six-term signed sum of triple products. Because the
    layout is column-major the result needs no further transposition.
    """
    m: list[float] = [float(v) for v in values[:MATRIX_SIZE]]
    adj: NDArray[np.float64] = np.empty(MATRIX_SIZE, dtype=float)

    adj[0] = (
        m[5] * m[10] * m[15]
        - m[5] * m[11] * m[14]
        - m[9] * m[6] * m[15]
        + m[9] * m[7] * m[14]
        + m[13] * m[6] * m[11]
        - m[13] * m[7] * m[10]
    )
    adj[4] = (
        -m[4] * m[10] * m[15]
        + m[4] * m[11] * m[14]
        + m[8] * m[6] * m[15]
        - m[8] * m[7] * m[14]
        - m[12] * m[6] * m[11]
        + m[12] * m[7] * m[10]
    )
    adj[8] = (
        m[4] * m[9] * m[15]
        - m[4] * m[11] * m[13]
        - m[8] * m[5] * m[15]
        + m[8] * m[7] * m[13]
        + m[12] * m[5] * m[11]
        - m[12] * m[7] * m[9]
    )
    adj[12] = (
        -m[4] * m[9] * m[14]
        + m[4] * m[10] * m[13]
        + m[8] * m[5] * m[14]
        - m[8] * m[6] * m[13]
        - m[12] * m[5] * m[10]
        + m[12] * m[6] * m[9]
    )
    adj[1] = (
        -m[1] * m[10] * m[15]
        + m[1] * m[11] * m[14]
        + m[9] * m[2] * m[15]
        - m[9] * m[3] * m[14]
        - m[13] * m[2] * m[11]
        + m[13] * m[3] * m[10]
    )
    adj[5] = (
        m[0] * m[10] * m[15]
        - m[0] * m[11] * m[14]
        - m[8] * m[2] * m[15]
        + m[8] * m[3] * m[14]
        + m[12] * m[2] * m[11]
        - m[12] * m[3] * m[10]
    )
    adj[9] = (
        -m[0] * m[9] * m[15]
        + m[0] * m[11] * m[13]
        + m[8] * m[1] * m[15]
        - m[8] * m[3] * m[13]
        - m[12] * m[1] * m[11]
        + m[12] * m[3] * m[9]
    )
    adj[13] = (
        m[0] * m[9] * m[14]
        - m[0] * m[10] * m[13]
        - m[8] * m[1] * m[14]
        + m[8] * m[2] * m[13]
        + m[12] * m[1] * m[10]
        - m[12] * m[2] * m[9]
    )
    adj[2] = (
        m[1] * m[6] * m[15]
        - m[1] * m[7] * m[14]
        - m[5] * m[2] * m[15]
        + m[5] * m[3] * m[14]
        + m[13] * m[2] * m[7]
        - m[13] * m[3] * m[6]
    )
    adj[6] = (
        -m[0] * m[6] * m[15]
        + m[0] * m[7] * m[14]
        + m[4] * m[2] * m[15]
        - m[4] * m[3] * m[14]
        - m[12] * m[2] * m[7]
        + m[12] * m[3] * m[6]
    )
    adj[10] = (
        m[0] * m[5] * m[15]
        - m[0] * m[7] * m[13]
        - m[4] * m[1] * m[15]
        + m[4] * m[3] * m[13]
        + m[12] * m[1] * m[7]
        - m[12] * m[3] * m[5]
    )
    adj[14] = (
        -m[0] * m[5] * m[14]
        + m[0] * m[6] * m[13]
        + m[4] * m[1] * m[14]
        - m[4] * m[2] * m[13]
        - m[12] * m[1] * m[6]
        + m[12] * m[2] * m[5]
    )
    adj[3] = (
        -m[1] * m[6] * m[11]
        + m[1] * m[7] * m[10]
        + m[5] * m[2] * m[11]
        - m[5] * m[3] * m[10]
        - m[9] * m[2] * m[7]
        + m[9] * m[3] * m[6]
    )
    adj[7] = (
        m[0] * m[6] * m[11]
        - m[0] * m[7] * m[10]
        - m[4] * m[2] * m[11]
        + m[4] * m[3] * m[10]
        + m[8] * m[2] * m[7]
        - m[8] * m[3] * m[6]
    )
    adj[11] = (
        -m[0] * m[5] * m[11]
        + m[0] * m[7] * m[9]
        + m[4] * m[1] * m[11]
        - m[4] * m[3] * m[9]
        - m[8] * m[1] * m[7]
        + m[8] * m[3] * m[5]
    )
    adj[15] = (
        m[0] * m[5] * m[10]
        - m[0] * m[6] * m[9]
        - m[4] * m[1] * m[10]
        + m[4] * m[2] * m[9]
        + m[8] * m[1] * m[6]
        - m[8] * m[2] * m[5]
    )

    return adj


def invert(values: NDArray[np.float64]) -> bool:
    """Invert matrix values in place.

    Returns:
        False, leaving the values untouched, when the determinant is exactly
        zero. True after writing adjugate / determinant otherwise.
    """
    det: float = determinant(values)
    if det == 0.0:
        return False
    values[:MATRIX_SIZE] = adjugate(values) * (1.0 / det)
    return True
