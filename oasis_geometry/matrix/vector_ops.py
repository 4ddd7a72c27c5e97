################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Apply a Matrix4 to 3-vectors, including the inverse of a rigid transform."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from ..math_utils.vec3 import Vec3
from ..math_utils.vec3 import Vector3Like
from . import matrix_kernels
from .matrix4 import Matrix4
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


def project(v: Vector3Like, m: Matrix4) -> NDArray[np.float64]:
    """Return v transformed by m with the perspective divide applied."""
    vec: NDArray[np.float64] = Vec3.as_vec3(v)
    matrix_kernels.project_values(m.val, vec)
    return vec


def rotate(v: Vector3Like, m: Matrix4) -> NDArray[np.float64]:
    """Return v transformed by the upper 3x3 block of m."""
    vec: NDArray[np.float64] = Vec3.as_vec3(v)
    matrix_kernels.rotate_values(m.val, vec)
    return vec


def unrotate(v: Vector3Like, m: Matrix4) -> NDArray[np.float64]:
    """Return v transformed by the transpose of the upper 3x3 block of m.

    For a rotation-only block this undoes rotate().
    """
    vec: NDArray[np.float64] = Vec3.as_vec3(v)
    val: NDArray[np.float64] = m.val
    x: float = float(vec[0])
    y: float = float(vec[1])
    z: float = float(vec[2])
    vec[0] = x * val[M00] + y * val[M10] + z * val[M20]
    vec[1] = x * val[M01] + y * val[M11] + z * val[M21]
    vec[2] = x * val[M02] + y * val[M12] + z * val[M22]
    return vec


def untransform(v: Vector3Like, m: Matrix4) -> NDArray[np.float64]:
    """Undo a rigid transform: remove the translation, then unrotate.

    Only exact for matrices without scale or shear.
    """
    vec: NDArray[np.float64] = Vec3.as_vec3(v)
    vec[0] -= m.val[M03]
    vec[1] -= m.val[M13]
    vec[2] -= m.val[M23]
    return unrotate(vec, m)
