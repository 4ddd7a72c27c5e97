################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for Matrix4 vector helpers."""

from __future__ import annotations

import numpy as np
from numpy.typing import NDArray

from oasis_geometry.math_utils.quat import Quaternion
from oasis_geometry.matrix import vector_ops
from oasis_geometry.matrix.matrix4 import Matrix4


POINT: NDArray[np.float64] = np.array([0.5, -1.5, 2.0], dtype=float)


def _rigid() -> Matrix4:
    """Return a rotation followed by a translation with distinct axes."""
    return Matrix4().set_from_translation_rotation(
        [1.0, 2.0, 3.0], Quaternion.from_euler_deg(40.0, 15.0, -25.0)
    )


def test_rotate_matches_matrix_method() -> None:
    """Checks rotate applies only the 3x3 block."""
    mat: Matrix4 = _rigid()
    assert np.allclose(vector_ops.rotate(POINT, mat), mat.rotate_vector(POINT))
    assert np.allclose(vector_ops.rotate(POINT, mat), mat.as_array()[:3, :3] @ POINT)


def test_project_matches_matrix_method() -> None:
    """Checks project applies the homogeneous divide."""
    proj: Matrix4 = Matrix4().set_to_projection(0.5, 20.0, 70.0, 1.3)
    point: NDArray[np.float64] = np.array([0.3, 0.2, -4.0], dtype=float)
    assert np.allclose(vector_ops.project(point, proj), proj.project_point(point))


def test_unrotate_inverts_rotate() -> None:
    """Checks unrotate undoes a pure rotation."""
    mat: Matrix4 = _rigid()
    rotated: NDArray[np.float64] = vector_ops.rotate(POINT, mat)
    assert np.allclose(vector_ops.unrotate(rotated, mat), POINT)


def test_untransform_inverts_rigid_transform() -> None:
    """Checks untransform undoes rotation and translation on every axis."""
    mat: Matrix4 = _rigid()
    transformed: NDArray[np.float64] = mat.transform_point(POINT)
    assert np.allclose(vector_ops.untransform(transformed, mat), POINT)
    inverse: Matrix4 = mat.inverted()
    assert np.allclose(
        vector_ops.untransform(transformed, mat), inverse.transform_point(transformed)
    )


def test_helpers_return_new_arrays() -> None:
    """Checks inputs are not modified."""
    point: NDArray[np.float64] = POINT.copy()
    vector_ops.untransform(point, _rigid())
    vector_ops.project(point, _rigid())
    assert np.array_equal(point, POINT)
