################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for Matrix4 storage and composition."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.typing import NDArray

from oasis_geometry.math_utils.quat import Quaternion
from oasis_geometry.matrix.matrix4 import Matrix4


X_AXIS: NDArray[np.float64] = np.array([1.0, 0.0, 0.0], dtype=float)
Y_AXIS: NDArray[np.float64] = np.array([0.0, 1.0, 0.0], dtype=float)
Z_AXIS: NDArray[np.float64] = np.array([0.0, 0.0, 1.0], dtype=float)


def _sample_matrix() -> Matrix4:
    """Return a translated, rotated and scaled transform."""
    return Matrix4.from_transform(
        [1.0, -2.0, 3.0],
        Quaternion.from_euler_deg(30.0, -20.0, 45.0),
        [2.0, 3.0, 0.5],
    )


def test_default_is_identity() -> None:
    """Checks a new matrix is the identity."""
    mat: Matrix4 = Matrix4()
    assert np.array_equal(mat.as_array(), np.eye(4))
    assert mat.values is mat.val
    assert mat.values.shape == (16,)


def test_construct_copies() -> None:
    """Checks construction from a matrix or buffer copies the values."""
    src: Matrix4 = _sample_matrix()
    copy: Matrix4 = Matrix4(src)
    copy[0, 3] = 100.0
    assert src[0, 3] == 1.0
    raw: list[float] = list(src.val)
    from_raw: Matrix4 = Matrix4(raw)
    assert from_raw == src
    with pytest.raises(ValueError):
        Matrix4([1.0, 2.0])


def test_row_col_access() -> None:
    """Checks (row, col) indexing reaches the column-major slot."""
    mat: Matrix4 = Matrix4().set_to_translation([4.0, 5.0, 6.0])
    assert mat[0, 3] == 4.0
    assert mat[2, 3] == 6.0
    assert mat.val[14] == 6.0
    mat[3, 2] = -1.0
    assert mat.val[11] == -1.0
    with pytest.raises(ValueError):
        mat[4, 0]


def test_set_and_set_values() -> None:
    """Checks bulk assignment from another matrix or a buffer."""
    src: Matrix4 = _sample_matrix()
    dst: Matrix4 = Matrix4()
    assert dst.set(src) is dst
    assert dst == src
    dst.set_values(np.arange(16, dtype=float))
    assert dst[1, 0] == 1.0
    assert dst[0, 1] == 4.0


def test_equality_and_hash() -> None:
    """Checks value equality and that matrices are unhashable."""
    assert Matrix4() == Matrix4()
    assert Matrix4() != Matrix4().set_to_translation([1.0, 0.0, 0.0])
    with pytest.raises(TypeError):
        hash(Matrix4())


def test_str_layout() -> None:
    """Checks the printed form lists rows."""
    text: str = str(Matrix4().set_to_translation([7.0, 0.0, 0.0]))
    lines: list[str] = text.splitlines()
    assert len(lines) == 4
    assert lines[0] == "[1.0|0.0|0.0|7.0]"
    assert lines[3] == "[0.0|0.0|0.0|1.0]"


def test_extract_4x3() -> None:
    """Checks the axis columns and translation are extracted in order."""
    mat: Matrix4 = _sample_matrix()
    out: NDArray[np.float64] = mat.extract_4x3()
    rows: NDArray[np.float64] = mat.as_array()
    assert out.shape == (12,)
    assert np.allclose(out[0:3], rows[:3, 0])
    assert np.allclose(out[9:12], [1.0, -2.0, 3.0])
    dst: NDArray[np.float64] = np.zeros(12, dtype=float)
    assert mat.extract_4x3(dst) is dst


def test_identity_multiply() -> None:
    """Checks multiplying by the identity on either side is a no-op."""
    mat: Matrix4 = _sample_matrix()
    assert np.allclose(mat.copy().multiply(Matrix4()).val, mat.val)
    assert np.allclose(mat.copy().multiply_left(Matrix4()).val, mat.val)


def test_multiply_order() -> None:
    """Checks postmultiply and premultiply orders."""
    a: Matrix4 = _sample_matrix()
    b: Matrix4 = Matrix4().set_to_rotation(Y_AXIS, 70.0).trn([0.0, 1.0, 2.0])
    assert np.allclose(a.copy().multiply(b).as_array(), a.as_array() @ b.as_array())
    assert np.allclose(
        a.copy().multiply_left(b).as_array(), b.as_array() @ a.as_array()
    )


def test_multiply_self() -> None:
    """Checks a matrix may be multiplied by itself."""
    mat: Matrix4 = _sample_matrix()
    expected: NDArray[np.float64] = mat.as_array() @ mat.as_array()
    assert np.allclose(mat.multiply(mat).as_array(), expected)


def test_matmul_returns_new() -> None:
    """Checks the @ operator leaves both operands untouched."""
    a: Matrix4 = _sample_matrix()
    b: Matrix4 = Matrix4().set_to_scaling([2.0, 2.0, 2.0])
    a_before: Matrix4 = a.copy()
    product: Matrix4 = a @ b
    assert a == a_before
    assert np.allclose(product.as_array(), a.as_array() @ b.as_array())


def test_double_transpose() -> None:
    """Checks transposing twice restores the matrix."""
    mat: Matrix4 = _sample_matrix()
    original: Matrix4 = mat.copy()
    assert np.allclose(mat.transpose().as_array(), original.as_array().T)
    assert mat.transpose() == original


def test_translation_rotation_matches_chain() -> None:
    """Checks direct composition equals translating then rotating."""
    translation: NDArray[np.float64] = np.array([1.0, 2.0, 3.0], dtype=float)
    rotation: Quaternion = Quaternion.from_axis_angle_deg([1.0, 1.0, 0.0], 40.0)
    direct: Matrix4 = Matrix4().set_from_translation_rotation(translation, rotation)
    chained: Matrix4 = Matrix4().translate(translation).rotate_quaternion(rotation)
    assert direct.almost_equal(chained)


def test_translation_rotation_scale_matches_chain() -> None:
    """Checks direct composition equals translate, rotate, then scale."""
    rotation: Quaternion = Quaternion.from_euler_deg(10.0, 20.0, 30.0)
    direct: Matrix4 = Matrix4().set_from_translation_rotation_scale(
        [1.0, 2.0, 3.0], rotation, [2.0, 0.5, 4.0]
    )
    chained: Matrix4 = (
        Matrix4()
        .translate([1.0, 2.0, 3.0])
        .rotate_quaternion(rotation)
        .scale(2.0, 0.5, 4.0)
    )
    assert direct.almost_equal(chained)
    assert Matrix4.from_quaternion(rotation).almost_equal(
        Matrix4().set_from_quaternion(rotation)
    )


def test_rotate_zero_angle_is_noop() -> None:
    """Checks zero-angle rotations skip axis validation."""
    mat: Matrix4 = _sample_matrix()
    before: Matrix4 = mat.copy()
    assert mat.rotate([0.0, 0.0, 0.0], 0.0) == before
    assert mat.rotate_rad([0.0, 0.0, 0.0], 0.0) == before
    assert Matrix4(mat).set_to_rotation([0.0, 0.0, 0.0], 0.0) == Matrix4()
    assert Matrix4(mat).set_to_rotation_rad(Z_AXIS, 0.0) == Matrix4()


def test_rotate_degrees_and_radians() -> None:
    """Checks postmultiplied rotations in degrees and radians agree."""
    deg: Matrix4 = Matrix4().rotate(Z_AXIS, 90.0)
    rad: Matrix4 = Matrix4().rotate_rad(Z_AXIS, np.pi / 2.0)
    assert deg.almost_equal(rad)
    assert np.allclose(deg.transform_point(X_AXIS), Y_AXIS)
    assert Matrix4().set_to_rotation(Z_AXIS, 90.0).almost_equal(deg)


def test_rotate_between() -> None:
    """Checks rotations taking one direction onto another."""
    mat: Matrix4 = Matrix4().set_to_rotation_between([0.0, 0.0, 2.0], X_AXIS)
    assert np.allclose(mat.rotate_vector(Z_AXIS), X_AXIS)
    post: Matrix4 = Matrix4().rotate_between(Z_AXIS, X_AXIS)
    assert post.almost_equal(mat)


def test_euler_angles() -> None:
    """Checks Euler angle setters in degrees and radians."""
    deg: Matrix4 = Matrix4().set_from_euler_angles(90.0, 0.0, 0.0)
    assert np.allclose(deg.rotate_vector(Z_AXIS), X_AXIS)
    rad: Matrix4 = Matrix4().set_from_euler_angles_rad(0.3, -0.2, 0.1)
    expected: Quaternion = Quaternion.from_euler_rad(0.3, -0.2, 0.1)
    assert np.allclose(rad.as_array()[:3, :3], expected.as_matrix())


def test_transform_point_and_vector() -> None:
    """Checks points receive the translation and directions do not."""
    mat: Matrix4 = Matrix4().set_from_translation_rotation(
        [10.0, 0.0, 0.0], Quaternion.from_axis_angle_deg(Z_AXIS, 90.0)
    )
    assert np.allclose(mat.transform_point([1.0, 0.0, 0.0]), [10.0, 1.0, 0.0])
    assert np.allclose(mat.rotate_vector([1.0, 0.0, 0.0]), [0.0, 1.0, 0.0])


def test_transform_point_does_not_mutate_input() -> None:
    """Checks vector transforms return new arrays."""
    point: NDArray[np.float64] = np.array([1.0, 2.0, 3.0], dtype=float)
    mat: Matrix4 = Matrix4().set_to_translation([1.0, 1.0, 1.0])
    result: NDArray[np.float64] = mat.transform_point(point)
    assert np.array_equal(point, [1.0, 2.0, 3.0])
    assert np.array_equal(result, [2.0, 3.0, 4.0])


def test_trn_and_translation_setters() -> None:
    """Checks translation helpers only touch the translation column."""
    mat: Matrix4 = Matrix4().set_to_rotation(Z_AXIS, 30.0)
    block: NDArray[np.float64] = mat.as_array()[:3, :3]
    mat.trn([1.0, 2.0, 3.0]).trn([1.0, 0.0, 0.0])
    assert np.allclose(mat.get_translation(), [2.0, 2.0, 3.0])
    assert np.allclose(mat.as_array()[:3, :3], block)
    mat.set_translation([-1.0, -1.0, -1.0])
    assert np.allclose(mat.get_translation(), [-1.0, -1.0, -1.0])
    assert np.allclose(mat.as_array()[:3, :3], block)


def test_translate_postmultiplies() -> None:
    """Checks translate applies in the local frame."""
    mat: Matrix4 = Matrix4().set_to_scaling([2.0, 2.0, 2.0])
    mat.translate([1.0, 0.0, 0.0])
    assert np.allclose(mat.get_translation(), [2.0, 0.0, 0.0])


def test_scaling_helpers() -> None:
    """Checks scaling setters and the diagonal-only scl."""
    mat: Matrix4 = Matrix4().set_to_translation_and_scaling(
        [1.0, 2.0, 3.0], [4.0, 5.0, 6.0]
    )
    assert np.allclose(np.diag(mat.as_array()), [4.0, 5.0, 6.0, 1.0])
    assert np.allclose(mat.get_translation(), [1.0, 2.0, 3.0])
    mat.scl(2.0)
    assert np.allclose(np.diag(mat.as_array()), [8.0, 10.0, 12.0, 1.0])
    mat.scl(1.0, 0.5, 2.0)
    assert np.allclose(np.diag(mat.as_array()), [8.0, 5.0, 24.0, 1.0])
    assert np.allclose(mat.get_translation(), [1.0, 2.0, 3.0])
    scaled: Matrix4 = Matrix4().set_to_rotation(Z_AXIS, 90.0).scale(2.0, 3.0, 4.0)
    assert np.allclose(scaled.transform_point([1.0, 0.0, 0.0]), [0.0, 2.0, 0.0])


def test_set_from_axes_columns() -> None:
    """Checks axes become matrix columns."""
    mat: Matrix4 = Matrix4().set_from_axes(Y_AXIS, Z_AXIS, X_AXIS, [5.0, 6.0, 7.0])
    rows: NDArray[np.float64] = mat.as_array()
    assert np.allclose(rows[:3, 0], Y_AXIS)
    assert np.allclose(rows[:3, 1], Z_AXIS)
    assert np.allclose(rows[:3, 2], X_AXIS)
    assert np.allclose(rows[:, 3], [5.0, 6.0, 7.0, 1.0])
    assert np.allclose(mat.transform_point(X_AXIS), [5.0, 7.0, 7.0])


def test_set_from_mat3() -> None:
    """Checks a 2D homogeneous matrix is embedded around an identity z axis."""
    mat3: NDArray[np.float64] = np.array(
        [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [7.0, 8.0, 9.0]], dtype=float
    )
    expected: NDArray[np.float64] = np.array(
        [
            [1.0, 2.0, 0.0, 3.0],
            [4.0, 5.0, 0.0, 6.0],
            [0.0, 0.0, 1.0, 0.0],
            [7.0, 8.0, 0.0, 9.0],
        ],
        dtype=float,
    )
    assert np.array_equal(_sample_matrix().set_from_mat3(mat3).as_array(), expected)
    with pytest.raises(ValueError):
        Matrix4().set_from_mat3(np.eye(4))


def test_set_from_affine2() -> None:
    """Checks a 2D affine transform is embedded with an affine bottom row."""
    affine: NDArray[np.float64] = np.array(
        [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], dtype=float
    )
    expected: NDArray[np.float64] = np.array(
        [
            [1.0, 2.0, 0.0, 3.0],
            [4.0, 5.0, 0.0, 6.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype=float,
    )
    mat: Matrix4 = _sample_matrix().set_from_affine2(affine)
    assert np.array_equal(mat.as_array(), expected)


def test_set_as_affine() -> None:
    """Checks only the 2D affine entries are overwritten."""
    mat: Matrix4 = Matrix4().set_to_translation([0.0, 0.0, 7.0])
    mat.set_as_affine(np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]], dtype=float))
    rows: NDArray[np.float64] = mat.as_array()
    assert np.array_equal(rows[:2, :2], [[1.0, 2.0], [4.0, 5.0]])
    assert np.array_equal(rows[:3, 3], [3.0, 6.0, 7.0])
    assert rows[2, 2] == 1.0

    other: Matrix4 = Matrix4().set_to_scaling([9.0, 9.0, 9.0]).trn([1.0, 1.0, 1.0])
    mat.set_as_affine(other)
    rows = mat.as_array()
    assert np.array_equal(rows[:2, :2], [[9.0, 0.0], [0.0, 9.0]])
    assert np.array_equal(rows[:3, 3], [1.0, 1.0, 7.0])
    assert rows[2, 2] == 1.0


def test_has_rotation_or_scaling() -> None:
    """Checks detection of a non-identity 3x3 block."""
    assert not Matrix4().has_rotation_or_scaling()
    assert not Matrix4().set_to_translation([1.0, 2.0, 3.0]).has_rotation_or_scaling()
    assert Matrix4().set_to_scaling([1.0, 2.0, 1.0]).has_rotation_or_scaling()
    assert Matrix4().set_to_rotation(X_AXIS, 10.0).has_rotation_or_scaling()
    nearly: Matrix4 = Matrix4()
    nearly[0, 1] = 1e-9
    assert not nearly.has_rotation_or_scaling()
    assert nearly.has_rotation_or_scaling(tolerance=0.0)
