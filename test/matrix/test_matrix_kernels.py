################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Tests for raw matrix buffer kernels."""

from __future__ import annotations

import warnings

import numpy as np
from numpy.typing import NDArray

from oasis_geometry.matrix import matrix_kernels
from oasis_geometry.matrix.matrix_layout import from_rows
from oasis_geometry.matrix.matrix_layout import identity_values
from oasis_geometry.matrix.matrix_layout import to_rows


def _random_rows(seed: int) -> NDArray[np.float64]:
    """Return a well-conditioned random 4x4 matrix."""
    rng: np.random.Generator = np.random.default_rng(seed)
    return rng.uniform(-1.0, 1.0, size=(4, 4)) + 4.0 * np.eye(4)


def test_multiply_matches_numpy() -> None:
    """Checks in-place multiplication computes a * b."""
    a_rows: NDArray[np.float64] = _random_rows(1)
    b_rows: NDArray[np.float64] = _random_rows(2)
    a: NDArray[np.float64] = from_rows(a_rows)
    matrix_kernels.multiply(a, from_rows(b_rows))
    assert np.allclose(to_rows(a), a_rows @ b_rows)


def test_multiply_identity() -> None:
    """Checks multiplying by the identity leaves a matrix unchanged."""
    a_rows: NDArray[np.float64] = _random_rows(3)
    a: NDArray[np.float64] = from_rows(a_rows)
    matrix_kernels.multiply(a, identity_values())
    assert np.allclose(to_rows(a), a_rows)


def test_multiply_aliased() -> None:
    """Checks multiplying a buffer by itself squares the matrix."""
    a_rows: NDArray[np.float64] = _random_rows(4)
    a: NDArray[np.float64] = from_rows(a_rows)
    matrix_kernels.multiply(a, a)
    assert np.allclose(to_rows(a), a_rows @ a_rows)


def test_transform_values_list_in_place() -> None:
    """Checks vector kernels update plain lists in place."""
    rows: NDArray[np.float64] = np.eye(4)
    rows[:3, 3] = [10.0, 20.0, 30.0]
    vec: list[float] = [1.0, 2.0, 3.0]
    result: object = matrix_kernels.transform_values(from_rows(rows), vec)
    assert result is vec
    assert np.allclose(vec, [11.0, 22.0, 33.0])


def test_rotate_values_ignores_translation() -> None:
    """Checks the direction kernel applies only the 3x3 block."""
    rows: NDArray[np.float64] = _random_rows(5)
    vec: NDArray[np.float64] = np.array([1.0, -2.0, 0.5], dtype=float)
    expected: NDArray[np.float64] = rows[:3, :3] @ vec
    matrix_kernels.rotate_values(from_rows(rows), vec)
    assert np.allclose(vec, expected)


def test_project_values_divides_by_w() -> None:
    """Checks the projection kernel performs the homogeneous divide."""
    rows: NDArray[np.float64] = _random_rows(6)
    vec: NDArray[np.float64] = np.array([0.2, 0.3, -0.4], dtype=float)
    homogeneous: NDArray[np.float64] = rows @ np.append(vec, 1.0)
    matrix_kernels.project_values(from_rows(rows), vec)
    assert np.allclose(vec, homogeneous[:3] / homogeneous[3])


def test_project_values_zero_w_is_silent() -> None:
    """Checks a point mapping to w == 0 yields non-finite values quietly."""
    rows: NDArray[np.float64] = np.zeros((4, 4), dtype=float)
    rows[0, 0] = 1.0
    rows[1, 1] = 1.0
    rows[3, 2] = -1.0
    vec: NDArray[np.float64] = np.array([1.0, 0.0, 0.0], dtype=float)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        matrix_kernels.project_values(from_rows(rows), vec)
    assert not np.all(np.isfinite(vec))


def test_transpose() -> None:
    """Checks in-place transposition."""
    rows: NDArray[np.float64] = _random_rows(7)
    values: NDArray[np.float64] = from_rows(rows)
    matrix_kernels.transpose(values)
    assert np.array_equal(to_rows(values), rows.T)


def test_determinant_matches_numpy() -> None:
    """Checks the closed-form determinants against numpy."""
    for seed in range(8, 12):
        rows: NDArray[np.float64] = _random_rows(seed)
        values: NDArray[np.float64] = from_rows(rows)
        assert np.isclose(matrix_kernels.determinant(values), np.linalg.det(rows))
        assert np.isclose(
            matrix_kernels.determinant_3x3(values), np.linalg.det(rows[:3, :3])
        )


def test_determinant_non_affine() -> None:
    """Checks the determinant uses every entry of the bottom row."""
    rows: NDArray[np.float64] = np.eye(4)
    rows[3, :] = [2.0, 3.0, 4.0, 5.0]
    rows[0, 3] = 1.0
    assert np.isclose(matrix_kernels.determinant(from_rows(rows)), np.linalg.det(rows))


def test_invert_matches_numpy() -> None:
    """Checks the adjugate inverse against numpy."""
    rows: NDArray[np.float64] = _random_rows(12)
    values: NDArray[np.float64] = from_rows(rows)
    assert matrix_kernels.invert(values)
    assert np.allclose(to_rows(values), np.linalg.inv(rows))
    adjugate: NDArray[np.float64] = matrix_kernels.adjugate(from_rows(rows))
    assert np.allclose(to_rows(adjugate), np.linalg.inv(rows) * np.linalg.det(rows))


def test_invert_singular_leaves_values() -> None:
    """Checks a singular matrix reports failure without modification."""
    values: NDArray[np.float64] = identity_values()
    values[0] = 0.0
    before: NDArray[np.float64] = values.copy()
    assert not matrix_kernels.invert(values)
    assert np.array_equal(values, before)
