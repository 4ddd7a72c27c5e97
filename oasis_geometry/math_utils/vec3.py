################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Small 3D vector helpers."""

from __future__ import annotations

from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from .units import Tolerances


# Any 3-element float sequence accepted where a 3-vector is expected
Vector3Like = Union[Sequence[float], NDArray[np.float64]]


class Vec3:
    """Vector utilities for 3D vectors."""

    @staticmethod
    def as_vec3(v: Vector3Like, name: str = "v") -> NDArray[np.float64]:
        """Return a float copy of a 3-vector, checking its shape."""
        vec: NDArray[np.float64] = np.array(v, dtype=float)
        if vec.shape != (3,):
            raise ValueError(f"{name} must be shape (3,)")
        return vec

    @staticmethod
    def normalize(
        v: Vector3Like,
        eps: float = Tolerances.EPS,
        name: str = "v",
    ) -> NDArray[np.float64]:
        """Normalize a 3-vector."""
        vec: NDArray[np.float64] = Vec3.as_vec3(v, name)
        norm: float = float(np.linalg.norm(vec))
        if norm < eps:
            raise ValueError(f"{name} has near-zero norm")
        return vec / norm

    @staticmethod
    def cross(
        u: Vector3Like,
        v: Vector3Like,
    ) -> NDArray[np.float64]:
        """Return the cross product u x v."""
        u_vec: NDArray[np.float64] = Vec3.as_vec3(u, "u")
        v_vec: NDArray[np.float64] = Vec3.as_vec3(v, "v")
        return np.array(
            [
                u_vec[1] * v_vec[2] - u_vec[2] * v_vec[1],
                u_vec[2] * v_vec[0] - u_vec[0] * v_vec[2],
                u_vec[0] * v_vec[1] - u_vec[1] * v_vec[0],
            ],
            dtype=float,
        )

    @staticmethod
    def any_orthogonal(v: Vector3Like) -> NDArray[np.float64]:
        """Return a unit vector orthogonal to a non-zero 3-vector."""
        vec: NDArray[np.float64] = Vec3.normalize(v)
        # Cross with the basis axis least aligned with v
        idx: int = int(np.argmin(np.abs(vec)))
        basis: NDArray[np.float64] = np.zeros(3, dtype=float)
        basis[idx] = 1.0
        return Vec3.normalize(Vec3.cross(vec, basis))
