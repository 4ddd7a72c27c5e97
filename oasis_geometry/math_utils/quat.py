################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################
"""Quaternion utilities using the wxyz convention.

Rotations follow the right-handed, active convention: a quaternion built
from an axis and a positive angle rotates vectors counterclockwise about
that axis when looking down the axis toward the origin.

Euler angles are applied as yaw about +Y, then pitch about +X, then roll
about +Z, so that ``from_euler_rad(yaw, pitch, roll)`` equals
``Ry(yaw) * Rx(pitch) * Rz(roll)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from .units import Angle
from .units import Tolerances
from .units import assert_finite
from .vec3 import Vec3
from .vec3 import Vector3Like


# Dot product above which slerp falls back to normalized lerp
SLERP_LINEAR_THRESHOLD: float = 0.9995

# Half-angle below which power() uses the small-angle coefficient
POWER_SMALL_ANGLE_RAD: float = 1e-3


@dataclass(frozen=True)
class Quaternion:
    """Quaternion stored in wxyz order."""

    wxyz: NDArray[np.float64]

    def __post_init__(self) -> None:
        """Validate quaternion inputs and normalize storage."""
        wxyz: NDArray[np.float64] = np.asarray(self.wxyz, dtype=float)
        if wxyz.shape != (4,):
            raise ValueError("wxyz must be shape (4,)")
        assert_finite(wxyz, "wxyz")
        object.__setattr__(self, "wxyz", wxyz)

    @property
    def w(self) -> float:
        return float(self.wxyz[0])

    @property
    def x(self) -> float:
        return float(self.wxyz[1])

    @property
    def y(self) -> float:
        return float(self.wxyz[2])

    @property
    def z(self) -> float:
        return float(self.wxyz[3])

    @staticmethod
    def identity() -> "Quaternion":
        """Return the identity quaternion."""
        return Quaternion.from_wxyz(1.0, 0.0, 0.0, 0.0)

    @staticmethod
    def from_wxyz(w: float, x: float, y: float, z: float) -> "Quaternion":
        """Create a quaternion from components."""
        return Quaternion(np.array([w, x, y, z], dtype=float))

    @staticmethod
    def from_xyzw(xyzw: Sequence[float]) -> "Quaternion":
        """Create a quaternion from components in xyzw order."""
        arr: NDArray[np.float64] = np.asarray(xyzw, dtype=float)
        if arr.shape != (4,):
            raise ValueError("xyzw must be shape (4,)")
        return Quaternion.from_wxyz(
            float(arr[3]), float(arr[0]), float(arr[1]), float(arr[2])
        )

    @staticmethod
    def from_axis_angle_rad(axis: Vector3Like, radians: float) -> "Quaternion":
        """Create a quaternion rotating by an angle in radians about an axis."""
        unit_axis: NDArray[np.float64] = Vec3.normalize(axis, name="axis")
        half: float = 0.5 * float(radians)
        s: float = float(np.sin(half))
        return Quaternion.from_wxyz(
            float(np.cos(half)),
            float(unit_axis[0]) * s,
            float(unit_axis[1]) * s,
            float(unit_axis[2]) * s,
        )

    @staticmethod
    def from_axis_angle_deg(axis: Vector3Like, degrees: float) -> "Quaternion":
        """Create a quaternion rotating by an angle in degrees about an axis."""
        return Quaternion.from_axis_angle_rad(axis, float(Angle.deg2rad(degrees)))

    @staticmethod
    def from_euler_rad(yaw: float, pitch: float, roll: float) -> "Quaternion":
        """Create a quaternion from yaw (Y), pitch (X) and roll (Z) in radians."""
        hy: float = 0.5 * float(yaw)
        hp: float = 0.5 * float(pitch)
        hr: float = 0.5 * float(roll)
        cy: float = float(np.cos(hy))
        sy: float = float(np.sin(hy))
        cp: float = float(np.cos(hp))
        sp: float = float(np.sin(hp))
        cr: float = float(np.cos(hr))
        sr: float = float(np.sin(hr))
        return Quaternion.from_wxyz(
            cy * cp * cr + sy * sp * sr,
            cy * sp * cr + sy * cp * sr,
            sy * cp * cr - cy * sp * sr,
            cy * cp * sr - sy * sp * cr,
        )

    @staticmethod
    def from_euler_deg(yaw: float, pitch: float, roll: float) -> "Quaternion":
        """Create a quaternion from yaw, pitch and roll in degrees."""
        return Quaternion.from_euler_rad(
            float(Angle.deg2rad(yaw)),
            float(Angle.deg2rad(pitch)),
            float(Angle.deg2rad(roll)),
        )

    @staticmethod
    def from_cross(v1: Vector3Like, v2: Vector3Like) -> "Quaternion":
        """Create the shortest-arc rotation taking direction v1 onto v2."""
        a: NDArray[np.float64] = Vec3.normalize(v1, name="v1")
        b: NDArray[np.float64] = Vec3.normalize(v2, name="v2")
        dot: float = float(np.clip(np.dot(a, b), -1.0, 1.0))
        axis: NDArray[np.float64] = Vec3.cross(a, b)
        if float(np.linalg.norm(axis)) < Tolerances.FLOAT_ROUNDING_ERROR:
            if dot > 0.0:
                return Quaternion.identity()
            # Opposite directions: half turn about any perpendicular axis
            return Quaternion.from_axis_angle_rad(Vec3.any_orthogonal(a), np.pi)
        return Quaternion.from_axis_angle_rad(axis, float(np.arccos(dot)))

    @staticmethod
    def from_matrix(R: NDArray[np.float64]) -> "Quaternion":
        """Create a quaternion from a rotation matrix."""
        mat: NDArray[np.float64] = np.asarray(R, dtype=float)
        if mat.shape != (3, 3):
            raise ValueError("R must be shape (3, 3)")
        assert_finite(mat, "R")
        trace: float = float(np.trace(mat))
        if trace > 0.0:
            s: float = float(np.sqrt(trace + 1.0) * 2.0)
            w: float = 0.25 * s
            x: float = float((mat[2, 1] - mat[1, 2]) / s)
            y: float = float((mat[0, 2] - mat[2, 0]) / s)
            z: float = float((mat[1, 0] - mat[0, 1]) / s)
        else:
            diag: NDArray[np.float64] = np.diag(mat)
            idx: int = int(np.argmax(diag))
            if idx == 0:
                s = float(np.sqrt(1.0 + mat[0, 0] - mat[1, 1] - mat[2, 2]) * 2.0)
                w = float((mat[2, 1] - mat[1, 2]) / s)
                x = 0.25 * s
                y = float((mat[0, 1] + mat[1, 0]) / s)
                z = float((mat[0, 2] + mat[2, 0]) / s)
            elif idx == 1:
                s = float(np.sqrt(1.0 + mat[1, 1] - mat[0, 0] - mat[2, 2]) * 2.0)
                w = float((mat[0, 2] - mat[2, 0]) / s)
                x = float((mat[0, 1] + mat[1, 0]) / s)
                y = 0.25 * s
                z = float((mat[1, 2] + mat[2, 1]) / s)
            else:
                s = float(np.sqrt(1.0 + mat[2, 2] - mat[0, 0] - mat[1, 1]) * 2.0)
                w = float((mat[1, 0] - mat[0, 1]) / s)
                x = float((mat[0, 2] + mat[2, 0]) / s)
                y = float((mat[1, 2] + mat[2, 1]) / s)
                z = 0.25 * s
        return Quaternion.from_wxyz(w, x, y, z).normalized()

    @staticmethod
    def from_matrix4_values(
        values: NDArray[np.float64], normalize_axes: bool = False
    ) -> "Quaternion":
        """Extract the rotation of a column-major 4x4 matrix.

        Args:
            values: 16 column-major matrix values
            normalize_axes: Divide each column of the 3x3 block by its length
                first. Required when the matrix carries non-unit scale.

        Returns:
            The unit quaternion of the (unscaled) 3x3 block
        """
        vals: NDArray[np.float64] = np.asarray(values, dtype=float)
        if vals.shape != (16,):
            raise ValueError("values must be shape (16,)")
        block: NDArray[np.float64] = vals.reshape((4, 4), order="F")[:3, :3].copy()
        if normalize_axes:
            lengths: NDArray[np.float64] = np.linalg.norm(block, axis=0)
            if np.any(lengths < Tolerances.EPS):
                raise ValueError("matrix axes must be non-zero to normalize")
            block = block / lengths
        return Quaternion.from_matrix(block)

    def as_matrix(self) -> NDArray[np.float64]:
        """Return the rotation matrix representation."""
        q: NDArray[np.float64] = self.normalized().wxyz
        w: float = float(q[0])
        x: float = float(q[1])
        y: float = float(q[2])
        z: float = float(q[3])
        return np.array(
            [
                [
                    1.0 - 2.0 * (y * y + z * z),
                    2.0 * (x * y - z * w),
                    2.0 * (x * z + y * w),
                ],
                [
                    2.0 * (x * y + z * w),
                    1.0 - 2.0 * (x * x + z * z),
                    2.0 * (y * z - x * w),
                ],
                [
                    2.0 * (x * z - y * w),
                    2.0 * (y * z + x * w),
                    1.0 - 2.0 * (x * x + y * y),
                ],
            ],
            dtype=float,
        )

    def as_matrix4_values(self) -> NDArray[np.float64]:
        """Return the rotation as 16 column-major homogeneous matrix values."""
        mat: NDArray[np.float64] = np.eye(4, dtype=float)
        mat[:3, :3] = self.as_matrix()
        return mat.reshape(16, order="F")

    def norm(self) -> float:
        """Return the quaternion length."""
        return float(np.linalg.norm(self.wxyz))

    def normalized(self) -> "Quaternion":
        """Return a normalized quaternion."""
        norm: float = self.norm()
        if norm < Tolerances.EPS:
            raise ValueError("Quaternion norm is too small")
        return Quaternion(self.wxyz / norm)

    def inverse(self) -> "Quaternion":
        """Return the inverse quaternion."""
        q: NDArray[np.float64] = self.normalized().wxyz
        return Quaternion.from_wxyz(
            float(q[0]), float(-q[1]), float(-q[2]), float(-q[3])
        )

    def dot(self, other: "Quaternion") -> float:
        """Return the four-component dot product."""
        return float(np.dot(self.wxyz, other.wxyz))

    def __neg__(self) -> "Quaternion":
        return Quaternion(-self.wxyz)

    def __mul__(self, other: "Quaternion") -> "Quaternion":
        """Multiply two quaternions using the Hamilton product."""
        q1: NDArray[np.float64] = self.wxyz
        q2: NDArray[np.float64] = other.wxyz
        w1: float = float(q1[0])
        x1: float = float(q1[1])
        y1: float = float(q1[2])
        z1: float = float(q1[3])
        w2: float = float(q2[0])
        x2: float = float(q2[1])
        y2: float = float(q2[2])
        z2: float = float(q2[3])
        w: float = w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2
        x: float = w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2
        y: float = w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2
        z: float = w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2
        return Quaternion.from_wxyz(w, x, y, z)

    def rotate(self, v: Vector3Like) -> NDArray[np.float64]:
        """Rotate a 3-vector by this quaternion."""
        vec: NDArray[np.float64] = Vec3.as_vec3(v)
        assert_finite(vec, "v")
        return self.as_matrix() @ vec

    def slerp(self, other: "Quaternion", t: float) -> "Quaternion":
        """Spherically interpolate toward another rotation along the short arc."""
        q1: NDArray[np.float64] = self.normalized().wxyz
        q2: NDArray[np.float64] = other.normalized().wxyz
        dot: float = float(np.dot(q1, q2))
        if dot < 0.0:
            q2 = -q2
            dot = -dot

        if dot > SLERP_LINEAR_THRESHOLD:
            # Nearly parallel, sin(theta) is too small to divide by
            return Quaternion(q1 + float(t) * (q2 - q1)).normalized()

        theta: float = float(np.arccos(dot))
        sin_theta: float = float(np.sin(theta))
        s1: float = float(np.sin((1.0 - float(t)) * theta)) / sin_theta
        s2: float = float(np.sin(float(t) * theta)) / sin_theta
        return Quaternion(s1 * q1 + s2 * q2)

    def power(self, alpha: float) -> "Quaternion":
        """Raise the quaternion to a real power, returning a unit quaternion."""
        norm: float = self.norm()
        if norm < Tolerances.EPS:
            raise ValueError("Quaternion norm is too small")
        norm_exp: float = norm ** float(alpha)
        theta: float = float(np.arccos(np.clip(self.w / norm, -1.0, 1.0)))
        coeff: float
        if abs(theta) < POWER_SMALL_ANGLE_RAD:
            coeff = norm_exp * float(alpha) / norm
        else:
            coeff = norm_exp * float(np.sin(float(alpha) * theta)) / (
                norm * float(np.sin(theta))
            )
        w: float = norm_exp * float(np.cos(float(alpha) * theta))
        return Quaternion.from_wxyz(
            w, coeff * self.x, coeff * self.y, coeff * self.z
        ).normalized()

    def log(self) -> NDArray[np.float64]:
        """Return the logarithm of a unit quaternion as a 3-vector.

        The result is the rotation axis scaled by half the rotation angle, the
        vector part of log(q) for a unit quaternion.
        """
        q: NDArray[np.float64] = self.normalized().wxyz
        vec: NDArray[np.float64] = q[1:]
        vec_norm: float = float(np.linalg.norm(vec))
        if vec_norm < Tolerances.EPS:
            return np.zeros(3, dtype=float)
        half_angle: float = float(np.arctan2(vec_norm, float(q[0])))
        return vec * (half_angle / vec_norm)

    @staticmethod
    def exp(v: Vector3Like) -> "Quaternion":
        """Return the unit quaternion exp(v) for a pure vector v."""
        vec: NDArray[np.float64] = Vec3.as_vec3(v)
        assert_finite(vec, "v")
        half_angle: float = float(np.linalg.norm(vec))
        if half_angle < Tolerances.EPS:
            return Quaternion.identity()
        s: float = float(np.sin(half_angle)) / half_angle
        return Quaternion.from_wxyz(
            float(np.cos(half_angle)),
            float(vec[0]) * s,
            float(vec[1]) * s,
            float(vec[2]) * s,
        )

    def to_wxyz(self) -> NDArray[np.float64]:
        """Return a copy of the quaternion components."""
        return np.array(self.wxyz, dtype=float)

    def almost_equal(self, other: "Quaternion", atol: float = 1e-9) -> bool:
        """Check approximate equality, accounting for sign ambiguity."""
        q1: NDArray[np.float64] = self.wxyz
        q2: NDArray[np.float64] = other.wxyz
        if np.allclose(q1, q2, atol=atol):
            return True
        return bool(np.allclose(q1, -q2, atol=atol))
