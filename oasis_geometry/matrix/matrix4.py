################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Mutable 4x4 homogeneous transform matrix.

The matrix is backed by 16 column-major float64 values (see matrix_layout).
Methods that change the matrix do so in place and return the matrix, so
calls can be chained:

    view = Matrix4().set_to_look_at(eye, target, up)
    model = Matrix4().translate(position).rotate_quaternion(q).scale(2, 2, 2)

"set" methods overwrite the whole matrix. Postmultiplying methods
(multiply, translate, rotate, scale) compose onto the current content, so
for points ``M.multiply(B)`` applies B first and then the previous M.

Preconditions that are documented but not checked, matching per-frame use:

    - Quaternions passed in must be unit length, otherwise the rotation block
      is sheared.
    - project_point() of a point mapping to w == 0 yields inf or NaN.
    - Weights passed to set_to_average() should sum to one.
    - lerp() blends entries linearly and is only a first-order
      approximation for matrices that differ by a rotation.
"""

from __future__ import annotations

import logging
from typing import Optional
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from ..math_utils.quat import Quaternion
from ..math_utils.units import Angle
from ..math_utils.units import Tolerances
from ..math_utils.units import is_equal
from ..math_utils.units import is_zero
from ..math_utils.vec3 import Vec3
from ..math_utils.vec3 import Vector3Like
from . import matrix_kernels
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
from .matrix_layout import ValuesLike
from .matrix_layout import as_values
from .matrix_layout import from_rows
from .matrix_layout import identity_values
from .matrix_layout import index
from .matrix_layout import to_rows


_LOG: logging.Logger = logging.getLogger(__name__)


class NonInvertibleMatrixError(ArithmeticError):
    """Raised when inverting a matrix whose determinant is zero."""


class Matrix4:
    """Column-major 4x4 homogeneous transform."""

    __slots__ = ("val",)

    val: NDArray[np.float64]

    def __init__(self, values: Union[ValuesLike, "Matrix4", None] = None) -> None:
        """Create an identity matrix, or a copy of a matrix or raw buffer."""
        if values is None:
            self.val = identity_values()
        elif isinstance(values, Matrix4):
            self.val = np.array(values.val, dtype=float)
        else:
            self.val = as_values(values)

    @staticmethod
    def from_quaternion(rotation: Quaternion) -> "Matrix4":
        """Create a rotation matrix from a unit quaternion."""
        return Matrix4().set_from_quaternion(rotation)

    @staticmethod
    def from_transform(
        position: Vector3Like,
        rotation: Quaternion,
        scale: Optional[Vector3Like] = None,
    ) -> "Matrix4":
        """Create a matrix from translation, rotation and optional scale."""
        if scale is None:
            return Matrix4().set_from_translation_rotation(position, rotation)
        return Matrix4().set_from_translation_rotation_scale(position, rotation, scale)

    @staticmethod
    def from_rows(matrix: NDArray[np.float64]) -> "Matrix4":
        """Create a matrix from a 4x4 array indexed [row, col]."""
        return Matrix4(from_rows(matrix))

    #
    # Storage access
    #

    @property
    def values(self) -> NDArray[np.float64]:
        """Return the backing column-major array."""
        return self.val

    def __getitem__(self, key: tuple[int, int]) -> float:
        row, col = key
        return float(self.val[index(row, col)])

    def __setitem__(self, key: tuple[int, int], value: float) -> None:
        row, col = key
        self.val[index(row, col)] = float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix4):
            return NotImplemented
        return bool(np.array_equal(self.val, other.val))

    # Mutable, so not hashable
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Matrix4({self.val.tolist()!r})"

    def __str__(self) -> str:
        rows: NDArray[np.float64] = to_rows(self.val)
        return "".join(
            "[" + "|".join(str(float(v)) for v in row) + "]\n" for row in rows
        )

    def __matmul__(self, other: "Matrix4") -> "Matrix4":
        """Return the product self * other as a new matrix."""
        if not isinstance(other, Matrix4):
            return NotImplemented
        return self.copy().multiply(other)

    def copy(self) -> "Matrix4":
        """Return a copy of this matrix."""
        return Matrix4(self)

    def as_array(self) -> NDArray[np.float64]:
        """Return a 4x4 copy indexed [row, col]."""
        return to_rows(self.val)

    def almost_equal(self, other: "Matrix4", atol: float = 1e-9) -> bool:
        """Check element-wise approximate equality."""
        return bool(np.allclose(self.val, other.val, atol=atol))

    def set(self, other: "Matrix4") -> "Matrix4":
        """Copy the values of another matrix into this one."""
        self.val[:] = other.val
        return self

    def set_values(self, values: ValuesLike) -> "Matrix4":
        """Copy the first 16 values of a column-major buffer."""
        self.val[:] = as_values(values)
        return self

    def extract_4x3(
        self, dst: Optional[NDArray[np.float64]] = None
    ) -> NDArray[np.float64]:
        """Return the three axis columns and the translation column.

        The 12 values are ordered column by column, three rows each.
        """
        out: NDArray[np.float64] = (
            np.empty(12, dtype=float) if dst is None else dst
        )
        out[0:3] = self.val[M00 : M20 + 1]
        out[3:6] = self.val[M01 : M21 + 1]
        out[6:9] = self.val[M02 : M22 + 1]
        out[9:12] = self.val[M03 : M23 + 1]
        return out

    #
    # Composition
    #

    def idt(self) -> "Matrix4":
        """Set this matrix to the identity."""
        self.val[:] = identity_values()
        return self

    def set_from_quaternion(self, rotation: Quaternion) -> "Matrix4":
        """Set this matrix to the rotation of a unit quaternion."""
        return self._set_composed(0.0, 0.0, 0.0, rotation, 1.0, 1.0, 1.0)

    def set_from_translation_rotation(
        self, position: Vector3Like, rotation: Quaternion
    ) -> "Matrix4":
        """Set this matrix to a translation and a unit quaternion rotation."""
        pos: NDArray[np.float64] = Vec3.as_vec3(position, "position")
        return self._set_composed(
            float(pos[0]), float(pos[1]), float(pos[2]), rotation, 1.0, 1.0, 1.0
        )

    def set_from_translation_rotation_scale(
        self, position: Vector3Like, rotation: Quaternion, scale: Vector3Like
    ) -> "Matrix4":
        """Set this matrix to translation * rotation * scale."""
        pos: NDArray[np.float64] = Vec3.as_vec3(position, "position")
        scl: NDArray[np.float64] = Vec3.as_vec3(scale, "scale")
        return self._set_composed(
            float(pos[0]),
            float(pos[1]),
            float(pos[2]),
            rotation,
            float(scl[0]),
            float(scl[1]),
            float(scl[2]),
        )

    def _set_composed(
        self,
        tx: float,
        ty: float,
        tz: float,
        rotation: Quaternion,
        sx: float,
        sy: float,
        sz: float,
    ) -> "Matrix4":
        qx: float = rotation.x
        qy: float = rotation.y
        qz: float = rotation.z
        qw: float = rotation.w

        xs: float = qx * 2.0
        ys: float = qy * 2.0
        zs: float = qz * 2.0
        wx: float = qw * xs
        wy: float = qw * ys
        wz: float = qw * zs
        xx: float = qx * xs
        xy: float = qx * ys
        xz: float = qx * zs
        yy: float = qy * ys
        yz: float = qy * zs
        zz: float = qz * zs

        val: NDArray[np.float64] = self.val
        val[M00] = sx * (1.0 - (yy + zz))
        val[M01] = sy * (xy - wz)
        val[M02] = sz * (xz + wy)
        val[M03] = tx

        val[M10] = sx * (xy + wz)
        val[M11] = sy * (1.0 - (xx + zz))
        val[M12] = sz * (yz - wx)
        val[M13] = ty

        val[M20] = sx * (xz - wy)
        val[M21] = sy * (yz + wx)
        val[M22] = sz * (1.0 - (xx + yy))
        val[M23] = tz

        val[M30] = 0.0
        val[M31] = 0.0
        val[M32] = 0.0
        val[M33] = 1.0
        return self

    def set_from_axes(
        self,
        x_axis: Vector3Like,
        y_axis: Vector3Like,
        z_axis: Vector3Like,
        position: Vector3Like,
    ) -> "Matrix4":
        """Set the three axis columns and the translation column."""
        val: NDArray[np.float64] = self.val
        val[M00 : M20 + 1] = Vec3.as_vec3(x_axis, "x_axis")
        val[M01 : M21 + 1] = Vec3.as_vec3(y_axis, "y_axis")
        val[M02 : M22 + 1] = Vec3.as_vec3(z_axis, "z_axis")
        val[M03 : M23 + 1] = Vec3.as_vec3(position, "position")
        val[M30] = 0.0
        val[M31] = 0.0
        val[M32] = 0.0
        val[M33] = 1.0
        return self

    def multiply(self, other: "Matrix4") -> "Matrix4":
        """Postmultiply by another matrix, self := self * other."""
        matrix_kernels.multiply(self.val, other.val)
        return self

    def multiply_left(self, other: "Matrix4") -> "Matrix4":
        """Premultiply by another matrix, self := other * self."""
        product: NDArray[np.float64] = np.array(other.val, dtype=float)
        matrix_kernels.multiply(product, self.val)
        self.val[:] = product
        return self

    def transpose(self) -> "Matrix4":
        """Transpose this matrix."""
        matrix_kernels.transpose(self.val)
        return self

    def trn(self, translation: Vector3Like) -> "Matrix4":
        """Add to the translation column, leaving the other columns untouched."""
        self.val[M03 : M23 + 1] += Vec3.as_vec3(translation, "translation")
        return self

    def translate(self, translation: Vector3Like) -> "Matrix4":
        """Postmultiply by a translation matrix."""
        vec: NDArray[np.float64] = Vec3.as_vec3(translation, "translation")
        return self.multiply(Matrix4().set_to_translation(vec))

    def rotate(self, axis: Vector3Like, degrees: float) -> "Matrix4":
        """Postmultiply by a rotation about an axis, in degrees."""
        if degrees == 0.0:
            return self
        return self.rotate_quaternion(Quaternion.from_axis_angle_deg(axis, degrees))

    def rotate_rad(self, axis: Vector3Like, radians: float) -> "Matrix4":
        """Postmultiply by a rotation about an axis, in radians."""
        if radians == 0.0:
            return self
        return self.rotate_quaternion(Quaternion.from_axis_angle_rad(axis, radians))

    def rotate_quaternion(self, rotation: Quaternion) -> "Matrix4":
        """Postmultiply by the rotation of a unit quaternion."""
        matrix_kernels.multiply(self.val, rotation.as_matrix4_values())
        return self

    def rotate_between(self, v1: Vector3Like, v2: Vector3Like) -> "Matrix4":
        """Postmultiply by the shortest rotation taking direction v1 onto v2."""
        return self.rotate_quaternion(Quaternion.from_cross(v1, v2))

    def scale(self, scale_x: float, scale_y: float, scale_z: float) -> "Matrix4":
        """Postmultiply by a scaling matrix."""
        return self.multiply(Matrix4().set_to_scaling((scale_x, scale_y, scale_z)))

    def scl(
        self, x: float, y: Optional[float] = None, z: Optional[float] = None
    ) -> "Matrix4":
        """Multiply the diagonal scale entries, uniformly when only x is given."""
        self.val[M00] *= x
        self.val[M11] *= x if y is None else y
        self.val[M22] *= x if z is None else z
        return self

    def set_translation(self, translation: Vector3Like) -> "Matrix4":
        """Overwrite the translation column only."""
        self.val[M03 : M23 + 1] = Vec3.as_vec3(translation, "translation")
        return self

    def set_to_translation(self, translation: Vector3Like) -> "Matrix4":
        """Set this matrix to a translation matrix."""
        return self.idt().set_translation(translation)

    def set_to_scaling(self, scale: Vector3Like) -> "Matrix4":
        """Set this matrix to a scaling matrix."""
        scl: NDArray[np.float64] = Vec3.as_vec3(scale, "scale")
        self.idt()
        self.val[M00] = scl[0]
        self.val[M11] = scl[1]
        self.val[M22] = scl[2]
        return self

    def set_to_translation_and_scaling(
        self, translation: Vector3Like, scale: Vector3Like
    ) -> "Matrix4":
        """Set this matrix to a translation combined with a scaling."""
        return self.set_to_scaling(scale).set_translation(translation)

    def set_to_rotation(self, axis: Vector3Like, degrees: float) -> "Matrix4":
        """Set this matrix to a rotation about an axis, in degrees."""
        if degrees == 0.0:
            return self.idt()
        return self.set_from_quaternion(Quaternion.from_axis_angle_deg(axis, degrees))

    def set_to_rotation_rad(self, axis: Vector3Like, radians: float) -> "Matrix4":
        """Set this matrix to a rotation about an axis, in radians."""
        if radians == 0.0:
            return self.idt()
        return self.set_from_quaternion(Quaternion.from_axis_angle_rad(axis, radians))

    def set_to_rotation_between(self, v1: Vector3Like, v2: Vector3Like) -> "Matrix4":
        """Set this matrix to the shortest rotation taking direction v1 onto v2."""
        return self.set_from_quaternion(Quaternion.from_cross(v1, v2))

    def set_from_euler_angles(self, yaw: float, pitch: float, roll: float) -> "Matrix4":
        """Set this matrix to a rotation from yaw, pitch and roll in degrees."""
        return self.set_from_quaternion(Quaternion.from_euler_deg(yaw, pitch, roll))

    def set_from_euler_angles_rad(
        self, yaw: float, pitch: float, roll: float
    ) -> "Matrix4":
        """Set this matrix to a rotation from yaw, pitch and roll in radians."""
        return self.set_from_quaternion(Quaternion.from_euler_rad(yaw, pitch, roll))

    def set_from_mat3(self, matrix: NDArray[np.float64]) -> "Matrix4":
        """Embed a 3x3 matrix describing a 2D homogeneous transform.

        The 2D linear block and translation map onto the x/y axes, the
        homogeneous row onto row 3, and the z row and column are identity.
        """
        mat: NDArray[np.float64] = np.asarray(matrix, dtype=float)
        if mat.shape != (3, 3):
            raise ValueError("matrix must be shape (3, 3)")
        val: NDArray[np.float64] = self.val
        val[:] = 0.0
        val[M00] = mat[0, 0]
        val[M10] = mat[1, 0]
        val[M30] = mat[2, 0]
        val[M01] = mat[0, 1]
        val[M11] = mat[1, 1]
        val[M31] = mat[2, 1]
        val[M22] = 1.0
        val[M03] = mat[0, 2]
        val[M13] = mat[1, 2]
        val[M33] = mat[2, 2]
        return self

    def set_from_affine2(self, affine: NDArray[np.float64]) -> "Matrix4":
        """Embed a 2D affine transform given as a (2, 3) array."""
        aff: NDArray[np.float64] = _as_affine2(affine)
        val: NDArray[np.float64] = self.val
        val[:] = 0.0
        val[M00] = aff[0, 0]
        val[M10] = aff[1, 0]
        val[M01] = aff[0, 1]
        val[M11] = aff[1, 1]
        val[M22] = 1.0
        val[M03] = aff[0, 2]
        val[M13] = aff[1, 2]
        val[M33] = 1.0
        return self

    def set_as_affine(
        self, source: Union["Matrix4", NDArray[np.float64]]
    ) -> "Matrix4":
        """Overwrite only the 2D affine entries from a matrix or (2, 3) array.

        This is the inverse of reading a 2D affine transform out of a matrix
        known to hold one: M00, M01, M10, M11, M03 and M13 are replaced.
        """
        val: NDArray[np.float64] = self.val
        if isinstance(source, Matrix4):
            for offset in (M00, M10, M01, M11, M03, M13):
                val[offset] = source.val[offset]
            return self
        aff: NDArray[np.float64] = _as_affine2(source)
        val[M00] = aff[0, 0]
        val[M10] = aff[1, 0]
        val[M01] = aff[0, 1]
        val[M11] = aff[1, 1]
        val[M03] = aff[0, 2]
        val[M13] = aff[1, 2]
        return self

    def has_rotation_or_scaling(
        self, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR
    ) -> bool:
        """Return False when the upper 3x3 block is the identity."""
        val: NDArray[np.float64] = self.val
        return not (
            is_equal(float(val[M00]), 1.0, tolerance)
            and is_equal(float(val[M11]), 1.0, tolerance)
            and is_equal(float(val[M22]), 1.0, tolerance)
            and is_zero(float(val[M01]), tolerance)
            and is_zero(float(val[M02]), tolerance)
            and is_zero(float(val[M10]), tolerance)
            and is_zero(float(val[M12]), tolerance)
            and is_zero(float(val[M20]), tolerance)
            and is_zero(float(val[M21]), tolerance)
        )

    #
    # Vector transforms
    #

    def transform_point(self, point: Vector3Like) -> NDArray[np.float64]:
        """Return the point transformed by this matrix, with w taken as 1."""
        vec: NDArray[np.float64] = Vec3.as_vec3(point, "point")
        matrix_kernels.transform_values(self.val, vec)
        return vec

    def project_point(self, point: Vector3Like) -> NDArray[np.float64]:
        """Return the point transformed by this matrix and divided by w."""
        vec: NDArray[np.float64] = Vec3.as_vec3(point, "point")
        matrix_kernels.project_values(self.val, vec)
        return vec

    def rotate_vector(self, direction: Vector3Like) -> NDArray[np.float64]:
        """Return the direction transformed by the upper 3x3 block only."""
        vec: NDArray[np.float64] = Vec3.as_vec3(direction, "direction")
        matrix_kernels.rotate_values(self.val, vec)
        return vec

    #
    # Inversion and decomposition
    #

    def det(self) -> float:
        """Return the determinant of this matrix."""
        return matrix_kernels.determinant(self.val)

    def det_3x3(self) -> float:
        """Return the determinant of the upper 3x3 block."""
        return matrix_kernels.determinant_3x3(self.val)

    def try_invert(self) -> bool:
        """Invert in place, returning False and leaving the matrix unchanged
        when it is singular."""
        return matrix_kernels.invert(self.val)

    def invert(self) -> "Matrix4":
        """Invert this matrix in place.

        Raises:
            NonInvertibleMatrixError: If the determinant is exactly zero. The
                matrix is left unchanged.
        """
        if not matrix_kernels.invert(self.val):
            _LOG.debug("Refusing to invert singular matrix:\n%s", self)
            raise NonInvertibleMatrixError("non-invertible matrix")
        return self

    def inverted(self) -> "Matrix4":
        """Return the inverse as a new matrix."""
        return self.copy().invert()

    def to_normal_matrix(self) -> "Matrix4":
        """Turn this matrix into its normal matrix.

        The translation column is cleared, then the matrix is inverted and
        transposed, giving the transform for surface normals under
        non-uniform scale.

        Raises:
            NonInvertibleMatrixError: If the 3x3 block is singular. The
                matrix is left unchanged.
        """
        normal: Matrix4 = self.copy()
        normal.val[M03 : M23 + 1] = 0.0
        normal.invert()
        self.val[:] = normal.val
        return self.transpose()

    def get_translation(self) -> NDArray[np.float64]:
        """Return the translation column."""
        return np.array(self.val[M03 : M23 + 1], dtype=float)

    def get_rotation(self, normalize_axes: bool = False) -> Quaternion:
        """Return the rotation of the upper 3x3 block.

        Args:
            normalize_axes: Remove per-axis scale before extracting. Required
                for a valid unit quaternion when the matrix is scaled.
        """
        return Quaternion.from_matrix4_values(self.val, normalize_axes)

    def get_scale_x_squared(self) -> float:
        """Return the squared length of the x axis column."""
        val: NDArray[np.float64] = self.val
        return float(val[M00] * val[M00] + val[M10] * val[M10] + val[M20] * val[M20])

    def get_scale_y_squared(self) -> float:
        """Return the squared length of the y axis column."""
        val: NDArray[np.float64] = self.val
        return float(val[M01] * val[M01] + val[M11] * val[M11] + val[M21] * val[M21])

    def get_scale_z_squared(self) -> float:
        """Return the squared length of the z axis column."""
        val: NDArray[np.float64] = self.val
        return float(val[M02] * val[M02] + val[M12] * val[M12] + val[M22] * val[M22])

    def get_scale_x(self, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR) -> float:
        """Return the x axis scale."""
        val: NDArray[np.float64] = self.val
        if is_zero(float(val[M10]), tolerance) and is_zero(float(val[M20]), tolerance):
            return abs(float(val[M00]))
        return float(np.sqrt(self.get_scale_x_squared()))

    def get_scale_y(self, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR) -> float:
        """Return the y axis scale."""
        val: NDArray[np.float64] = self.val
        if is_zero(float(val[M01]), tolerance) and is_zero(float(val[M21]), tolerance):
            return abs(float(val[M11]))
        return float(np.sqrt(self.get_scale_y_squared()))

    def get_scale_z(self, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR) -> float:
        """Return the z axis scale."""
        val: NDArray[np.float64] = self.val
        if is_zero(float(val[M02]), tolerance) and is_zero(float(val[M12]), tolerance):
            return abs(float(val[M22]))
        return float(np.sqrt(self.get_scale_z_squared()))

    def get_scale(
        self, tolerance: float = Tolerances.FLOAT_ROUNDING_ERROR
    ) -> NDArray[np.float64]:
        """Return the per-axis scale as a 3-vector."""
        return np.array(
            [
                self.get_scale_x(tolerance),
                self.get_scale_y(tolerance),
                self.get_scale_z(tolerance),
            ],
            dtype=float,
        )

    #
    # Projection and view
    #

    def set_to_projection(
        self, near: float, far: float, fovy_degrees: float, aspect_ratio: float
    ) -> "Matrix4":
        """Set this matrix to a perspective projection, field of view in degrees.

        Args:
            near: Distance to the near clipping plane
            far: Distance to the far clipping plane
            fovy_degrees: Vertical field of view in degrees
            aspect_ratio: Viewport width divided by height
        """
        return self.set_to_projection_rad(
            near, far, float(Angle.deg2rad(fovy_degrees)), aspect_ratio
        )

    def set_to_projection_rad(
        self, near: float, far: float, fovy_radians: float, aspect_ratio: float
    ) -> "Matrix4":
        """Set this matrix to a perspective projection, field of view in radians.

        Depth is mapped into [-1, 1] OpenGL style and row 3 copies -z into w
        for the perspective divide.
        """
        focal: float = 1.0 / float(np.tan(0.5 * float(fovy_radians)))
        a1: float = (far + near) / (near - far)
        a2: float = (2.0 * far * near) / (near - far)

        val: NDArray[np.float64] = self.val
        val[:] = 0.0
        val[M00] = focal / aspect_ratio
        val[M11] = focal
        val[M22] = a1
        val[M32] = -1.0
        val[M23] = a2
        return self

    def set_to_frustum(
        self,
        left: float,
        right: float,
        bottom: float,
        top: float,
        near: float,
        far: float,
    ) -> "Matrix4":
        """Set this matrix to a perspective projection from frustum planes."""
        x: float = 2.0 * near / (right - left)
        y: float = 2.0 * near / (top - bottom)
        a: float = (right + left) / (right - left)
        b: float = (top + bottom) / (top - bottom)
        a1: float = (far + near) / (near - far)
        a2: float = (2.0 * far * near) / (near - far)

        val: NDArray[np.float64] = self.val
        val[:] = 0.0
        val[M00] = x
        val[M11] = y
        val[M02] = a
        val[M12] = b
        val[M22] = a1
        val[M32] = -1.0
        val[M23] = a2
        return self

    def set_to_ortho(
        self,
        left: float,
        right: float,
        bottom: float,
        top: float,
        near: float,
        far: float,
    ) -> "Matrix4":
        """Set this matrix to an orthographic projection.

        View-space z in [-near, -far] maps to [-1, 1].
        """
        self.idt()
        val: NDArray[np.float64] = self.val
        val[M00] = 2.0 / (right - left)
        val[M11] = 2.0 / (top - bottom)
        val[M22] = -2.0 / (far - near)
        val[M03] = -(right + left) / (right - left)
        val[M13] = -(top + bottom) / (top - bottom)
        val[M23] = -(far + near) / (far - near)
        return self

    def set_to_ortho_2d(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        near: float = 0.0,
        far: float = 1.0,
    ) -> "Matrix4":
        """Set this matrix to an orthographic projection of a 2D rectangle."""
        return self.set_to_ortho(x, x + width, y, y + height, near, far)

    def set_to_look_direction(
        self, direction: Vector3Like, up: Vector3Like
    ) -> "Matrix4":
        """Set this matrix to a rotation-only view looking along a direction.

        Raises:
            ValueError: If the direction is zero or parallel to up
        """
        forward: NDArray[np.float64] = Vec3.normalize(direction, name="direction")
        right: NDArray[np.float64] = Vec3.normalize(
            Vec3.cross(forward, up), name="direction x up"
        )
        true_up: NDArray[np.float64] = Vec3.normalize(Vec3.cross(right, forward))

        self.idt()
        val: NDArray[np.float64] = self.val
        val[M00] = right[0]
        val[M01] = right[1]
        val[M02] = right[2]
        val[M10] = true_up[0]
        val[M11] = true_up[1]
        val[M12] = true_up[2]
        val[M20] = -forward[0]
        val[M21] = -forward[1]
        val[M22] = -forward[2]
        return self

    def set_to_look_at(
        self, position: Vector3Like, target: Vector3Like, up: Vector3Like
    ) -> "Matrix4":
        """Set this matrix to a view matrix for a camera at position facing
        target."""
        pos: NDArray[np.float64] = Vec3.as_vec3(position, "position")
        direction: NDArray[np.float64] = Vec3.as_vec3(target, "target") - pos
        self.set_to_look_direction(direction, up)
        return self.multiply(Matrix4().set_to_translation(-pos))

    def set_to_world(
        self, position: Vector3Like, forward: Vector3Like, up: Vector3Like
    ) -> "Matrix4":
        """Set this matrix to place an object at position facing forward.

        The result is the inverse of the view matrix built by set_to_look_at()
        for the same camera.
        """
        fwd: NDArray[np.float64] = Vec3.normalize(forward, name="forward")
        right: NDArray[np.float64] = Vec3.normalize(
            Vec3.cross(fwd, up), name="forward x up"
        )
        true_up: NDArray[np.float64] = Vec3.normalize(Vec3.cross(right, fwd))
        return self.set_from_axes(right, true_up, -fwd, position)

    #
    # Blending
    #

    def lerp(self, other: "Matrix4", alpha: float) -> "Matrix4":
        """Linearly interpolate every entry toward another matrix.

        No structural correction is applied, so the result is not a rigid
        transform when the inputs differ by a rotation.
        """
        self.val += (other.val - self.val) * float(alpha)
        return self

    def avg_with(self, other: "Matrix4", weight: float) -> "Matrix4":
        """Blend with another transform, weighting this matrix by weight.

        Scale and translation are blended linearly, rotation is slerped. A
        transform with a zero-scale axis has no rotation, so the other
        transform's rotation is used.
        """
        w: float = float(weight)
        scale: NDArray[np.float64] = self.get_scale() * w + other.get_scale() * (
            1.0 - w
        )
        translation: NDArray[np.float64] = self.get_translation() * w + (
            other.get_translation() * (1.0 - w)
        )
        mine: Optional[Quaternion] = _scaled_rotation(self)
        theirs: Optional[Quaternion] = _scaled_rotation(other)
        rotation: Quaternion
        if mine is None:
            rotation = theirs if theirs is not None else Quaternion.identity()
        elif theirs is None:
            rotation = mine
        else:
            rotation = mine.slerp(theirs, 1.0 - w)
        return self.set_from_translation_rotation_scale(translation, rotation, scale)

    def set_to_average(
        self,
        matrices: Sequence["Matrix4"],
        weights: Optional[Sequence[float]] = None,
    ) -> "Matrix4":
        """Set this matrix to the weighted average of several transforms.

        Each input is decomposed into scale, rotation and translation. Scales
        and translations are summed linearly. Rotations are averaged about the
        principal eigenvector of sum_i w_i * q_i q_i^T, which depends on
        neither input order nor quaternion sign (see _average_rotation).

        Inputs with a zero-scale axis carry no rotation and are left out of the
        rotation average. When every input is zero-scale the rotation is the
        identity.

        Args:
            matrices: Transforms to blend
            weights: Per-matrix weights, expected to sum to one. Defaults to
                1 / len(matrices) each.
        """
        count: int = len(matrices)
        if count == 0:
            raise ValueError("matrices must not be empty")

        w: NDArray[np.float64]
        if weights is None:
            w = np.full(count, 1.0 / count, dtype=float)
        else:
            w = np.asarray(weights, dtype=float)
            if w.shape != (count,):
                raise ValueError("weights must have one entry per matrix")

        scale: NDArray[np.float64] = np.zeros(3, dtype=float)
        translation: NDArray[np.float64] = np.zeros(3, dtype=float)
        rotations: list[Quaternion] = []
        rotation_weights: list[float] = []

        for matrix, weight in zip(matrices, w):
            scale += matrix.get_scale() * weight
            translation += matrix.get_translation() * weight

            rotation: Optional[Quaternion] = _scaled_rotation(matrix)
            if rotation is not None:
                rotations.append(rotation)
                rotation_weights.append(float(weight))

        return self.set_from_translation_rotation_scale(
            translation, _average_rotation(rotations, rotation_weights), scale
        )


def _scaled_rotation(matrix: Matrix4) -> Optional[Quaternion]:
    """Return the rotation with scale removed, or None for a zero-scale axis."""
    if np.any(matrix.get_scale() < Tolerances.EPS):
        return None
    return matrix.get_rotation(True)


def _average_rotation(
    rotations: Sequence[Quaternion], weights: Sequence[float]
) -> Quaternion:
    """Return the weighted mean of unit quaternions.

    The reference is the principal eigenvector of sum_i w_i * q_i q_i^T, with
    its largest component made positive. Each q_i is flipped to the
    reference's hemisphere and the weighted logs of reference^-1 * q_i are
    averaged, so the result depends on neither input order nor sign.
    """
    if not rotations:
        return Quaternion.identity()

    quats: NDArray[np.float64] = np.array([q.wxyz for q in rotations], dtype=float)
    w: NDArray[np.float64] = np.asarray(weights, dtype=float)
    scatter: NDArray[np.float64] = (quats * w[:, np.newaxis]).T @ quats

    # eigh sorts eigenvalues in ascending order
    eigenvectors: NDArray[np.float64] = np.linalg.eigh(scatter)[1]
    principal: NDArray[np.float64] = eigenvectors[:, -1]
    if principal[int(np.argmax(np.abs(principal)))] < 0.0:
        principal = -principal
    reference: Quaternion = Quaternion(principal).normalized()
    reference_inv: Quaternion = reference.inverse()

    log_sum: NDArray[np.float64] = np.zeros(3, dtype=float)
    for rotation, weight in zip(rotations, w):
        if rotation.dot(reference) < 0.0:
            rotation = -rotation
        log_sum += (reference_inv * rotation).log() * weight

    total: float = float(np.sum(w))
    if not is_zero(total, Tolerances.EPS):
        log_sum /= total

    return reference * Quaternion.exp(log_sum)


def _as_affine2(affine: NDArray[np.float64]) -> NDArray[np.float64]:
    """Coerce a 2D affine transform to a (2, 3) float array."""
    aff: NDArray[np.float64] = np.asarray(affine, dtype=float)
    if aff.shape == (3, 3):
        # Accept the full homogeneous form, its last row is implicit
        aff = aff[:2, :]
    if aff.shape != (2, 3):
        raise ValueError("affine must be shape (2, 3)")
    return aff
