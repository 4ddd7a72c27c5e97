################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Homogeneous transform matrices for cameras, scene graphs and kinematics."""

from __future__ import annotations

from oasis_geometry.math_utils.quat import Quaternion
from oasis_geometry.matrix.matrix4 import Matrix4
from oasis_geometry.matrix.matrix4 import NonInvertibleMatrixError


__all__ = [
    "Matrix4",
    "NonInvertibleMatrixError",
    "Quaternion",
]
