################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Angle units, 3-vector helpers and quaternions."""

from __future__ import annotations

from oasis_geometry.math_utils.quat import Quaternion
from oasis_geometry.math_utils.units import Angle
from oasis_geometry.math_utils.units import Tolerances
from oasis_geometry.math_utils.vec3 import Vec3


__all__ = [
    "Angle",
    "Quaternion",
    "Tolerances",
    "Vec3",
]
