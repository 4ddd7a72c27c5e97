################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
4x4 column-major transform matrix and its array kernels
"""

from __future__ import annotations

from oasis_geometry.matrix.matrix4 import Matrix4
from oasis_geometry.matrix.matrix4 import NonInvertibleMatrixError


__all__ = [
    "Matrix4",
    "NonInvertibleMatrixError",
]
