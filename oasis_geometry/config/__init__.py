################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Projection and view configuration."""

from __future__ import annotations

from oasis_geometry.config.matrix_params import MatrixParams
from oasis_geometry.config.matrix_params import MatrixParamsError
from oasis_geometry.config.projection_config import ProjectionConfig
from oasis_geometry.config.projection_config import ProjectionConfigError


__all__ = [
    "MatrixParams",
    "MatrixParamsError",
    "ProjectionConfig",
    "ProjectionConfigError",
]
