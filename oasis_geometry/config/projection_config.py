################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Camera configuration producing projection and view matrices.

Example YAML:

    projection:
      type: perspective
      near: 0.1
      far: 100.0
      fovy_deg: 67.0
      aspect: 1.5
    view:
      enabled: true
      position: [0.0, 2.0, 5.0]
      target: [0.0, 0.0, 0.0]
      up: [0.0, 1.0, 0.0]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from typing import Union

import numpy as np
import yaml
from numpy.typing import NDArray

from ..matrix.matrix4 import Matrix4
from .matrix_params import MatrixParams
from .matrix_params import MatrixParamsError
from .matrix_params import ProjectionParams


_LOG: logging.Logger = logging.getLogger(__name__)


# Supported values of projection.type
PROJECTION_TYPES: frozenset[str] = frozenset({"perspective", "frustum", "ortho"})


class ProjectionConfigError(Exception):
    """Raised when projection configuration validation fails."""


@dataclass(frozen=True)
class ProjectionConfig:
    """Convenience wrapper around projection and view parameters."""

    params: MatrixParams

    def __init__(self, params: MatrixParams) -> None:
        """Initialize the configuration wrapper and validate."""
        object.__setattr__(self, "params", params)
        self.validate()

    @classmethod
    def defaults(cls) -> ProjectionConfig:
        """Return the default configuration."""
        return cls(MatrixParams.defaults())

    def validate(self) -> None:
        """Validate parameter invariants and the projection kind."""
        if self.params.projection.type not in PROJECTION_TYPES:
            raise ProjectionConfigError(
                "projection.type must be perspective, frustum, or ortho"
            )

        try:
            self.params.validate()
        except MatrixParamsError as exc:
            raise ProjectionConfigError(str(exc)) from exc

    def projection_type(self) -> str:
        """Return the configured projection kind."""
        return self.params.projection.type

    def projection_matrix(self) -> Matrix4:
        """Return a new projection matrix for the configured volume."""
        proj: ProjectionParams = self.params.projection
        if proj.type == "perspective":
            return Matrix4().set_to_projection(
                proj.near, proj.far, proj.fovy_deg, proj.aspect
            )
        if proj.type == "frustum":
            return Matrix4().set_to_frustum(
                proj.left, proj.right, proj.bottom, proj.top, proj.near, proj.far
            )
        return Matrix4().set_to_ortho(
            proj.left, proj.right, proj.bottom, proj.top, proj.near, proj.far
        )

    def view_matrix(self) -> Matrix4:
        """Return a new view matrix, identity when the view is disabled."""
        if not self.params.view.enabled:
            return Matrix4()
        return Matrix4().set_to_look_at(
            self.params.view.position, self.params.view.target, self.params.view.up
        )

    def camera_matrix(self) -> Matrix4:
        """Return the camera placement in world space, the inverse view."""
        if not self.params.view.enabled:
            return Matrix4()
        direction: Any = self.params.view.target - self.params.view.position
        return Matrix4().set_to_world(
            self.params.view.position, direction, self.params.view.up
        )

    def combined_matrix(self) -> Matrix4:
        """Return projection * view."""
        return self.projection_matrix().multiply(self.view_matrix())

    def zero_tolerance(self) -> float:
        """Return the configured tolerance for treating entries as zero."""
        return self.params.tolerances.zero

    def get_scale(self, matrix: Matrix4) -> NDArray[np.float64]:
        """Return the per-axis scale of a matrix using the configured tolerance."""
        return matrix.get_scale(self.zero_tolerance())

    def has_rotation_or_scaling(self, matrix: Matrix4) -> bool:
        """Check a matrix for rotation or scale using the configured tolerance."""
        return matrix.has_rotation_or_scaling(self.zero_tolerance())


def loads_yaml(text: str) -> ProjectionConfig:
    """Parse a configuration from YAML text."""
    try:
        loaded: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ProjectionConfigError(f"Invalid YAML: {exc}") from exc
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise ProjectionConfigError("YAML root must be a mapping")

    params: MatrixParams
    try:
        params = MatrixParams.from_dict(loaded)
    except MatrixParamsError as exc:
        raise ProjectionConfigError(str(exc)) from exc
    except TypeError as exc:
        raise ProjectionConfigError(f"Invalid parameter: {exc}") from exc
    return ProjectionConfig(params)


def load_yaml_file(path: Union[str, Path]) -> ProjectionConfig:
    """Load a configuration from a YAML file."""
    config_path: Path = Path(path)
    config: ProjectionConfig = loads_yaml(config_path.read_text(encoding="utf-8"))
    _LOG.info(
        "Loaded %s projection config from %s", config.projection_type(), config_path
    )
    return config


def dumps_yaml(config: ProjectionConfig) -> str:
    """Serialize a configuration to deterministic YAML."""
    data: dict[str, Any] = config.params.as_nested_dict()
    return yaml.safe_dump(
        data,
        sort_keys=False,
        indent=2,
        default_flow_style=False,
    )
