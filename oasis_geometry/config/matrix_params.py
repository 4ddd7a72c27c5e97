################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of OASIS - https://github.com/eigendude/OASIS
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Structured configuration schema for camera projection and view matrices."""

from __future__ import annotations

import numbers
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields
from dataclasses import replace
from typing import Any
from typing import Mapping

import numpy as np

from ..math_utils.units import Tolerances


# Entries within this distance of zero are treated as zero
TOLERANCE_ZERO: float = Tolerances.FLOAT_ROUNDING_ERROR

# Projection kind: "perspective", "frustum" or "ortho"
PROJECTION_TYPE: str = "perspective"
# Distance to the near clipping plane
PROJECTION_NEAR: float = 0.1
# Distance to the far clipping plane
PROJECTION_FAR: float = 100.0
# Vertical field of view in degrees, perspective only
PROJECTION_FOVY_DEG: float = 67.0
# Viewport width divided by height, perspective only
PROJECTION_ASPECT: float = 1.0
# Left clipping plane, frustum and ortho only
PROJECTION_LEFT: float = -1.0
# Right clipping plane, frustum and ortho only
PROJECTION_RIGHT: float = 1.0
# Bottom clipping plane, frustum and ortho only
PROJECTION_BOTTOM: float = -1.0
# Top clipping plane, frustum and ortho only
PROJECTION_TOP: float = 1.0

# Build a look-at view matrix, identity view otherwise
VIEW_ENABLED: bool = False
# Camera position in world coordinates
VIEW_POSITION: np.ndarray = np.array([0.0, 0.0, 0.0], dtype=np.float64)
# Point the camera looks at in world coordinates
VIEW_TARGET: np.ndarray = np.array([0.0, 0.0, -1.0], dtype=np.float64)
# Approximate up direction of the camera
VIEW_UP: np.ndarray = np.array([0.0, 1.0, 0.0], dtype=np.float64)


class MatrixParamsError(Exception):
    """Raised when matrix parameter validation fails."""


def _as_float_array(value: Any, name: str) -> np.ndarray:
    """Coerce a value to a float64 numpy array with shape (3,)."""
    try:
        array: np.ndarray = np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise MatrixParamsError(f"{name} must be numeric") from exc
    if array.shape != (3,):
        raise MatrixParamsError(f"{name} must have shape (3,)")
    if not np.all(np.isfinite(array)):
        raise MatrixParamsError(f"{name} must contain finite values")
    return array


def _require_finite(value: float, name: str) -> None:
    """Require a finite real value."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise MatrixParamsError(f"{name} must be a number")
    if not np.isfinite(value):
        raise MatrixParamsError(f"{name} must be finite")


def _require_positive(value: float, name: str) -> None:
    """Require a positive value."""
    _require_finite(value, name)
    if value <= 0.0:
        raise MatrixParamsError(f"{name} must be positive")


def _require_non_negative(value: float, name: str) -> None:
    """Require a non-negative value."""
    _require_finite(value, name)
    if value < 0.0:
        raise MatrixParamsError(f"{name} must be non-negative")


def _require_distinct(low: float, high: float, name: str, tolerance: float) -> None:
    """Require two planes to be separated by more than the tolerance."""
    _require_finite(low, name)
    _require_finite(high, name)
    if abs(high - low) <= tolerance:
        raise MatrixParamsError(f"{name} planes must not coincide")


@dataclass(frozen=True)
class ToleranceParams:
    """Numerical tolerances for matrix checks."""

    # Entries within this distance of zero are treated as zero
    zero: float = TOLERANCE_ZERO


@dataclass(frozen=True)
class ProjectionParams:
    """Projection volume parameters."""

    # Projection kind
    type: str = PROJECTION_TYPE
    # Distance to the near clipping plane
    near: float = PROJECTION_NEAR
    # Distance to the far clipping plane
    far: float = PROJECTION_FAR
    # Vertical field of view in degrees
    fovy_deg: float = PROJECTION_FOVY_DEG
    # Viewport width divided by height
    aspect: float = PROJECTION_ASPECT
    # Left clipping plane
    left: float = PROJECTION_LEFT
    # Right clipping plane
    right: float = PROJECTION_RIGHT
    # Bottom clipping plane
    bottom: float = PROJECTION_BOTTOM
    # Top clipping plane
    top: float = PROJECTION_TOP


@dataclass(frozen=True)
class ViewParams:
    """Look-at camera parameters."""

    # Build a look-at view matrix
    enabled: bool = VIEW_ENABLED
    # Camera position in world coordinates
    position: np.ndarray = field(default_factory=lambda: VIEW_POSITION.copy())
    # Point the camera looks at
    target: np.ndarray = field(default_factory=lambda: VIEW_TARGET.copy())
    # Approximate up direction
    up: np.ndarray = field(default_factory=lambda: VIEW_UP.copy())

    def __post_init__(self) -> None:
        """Coerce vectors into float64 numpy arrays."""
        object.__setattr__(
            self, "position", _as_float_array(self.position, "view.position")
        )
        object.__setattr__(self, "target", _as_float_array(self.target, "view.target"))
        object.__setattr__(self, "up", _as_float_array(self.up, "view.up"))


@dataclass(frozen=True)
class MatrixParams:
    """Complete configuration tree for projection and view matrices."""

    tolerances: ToleranceParams
    projection: ProjectionParams
    view: ViewParams

    @classmethod
    def defaults(cls) -> MatrixParams:
        """Return the default parameter tree."""
        return cls(
            tolerances=ToleranceParams(),
            projection=ProjectionParams(),
            view=ViewParams(),
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatrixParams:
        """Build a parameter tree from nested mappings.

        Missing namespaces and keys keep their defaults. Unknown namespaces
        or keys raise MatrixParamsError.
        """
        namespaces: dict[str, type] = {
            "tolerances": ToleranceParams,
            "projection": ProjectionParams,
            "view": ViewParams,
        }
        unknown: set[str] = {key for key in data.keys() if key not in namespaces}
        if unknown:
            raise MatrixParamsError(
                f"Unexpected namespaces: {', '.join(sorted(unknown))}"
            )

        built: dict[str, Any] = {}
        for name, params_type in namespaces.items():
            section: Any = data.get(name)
            if section is None:
                built[name] = params_type()
                continue
            if not isinstance(section, Mapping):
                raise MatrixParamsError(f"{name} must be a mapping")
            allowed: set[str] = {f.name for f in fields(params_type)}
            extra: set[str] = {key for key in section.keys() if key not in allowed}
            if extra:
                raise MatrixParamsError(
                    f"Unexpected keys in {name}: {', '.join(sorted(extra))}"
                )
            built[name] = params_type(**section)

        return cls(**built)

    def validate(self) -> None:
        """Validate parameter invariants and constraints."""
        tol: float = self.tolerances.zero
        _require_non_negative(tol, "tolerances.zero")

        proj: ProjectionParams = self.projection
        if not proj.type:
            raise MatrixParamsError("projection.type must be set")
        if proj.type in ("perspective", "frustum"):
            _require_positive(proj.near, "projection.near")
        _require_finite(proj.near, "projection.near")
        _require_finite(proj.far, "projection.far")
        if proj.far - proj.near <= tol:
            raise MatrixParamsError("projection.far must exceed projection.near")
        if proj.type == "perspective":
            _require_positive(proj.aspect, "projection.aspect")
            _require_positive(proj.fovy_deg, "projection.fovy_deg")
            if proj.fovy_deg >= 180.0:
                raise MatrixParamsError("projection.fovy_deg must be below 180")
        else:
            _require_distinct(proj.left, proj.right, "projection.left/right", tol)
            _require_distinct(proj.bottom, proj.top, "projection.bottom/top", tol)

        view: ViewParams = self.view
        if view.enabled:
            direction: np.ndarray = view.target - view.position
            if float(np.linalg.norm(direction)) <= tol:
                raise MatrixParamsError("view.target must differ from view.position")
            if float(np.linalg.norm(np.cross(direction, view.up))) <= tol:
                raise MatrixParamsError(
                    "view.up must not be parallel to the view direction"
                )

    def replace(self, **namespace_overrides: Any) -> MatrixParams:
        """Return a modified copy of the parameters."""
        return replace(self, **namespace_overrides)

    def as_nested_dict(self) -> dict[str, Any]:
        """Return a nested dict representation for debugging."""
        return _dataclass_to_dict(self)


def _dataclass_to_dict(value: Any) -> Any:
    """Convert dataclasses and numpy arrays into plain Python values."""
    if hasattr(value, "__dataclass_fields__"):
        return {
            field.name: _dataclass_to_dict(getattr(value, field.name))
            for field in fields(value)
        }
    if isinstance(value, np.ndarray):
        return value.tolist()
    return value
